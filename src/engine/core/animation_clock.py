"""
どこで: `engine.core.animation_clock`。
何を: フレームごとに正規化進捗 `progress ∈ [0, 1)` を `speed` ずつ進め、1 に達したら 0 へ戻して
      ラップイベントを発火する状態機械。
なぜ: 視差スクロールの周期と、山の入れ替え（リサイクル）の唯一のトリガーを一箇所で管理するため。

- `tick()` は 1 描画フレームにつき 1 回だけ呼ぶ（時間ではなくフレーム基準）。
- `reset()` はイベントを出さずに 0 へ戻す（構成変更による全再構築用）。
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

WrapListener = Callable[[], None]


class AnimationClock:
    """フレーム駆動の周期カウンタ。"""

    MAX_PROGRESS = 1.0

    def __init__(self, speed: float, progress: float = 0.0) -> None:
        self._speed = self._check_speed(speed)
        if not (0.0 <= progress < self.MAX_PROGRESS):
            raise ValueError(f"progress must be in [0, 1): got {progress!r}")
        self._progress = float(progress)
        self._wrap_listeners: list[WrapListener] = []
        self.wrap_count = 0
        self.frame_count = 0

    @staticmethod
    def _check_speed(speed: float) -> float:
        speed = float(speed)
        if speed < 0.0:
            raise ValueError(f"speed must be >= 0: got {speed!r}")
        return speed

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def speed(self) -> float:
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = self._check_speed(value)

    def add_wrap_listener(self, listener: WrapListener) -> None:
        self._wrap_listeners.append(listener)

    def remove_wrap_listener(self, listener: WrapListener) -> None:
        try:
            self._wrap_listeners.remove(listener)
        except ValueError:
            pass

    def tick(self, dt: float | None = None) -> bool:
        """1 フレーム進める。ラップしたら True を返す（`dt` は Tickable 互換のため受けるだけ）。"""
        self.frame_count += 1
        self._progress += self._speed
        if self._progress < self.MAX_PROGRESS:
            return False

        self._progress = 0.0
        self.wrap_count += 1
        logger.debug("animation clock wrapped (count=%d)", self.wrap_count)
        for listener in tuple(self._wrap_listeners):
            listener()
        return True

    def reset(self) -> None:
        """進捗を 0 へ戻す。ラップイベントは発火しない。"""
        self._progress = 0.0

    def __repr__(self) -> str:
        return f"AnimationClock(speed={self._speed}, progress={self._progress})"


__all__ = ["AnimationClock"]
