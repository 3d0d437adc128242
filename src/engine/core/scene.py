"""
どこで: `engine.core.scene`。
何を: 構成・`AnimationClock`・`MountainField` を束ね、1 フレームごとの更新と描画用スナップショットを提供する
      `MountainScene`（Tickable）。
なぜ: 「時計を進める → ラップならリサイクル → 状態を読む」の順序を 1 回の `tick()` に閉じ込め、
      対話再生と書き出しで同じフレーム不変条件を守るため。

スレッド:
- 単一の論理スレッドからのみ操作する前提（ロックなし）。別スレッド由来のフレーム要求は
  `engine.runtime.driver.DisplayDriver` が駆動スレッドへ移してから `tick()` を呼ぶ。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from common.seeded_random import SeededRandom

from ..render.parallax import build_frame
from ..render.types import RenderFrame, RenderMode
from .animation_clock import AnimationClock
from .configuration import REBUILD_FIELDS, MountainsConfiguration
from .mountain_field import MountainField, SeedSource, widened_branching

logger = logging.getLogger(__name__)

SceneListener = Callable[["MountainScene"], None]


class MountainScene:
    """山並みアニメーションの状態機械。

    Parameters
    ----------
    config : MountainsConfiguration
        構成（`validated()` を通してから保持する）。
    aspect_ratio : float
        ビューポートの幅/高さ。分岐数の横方向拡張に使う。
    seed : int | None
        指定時はこのシードの SplitMix64 列から各山のシードを払い出す（書き出しの再現用）。
    seed_source : Callable[[], int] | None
        シード供給を直接指定する（`seed` より優先）。
    """

    def __init__(
        self,
        config: MountainsConfiguration | None = None,
        *,
        aspect_ratio: float = 1.0,
        seed: int | None = None,
        seed_source: SeedSource | None = None,
    ) -> None:
        self.config = (config if config is not None else MountainsConfiguration()).validated()
        self.aspect_ratio = float(aspect_ratio)
        if seed_source is None and seed is not None:
            seed_source = SeededRandom(seed).seed_source()
        self.clock = AnimationClock(self.config.speed)
        self.field = MountainField(
            palette=self.config.palette_assigner(),
            seed_source=seed_source,
            algorithm=self.config.ridge_algorithm,
        )
        self.clock.add_wrap_listener(self._on_wrap)
        self._listeners: list[SceneListener] = []
        self.version = 0

    # ---- 通知 ----
    def add_listener(self, listener: SceneListener) -> None:
        """progress 変化・リサイクル・再構築のたびに呼ばれるリスナーを登録する。"""
        self._listeners.append(listener)

    def remove_listener(self, listener: SceneListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        self.version += 1
        for listener in tuple(self._listeners):
            listener(self)

    # ---- 状態 ----
    @property
    def progress(self) -> float:
        return self.clock.progress

    @property
    def is_built(self) -> bool:
        return not self.field.is_empty

    def set_viewport(self, width: float, height: float) -> None:
        """ビューポート寸法から縦横比を更新する（次に生成される山から反映）。"""
        self.aspect_ratio = float(width) / max(float(height), 1.0)

    # ---- 操作 ----
    def _on_wrap(self) -> None:
        # 再構築途中（空）のフィールドにはリサイクルしない
        if self.field.is_empty:
            return
        self.field.recycle(self.aspect_ratio)

    def tick(self, dt: float | None = None) -> bool:
        """1 フレーム進める。ラップ時は同じ呼び出しの中でリサイクルまで済ませる。"""
        wrapped = self.clock.tick(dt)
        self._notify()
        return wrapped

    def rebuild(self) -> None:
        """時計を 0 に戻し（ラップなし）、構成どおりにフィールドを作り直す。"""
        self.clock.reset()
        k = self.config.max_points_per_depth
        # 正方形での見積もりは validated() 済み。横長で分岐数が広がる場合のみ再見積もり
        if widened_branching(k, self.aspect_ratio) != k:
            self.config.check_ridge_size(self.aspect_ratio)
        self.field.rebuild(
            self.config.number_of_mountains,
            self.config.max_points_per_depth,
            self.config.depth,
            self.aspect_ratio,
        )
        self._notify()

    def ensure_built(self) -> None:
        """初回表示時の再構築。"""
        if self.field.is_empty:
            self.rebuild()

    def configure(self, **changes: Any) -> bool:
        """構成を更新する。再構築が走ったら True を返す。

        - `number_of_mountains` / `max_points_per_depth` / `depth` / `ridge_algorithm` → 再構築
        - `speed` → 時計へ反映
        - パレット/前景色 → 以降に生成される山の色へ反映
        """
        if not changes:
            return False
        previous = self.config
        self.config = previous.replace(**changes).validated()

        self.clock.speed = self.config.speed
        self.field.palette = self.config.palette_assigner()
        self.field.algorithm = self.config.ridge_algorithm

        needs_rebuild = any(
            getattr(previous, name) != getattr(self.config, name) for name in REBUILD_FIELDS
        )
        if needs_rebuild:
            logger.debug("configuration change requires rebuild: %s", sorted(changes))
            self.rebuild()
        else:
            self._notify()
        return needs_rebuild

    # ---- 描画契約 ----
    def layers(self) -> list:
        """奥から手前の順に (silhouette, nearness)。"""
        return self.field.layers(self.clock.progress)

    def frame(self, mode: RenderMode = RenderMode.INTERACTIVE) -> RenderFrame:
        """現在の状態を描画コンシューマ向けのスナップショットにする。"""
        return build_frame(
            self.layers(),
            self.clock.progress,
            self.config,
            mode,
            version=self.version,
        )


__all__ = ["MountainScene"]
