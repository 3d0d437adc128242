"""
どこで: `engine.runtime.driver`。
何を: 表示更新ごとに `FrameClock`（シーン → 描画コンシューマ）を 1 回進める `DisplayDriver`。
      `pyglet.clock` でスケジュールするか、別スレッドのタイマからの要求をキュー経由で受け取る。
なぜ: コアの状態を単一の論理スレッドでのみ変更するため。別スレッド由来のフレーム要求は
      `post_frame()` で積むだけにし、駆動スレッドの `pump()` で消化する。

注意:
- `pyglet_mod` を渡さない場合は遅延 import する（テストではダミーを注入できる）。
- 停止は単に以後の `tick()` を呼ばないだけ。コア側に取り消すべき非同期処理は無い。
"""

from __future__ import annotations

import logging
import time
from queue import Empty, SimpleQueue
from typing import Any, Sequence

from ..core.frame_clock import FrameClock
from ..core.scene import MountainScene
from ..core.tickable import Tickable

logger = logging.getLogger(__name__)


class DisplayDriver:
    """シーンを表示更新に同期して駆動する。

    Parameters
    ----------
    scene : MountainScene
        駆動対象（FrameClock の先頭で tick される）。
    fps : int
        `pyglet.clock.schedule_interval` の周期（1/fps 秒）。
    consumers : Sequence[Tickable]
        シーン更新の後に tick される描画コンシューマ等。
    pyglet_mod : Any | None
        `pyglet` モジュール（None なら遅延 import）。
    """

    def __init__(
        self,
        scene: MountainScene,
        *,
        fps: int = 60,
        consumers: Sequence[Tickable] = (),
        pyglet_mod: Any | None = None,
    ) -> None:
        if fps < 1:
            raise ValueError(f"fps must be >= 1: got {fps!r}")
        self.scene = scene
        self.fps = int(fps)
        self.frame_clock = FrameClock([scene, *consumers])
        self._pyglet = pyglet_mod
        self._scheduled: Any | None = None
        self._requests: SimpleQueue[float] = SimpleQueue()

    def _pyglet_mod(self) -> Any:
        if self._pyglet is None:
            import pyglet

            self._pyglet = pyglet
        return self._pyglet

    @property
    def is_running(self) -> bool:
        return self._scheduled is not None

    # ---- pyglet 駆動 ----
    def _on_frame(self, dt: float) -> None:
        self.frame_clock.tick(dt)

    def _on_pump(self, _dt: float) -> None:  # noqa: D401 - pyglet schedule 互換
        self.pump()

    def start(self, *, external_source: bool = False) -> None:
        """駆動を開始する（開始済みなら何もしない）。

        `external_source=True` では自前の周期 tick を行わず、毎ループ `pump()` だけを呼ぶ
        （フレーム要求は別スレッドのタイマが `post_frame()` で積む）。
        """
        if self.is_running:
            return
        self.scene.ensure_built()
        clock = self._pyglet_mod().clock
        if external_source:
            clock.schedule(self._on_pump)
            self._scheduled = self._on_pump
        else:
            clock.schedule_interval(self._on_frame, 1.0 / self.fps)
            self._scheduled = self._on_frame
        logger.debug("display driver started (fps=%d, external=%s)", self.fps, external_source)

    def stop(self) -> None:
        """駆動を停止する（未開始なら何もしない）。"""
        if self._scheduled is None:
            return
        self._pyglet_mod().clock.unschedule(self._scheduled)
        self._scheduled = None
        logger.debug("display driver stopped after %d frames", self.frame_clock.frames)

    def run(self) -> None:
        """開始して pyglet のイベントループへ入る（`pyglet.app.exit()` で戻る）。"""
        self.start()
        try:
            self._pyglet_mod().app.run()
        finally:
            self.stop()

    # ---- スレッド間受け渡し ----
    def post_frame(self, timestamp: float | None = None) -> None:
        """任意のスレッドからフレーム要求を積む（コアの状態には触れない）。"""
        self._requests.put(time.perf_counter() if timestamp is None else float(timestamp))

    def pump(self) -> int:
        """積まれた要求を駆動スレッドで消化し、要求 1 件につき 1 回 tick する。処理件数を返す。"""
        handled = 0
        last: float | None = None
        while True:
            try:
                stamp = self._requests.get_nowait()
            except Empty:
                break
            dt = 0.0 if last is None else max(0.0, stamp - last)
            self.frame_clock.tick(dt)
            last = stamp
            handled += 1
        return handled


__all__ = ["DisplayDriver"]
