"""
どこで: `api.runner`。
何を: 構成/プリセット名から `MountainScene` を作り、動画書き出し（`export_video`）または
      pyglet による対話駆動（`run`）を行う高レベル関数。
なぜ: 利用者がエンジン内部（時計/フィールド/ドライバ）の組み立てを意識せずに使えるようにするため。
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from engine.core.configuration import MountainsConfiguration
from engine.core.scene import MountainScene
from engine.core.tickable import Tickable
from engine.export.video import ProgressCallback, VideoExporter, VideoSettings
from engine.render.types import RenderFrame, RenderMode

from .presets import get_preset


def _resolve(config: MountainsConfiguration | str) -> MountainsConfiguration:
    return get_preset(config) if isinstance(config, str) else config


def create_scene(
    config: MountainsConfiguration | str,
    *,
    width: float = 1.0,
    height: float = 1.0,
    seed: int | None = None,
) -> MountainScene:
    """構成（またはプリセット名）からシーンを作る。山はまだ生成しない。"""
    scene = MountainScene(_resolve(config), seed=seed)
    scene.set_viewport(width, height)
    return scene


def export_video(
    config: MountainsConfiguration | str,
    *,
    width: int = 1920,
    height: int = 1080,
    fps: int = 60,
    frame_count: int = 600,
    codec: str = "h264",
    path: str | Path | None = None,
    seed: int | None = None,
    progress: ProgressCallback | None = None,
) -> Path:
    """構成を動画ファイルへ書き出して、出力パスを返す。

    `seed` を指定すると同じ構成から同じ映像が得られる。
    """
    name_prefix = config if isinstance(config, str) else None
    scene = create_scene(config, width=width, height=height, seed=seed)
    settings = VideoSettings(width=width, height=height, frame_count=frame_count, fps=fps, codec=codec)
    return VideoExporter().export(
        scene, settings, path, name_prefix=name_prefix, progress=progress
    )


class _FrameCallback:
    """シーン更新後に RenderFrame を受け取るコンシューマ（Tickable）。"""

    def __init__(self, scene: MountainScene, on_frame: Callable[[RenderFrame], None]) -> None:
        self._scene = scene
        self._on_frame = on_frame

    def tick(self, dt: float) -> None:
        self._on_frame(self._scene.frame(RenderMode.INTERACTIVE))


def run(
    config: MountainsConfiguration | str,
    on_frame: Callable[[RenderFrame], None],
    *,
    fps: int = 60,
    width: float = 1.0,
    height: float = 1.0,
    consumers: Sequence[Tickable] = (),
    pyglet_mod=None,
) -> MountainScene:
    """pyglet のイベントループでシーンを駆動し、毎フレーム `on_frame(RenderFrame)` を呼ぶ。

    `pyglet.app.exit()` でループを抜けるとシーンを返す。
    """
    from engine.runtime.driver import DisplayDriver

    scene = create_scene(config, width=width, height=height)
    driver = DisplayDriver(
        scene,
        fps=fps,
        consumers=[_FrameCallback(scene, on_frame), *consumers],
        pyglet_mod=pyglet_mod,
    )
    driver.run()
    return scene


__all__ = ["create_scene", "export_video", "run"]
