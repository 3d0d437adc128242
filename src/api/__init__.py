"""
どこで: `api` 入口（高レベル公開 API）。
何を: シーン・構成・プリセット・書き出し/対話駆動を再輸出。
なぜ: 利用者が単一名前空間から構成選択 → 駆動/書き出しまで完結できるようにするため。

Usage:
    from api import export_video, get_preset

    cfg = get_preset("dolomites")
    export_video(cfg, width=1280, height=720, frame_count=300, seed=7)
"""

from engine.core.configuration import MountainsConfiguration
from engine.core.scene import MountainScene
from engine.render.types import RenderFrame, RenderMode
from shapes.silhouette import MountainSilhouette

from .presets import get_preset, list_presets, load_presets
from .runner import create_scene, export_video, run

__all__ = [
    "MountainScene",
    "MountainsConfiguration",
    "MountainSilhouette",
    "RenderFrame",
    "RenderMode",
    "create_scene",
    "export_video",
    "run",
    "get_preset",
    "list_presets",
    "load_presets",
]

__version__ = "0.1.0"
