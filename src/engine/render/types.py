"""
どこで: `engine.render` 型定義。
何を: 描画コンシューマへ渡す 1 フレーム分のデータ `RenderFrame` と、山ごとの `ParallaxLayer`。
なぜ: コア（時計/フィールド）と描画実装（ラスタライザ/外部 UI）の境界を、描画 API に依存しない形で固定するため。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from common.types import RGBA
from shapes.silhouette import MountainSilhouette


class RenderMode(Enum):
    """対話表示と動画書き出しで背景/上塗り色の規則が異なる。"""

    INTERACTIVE = "interactive"
    EXPORT = "export"


@dataclass(frozen=True)
class ParallaxLayer:
    """1 つの山の描画指示。

    scale は上端基準（水平方向は中央基準）の拡大率、offset はビューポート高さに対する下方向の比。
    overlay は背景の上に重ねる色（アルファ込み）。
    """

    silhouette: MountainSilhouette
    nearness: float
    scale: float
    offset: float
    overlay: RGBA


@dataclass(frozen=True)
class RenderFrame:
    """描画コンシューマが 1 フレームで読む状態のスナップショット。"""

    progress: float
    layers: tuple[ParallaxLayer, ...]  # 奥 → 手前
    background: tuple[tuple[float, RGBA], ...]  # (位置 0..1, 色) の縦グラデーション
    rounded: bool
    mode: RenderMode
    version: int = 0


__all__ = ["RenderMode", "ParallaxLayer", "RenderFrame"]
