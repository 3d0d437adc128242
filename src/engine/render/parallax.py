"""
どこで: `engine.render.parallax`。
何を: nearness と構成の指数から、山ごとの拡大率/下方オフセット/上塗り色を計算して `RenderFrame` を組み立てる。
なぜ: 視差の式を描画実装ごとに重複させず、対話表示と書き出しで同じ見た目を保証するため。
"""

from __future__ import annotations

from typing import Sequence

from common.types import RGBA
from engine.core.configuration import MountainsConfiguration
from shapes.silhouette import MountainSilhouette

from .types import ParallaxLayer, RenderFrame, RenderMode


def parallax_scale(nearness: float, config: MountainsConfiguration) -> float:
    """scale = 1 + nearness**zoom_exponent * zoom_amount"""
    return 1.0 + (nearness**config.zoom_exponent) * config.zoom_amount


def parallax_offset(nearness: float, config: MountainsConfiguration) -> float:
    """offset = nearness**offset_exponent * offset_amount（高さ比）"""
    return (nearness**config.offset_exponent) * config.offset_amount


def overlay_color(
    silhouette: MountainSilhouette,
    nearness: float,
    config: MountainsConfiguration,
    mode: RenderMode,
) -> RGBA:
    # 書き出し: 山の色を nearness の不透明度で、対話: 前景色を nearness**2 で
    if mode is RenderMode.EXPORT:
        r, g, b, a = silhouette.color
        return (r, g, b, a * nearness)
    r, g, b, a = config.foreground_color
    return (r, g, b, a * nearness * nearness)


def build_frame(
    layers: Sequence[tuple[MountainSilhouette, float]],
    progress: float,
    config: MountainsConfiguration,
    mode: RenderMode = RenderMode.INTERACTIVE,
    *,
    version: int = 0,
) -> RenderFrame:
    """(silhouette, nearness) 列と構成から `RenderFrame` を作る。"""
    parallax = tuple(
        ParallaxLayer(
            silhouette=m,
            nearness=n,
            scale=parallax_scale(n, config),
            offset=parallax_offset(n, config),
            overlay=overlay_color(m, n, config, mode),
        )
        for m, n in layers
    )
    if mode is RenderMode.EXPORT:
        background = ((0.0, config.background_color_for_video),)
    else:
        background = config.background_stops()
    return RenderFrame(
        progress=progress,
        layers=parallax,
        background=background,
        rounded=config.rounded,
        mode=mode,
        version=version,
    )


__all__ = ["parallax_scale", "parallax_offset", "overlay_color", "build_frame"]
