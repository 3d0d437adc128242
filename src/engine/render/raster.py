"""
どこで: `engine.render.raster`。
何を: `RenderFrame` を numpy だけで RGB 画像（uint8, (h, w, 3)）へ塗りつぶす最小のソフトウェアラスタライザ。
なぜ: GUI なしで書き出しパイプラインを駆動できるようにするため（本格的な合成は外部の描画実装に任せる）。

描画規則:
- 背景は縦グラデーション（停止点を行中心で線形補間）。停止点 1 つなら単色。
- 山は奥（index 0）から順に塗る。各山の領域は稜線より下、変換後の矩形下端まで。
- 変換は拡大（上端基準・水平中央基準）→ 下方オフセット。
- 山の色は「背景 + 上塗り色（アルファ合成）」。
"""

from __future__ import annotations

import numpy as np

from .types import RenderFrame


def _background(stops, width: int, height: int) -> np.ndarray:
    positions = np.array([p for p, _ in stops], dtype=np.float64)
    colors = np.array([c[:3] for _, c in stops], dtype=np.float64)
    v = (np.arange(height, dtype=np.float64) + 0.5) / height
    column = np.stack([np.interp(v, positions, colors[:, ch]) for ch in range(3)], axis=1)
    return np.broadcast_to(column[:, None, :], (height, width, 3)).copy()


def layer_mask(
    ridge_xy: np.ndarray, scale: float, offset_px: float, width: int, height: int
) -> np.ndarray:
    """稜線（ピクセル座標, x 単調）より下の領域を bool マスク (h, w) で返す。"""
    xs = ridge_xy[:, 0]
    ys = ridge_xy[:, 1]
    cx = width * 0.5
    cols = np.arange(width, dtype=np.float64) + 0.5
    src_x = cx + (cols - cx) / scale
    valid = (src_x >= xs[0]) & (src_x <= xs[-1])
    top = np.interp(src_x, xs, ys) * scale + offset_px
    bottom = height * scale + offset_px
    rows = (np.arange(height, dtype=np.float64) + 0.5)[:, None]
    return (rows >= top[None, :]) & (rows < bottom) & valid[None, :]


def rasterize(frame: RenderFrame, width: int, height: int) -> np.ndarray:
    """`frame` を (height, width, 3) の uint8 画像にする。"""
    width = int(width)
    height = int(height)
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid raster size: {width}x{height}")

    background = _background(frame.background, width, height)
    canvas = background.copy()
    rect = (0.0, 0.0, float(width), float(height))

    for layer in frame.layers:
        outline = layer.silhouette.outline(rect, rounded=frame.rounded)
        if outline.shape[0] < 4:
            continue
        ridge_xy = outline[:-2]  # 末尾 2 点は矩形の下角
        mask = layer_mask(ridge_xy, layer.scale, layer.offset * height, width, height)
        if not mask.any():
            continue
        r, g, b, a = layer.overlay
        a = min(max(a, 0.0), 1.0)
        tint = background[mask] * (1.0 - a) + np.array([r, g, b], dtype=np.float64) * a
        canvas[mask] = tint

    return np.clip(canvas * 255.0 + 0.5, 0.0, 255.0).astype(np.uint8)


__all__ = ["rasterize", "layer_mask"]
