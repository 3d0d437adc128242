"""
どこで: `util.color`。
何を: 色指定の正規化/変換（Hex, RGBA 0–1, RGBA 0–255, HSB）を一元化。
なぜ: プリセット YAML・構成・パレット・ラスタライザで同一の受理仕様とエラーメッセージを使うため。
"""

from __future__ import annotations

import colorsys
import math
from typing import Sequence

from common.types import RGBA


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> RGBA:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    大文字/小文字は不問。アルファ省略時は 1.0。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        value = int(t, 16)
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    if len(t) == 6:
        value = (value << 8) | 0xFF
    r = (value >> 24) & 0xFF
    g = (value >> 16) & 0xFF
    b = (value >> 8) & 0xFF
    a = value & 0xFF
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def normalize_color(value: object) -> RGBA:
    """色を RGBA(0–1) へ正規化する。

    - 受理: Hex 文字列, (r,g,b[,a]) （全要素 0–1 なら 0–1、それ以外は 0–255 とみなす）
    - 返値: (r,g,b,a) （0–1）
    """
    if isinstance(value, str):
        return parse_hex_color_str(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(value) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        comps = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(comps) == 3:
        comps.append(1.0 if all(0.0 <= c <= 1.0 for c in comps) else 255.0)
    if all(0.0 <= c <= 1.0 for c in comps):
        r, g, b, a = comps
        return (r, g, b, a)
    r, g, b, a = (max(0, min(255, int(round(c)))) / 255.0 for c in comps)
    return (r, g, b, a)


def to_hex(value: object, *, include_alpha: bool = True) -> str:
    """色を "#RRGGBBAA"（または "#RRGGBB"）へ変換する。"""
    r, g, b, a = to_u8_rgba(value)
    if include_alpha:
        return f"#{r:02X}{g:02X}{b:02X}{a:02X}"
    return f"#{r:02X}{g:02X}{b:02X}"


def to_u8_rgba(value: object) -> tuple[int, int, int, int]:
    """色を RGBA(0–255) へ変換する。"""
    r, g, b, a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(a * 255)))


def rgba_to_hsba(rgba: Sequence[float]) -> tuple[float, float, float, float] | None:
    """RGBA(0–1) を (hue, saturation, brightness, alpha) へ変換する。

    成分が非有限または 0–1 の範囲外なら表現不能として None を返す。
    無彩色の hue は 0 になる。
    """
    if len(rgba) != 4:
        return None
    r, g, b, a = (float(c) for c in rgba)
    if not all(math.isfinite(c) and 0.0 <= c <= 1.0 for c in (r, g, b, a)):
        return None
    h, s, v = colorsys.rgb_to_hsv(r, g, b)
    return (h, s, v, a)


def hsba_to_rgba(h: float, s: float, b: float, a: float) -> RGBA:
    """(hue, saturation, brightness, alpha) を RGBA(0–1) へ変換する。"""
    r, g, bl = colorsys.hsv_to_rgb(h % 1.0, clamp01(s), clamp01(b))
    return (r, g, bl, clamp01(a))


__all__ = [
    "clamp01",
    "parse_hex_color_str",
    "normalize_color",
    "to_hex",
    "to_u8_rgba",
    "rgba_to_hsba",
    "hsba_to_rgba",
]
