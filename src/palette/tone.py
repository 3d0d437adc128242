"""Seeded palette selection and tonal variants for mountain silhouettes.

Each silhouette's colour is a pure function of its seed: the seed picks a base
colour from the palette (``seed % len(palette)``) and a secondary SplitMix64
stream, seeded with ``seed ^ TONE_SEED_SALT``, jitters hue, saturation and
brightness. The secondary stream never touches the one used for the ridge.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from common.seeded_random import SeededRandom
from common.types import BLACK, RGBA
from util.color import clamp01, hsba_to_rgba, normalize_color, rgba_to_hsba

TONE_SEED_SALT = 0x9E37_79B9_7F4A_7C15

HUE_JITTER = (-0.035, 0.035)
SATURATION_FACTOR = (0.75, 1.15)
BRIGHTNESS_FACTOR = (0.75, 1.12)
BRIGHTNESS_OFFSET = (-0.06, 0.06)


def tone_variant(color: RGBA, seed: int) -> RGBA:
    """Return a small seeded perturbation of ``color``.

    Draw order on the secondary stream is hue jitter, saturation factor,
    brightness factor, brightness offset. Hue wraps into [0, 1); saturation
    and brightness are clamped to [0, 1]; alpha is kept.

    Colours that cannot be expressed as HSB (non-finite or out-of-range
    components) are returned unchanged.
    """
    hsba = rgba_to_hsba(color)
    if hsba is None:
        return color
    h, s, b, a = hsba

    rng = SeededRandom(int(seed) ^ TONE_SEED_SALT)
    hue_jitter = rng.uniform(*HUE_JITTER)
    saturation_mult = rng.uniform(*SATURATION_FACTOR)
    brightness_mult = rng.uniform(*BRIGHTNESS_FACTOR)
    brightness_add = rng.uniform(*BRIGHTNESS_OFFSET)

    h = (h + hue_jitter) % 1.0
    s = clamp01(s * saturation_mult)
    b = clamp01(b * brightness_mult + brightness_add)
    return hsba_to_rgba(h, s, b, a)


def base_index(seed: int, palette_size: int) -> int:
    """Index of the base colour chosen for ``seed``."""
    if palette_size <= 0:
        raise ValueError("palette must not be empty")
    return int(seed) % palette_size


def color_for(seed: int, palette: Sequence[RGBA]) -> RGBA:
    """Pick ``palette[seed % len(palette)]`` and return its tonal variant."""
    base = palette[base_index(seed, len(palette))]
    return tone_variant(base, seed)


class PaletteAssigner:
    """Deterministic seed → colour mapping over a fixed palette.

    Parameters
    ----------
    palette:
        Base colours (hex strings or RGBA tuples). May be empty.
    fallback:
        Colour used as the single-entry palette when ``palette`` is empty.
    """

    def __init__(self, palette: Iterable[object] = (), fallback: object = BLACK) -> None:
        colors = tuple(normalize_color(c) for c in palette)
        self.fallback: RGBA = normalize_color(fallback)
        self.palette: tuple[RGBA, ...] = colors if colors else (self.fallback,)

    def __call__(self, seed: int) -> RGBA:
        return color_for(seed, self.palette)

    def color_for(self, seed: int) -> RGBA:
        return color_for(seed, self.palette)

    def __repr__(self) -> str:
        return f"PaletteAssigner(size={len(self.palette)})"


__all__ = [
    "TONE_SEED_SALT",
    "tone_variant",
    "base_index",
    "color_for",
    "PaletteAssigner",
]
