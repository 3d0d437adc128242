"""Public entrypoint for silhouette colouring.

Re-exports the seed-driven palette helpers so that callers can import from
``palette`` instead of individual submodules.
"""

from .tone import TONE_SEED_SALT, PaletteAssigner, base_index, color_for, tone_variant

__all__ = [
    "TONE_SEED_SALT",
    "PaletteAssigner",
    "base_index",
    "color_for",
    "tone_variant",
]
