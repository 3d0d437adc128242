"""
どこで: `common` パッケージ。
何を: 乱数ストリーム・レジストリ・設定/ロギングなど、全層で使う軽量基盤。
なぜ: 上位層（shapes/palette/engine/api）から再利用する共通部品を分離し、依存の向きを単純化するため。
"""

from .base_registry import BaseRegistry
from .seeded_random import SeededRandom, entropy_seed

__all__ = [
    "BaseRegistry",
    "SeededRandom",
    "entropy_seed",
]
