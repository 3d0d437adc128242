"""
どこで: `common.seeded_random`
何を: 64bit シードから決定的な乱数列を返す SplitMix64 ストリーム `SeededRandom` を提供。
なぜ: 稜線生成と色ゆらぎを同じシードから何度でも同一に再現するため（実装間でも一致させる）。

設計方針:
- 状態は 64bit 符号なし整数 1 個のみ。演算はすべて 2**64 を法とする。
- シード 0 は全ゼロ列を避けるため固定の非ゼロ定数へ置換する。
- 外部エントロピーは `entropy_seed()` のみが使う（ストリーム自体は純粋）。
"""

from __future__ import annotations

import secrets
from typing import Callable

MASK64 = 0xFFFF_FFFF_FFFF_FFFF
GOLDEN_GAMMA = 0x9E37_79B9_7F4A_7C15
ZERO_SEED_REPLACEMENT = 0xDEAD_BEEF

_MIX1 = 0xBF58_476D_1CE4_E5B9
_MIX2 = 0x94D0_49BB_1331_11EB
_INV_2_53 = 1.0 / float(1 << 53)


def entropy_seed() -> int:
    """OS エントロピーから新しい 64bit シードを返す。"""
    return secrets.randbits(64)


class SeededRandom:
    """SplitMix64 による決定的乱数ストリーム。

    同じシードからは常に同じ無限列が得られる。消費は逐次のみで、
    生成ごとに作って使い捨てる想定。
    """

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        seed = int(seed) & MASK64
        self.state = seed if seed != 0 else ZERO_SEED_REPLACEMENT

    def next_u64(self) -> int:
        """次の 64bit 値を返す。"""
        self.state = (self.state + GOLDEN_GAMMA) & MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * _MIX1) & MASK64
        z = ((z ^ (z >> 27)) * _MIX2) & MASK64
        return z ^ (z >> 31)

    def random(self) -> float:
        """[0, 1) の一様乱数（上位 53bit を使用）。"""
        return (self.next_u64() >> 11) * _INV_2_53

    def uniform(self, lo: float, hi: float) -> float:
        """[lo, hi] の一様乱数。"""
        return lo + (hi - lo) * self.random()

    def seed_source(self) -> Callable[[], int]:
        """このストリームから 64bit シードを順に払い出す関数を返す。"""
        return self.next_u64

    def __repr__(self) -> str:
        return f"SeededRandom(state=0x{self.state:016x})"


__all__ = [
    "SeededRandom",
    "entropy_seed",
    "MASK64",
    "GOLDEN_GAMMA",
    "ZERO_SEED_REPLACEMENT",
]
