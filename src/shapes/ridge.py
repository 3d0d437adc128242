"""
どこで: `shapes.ridge`。
何を: 再帰的な中点変位で単位正方形内の稜線（山のシルエット上端）点列を生成する。
なぜ: (分岐数, 深さ, シード) の小さなパラメータ集合から、毎回ビット単位で同一の稜線を得るため。

アルゴリズム:
1. 端点 y を乱数列から 2 つ引く: start=(0, r0), end=(1, r1)。
2. 区間 (a, b) を `branching` 個の等間隔な内点で分割し、各内点の y を
   [min(a.y, b.y), max(a.y, b.y)] から一様に引く（その段の内点をすべて引いてから再帰）。
3. 連鎖 [a, m1, ..., mk, b] の隣接ペアごとに depth-1 で再帰。境界点の重複は書き込み位置で除く。

実装メモ:
- 出力は点数を事前計算した平坦バッファ（float64, shape=(n, 2)）へ書き込みカーソルで詰める。
  リストの連結を繰り返さないため、深い再帰でも O(n)。
- 乱数の消費順は「深さ優先・左から右」で固定。
- 点数は分岐数 k・深さ d に対して指数的に増える（midpoint で (k+1)**d + 1）。上限は設けない。
  呼び出し側で `ridge_point_count` により事前に見積もること。
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from common.seeded_random import SeededRandom

from .registry import get_ridge, ridge

BranchingRule = Callable[[int], int]


def _same_branching(k: int) -> int:
    return k


def _tapered_branching(k: int) -> int:
    return max(1, k - 1)


def _check_params(max_points_per_depth: int, depth: int) -> tuple[int, int]:
    k = int(max_points_per_depth)
    d = int(depth)
    if k < 1:
        raise ValueError(f"max_points_per_depth must be >= 1: got {max_points_per_depth!r}")
    if d < 0:
        raise ValueError(f"depth must be >= 0: got {depth!r}")
    return k, d


def _segment_count(branching: int, depth: int, rule: BranchingRule) -> int:
    segments = 1
    for _ in range(depth):
        segments *= branching + 1
        branching = rule(branching)
    return segments


def _subdivide(
    out: np.ndarray,
    cursor: int,
    a: tuple[float, float],
    b: tuple[float, float],
    branching: int,
    depth: int,
    rng: SeededRandom,
    rule: BranchingRule,
) -> int:
    """区間 (a, b] を `out[cursor:]` に書き込み、次の書き込み位置を返す。

    `a` は呼び出し側で書き込み済み（兄弟区間の共有点を一度だけ出力する）。
    """
    if depth == 0:
        out[cursor, 0] = b[0]
        out[cursor, 1] = b[1]
        return cursor + 1

    ax, ay = a
    bx, by = b
    lo = min(ay, by)
    span = max(ay, by) - lo
    step = (bx - ax) / (branching + 1)

    chain = [(ax + i * step, lo + span * rng.random()) for i in range(1, branching + 1)]
    chain.append(b)

    sub = rule(branching)
    prev = a
    for point in chain:
        cursor = _subdivide(out, cursor, prev, point, sub, depth - 1, rng, rule)
        prev = point
    return cursor


def _midpoint_displacement(
    max_points_per_depth: int, depth: int, rng: SeededRandom, rule: BranchingRule
) -> np.ndarray:
    k, d = _check_params(max_points_per_depth, depth)
    n = _segment_count(k, d, rule) + 1
    out = np.empty((n, 2), dtype=np.float64)

    start = (0.0, rng.random())
    end = (1.0, rng.random())
    out[0] = start
    written = _subdivide(out, 1, start, end, k, d, rng, rule)
    assert written == n, (written, n)

    out.setflags(write=False)
    return out


@ridge
def midpoint(max_points_per_depth: int, depth: int, rng: SeededRandom) -> np.ndarray:
    """全段で同じ分岐数を使う中点変位。点数は `(k+1)**d + 1`。

    Parameters
    ----------
    max_points_per_depth : int
        1 段あたりに挿入する内点数（分岐数）。1 以上。
    depth : int
        再帰の段数。0 なら端点 2 点のみ（直線の稜線）。
    rng : SeededRandom
        消費される乱数ストリーム。
    """
    return _midpoint_displacement(max_points_per_depth, depth, rng, _same_branching)


@ridge
def tapered(max_points_per_depth: int, depth: int, rng: SeededRandom) -> np.ndarray:
    """段ごとに分岐数を 1 ずつ減らす（下限 1）中点変位。細部ほど粗くなる。"""
    return _midpoint_displacement(max_points_per_depth, depth, rng, _tapered_branching)


midpoint.__point_count__ = lambda k, d: _segment_count(*_check_params(k, d), _same_branching) + 1
tapered.__point_count__ = lambda k, d: _segment_count(*_check_params(k, d), _tapered_branching) + 1


def ridge_point_count(
    max_points_per_depth: int, depth: int, algorithm: str = "midpoint"
) -> int | None:
    """生成前に稜線の点数を見積もる。

    `__point_count__` を持たないアルゴリズム（利用者登録）は見積もり不能として None。
    """
    counter = getattr(get_ridge(algorithm), "__point_count__", None)
    if counter is None:
        return None
    return int(counter(max_points_per_depth, depth))


def generate_ridge(
    max_points_per_depth: int, depth: int, seed: int, algorithm: str = "midpoint"
) -> np.ndarray:
    """シードから稜線点列を生成する。

    同じ `(max_points_per_depth, depth, seed, algorithm)` なら常に同一の配列を返す。
    返り値は読み取り専用の float64 配列（shape=(n, 2)、x は 0 から 1 へ狭義単調増加）。
    """
    fn = get_ridge(algorithm)
    return fn(max_points_per_depth, depth, SeededRandom(seed))


__all__ = ["midpoint", "tapered", "generate_ridge", "ridge_point_count"]
