"""
どこで: `shapes.silhouette`。
何を: 生成済み稜線とその生成パラメータ/色を束ねた不変エンティティ `MountainSilhouette`。
なぜ: 稜線は構築時に一度だけ生成し、以降は任意の矩形へ純粋な射影で再利用するため。

設計意図:
- パラメータ変更時はその場で再生成せず、新しいインスタンスを作る。
- `id` はコレクション内の同一性（差分検出）用で意味を持たない。等価性も同一性で判定する。
- 射影 `x' = min_x + x*w`, `y' = min_y + y*h` は毎回同じ結果を返す（キャッシュしない）。
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

import numpy as np

from common.seeded_random import entropy_seed
from common.types import BLACK, RGBA, Rect

from .ridge import generate_ridge


@dataclass(frozen=True, eq=False)
class MountainSilhouette:
    """1 つの山のシルエット。

    Attributes
    ----------
    max_points_per_depth : int
        生成時の分岐数。
    depth : int
        生成時の再帰段数。
    seed : int
        稜線と色の由来となる 64bit シード。
    color : RGBA
        表示色（パレットから割り当て済み）。
    ridge_unit_points : np.ndarray
        単位正方形内の稜線点列（読み取り専用, shape=(n, 2)）。
    algorithm : str
        使用した稜線アルゴリズム名。
    """

    max_points_per_depth: int
    depth: int
    seed: int
    color: RGBA
    ridge_unit_points: np.ndarray = field(repr=False)
    algorithm: str = "midpoint"
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @classmethod
    def generate(
        cls,
        max_points_per_depth: int,
        depth: int,
        seed: int | None = None,
        color: RGBA = BLACK,
        algorithm: str = "midpoint",
    ) -> "MountainSilhouette":
        """パラメータから稜線を生成してインスタンスを作る（seed 省略時は OS エントロピー）。"""
        if seed is None:
            seed = entropy_seed()
        points = generate_ridge(max_points_per_depth, depth, seed, algorithm)
        return cls(
            max_points_per_depth=int(max_points_per_depth),
            depth=int(depth),
            seed=int(seed),
            color=tuple(float(c) for c in color),  # type: ignore[arg-type]
            ridge_unit_points=points,
            algorithm=algorithm,
        )

    @property
    def point_count(self) -> int:
        return int(self.ridge_unit_points.shape[0])

    def ridge_points(self, rect: Rect) -> np.ndarray:
        """稜線を矩形 `rect=(min_x, min_y, width, height)` へ射影した新しい配列を返す。"""
        min_x, min_y, width, height = rect
        origin = np.array([min_x, min_y], dtype=np.float64)
        size = np.array([width, height], dtype=np.float64)
        return origin + self.ridge_unit_points * size

    def outline(self, rect: Rect, *, rounded: bool = False, samples_per_curve: int = 8) -> np.ndarray:
        """塗りつぶし用の閉じた多角形（稜線 → 右下 → 左下）を返す。

        `rounded=True` では、各稜線点を制御点として隣接中点間を 2 次ベジェで結び、
        最後に終点へ直線で繋ぐ。稜線が 2 点未満なら空配列。
        """
        ridge = self.ridge_points(rect)
        if ridge.shape[0] < 2:
            return np.empty((0, 2), dtype=np.float64)

        if rounded:
            top = _smooth_ridge(ridge, max(1, int(samples_per_curve)))
        else:
            top = ridge

        min_x, min_y, width, height = rect
        corners = np.array(
            [[min_x + width, min_y + height], [min_x, min_y + height]], dtype=np.float64
        )
        return np.concatenate([top, corners], axis=0)


def _smooth_ridge(ridge: np.ndarray, samples: int) -> np.ndarray:
    # 区間 i: 始点 p0 = 直前の中点（初回は ridge[0]）、制御点 c = ridge[i-1]、終点 = mid(ridge[i-1], ridge[i])
    mids = 0.5 * (ridge[:-1] + ridge[1:])
    p0 = np.concatenate([ridge[:1], mids[:-1]], axis=0)
    c = ridge[:-1]
    p1 = mids

    t = np.linspace(0.0, 1.0, samples + 1)[1:, None, None]
    u = 1.0 - t
    curves = u * u * p0[None] + 2.0 * u * t * c[None] + t * t * p1[None]
    # (samples, segments, 2) → 区間順に並べる
    curves = curves.transpose(1, 0, 2).reshape(-1, 2)
    return np.concatenate([ridge[:1], curves, ridge[-1:]], axis=0)


__all__ = ["MountainSilhouette"]
