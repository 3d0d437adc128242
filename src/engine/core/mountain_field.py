"""
どこで: `engine.core.mountain_field`。
何を: 表示中の `MountainSilhouette` の順序付き列と、その再構築/リサイクル方針を持つ `MountainField`。
なぜ: 山の数を一定に保ったまま「奥に新しい山を足し、手前の山を捨てる」連続スクロールを実現するため。

並び順の規約:
- index 0 が最も奥（かつ最も新しい）。末尾が最も手前で、リサイクル時に捨てられる。
- nearness = (index + progress mod 1) / count。progress が 0→1 に進むと各山が 1/count だけ手前へ寄り、
  ラップ時に先頭挿入で index が 1 ずつずれるため、見た目は連続する。

変更通知:
- 再構築/リサイクルのたびに `version` を増やし、登録済みリスナーへ自身を渡して通知する。
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from common.seeded_random import entropy_seed
from palette.tone import PaletteAssigner
from shapes.silhouette import MountainSilhouette

logger = logging.getLogger(__name__)

SeedSource = Callable[[], int]
FieldListener = Callable[["MountainField"], None]


def widened_branching(max_points_per_depth: int, aspect_ratio_hint: float) -> int:
    """横長ビューポートでも稜線の密度を保つよう、分岐数を縦横比で広げる。"""
    k = int(max_points_per_depth)
    return max(1, k, int(round(k * float(aspect_ratio_hint))))


def nearness(index: int, progress: float, count: int) -> float:
    """位置 `index` の山の近さ（0 = 最奥）。`count <= 0` は不正構成として拒否する。"""
    if count <= 0:
        raise ValueError(f"count must be >= 1: got {count!r}")
    return (index + (progress % 1.0)) / count


class MountainField:
    """表示中の山の列。

    Parameters
    ----------
    palette : PaletteAssigner | None
        シード → 色の割り当て。None なら黒 1 色。
    seed_source : Callable[[], int] | None
        新しい山ごとのシード供給。None なら OS エントロピー。
    algorithm : str
        稜線アルゴリズム名（`shapes.registry`）。
    """

    def __init__(
        self,
        *,
        palette: PaletteAssigner | None = None,
        seed_source: SeedSource | None = None,
        algorithm: str = "midpoint",
    ) -> None:
        self.palette = palette if palette is not None else PaletteAssigner()
        self.seed_source: SeedSource = seed_source if seed_source is not None else entropy_seed
        self.algorithm = algorithm
        self._silhouettes: list[MountainSilhouette] = []
        self._max_points_per_depth = 1
        self._depth = 0
        self._listeners: list[FieldListener] = []
        self.version = 0

    # ---- コレクション ----
    @property
    def silhouettes(self) -> tuple[MountainSilhouette, ...]:
        return tuple(self._silhouettes)

    def __len__(self) -> int:
        return len(self._silhouettes)

    def __iter__(self) -> Iterator[MountainSilhouette]:
        return iter(tuple(self._silhouettes))

    def __getitem__(self, index: int) -> MountainSilhouette:
        return self._silhouettes[index]

    @property
    def is_empty(self) -> bool:
        return not self._silhouettes

    # ---- 通知 ----
    def add_listener(self, listener: FieldListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FieldListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _changed(self) -> None:
        self.version += 1
        for listener in tuple(self._listeners):
            listener(self)

    # ---- 生成 ----
    def _generate(self, aspect_ratio_hint: float) -> MountainSilhouette:
        seed = int(self.seed_source())
        return MountainSilhouette.generate(
            widened_branching(self._max_points_per_depth, aspect_ratio_hint),
            self._depth,
            seed=seed,
            color=self.palette(seed),
            algorithm=self.algorithm,
        )

    def rebuild(
        self,
        count: int,
        max_points_per_depth: int,
        depth: int,
        aspect_ratio_hint: float = 1.0,
    ) -> None:
        """現在の山をすべて捨て、`count` 個の新しい山を独立シードで生成する。"""
        if count < 1:
            raise ValueError(f"count must be >= 1: got {count!r}")
        if max_points_per_depth < 1:
            raise ValueError(f"max_points_per_depth must be >= 1: got {max_points_per_depth!r}")
        if depth < 0:
            raise ValueError(f"depth must be >= 0: got {depth!r}")

        self._max_points_per_depth = int(max_points_per_depth)
        self._depth = int(depth)
        self._silhouettes = [self._generate(aspect_ratio_hint) for _ in range(int(count))]
        logger.debug(
            "field rebuilt: count=%d branching=%d depth=%d aspect=%.3f",
            count,
            widened_branching(self._max_points_per_depth, aspect_ratio_hint),
            depth,
            aspect_ratio_hint,
        )
        self._changed()

    def recycle(self, aspect_ratio_hint: float = 1.0) -> MountainSilhouette | None:
        """新しい山を先頭（最奥）へ入れ、末尾（最手前）を捨てる。空なら何もしない。"""
        if not self._silhouettes:
            return None
        mountain = self._generate(aspect_ratio_hint)
        self._silhouettes.insert(0, mountain)
        dropped = self._silhouettes.pop()
        logger.debug("field recycled: +seed=%d -seed=%d", mountain.seed, dropped.seed)
        self._changed()
        return mountain

    # ---- 描画契約 ----
    def nearness(self, index: int, progress: float) -> float:
        return nearness(index, progress, len(self._silhouettes))

    def layers(self, progress: float) -> list[tuple[MountainSilhouette, float]]:
        """奥から手前の順に (silhouette, nearness) を返す。"""
        count = len(self._silhouettes)
        return [(m, nearness(i, progress, count)) for i, m in enumerate(self._silhouettes)]


__all__ = ["MountainField", "widened_branching", "nearness"]
