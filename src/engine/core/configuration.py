"""
どこで: `engine.core.configuration`。
何を: 山の数・分岐数・深さ・速度・視差指数・配色などの構成バンドル `MountainsConfiguration`。
なぜ: コア（時計/フィールド/描画契約）が読む値を 1 か所にまとめ、不正値をコアへ届く前に弾く/丸めるため。

不正値の扱い:
- `number_of_mountains <= 0` / `max_points_per_depth <= 0` / `depth < 0` / `speed < 0` /
  `zoom_exponent < 0` / `offset_exponent < 0` は
  厳格モード（`RIDGELINE_STRICT=1`）では ValueError、それ以外は下限（1/1/0/0/0/0）へ丸めて警告。
- 稜線の予測点数が `RIDGELINE_RIDGE_POINT_WARN` を超えたら警告のみ（生成は止めない）。
  `validated()` は正方形の縦横比で、シーンの再構築時は実際の縦横比（分岐数の拡張込み）で見積もる。
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from common import settings
from common.base_registry import BaseRegistry
from common.types import BLACK, RGBA, WHITE
from palette.tone import PaletteAssigner
from shapes.registry import is_ridge_registered
from shapes.ridge import ridge_point_count
from util.color import normalize_color, to_hex

from .mountain_field import widened_branching

logger = logging.getLogger(__name__)

_MINIMUMS: dict[str, int] = {
    "number_of_mountains": 1,
    "max_points_per_depth": 1,
    "depth": 0,
}

_COLOR_FIELDS = (
    "background_color1",
    "background_color2",
    "background_color3",
    "background_color_for_video",
    "foreground_color",
)

_EXPONENT_FIELDS = ("zoom_exponent", "offset_exponent")

# camelCase 由来のキー → フィールド名
_ALIASES: dict[str, str] = {
    "zoom_effect": "zoom_exponent",
    "zoom_effect2": "zoom_amount",
    "offset_effect": "offset_exponent",
    "offset_effect2": "offset_amount",
}

# 再構築（フィールド全体の作り直し）を要するフィールド
REBUILD_FIELDS = frozenset({"number_of_mountains", "max_points_per_depth", "depth", "ridge_algorithm"})


@dataclass
class MountainsConfiguration:
    """山並みアニメーションの構成。

    視差変換（描画側で使用）:
    - scale  = 1 + nearness**zoom_exponent * zoom_amount
    - offset = nearness**offset_exponent * offset_amount（ビューポート高さに対する比）
    """

    number_of_mountains: int = 10
    max_points_per_depth: int = 3
    depth: int = 2
    speed: float = 0.01
    zoom_exponent: float = 1.0
    zoom_amount: float = 1.5
    offset_exponent: float = 3.0
    offset_amount: float = 1.0
    background_color1: RGBA = WHITE
    background_color2: RGBA = WHITE
    background_color3: RGBA = WHITE
    background_color_for_video: RGBA = WHITE
    foreground_color: RGBA = BLACK
    rounded: bool = True
    music_file_name: str = ""
    mountain_palette: tuple[RGBA, ...] = field(default_factory=tuple)
    ridge_algorithm: str = "midpoint"

    def __post_init__(self) -> None:
        self.number_of_mountains = int(self.number_of_mountains)
        self.max_points_per_depth = int(self.max_points_per_depth)
        self.depth = int(self.depth)
        for name in ("speed", "zoom_exponent", "zoom_amount", "offset_exponent", "offset_amount"):
            setattr(self, name, float(getattr(self, name)))
        for name in _COLOR_FIELDS:
            setattr(self, name, normalize_color(getattr(self, name)))
        self.mountain_palette = tuple(normalize_color(c) for c in self.mountain_palette)
        self.rounded = bool(self.rounded)
        self.music_file_name = str(self.music_file_name or "")

    # ---- 構築 ----
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MountainsConfiguration":
        """辞書（YAML 由来など）から構成を作る。

        - キーは snake_case / camelCase どちらも可（`zoomEffect2` → `zoom_amount` など）。
        - 色は Hex 文字列または (r,g,b[,a]) を受理。
        - 未知のキーは警告して無視する。
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for raw_key, value in data.items():
            key = BaseRegistry._normalize_key(str(raw_key))
            key = _ALIASES.get(key, key)
            if key not in known:
                logger.warning("unknown configuration key ignored: %s", raw_key)
                continue
            kwargs[key] = value
        if kwargs.get("mountain_palette") is None:
            kwargs.pop("mountain_palette", None)
        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        """YAML へ書き出せる辞書（色は "#RRGGBBAA"）。"""
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name in _COLOR_FIELDS:
                value = to_hex(value)
            elif f.name == "mountain_palette":
                value = [to_hex(c) for c in value]
            out[f.name] = value
        return out

    def replace(self, **changes: Any) -> "MountainsConfiguration":
        return dataclasses.replace(self, **changes)

    # ---- 検証 ----
    def validated(self, *, strict: bool | None = None) -> "MountainsConfiguration":
        """下限違反を例外化（厳格モード）または丸めた構成を返す。"""
        cfg = settings.get()
        if strict is None:
            strict = cfg.STRICT

        changes: dict[str, Any] = {}
        for name, minimum in _MINIMUMS.items():
            value = getattr(self, name)
            if value < minimum:
                if strict:
                    raise ValueError(f"{name} must be >= {minimum}: got {value!r}")
                logger.warning("%s=%r is below the minimum; clamped to %r", name, value, minimum)
                changes[name] = minimum
        if self.speed < 0.0:
            if strict:
                raise ValueError(f"speed must be >= 0: got {self.speed!r}")
            logger.warning("speed=%r is negative; clamped to 0", self.speed)
            changes["speed"] = 0.0
        # 最奥の山は nearness=0 になるため、負の指数は 0**負 で破綻する
        for name in _EXPONENT_FIELDS:
            value = getattr(self, name)
            if value < 0.0:
                if strict:
                    raise ValueError(f"{name} must be >= 0: got {value!r}")
                logger.warning("%s=%r is negative; clamped to 0", name, value)
                changes[name] = 0.0
        if not is_ridge_registered(self.ridge_algorithm):
            if strict:
                raise ValueError(f"unknown ridge algorithm: {self.ridge_algorithm!r}")
            logger.warning("unknown ridge algorithm %r; using 'midpoint'", self.ridge_algorithm)
            changes["ridge_algorithm"] = "midpoint"

        result = self.replace(**changes) if changes else self
        result.check_ridge_size()
        return result

    def estimated_ridge_points(self, aspect_ratio_hint: float = 1.0) -> int | None:
        """縦横比による分岐数の拡張込みで、山 1 つあたりの稜線点数を見積もる。

        見積もり関数を持たないアルゴリズムでは None。
        """
        branching = widened_branching(self.max_points_per_depth, aspect_ratio_hint)
        return ridge_point_count(branching, self.depth, self.ridge_algorithm)

    def check_ridge_size(self, aspect_ratio_hint: float = 1.0) -> bool:
        """見積もり点数が `RIDGELINE_RIDGE_POINT_WARN` を超えたら警告して True（生成は止めない）。"""
        limit = settings.get().RIDGE_POINT_WARN
        points = self.estimated_ridge_points(aspect_ratio_hint)
        if points is None or points <= limit:
            return False
        logger.warning(
            "ridge of %d points per mountain exceeds the recommended limit %d "
            "(max_points_per_depth=%d widened for aspect %.3f, depth=%d)",
            points,
            limit,
            self.max_points_per_depth,
            aspect_ratio_hint,
            self.depth,
        )
        return True

    # ---- 派生値 ----
    def palette_assigner(self) -> PaletteAssigner:
        """パレットが空なら前景色 1 色にフォールバックする色割り当て。"""
        return PaletteAssigner(self.mountain_palette, fallback=self.foreground_color)

    def mountain_color(self, seed: int) -> RGBA:
        return self.palette_assigner()(seed)

    def background_stops(self) -> tuple[tuple[float, RGBA], ...]:
        """対話表示用の縦グラデーション（上→下）。"""
        return (
            (0.0, self.background_color1),
            (0.5, self.background_color2),
            (1.0, self.background_color3),
        )


__all__ = ["MountainsConfiguration", "REBUILD_FIELDS"]
