from __future__ import annotations

import numpy as np
import pytest

from engine.core.mountain_field import MountainField, nearness, widened_branching
from palette.tone import PaletteAssigner
from shapes.ridge import generate_ridge


@pytest.mark.parametrize(
    "k,aspect,expected",
    [(3, 1.0, 3), (3, 16 / 9, 5), (3, 0.5, 3), (1, 2.6, 3), (2, 1.25, 2), (4, 0.1, 4)],
)
def test_widened_branching(k: int, aspect: float, expected: int) -> None:
    assert widened_branching(k, aspect) == expected


def test_nearness_formula() -> None:
    assert nearness(0, 0.0, 4) == 0.0
    assert nearness(3, 0.5, 4) == pytest.approx(0.875)
    assert nearness(2, 1.25, 4) == pytest.approx(0.5625)
    with pytest.raises(ValueError):
        nearness(0, 0.0, 0)


def test_rebuild_creates_independent_mountains(counter_seeds) -> None:
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(4, 2, 2)
    assert len(field) == 4
    assert [m.seed for m in field] == [1, 2, 3, 4]
    assert all(m.point_count == 10 for m in field)
    np.testing.assert_array_equal(field[2].ridge_unit_points, generate_ridge(2, 2, 3))


def test_rebuild_replaces_previous_content(counter_seeds) -> None:
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(3, 1, 1)
    first = field.silhouettes
    field.rebuild(2, 1, 1)
    assert len(field) == 2
    assert not set(m.id for m in first) & set(m.id for m in field)


def test_rebuild_uses_aspect_widened_branching(counter_seeds) -> None:
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(1, 3, 1, aspect_ratio_hint=16 / 9)
    assert field[0].max_points_per_depth == 5
    assert field[0].point_count == 7


@pytest.mark.parametrize("args", [(0, 1, 1), (1, 0, 1), (1, 1, -1)])
def test_rebuild_rejects_invalid_arguments(args) -> None:
    field = MountainField()
    with pytest.raises(ValueError):
        field.rebuild(*args)


def test_recycle_inserts_far_and_drops_near(counter_seeds) -> None:
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(3, 1, 1)
    before = [m.seed for m in field]
    added = field.recycle()
    assert added is field[0]
    assert [m.seed for m in field] == [4, *before[:-1]]
    assert len(field) == 3


def test_recycle_on_empty_field_is_noop() -> None:
    field = MountainField()
    assert field.recycle() is None
    assert field.is_empty
    assert field.version == 0


def test_colors_come_from_the_palette(counter_seeds) -> None:
    palette = PaletteAssigner(["#FF0000", "#00FF00"])
    field = MountainField(palette=palette, seed_source=counter_seeds)
    field.rebuild(4, 1, 1)
    for m in field:
        assert m.color == palette(m.seed)


def test_listeners_and_version(counter_seeds) -> None:
    seen = []
    field = MountainField(seed_source=counter_seeds)

    def listener(f: MountainField) -> None:
        seen.append(len(f))

    field.add_listener(listener)
    field.rebuild(2, 1, 1)
    field.recycle()
    assert seen == [2, 2]
    assert field.version == 2
    field.remove_listener(listener)
    field.recycle()
    assert seen == [2, 2]


def test_layers_are_far_to_near(counter_seeds) -> None:
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(4, 1, 1)
    layers = field.layers(0.5)
    assert [m.seed for m, _ in layers] == [1, 2, 3, 4]
    assert [n for _, n in layers] == pytest.approx([0.125, 0.375, 0.625, 0.875])
    assert field.nearness(1, 0.5) == pytest.approx(0.375)


def test_continuity_across_recycle(counter_seeds) -> None:
    # ラップ直前の nearness と、リサイクル後の progress=0 の nearness が連続する
    field = MountainField(seed_source=counter_seeds)
    field.rebuild(5, 1, 1)
    survivor = field[2]
    before = field.nearness(2, 0.999999)
    field.recycle()
    assert field[3] is survivor
    after = field.nearness(3, 0.0)
    assert after == pytest.approx(before, abs=1e-5)
