from __future__ import annotations

import pytest

from common.seeded_random import SeededRandom
from engine.core.configuration import MountainsConfiguration
from engine.core.scene import MountainScene
from engine.render.types import RenderMode


def test_scene_starts_unbuilt_and_ensure_built_builds(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)
    assert not scene.is_built
    scene.ensure_built()
    assert scene.is_built
    assert len(scene.field) == 3
    seeds = [m.seed for m in scene.field]
    scene.ensure_built()  # 2 回目は何もしない
    assert [m.seed for m in scene.field] == seeds


def test_tick_wraps_and_recycles_within_the_same_call(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)  # speed=0.25
    scene.rebuild()
    assert [m.seed for m in scene.field] == [1, 2, 3]
    wrapped = [scene.tick() for _ in range(4)]
    assert wrapped == [False, False, False, True]
    assert scene.progress == 0.0
    assert [m.seed for m in scene.field] == [4, 1, 2]


def test_rebuild_resets_progress_without_recycling(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)
    scene.rebuild()
    scene.tick()
    scene.tick()
    assert scene.progress == pytest.approx(0.5)
    scene.rebuild()
    assert scene.progress == 0.0
    assert scene.clock.wrap_count == 0
    assert [m.seed for m in scene.field] == [4, 5, 6]


def test_wrap_on_empty_field_does_not_recycle(small_config) -> None:
    scene = MountainScene(small_config.replace(speed=1.0))
    assert scene.tick() is True
    assert scene.field.is_empty


def test_seed_makes_scenes_reproducible(small_config) -> None:
    a = MountainScene(small_config, seed=2024)
    b = MountainScene(small_config, seed=2024)
    a.rebuild()
    b.rebuild()
    for _ in range(5):
        a.tick()
        b.tick()
    assert [m.seed for m in a.field] == [m.seed for m in b.field]
    source = SeededRandom(2024).seed_source()
    s = [source() for _ in range(4)]
    # 4 tick 目でラップ → 最奥に 4 つ目、最手前の 3 つ目が消える
    assert [m.seed for m in a.field] == [s[3], s[0], s[1]]


def test_configure_rebuild_fields(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)
    scene.rebuild()
    scene.tick()
    assert scene.configure(number_of_mountains=5) is True
    assert len(scene.field) == 5
    assert scene.progress == 0.0


def test_configure_speed_and_palette_do_not_rebuild(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)
    scene.rebuild()
    ids = [m.id for m in scene.field]
    assert scene.configure(speed=0.5, mountain_palette=("#FF0000",)) is False
    assert [m.id for m in scene.field] == ids
    assert scene.clock.speed == 0.5
    new = scene.field.recycle()
    assert new is not None
    assert new.color == scene.config.palette_assigner()(new.seed)
    assert scene.configure() is False


def test_set_viewport_widens_new_mountains(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)  # k=2
    scene.set_viewport(1920, 1080)
    assert scene.aspect_ratio == pytest.approx(16 / 9)
    scene.rebuild()
    assert all(m.max_points_per_depth == 4 for m in scene.field)
    scene.set_viewport(100, 0)
    assert scene.aspect_ratio == 100.0


def test_listeners_see_every_change(small_config, counter_seeds) -> None:
    versions = []
    scene = MountainScene(small_config, seed_source=counter_seeds)
    scene.add_listener(lambda s: versions.append(s.version))
    scene.rebuild()
    scene.tick()
    scene.configure(speed=0.1)
    assert versions == [1, 2, 3]


def test_frame_snapshot(small_config, counter_seeds) -> None:
    scene = MountainScene(small_config, seed_source=counter_seeds)
    scene.rebuild()
    scene.tick()
    frame = scene.frame()
    assert frame.mode is RenderMode.INTERACTIVE
    assert frame.progress == pytest.approx(0.25)
    assert [layer.nearness for layer in frame.layers] == pytest.approx(
        [0.25 / 3, 1.25 / 3, 2.25 / 3]
    )
    assert frame.version == scene.version
    export = scene.frame(RenderMode.EXPORT)
    assert export.background == ((0.0, small_config.background_color_for_video),)


def test_invalid_config_is_clamped_by_default(caplog) -> None:
    scene = MountainScene(MountainsConfiguration(number_of_mountains=0, depth=-2))
    assert scene.config.number_of_mountains == 1
    assert scene.config.depth == 0
    assert "clamped" in caplog.text


def test_negative_exponent_frame_renders_farthest_layer(small_config) -> None:
    scene = MountainScene(small_config.replace(offset_exponent=-1.0, zoom_exponent=-3.0), seed=1)
    scene.rebuild()
    frame = scene.frame(RenderMode.EXPORT)
    assert frame.layers[0].nearness == 0.0
    assert frame.layers[0].scale == pytest.approx(1.0 + small_config.zoom_amount)
    assert frame.layers[0].offset == pytest.approx(small_config.offset_amount)


def test_scene_with_algorithm_lacking_point_estimate(small_config) -> None:
    import numpy as np

    from shapes.registry import ridge, unregister

    @ridge("step_ridge")
    def step_ridge(max_points_per_depth, depth, rng):
        return np.array([[0.0, rng.random()], [0.5, 0.5], [1.0, rng.random()]])

    try:
        scene = MountainScene(small_config.replace(ridge_algorithm="step_ridge"), seed=2)
        scene.rebuild()
        assert all(m.point_count == 3 for m in scene.field)
        assert len(scene.frame().layers) == 3
    finally:
        unregister("step_ridge")


def test_rebuild_warns_with_widened_estimate(monkeypatch, small_config, caplog) -> None:
    from common import settings

    monkeypatch.setenv("RIDGELINE_RIDGE_POINT_WARN", "12")
    settings.reload_from_env()
    scene = MountainScene(small_config)  # k=2, d=2 → 正方形で 10 点
    assert "exceeds" not in caplog.text
    scene.set_viewport(1920, 1080)  # 分岐 4 → 26 点
    scene.rebuild()
    assert "26 points" in caplog.text
