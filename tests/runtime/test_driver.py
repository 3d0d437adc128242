from __future__ import annotations

import threading
from types import SimpleNamespace

import pytest

from engine.core.scene import MountainScene
from engine.runtime.driver import DisplayDriver


class _FakeClock:
    def __init__(self) -> None:
        self.interval: list[tuple[object, float]] = []
        self.every: list[object] = []
        self.unscheduled: list[object] = []

    def schedule_interval(self, fn, interval: float) -> None:
        self.interval.append((fn, interval))

    def schedule(self, fn) -> None:
        self.every.append(fn)

    def unschedule(self, fn) -> None:
        self.unscheduled.append(fn)


def _fake_pyglet(run=None) -> SimpleNamespace:
    return SimpleNamespace(clock=_FakeClock(), app=SimpleNamespace(run=run or (lambda: None)))


class _Recorder:
    def __init__(self, scene: MountainScene) -> None:
        self.scene = scene
        self.progress: list[float] = []

    def tick(self, dt: float) -> None:
        self.progress.append(self.scene.progress)


def test_start_schedules_at_fps_and_builds(small_config) -> None:
    pg = _fake_pyglet()
    scene = MountainScene(small_config, seed=1)
    driver = DisplayDriver(scene, fps=30, pyglet_mod=pg)
    driver.start()
    assert scene.is_built
    assert driver.is_running
    ((fn, interval),) = pg.clock.interval
    assert interval == pytest.approx(1 / 30)

    driver.start()  # 2 回目は無視
    assert len(pg.clock.interval) == 1

    fn(1 / 30)
    assert scene.progress == pytest.approx(0.25)
    driver.stop()
    assert not driver.is_running
    assert pg.clock.unscheduled == [fn]
    driver.stop()
    assert len(pg.clock.unscheduled) == 1


def test_consumers_run_after_the_scene(small_config) -> None:
    pg = _fake_pyglet()
    scene = MountainScene(small_config, seed=1)
    rec = _Recorder(scene)
    driver = DisplayDriver(scene, consumers=[rec], pyglet_mod=pg)
    driver.start()
    fn, _ = pg.clock.interval[0]
    fn(0.016)
    fn(0.016)
    assert rec.progress == pytest.approx([0.25, 0.5])
    assert driver.frame_clock.frames == 2


def test_external_source_pumps_posted_frames(small_config) -> None:
    pg = _fake_pyglet()
    scene = MountainScene(small_config, seed=1)
    driver = DisplayDriver(scene, pyglet_mod=pg)
    driver.start(external_source=True)
    assert pg.clock.interval == []
    (pump_fn,) = pg.clock.every

    threads = [threading.Thread(target=driver.post_frame) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert scene.progress == 0.0  # 積むだけでは状態は変わらない

    pump_fn(0.0)
    assert scene.progress == pytest.approx(0.75)
    assert driver.pump() == 0


def test_pump_uses_timestamps_for_dt(small_config) -> None:
    scene = MountainScene(small_config, seed=1)
    dts = []

    class _Dt:
        def tick(self, dt: float) -> None:
            dts.append(dt)

    driver = DisplayDriver(scene, consumers=[_Dt()], pyglet_mod=_fake_pyglet())
    driver.post_frame(1.0)
    driver.post_frame(1.5)
    driver.post_frame(1.25)
    assert driver.pump() == 3
    assert dts == [0.0, 0.5, 0.0]


def test_run_enters_and_leaves_the_event_loop(small_config) -> None:
    entered = []
    pg = _fake_pyglet(run=lambda: entered.append(True))
    driver = DisplayDriver(MountainScene(small_config), pyglet_mod=pg)
    driver.run()
    assert entered == [True]
    assert not driver.is_running


def test_invalid_fps() -> None:
    with pytest.raises(ValueError):
        DisplayDriver(MountainScene(), fps=0)
