"""共通フィクスチャ。

- 決定的なシード供給
- 小さな構成試料
- 設定（環境変数）の隔離
"""

from __future__ import annotations

import itertools
from typing import Callable, Iterator

import pytest

from common import settings
from engine.core.configuration import MountainsConfiguration


@pytest.fixture()
def counter_seeds() -> Callable[[], int]:
    """1, 2, 3, ... を返すシード供給。"""
    counter = itertools.count(1)
    return lambda: next(counter)


@pytest.fixture()
def small_config() -> MountainsConfiguration:
    return MountainsConfiguration(
        number_of_mountains=3,
        max_points_per_depth=2,
        depth=2,
        speed=0.25,
        mountain_palette=("#1C594EFF", "#BBBF49FF"),
    )


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("RIDGELINE_STRICT", "RIDGELINE_RIDGE_POINT_WARN", "RIDGELINE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()
