from __future__ import annotations

from pathlib import Path

import pytest

from api import MountainsConfiguration, get_preset, list_presets, load_presets

EXPECTED = {
    "appenzell",
    "yosemite",
    "dolomites",
    "zhangjiajie",
    "torres_del_paine",
    "scottish_highlands",
    "tassili_n_ajjer",
    "himalaya",
    "background",
}


@pytest.mark.smoke
def test_bundled_presets_load() -> None:
    assert EXPECTED <= set(list_presets())


def test_bundled_preset_values() -> None:
    cfg = get_preset("dolomites")
    assert isinstance(cfg, MountainsConfiguration)
    assert (cfg.number_of_mountains, cfg.max_points_per_depth, cfg.depth) == (4, 3, 4)
    assert cfg.speed == 0.0025
    assert cfg.rounded is False
    assert len(cfg.mountain_palette) == 4
    assert get_preset("background").mountain_palette == ()


def test_name_lookup_is_normalized() -> None:
    assert get_preset("Torres-del-Paine") == get_preset("torres_del_paine")
    with pytest.raises(KeyError):
        get_preset("atlantis")


def test_custom_file_and_bad_entries(tmp_path: Path, caplog) -> None:
    path = tmp_path / "presets.yaml"
    path.write_text(
        "alps:\n"
        "  numberOfMountains: 3\n"
        "  depth: 1\n"
        "  foregroundColor: '#FFFFFF'\n"
        "broken: 12\n"
        "bad_color:\n"
        "  foreground_color: not-a-color\n",
        encoding="utf-8",
    )
    presets = load_presets(path)
    assert list(presets) == ["alps"]
    assert presets["alps"].number_of_mountains == 3
    assert presets["alps"].foreground_color == (1.0, 1.0, 1.0, 1.0)
    assert "broken" in caplog.text and "bad_color" in caplog.text


def test_missing_or_invalid_file_is_empty(tmp_path: Path) -> None:
    assert load_presets(tmp_path / "nope.yaml") == {}
    bad = tmp_path / "bad.yaml"
    bad.write_text("key: [unclosed", encoding="utf-8")
    assert load_presets(bad) == {}
