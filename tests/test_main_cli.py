from __future__ import annotations

import pytest

import main
from engine.export import video as video_mod


@pytest.mark.smoke
def test_list_presets(capsys) -> None:
    assert main.main(["--list"]) == 0
    out = capsys.readouterr().out.split()
    assert "himalaya" in out


def test_export_preset(monkeypatch, tmp_path) -> None:
    frames = []

    class _W:
        def append_data(self, image):
            frames.append(image.shape)

        def close(self):
            pass

    monkeypatch.setattr(video_mod, "_open_writer", lambda path, settings: _W())
    target = tmp_path / "cli.mp4"
    code = main.main(
        ["yosemite", "--width", "20", "--height", "10", "--frames", "2", "--seed", "4", "--out", str(target)]
    )
    assert code == 0
    assert frames == [(10, 20, 3), (10, 20, 3)]
