"""
どこで: `util.paths`。
何を: 動画出力先・構成ディレクトリの生成と解決ユーティリティを提供する。
なぜ: 書き出し/プリセット読込から保存先を簡潔に扱えるようにするため。
"""

from __future__ import annotations

from pathlib import Path

from .utils import _find_project_root


def configs_dir() -> Path:
    """プロジェクトルート直下の `configs/` を返す（作成はしない）。"""
    return _find_project_root(Path(__file__).parent) / "configs"


def ensure_video_dir() -> Path:
    """動画出力先 `data/video/` を作成して返す。

    - プロジェクトルート直下に `data/video` を作成する。
    - 既存の場合もそのまま Path を返す。
    - 並行呼び出しに対して `exist_ok=True` で安全。
    """
    root = _find_project_root(Path(__file__).parent)
    out = root / "data" / "video"
    out.mkdir(parents=True, exist_ok=True)
    return out
