"""
どこで: `api.presets`。
何を: `configs/presets.yaml` から名前付きの `MountainsConfiguration` を読み込む。
なぜ: 風景ごとのパラメータ/配色をコードから分離し、ユーザーが YAML で追加/上書きできるようにするため。

- ファイルが無い/壊れている場合は空（フェイルソフト）。未知の名前は KeyError。
- 名前は大文字小文字・ハイフンを吸収する（"Torres-del-Paine" → "torres_del_paine"）。
"""

from __future__ import annotations

import logging
from pathlib import Path

from common.base_registry import BaseRegistry
from engine.core.configuration import MountainsConfiguration
from util.utils import load_config

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return BaseRegistry._normalize_key(name)


def load_presets(path: str | Path | None = None) -> dict[str, MountainsConfiguration]:
    """プリセット名 → 構成の辞書を返す。壊れたエントリは警告して飛ばす。"""
    raw = load_config(Path(path) if path is not None else None)
    presets: dict[str, MountainsConfiguration] = {}
    for name, data in raw.items():
        if not isinstance(data, dict):
            logger.warning("preset %r is not a mapping; skipped", name)
            continue
        try:
            presets[_key(str(name))] = MountainsConfiguration.from_mapping(data)
        except (TypeError, ValueError) as e:
            logger.warning("preset %r is invalid; skipped: %s", name, e)
    return presets


def list_presets(path: str | Path | None = None) -> list[str]:
    return sorted(load_presets(path))


def get_preset(name: str, path: str | Path | None = None) -> MountainsConfiguration:
    """名前でプリセットを取得する。

    例外:
        KeyError: 該当プリセットが無い場合
    """
    presets = load_presets(path)
    key = _key(name)
    if key not in presets:
        raise KeyError(f"unknown preset: {name!r} (available: {', '.join(sorted(presets)) or '-'})")
    return presets[key]


__all__ = ["load_presets", "list_presets", "get_preset"]
