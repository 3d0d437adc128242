"""
どこで: `common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: 厳格モードや警告閾値の既定値/型を一箇所に揃え、テストから差し替え可能にするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int, env_str


@dataclass
class _Settings:
    # 不正な構成値を例外にする（False なら下限へ丸めて警告）
    STRICT: bool = False
    # 稜線の予測点数がこれを超えると警告
    RIDGE_POINT_WARN: int = 4096
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - `RIDGELINE_STRICT`: 0/1, true/false
    - `RIDGELINE_RIDGE_POINT_WARN`: 整数（下限 2）
    - `RIDGELINE_LOG_LEVEL`: DEBUG/INFO/WARNING...
    """
    _settings.STRICT = env_bool("RIDGELINE_STRICT", False)
    _settings.RIDGE_POINT_WARN = env_int("RIDGELINE_RIDGE_POINT_WARN", 4096, min_value=2) or 4096
    _settings.LOG_LEVEL = env_str("RIDGELINE_LOG_LEVEL", "INFO").upper()


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
