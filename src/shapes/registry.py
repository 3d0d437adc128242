"""
どこで: `shapes` のレジストリ層（関数専用）。
何を: `@ridge` デコレータで稜線生成関数を登録し、取得/一覧/検査を提供。
なぜ: 稜線アルゴリズムの差し替えを一貫 API で管理し、構成の名前指定から安全に解決するため。

概要:
- API: `@ridge` / `get_ridge` / `list_ridges` / `is_ridge_registered`。
- 登録対象は「関数」のみ。シグネチャは
  `fn(max_points_per_depth: int, depth: int, rng: SeededRandom) -> np.ndarray`。
- 予測点数関数は `fn.__point_count__ = (k, d) -> int` として添付できる（任意。無ければ見積もり不能）。
- デコレータは名前省略可（`@ridge` / `@ridge()`）と明示名指定をサポート。
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping

from common.base_registry import BaseRegistry

RidgeFn = Callable[..., Any]

_ridge_registry = BaseRegistry()


def ridge(arg: Any | None = None, /, name: str | None = None):
    """稜線生成関数をレジストリに登録するデコレータ。

    使用例:
    - `@ridge` / `@ridge()`                        → 関数名から自動推論。
    - `@ridge("custom")` / `@ridge(name="custom")` → 明示名で登録。

    例外:
    - TypeError: 関数以外を登録しようとした場合。
    """

    def _register_checked(obj: Any, resolved_name: str | None = None):
        if not inspect.isfunction(obj):
            raise TypeError(f"@ridge は関数のみ登録可能です: got {obj!r}")
        return _ridge_registry.register(resolved_name)(obj)

    # 直付け (@ridge)
    if inspect.isfunction(arg) and name is None:
        return _register_checked(arg, None)

    # 位置引数で名前を渡した (@ridge("name"))
    if isinstance(arg, str) and name is None:

        def _decorator_named(obj: Any):
            return _register_checked(obj, arg)

        return _decorator_named

    def _decorator_generic(obj: Any):
        return _register_checked(obj, name)

    return _decorator_generic


def get_ridge(name: str) -> RidgeFn:
    """登録された稜線生成関数を取得。

    例外:
        KeyError: 登録されていない場合
    """
    return _ridge_registry.get(name)


def list_ridges() -> list[str]:
    """登録されているアルゴリズム名の一覧（ソート済み）。"""
    return sorted(_ridge_registry.list_all())


def is_ridge_registered(name: str) -> bool:
    return _ridge_registry.is_registered(name)


def unregister(name: str) -> None:
    """名前を指定して登録を解除（存在しない場合は無視）。"""
    _ridge_registry.unregister(name)


def get_registry() -> Mapping[str, Any]:
    """レジストリ辞書のコピーを返す。"""
    return _ridge_registry.registry


__all__ = [
    "ridge",
    "get_ridge",
    "list_ridges",
    "is_ridge_registered",
    "unregister",
    "get_registry",
]
