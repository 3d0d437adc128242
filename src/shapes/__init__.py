"""
どこで: `shapes` パッケージ。
何を: 稜線アルゴリズム（import 副作用で登録）と `MountainSilhouette` を提供。
なぜ: 生成ステージの拡張点を一箇所に集約し、engine 層から名前で解決できるようにするため。
"""

# 稜線アルゴリズムを import して登録（副作用）
from . import ridge as _register_ridge  # noqa: F401
from .registry import get_ridge, is_ridge_registered, list_ridges, ridge  # re-export
from .ridge import generate_ridge, ridge_point_count
from .silhouette import MountainSilhouette

__all__ = [
    "ridge",
    "get_ridge",
    "list_ridges",
    "is_ridge_registered",
    "generate_ridge",
    "ridge_point_count",
    "MountainSilhouette",
]
