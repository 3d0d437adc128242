"""
どこで: `engine.core` の更新インターフェース。
何を: 1 フレーム更新 `tick(dt)` を持つ `Tickable` Protocol を定義。
なぜ: シーン/描画コンシューマなどフレーム駆動のオブジェクトを FrameClock から一様に扱うため。
"""

from typing import Protocol


class Tickable(Protocol):
    """1 フレーム分の更新を行うインターフェース。"""

    def tick(self, dt: float) -> None:
        """内部状態を 1 フレーム進める（`dt` は経過秒。フレーム基準の実装は無視してよい）。"""
