"""
どこで: `engine.runtime` サブパッケージ。
何を: 表示更新コールバック（pyglet.clock / 別スレッドのタイマ）からシーンを駆動する DisplayDriver を提供。
なぜ: フレーム駆動とコアの状態変更を単一の論理スレッドに揃えるため。
"""
