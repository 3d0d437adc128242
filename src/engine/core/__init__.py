"""
どこで: `engine.core` サブパッケージ。
何を: 構成・アニメーション時計・山フィールド・シーン、フレーム駆動（Tickable/FrameClock）を提供。
なぜ: 山並みアニメーションの状態機械を描画/入出力から独立させ、上位層（runtime/export/api）から再利用するため。
"""
