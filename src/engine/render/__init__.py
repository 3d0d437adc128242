"""
どこで: `engine.render` サブパッケージ。
何を: 描画コンシューマとの契約（RenderFrame/ParallaxLayer）、視差計算、最小ラスタライザを提供。
なぜ: コアの状態と描画実装の責務を分離し、対話表示と書き出しで同じ視差規則を共有するため。
"""
