"""
どこで: `common` の型定義。
何を: Vec2/RGBA/Rect などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

Vec2 = tuple[float, float]
# (r, g, b, a) すべて 0..1
RGBA = tuple[float, float, float, float]
# (min_x, min_y, width, height)。y は下向きに増える（画面座標）
Rect = tuple[float, float, float, float]

BLACK: RGBA = (0.0, 0.0, 0.0, 1.0)
WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)


__all__ = ["Vec2", "RGBA", "Rect", "BLACK", "WHITE"]
