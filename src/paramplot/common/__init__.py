"""
どこで: `paramplot.common` パッケージ。
何を: 設定/環境変数/ロギング/型エイリアスなど、全層で使う軽量基盤。
なぜ: engine/api の双方から依存できる最下層を分離し、依存の向きを単純化するため。
"""

from .types import RGB, UnitRGB, Vec2

__all__ = ["RGB", "UnitRGB", "Vec2"]
