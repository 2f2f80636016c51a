"""
どこで: `paramplot.engine.export` パッケージ。
何を: 確定済みフレームのヘッドレス出力（SVG）。
"""

from .svg import export_svg, frame_to_svg

__all__ = ["export_svg", "frame_to_svg"]
