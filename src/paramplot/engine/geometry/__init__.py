"""
どこで: `paramplot.engine.geometry` パッケージ。
何を: 描画プリミティブ・矢じり計算・スクリプト関数のサンプラを再輸出。
"""

from .arrow import ARROW_HEAD_ANGLE, ARROW_HEAD_LENGTH, arrow_head, head_length
from .primitives import EMPTY_FRAME, Curve, Frame, FrameBuilder, Polygon, Polyline, Vector
from .sampler import GeometrySampler, sample_parameters

__all__ = [
    "ARROW_HEAD_ANGLE",
    "ARROW_HEAD_LENGTH",
    "arrow_head",
    "head_length",
    "EMPTY_FRAME",
    "Curve",
    "Frame",
    "FrameBuilder",
    "Polygon",
    "Polyline",
    "Vector",
    "GeometrySampler",
    "sample_parameters",
]
