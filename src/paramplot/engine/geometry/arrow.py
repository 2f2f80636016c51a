"""
どこで: `paramplot.engine.geometry.arrow`。
何を: ベクトル（origin→tip）の矢じり 2 本の端点を計算する。
なぜ: 矢じりの寸法規則（固定上限と本体長に比例する上限、極短ベクトルの除外）を一か所で保証するため。

規則:
- 矢じりの各辺は tip から「逆方向（tip→origin）」を ±ARROW_HEAD_ANGLE 回転した向きへ伸びる。
- 辺の長さは `min(ARROW_HEAD_LENGTH, HEAD_LENGTH_RATIO * |v|)`。
- `|v| < MIN_ARROW_LENGTH` のときは矢じりを作らない（正規化が退化するため）。
"""

from __future__ import annotations

import math

import numpy as np

from ...common.types import Vec2

ARROW_HEAD_LENGTH = 0.15
ARROW_HEAD_ANGLE = math.pi / 7.0  # 約 25.7 度
HEAD_LENGTH_RATIO = 0.4
MIN_ARROW_LENGTH = 1e-6


def _rotation(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s], [s, c]], dtype=np.float64)


def head_length(vector_length: float) -> float:
    """本体長に対する矢じり辺の長さ。"""
    return min(ARROW_HEAD_LENGTH, HEAD_LENGTH_RATIO * float(vector_length))


def arrow_head(
    origin: Vec2,
    tip: Vec2,
    *,
    angle: float = ARROW_HEAD_ANGLE,
) -> tuple[Vec2, Vec2] | None:
    """矢じり 2 辺の端点 `(wing1, wing2)` を返す。極短ベクトルは None。

    wing1 は逆方向を +angle、wing2 は -angle 回転した側。
    """
    o = np.asarray(origin, dtype=np.float64)
    t = np.asarray(tip, dtype=np.float64)
    d = t - o
    length = float(np.hypot(d[0], d[1]))
    if length < MIN_ARROW_LENGTH:
        return None
    back = -d / length
    h = head_length(length)
    w1 = t + h * (_rotation(angle) @ back)
    w2 = t + h * (_rotation(-angle) @ back)
    return (float(w1[0]), float(w1[1])), (float(w2[0]), float(w2[1]))


__all__ = [
    "ARROW_HEAD_LENGTH",
    "ARROW_HEAD_ANGLE",
    "HEAD_LENGTH_RATIO",
    "MIN_ARROW_LENGTH",
    "head_length",
    "arrow_head",
]
