"""
どこで: `paramplot.util.color`。
何を: 色指定の正規化/変換（スクリプト配列 → RGB 0–255, RGB ↔ 0–1, Hex 表記）を一元化。
なぜ: ホスト関数/コントロール/エクスポート全体で同一の受理仕様を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

from ..common.types import RGB, UnitRGB


def clamp_byte(x: float) -> int:
    """数値を 0..255 の整数へ飽和変換する（小数部は切り捨て、NaN は 0）。"""
    try:
        f = float(x)
    except (TypeError, ValueError):
        return 0
    if math.isnan(f) or f <= 0.0:
        return 0
    if f >= 255.0:
        return 255
    return int(f)


def _component(value: object, fallback: int) -> int:
    if value is None:
        # JSON 経由で NaN/undefined は null になる。数値キャストと同じく 0 へ
        return 0
    if isinstance(value, bool):
        return clamp_byte(1.0 if value else 0.0)
    if isinstance(value, (int, float)):
        return clamp_byte(value)
    if isinstance(value, str):
        try:
            return clamp_byte(float(value.strip()))
        except ValueError:
            return 0
    return fallback


def rgb_from_script(value: object, default: RGB) -> RGB | None:
    """スクリプト由来の `[r, g, b]` 配列を RGB へ変換する。

    - 配列でない/要素数 3 未満のときは None（呼び出し側で既定値へフォールバック）。
    - 各成分は数値として 0..255 へ飽和変換する（NaN/null/undefined と数値化できない文字列は 0）。
      配列やオブジェクトなど数値でない成分は `default` の同成分を使う。4 要素目以降は無視。
    """
    if not isinstance(value, (list, tuple)) or len(value) < 3:
        return None
    return (
        _component(value[0], default[0]),
        _component(value[1], default[1]),
        _component(value[2], default[2]),
    )


def rgb_to_unit(rgb: Sequence[int]) -> UnitRGB:
    """RGB(0–255) → (r, g, b)（0–1）。"""
    return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0)


def rgb_from_unit(value: Sequence[float]) -> RGB:
    """(r, g, b)（0–1）→ RGB(0–255)。カラーウィジェット互換の切り捨て変換。"""
    if len(value) < 3:
        raise ValueError("unit color must have at least 3 components")
    return (
        clamp_byte(float(value[0]) * 255.0),
        clamp_byte(float(value[1]) * 255.0),
        clamp_byte(float(value[2]) * 255.0),
    )


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """RGB → "#rrggbb"。"""
    return "#{:02x}{:02x}{:02x}".format(
        clamp_byte(rgb[0]), clamp_byte(rgb[1]), clamp_byte(rgb[2])
    )


__all__ = ["clamp_byte", "rgb_from_script", "rgb_to_unit", "rgb_from_unit", "rgb_to_hex"]
