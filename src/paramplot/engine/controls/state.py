"""
どこで: `paramplot.engine.controls` の状態定義。
何を: スクリプトが `setup()` で宣言するコントロール（Slider/Checkbox/ColorPicker）の不変データ。
    宣言値（default）と現在値（value）、UI による変更有無（user_set）を保持する。
なぜ: UI/ランタイムが共有する単一の真実源として、値の検証・量子化・スクリプト注入形式を一か所に集めるため。

補足:
- インスタンスは frozen。値の変更は `with_value()` で新しいインスタンスを作る。
- Slider の値は常に [min, max] に収め、step > 0 のとき `min + n·step` の格子へ量子化する。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Literal, Sequence, Union

from ...common.types import RGB, UnitRGB
from ...util.color import clamp_byte, rgb_from_unit, rgb_to_unit

ControlKind = Literal["slider", "checkbox", "color"]

# 量子化で生じる 0.30000000000000004 のような誤差を落とす桁数
_QUANT_DIGITS = 12


@dataclass(frozen=True)
class Slider:
    """数値スライダー。"""

    kind: ClassVar[ControlKind] = "slider"

    name: str
    min: float
    max: float
    step: float
    default: float
    value: float
    user_set: bool = False

    @classmethod
    def declare(cls, name: str, *, min: float, max: float, step: float, default: float) -> "Slider":
        lo, hi = (min, max) if min <= max else (max, min)
        proto = cls(name=name, min=lo, max=hi, step=step, default=default, value=default)
        start = proto.coerce(default)
        return replace(proto, default=start, value=start)

    def quantize(self, value: float) -> float:
        v = min(max(float(value), self.min), self.max)
        if self.step > 0.0:
            n = round((v - self.min) / self.step)
            v = round(self.min + n * self.step, _QUANT_DIGITS)
            v = min(max(v, self.min), self.max)
        return v

    def coerce(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"slider '{self.name}' expects a number, got {type(value).__name__}")
        if not math.isfinite(float(value)):
            raise ValueError(f"slider '{self.name}' expects a finite number")
        return self.quantize(float(value))

    def with_value(self, value: Any, *, user_set: bool = True) -> "Slider":
        return replace(self, value=self.coerce(value), user_set=user_set)

    def script_value(self) -> float:
        return float(self.value)


@dataclass(frozen=True)
class Checkbox:
    """チェックボックス。`label` は表示用（`name` と異なってよい）。"""

    kind: ClassVar[ControlKind] = "checkbox"

    name: str
    label: str
    default: bool
    value: bool
    user_set: bool = False

    @classmethod
    def declare(cls, name: str, *, label: str, default: bool) -> "Checkbox":
        return cls(name=name, label=label, default=default, value=default)

    def coerce(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise TypeError(f"checkbox '{self.name}' expects a bool, got {type(value).__name__}")
        return value

    def with_value(self, value: Any, *, user_set: bool = True) -> "Checkbox":
        return replace(self, value=self.coerce(value), user_set=user_set)

    def script_value(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class ColorPicker:
    """カラーピッカー（RGB 0–255、アルファなし）。"""

    kind: ClassVar[ControlKind] = "color"

    name: str
    default: RGB
    value: RGB
    user_set: bool = False

    @classmethod
    def declare(cls, name: str, *, default: RGB) -> "ColorPicker":
        return cls(name=name, default=default, value=default)

    def coerce(self, value: Any) -> RGB:
        if not isinstance(value, (list, tuple)) or len(value) != 3:
            raise TypeError(f"color '{self.name}' expects (r, g, b)")
        return (clamp_byte(value[0]), clamp_byte(value[1]), clamp_byte(value[2]))

    def with_value(self, value: Any, *, user_set: bool = True) -> "ColorPicker":
        return replace(self, value=self.coerce(value), user_set=user_set)

    def with_unit_rgb(self, value: Sequence[float]) -> "ColorPicker":
        """0–1 のカラーウィジェット値から更新する。"""
        return self.with_value(rgb_from_unit(value))

    def to_unit_rgb(self) -> UnitRGB:
        return rgb_to_unit(self.value)

    def script_value(self) -> list[int]:
        return [int(c) for c in self.value]


Control = Union[Slider, Checkbox, ColorPicker]


__all__ = ["ControlKind", "Slider", "Checkbox", "ColorPicker", "Control"]
