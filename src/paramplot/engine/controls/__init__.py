"""
どこで: `paramplot.engine.controls` パッケージ。
何を: コントロールのデータ型と `ControlRegistry` を再輸出。
"""

from .registry import CHECKBOX_DEFAULT, COLOR_PICKER_DEFAULT, SLIDER_DEFAULTS, ControlRegistry
from .state import Checkbox, ColorPicker, Control, ControlKind, Slider

__all__ = [
    "ControlRegistry",
    "SLIDER_DEFAULTS",
    "CHECKBOX_DEFAULT",
    "COLOR_PICKER_DEFAULT",
    "Checkbox",
    "ColorPicker",
    "Control",
    "ControlKind",
    "Slider",
]
