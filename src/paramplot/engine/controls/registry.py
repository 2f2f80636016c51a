"""
どこで: `paramplot.engine.controls.registry`。
何を: 宣言済みコントロールの順序付き集合と現在値を保持する `ControlRegistry`。
      `setup()` 中に呼ばれるホスト関数 `addSlider`/`addCheckbox`/`addColorpicker` を提供し、
      `draw()` 前に現在値をスクリプトのグローバル変数へ注入する。
なぜ: UI ウィジェットとスクリプトのグローバル変数の往復を、ここ一か所に閉じ込めるため。

ライフサイクル:
- `begin_setup()` → （スクリプトの `setup()` がホスト関数経由で宣言）→ `commit_setup()`/`abort_setup()`。
- `commit_setup()` は集合を丸ごと置き換える。`preserve=True` のとき、同名・同種のコントロールで
  UI が変更した値（user_set）は新しい宣言の範囲へ収めて引き継ぐ。
- 置き換え以外で変わるのは `value` のみ（`set_value()` による UI 変更）。
- `reserve_names()` で指定したグローバル名（ホスト関数・`setup`/`draw`）と同名の宣言は警告して無視する。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator

from ...common.types import RGB
from ...util.color import rgb_from_script
from ..script.adapter import ScriptEngine
from ..script.bindings import HostFunction
from ..script.coerce import CallIssues, field, js_string, to_bool, to_number
from .state import Checkbox, ColorPicker, Control, Slider

logger = logging.getLogger(__name__)

SLIDER_DEFAULTS = {"min": 0.0, "max": 1.0, "step": 0.1, "default": 0.0}
CHECKBOX_DEFAULT = True
COLOR_PICKER_DEFAULT: RGB = (255, 255, 255)

Warn = Callable[[str], None]


class ControlRegistry:
    """コントロール宣言と現在値を集中管理する。"""

    def __init__(self, *, warn: Warn | None = None) -> None:
        self._controls: dict[str, Control] = {}
        self._pending: dict[str, Control] | None = None
        self._changed = False
        self._warn = warn
        self._reserved: frozenset[str] = frozenset()

    def reserve_names(self, names: Iterable[str]) -> None:
        """コントロール名として使えないグローバル名（ホスト関数・入口関数）を設定する。"""
        self._reserved = frozenset(names)

    # --- setup フェーズ ---
    def begin_setup(self) -> None:
        """新しい宣言の受け付けを開始する（前回の未確定分は破棄）。"""
        self._pending = {}

    @property
    def in_setup(self) -> bool:
        return self._pending is not None

    def commit_setup(self, *, preserve: bool = True) -> None:
        """受け付けた宣言で集合を置き換える。"""
        if self._pending is None:
            raise RuntimeError("commit_setup() called without begin_setup()")
        pending, self._pending = self._pending, None
        if preserve:
            for name, control in list(pending.items()):
                old = self._controls.get(name)
                if old is None or not old.user_set or type(old) is not type(control):
                    continue
                try:
                    pending[name] = control.with_value(old.value, user_set=True)
                except (TypeError, ValueError):
                    continue
        self._controls = pending
        self._changed = False
        logger.debug("controls replaced: %s", ", ".join(self._controls) or "(none)")

    def abort_setup(self) -> None:
        """受け付けた宣言を破棄し、既存の集合を維持する。"""
        self._pending = None

    def _declare(self, control: Control, call: str) -> None:
        if self._pending is None:
            if self._warn is not None:
                self._warn(f"{call}: ignored outside setup()")
            return
        if control.name in self._reserved:
            # 注入で同名のグローバル関数を上書きしてしまう
            if self._warn is not None:
                self._warn(
                    f"{call}('{control.name}'): ignored, name is reserved for a script global"
                )
            return
        # 同名の再宣言は後勝ち（並び位置は最初の宣言のまま）
        self._pending[control.name] = control

    # --- 宣言（ホスト関数の実体） ---
    def register_slider(self, name: str, params: Any = None) -> Slider:
        issues = CallIssues(f"addSlider('{name}')")
        values: dict[str, float] = {}
        for key, fallback in SLIDER_DEFAULTS.items():
            raw = field(params, key)
            values[key] = to_number(raw, fallback)
            if raw is not None and values[key] == fallback and not isinstance(raw, (int, float)):
                issues.note(f"invalid {key} {raw!r}, using {fallback}")
        if values["min"] > values["max"]:
            issues.note("min > max, swapped")
        if values["step"] < 0.0:
            issues.note("negative step, treated as continuous")
            values["step"] = 0.0
        slider = Slider.declare(
            name,
            min=values["min"],
            max=values["max"],
            step=values["step"],
            default=values["default"],
        )
        if slider.default != values["default"]:
            issues.note(f"default {values['default']} adjusted to {slider.default}")
        issues.report(self._warn)
        self._declare(slider, "addSlider")
        return slider

    def register_checkbox(self, name: str, label: str, params: Any = None) -> Checkbox:
        raw = field(params, "default")
        if raw is not None and not isinstance(raw, bool) and self._warn is not None:
            self._warn(f"addCheckbox('{name}'): default {raw!r} is not a boolean, using true")
        checkbox = Checkbox.declare(name, label=label, default=to_bool(raw, CHECKBOX_DEFAULT))
        self._declare(checkbox, "addCheckbox")
        return checkbox

    def register_color_picker(self, name: str, params: Any = None) -> ColorPicker:
        raw = field(params, "default")
        color = rgb_from_script(raw, COLOR_PICKER_DEFAULT)
        if color is None:
            if raw is not None and self._warn is not None:
                self._warn(
                    f"addColorpicker('{name}'): default {raw!r} is not [r, g, b], using white"
                )
            color = COLOR_PICKER_DEFAULT
        picker = ColorPicker.declare(name, default=color)
        self._declare(picker, "addColorpicker")
        return picker

    # --- UI 連携 ---
    def snapshot(self) -> tuple[Control, ...]:
        """宣言順のコントロール一覧（不変）。UI の描画用。"""
        return tuple(self._controls.values())

    def get(self, name: str) -> Control:
        return self._controls[name]

    def __contains__(self, name: object) -> bool:
        return name in self._controls

    def __iter__(self) -> Iterator[Control]:
        return iter(self._controls.values())

    def __len__(self) -> int:
        return len(self._controls)

    def set_value(self, name: str, value: Any) -> bool:
        """UI からの値変更。実際に値が変わったら True（再描画要求として記録）。

        存在しない名前は KeyError、型不一致は TypeError/ValueError。
        """
        current = self._controls[name]
        updated = current.with_value(value, user_set=True)
        self._controls[name] = updated
        if updated.value == current.value:
            return False
        self._changed = True
        return True

    def reset_value(self, name: str) -> bool:
        """宣言時の既定値へ戻す。"""
        current = self._controls[name]
        updated = current.with_value(current.default, user_set=False)
        self._controls[name] = updated
        if updated.value == current.value:
            return False
        self._changed = True
        return True

    @property
    def has_changes(self) -> bool:
        """未消費の値変更があるか（フラグは下ろさない）。"""
        return self._changed

    def consume_changes(self) -> bool:
        """前回呼び出し以降に値変更があったかを返し、フラグを下ろす。"""
        changed, self._changed = self._changed, False
        return changed

    def values(self) -> dict[str, Any]:
        """名前 → スクリプトへ注入される値。"""
        return {c.name: c.script_value() for c in self._controls.values()}

    # --- スクリプト連携 ---
    def inject_into_script(self, engine: ScriptEngine) -> None:
        """全コントロールの現在値を同名のグローバル変数として設定する。"""
        for control in self._controls.values():
            engine.set_global(control.name, control.script_value())

    def host_functions(self) -> list[HostFunction]:
        """`addSlider`/`addCheckbox`/`addColorpicker` の束縛定義。"""

        def add_slider(name: Any, params: Any) -> None:
            self.register_slider(js_string(name), params)

        def add_checkbox(name: Any, label: Any, params: Any) -> None:
            key = js_string(name)
            self.register_checkbox(key, key if label is None else js_string(label), params)

        def add_colorpicker(name: Any, params: Any) -> None:
            self.register_color_picker(js_string(name), params)

        return [
            HostFunction("addSlider", 2, add_slider),
            HostFunction("addCheckbox", 3, add_checkbox),
            HostFunction("addColorpicker", 2, add_colorpicker),
        ]


__all__ = [
    "ControlRegistry",
    "SLIDER_DEFAULTS",
    "CHECKBOX_DEFAULT",
    "COLOR_PICKER_DEFAULT",
]
