"""
どこで: `paramplot.api.session`（UI 層向けの高水準ファサード）。
何を: `EvaluationOrchestrator` を 1 セッションとして包み、ソース編集・コントロール操作・tick・
      フレーム/ログ参照・エクスポート（SVG/JSON 辞書）を 1 つの窓口にまとめる `PlotSession`。
なぜ: ウィンドウ/エディタ/ログ表示（いずれも外部）から、コアの内部構成を意識せずに使えるようにするため。

例:
    from paramplot.api import PlotSession

    session = PlotSession()            # 既定のデモスクリプト
    session.tick()                     # 初回: ロード + setup + draw
    session.set_control("radius", 2.0)
    session.tick()                     # draw のみ
    for line in session.lines():
        print(line.name, len(line.points))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from ..common import settings as _settings
from ..engine.controls.state import Checkbox, ColorPicker, Control, Slider
from ..engine.diagnostics import DiagnosticsSink, LogEntry
from ..engine.export.svg import export_svg, frame_to_svg
from ..engine.geometry.primitives import Frame, Polyline
from ..engine.runtime.orchestrator import EvaluationOrchestrator, FrameListener
from ..engine.runtime.state import EvalState
from ..engine.script.adapter import ScriptEngine
from ..engine.script.errors import ScriptError
from ..util.color import rgb_to_hex
from .script import DEFAULT_SCRIPT

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "f", "no", "n", "off"}


def parse_control_text(control: Control, text: str) -> Any:
    """コマンドライン等の文字列を、コントロールの種類に応じた値へ変換する。

    - Slider: 数値（`"2.5"`）
    - Checkbox: `true/false`, `1/0`, `yes/no`, `on/off`
    - ColorPicker: `"#rrggbb"` または `"r,g,b"`（0–255）

    Raises
    ------
    ValueError
        解釈できない場合。
    """
    s = text.strip()
    if isinstance(control, Slider):
        return float(s)
    if isinstance(control, Checkbox):
        low = s.lower()
        if low in _TRUE_WORDS:
            return True
        if low in _FALSE_WORDS:
            return False
        raise ValueError(f"checkbox '{control.name}' expects true/false, got {text!r}")
    if isinstance(control, ColorPicker):
        if s.startswith("#") and len(s) == 7:
            return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))
        parts = [p.strip() for p in s.split(",")]
        if len(parts) != 3:
            raise ValueError(f"color '{control.name}' expects #rrggbb or r,g,b, got {text!r}")
        return tuple(int(float(p)) for p in parts)
    raise TypeError(f"unsupported control type: {type(control).__name__}")


def control_to_dict(control: Control) -> dict[str, Any]:
    """コントロール 1 件を JSON 化可能な辞書へ。"""
    data: dict[str, Any] = {"kind": control.kind, "name": control.name}
    if isinstance(control, Slider):
        data.update(
            min=control.min, max=control.max, step=control.step, default=control.default
        )
    elif isinstance(control, Checkbox):
        data.update(label=control.label, default=control.default)
    else:
        data.update(default=list(control.default))
    data["value"] = control.script_value()
    data["user_set"] = control.user_set
    return data


def frame_to_dict(frame: Frame) -> dict[str, Any]:
    """確定済みフレームを JSON 化可能な辞書へ。"""
    return {
        "generation": frame.generation,
        "curves": [
            {
                "name": c.name,
                "points": c.points.tolist(),
                "color": list(c.color),
                "weight": c.weight,
            }
            for c in frame.curves
        ],
        "vectors": [
            {
                "name": v.name,
                "origin": list(v.origin),
                "tip": list(v.tip),
                "head": [list(w) for w in v.head] if v.head is not None else None,
                "color": list(v.color),
                "weight": v.weight,
            }
            for v in frame.vectors
        ],
        "polygons": [
            {
                "name": p.name,
                "vertices": p.vertices.tolist(),
                "stroke": list(p.stroke_color),
                "fill": list(p.fill_color),
                "weight": p.weight,
            }
            for p in frame.polygons
        ],
    }


class PlotSession:
    """1 つのスクリプトと、その評価結果（コントロール/フレーム/ログ）を持つセッション。"""

    def __init__(
        self,
        source: str = DEFAULT_SCRIPT,
        *,
        time_limit: float | None = None,
        memory_limit: int | None = None,
        preserve_values: bool | None = None,
        report_coercions: bool | None = None,
        max_log_entries: int | None = None,
    ) -> None:
        cfg = _settings.get()
        engine = ScriptEngine(
            time_limit=time_limit if time_limit is not None else cfg.SCRIPT_TIME_LIMIT,
            memory_limit=memory_limit if memory_limit is not None else cfg.SCRIPT_MEMORY_LIMIT,
        )
        self._orchestrator = EvaluationOrchestrator(
            source,
            engine=engine,
            diagnostics=DiagnosticsSink(max_entries=max_log_entries),
            preserve_values=preserve_values,
            report_coercions=report_coercions,
        )

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> "PlotSession":
        """スクリプトファイルを読み込んでセッションを作る。"""
        source = Path(path).read_text(encoding="utf-8")
        return cls(source, **kwargs)

    # --- ソース ---
    @property
    def source(self) -> str:
        return self._orchestrator.source

    @source.setter
    def source(self, value: str) -> None:
        self._orchestrator.set_source(value)

    @property
    def orchestrator(self) -> EvaluationOrchestrator:
        return self._orchestrator

    # --- 駆動 ---
    def tick(self, dt: float = 0.0) -> EvalState:
        return self._orchestrator.tick(dt)

    def rerun(self) -> None:
        """次の tick でフルリロードする（UI の「再実行」）。"""
        self._orchestrator.request_rerun()

    def redraw(self) -> None:
        self._orchestrator.request_redraw()

    def reset(self) -> None:
        self._orchestrator.reset()

    def subscribe(self, listener: FrameListener) -> None:
        self._orchestrator.subscribe(listener)

    # --- コントロール ---
    @property
    def controls(self) -> tuple[Control, ...]:
        return self._orchestrator.controls

    def control(self, name: str) -> Control:
        return self._orchestrator.registry.get(name)

    def set_control(self, name: str, value: Any) -> bool:
        return self._orchestrator.set_control_value(name, value)

    def set_color_unit(self, name: str, rgb01: Sequence[float]) -> bool:
        """0–1 のカラーウィジェット値でカラーピッカーを更新する。"""
        control = self.control(name)
        if not isinstance(control, ColorPicker):
            raise TypeError(f"control '{name}' is not a color picker")
        return self.set_control(name, control.with_unit_rgb(rgb01).value)

    def reset_control(self, name: str) -> bool:
        return self._orchestrator.reset_control_value(name)

    def apply_overrides(self, overrides: Mapping[str, str]) -> list[str]:
        """`name -> 文字列値` を一括適用し、存在しなかった名前の一覧を返す。

        値が解釈できない場合は ValueError/TypeError をそのまま送出する。
        """
        unknown: list[str] = []
        for name, text in overrides.items():
            if name not in self._orchestrator.registry:
                unknown.append(name)
                continue
            value = parse_control_text(self.control(name), text)
            self.set_control(name, value)
        return unknown

    # --- 出力 ---
    @property
    def frame(self) -> Frame:
        return self._orchestrator.frame

    def lines(self) -> list[Polyline]:
        return self._orchestrator.frame.lines()

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        return self._orchestrator.diagnostics.entries()

    @property
    def last_error(self) -> ScriptError | None:
        return self._orchestrator.last_error

    def to_svg(self, **kwargs: Any) -> str:
        return frame_to_svg(self.frame, **kwargs)

    def save_svg(self, path: str | Path, **kwargs: Any) -> Path:
        saved = export_svg(self.frame, path, **kwargs)
        logger.info("saved SVG: %s", saved)
        return saved

    def to_dict(self) -> dict[str, Any]:
        """コントロール・フレーム・ログをまとめた JSON 化可能な辞書。"""
        error = self.last_error
        return {
            "controls": [control_to_dict(c) for c in self.controls],
            "frame": frame_to_dict(self.frame),
            "logs": [{"kind": e.kind, "message": e.message} for e in self.logs],
            "error": error.describe() if error is not None else None,
        }

    def describe_controls(self) -> list[str]:
        """人間向けのコントロール一覧（CLI 表示用）。"""
        out: list[str] = []
        for c in self.controls:
            if isinstance(c, Slider):
                out.append(
                    f"{c.name} = {c.value:g}  (slider {c.min:g}..{c.max:g}, step {c.step:g})"
                )
            elif isinstance(c, Checkbox):
                out.append(f"{c.name} = {str(c.value).lower()}  (checkbox '{c.label}')")
            else:
                out.append(f"{c.name} = {rgb_to_hex(c.value)}  (color)")
        return out


__all__ = [
    "PlotSession",
    "parse_control_text",
    "control_to_dict",
    "frame_to_dict",
]
