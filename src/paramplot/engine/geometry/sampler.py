"""
どこで: `paramplot.engine.geometry.sampler`。
何を: ホスト関数 `addParametricGraph`/`addVector`/`addPolygon` の実体。スクリプト関数を標本点で評価し、
      点列・矢じりを構築して、呼び出し時点の `FrameBuilder`（現在フレームの一時バッファ）へ追加する。
なぜ: サンプリング規則（点数・既定スタイル・不正値の扱い）をスクリプトエンジンから独立に保証するため。

不正値の扱い（ベストエフォート）:
- 標本の戻り値が `[x, y]`（有限数 2 つ）でなければ、その点だけを捨てる。曲線全体は中断しない。
- `num_points` は整数へ切り捨て、1 以上 `max_num_points`（既定 100000）以下へ収める。
- ベクトルは始点/変位のどちらかが評価できなければ何も追加しない。
- いずれもスクリプトへ例外は投げない。捨てた件数は警告コールバックへ 1 件にまとめて報告する。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

import numpy as np

from ...common.types import RGB, Vec2
from ...util.color import rgb_from_script
from ..script.adapter import ScriptEngine, ScriptFunction
from ..script.bindings import HostFunction
from ..script.coerce import CallIssues, field, is_number, js_string, to_number, to_point
from ..script.errors import HostCallArgumentError, ScriptError
from .arrow import arrow_head
from .primitives import Curve, FrameBuilder, Polygon, Vector

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_COLOR: RGB = (200, 100, 0)
DEFAULT_VECTOR_COLOR: RGB = (0, 150, 200)
DEFAULT_POLYGON_STROKE: RGB = (0, 0, 0)
DEFAULT_POLYGON_FILL: RGB = (128, 128, 255)
DEFAULT_WEIGHT = 1.5

DEFAULT_RANGE_MIN = 0.0
DEFAULT_RANGE_MAX = 2.0 * math.pi
DEFAULT_NUM_POINTS = 500
DEFAULT_MAX_NUM_POINTS = 100_000

Warn = Callable[[str], None]
ArenaProvider = Callable[[], FrameBuilder | None]


def sample_parameters(t_min: float, t_max: float, num_points: int) -> np.ndarray:
    """`t = t_min + i·(t_max - t_min)/num_points`（i = 0..num_points）の num_points+1 点。"""
    if num_points < 1:
        raise ValueError("num_points must be >= 1")
    delta = (t_max - t_min) / num_points
    return t_min + delta * np.arange(num_points + 1, dtype=np.float64)


def _style_color(style: Any, key: str, default: RGB, issues: CallIssues) -> RGB:
    raw = field(style, key)
    if raw is None:
        return default
    color = rgb_from_script(raw, default)
    if color is None:
        issues.note(f"invalid {key} {raw!r}")
        return default
    return color


def _style_weight(style: Any, issues: CallIssues) -> float:
    raw = field(style, "weight")
    if raw is None:
        return DEFAULT_WEIGHT
    weight = to_number(raw, DEFAULT_WEIGHT)
    if not is_number(raw) and weight == DEFAULT_WEIGHT:
        issues.note(f"invalid weight {raw!r}")
    return weight


class GeometrySampler:
    """スクリプト関数を評価して描画プリミティブを生成する。"""

    def __init__(
        self,
        engine: ScriptEngine,
        *,
        warn: Warn | None = None,
        max_num_points: int = DEFAULT_MAX_NUM_POINTS,
    ) -> None:
        if max_num_points < 1:
            raise ValueError("max_num_points must be >= 1")
        self._engine = engine
        self._warn = warn
        self._max_num_points = int(max_num_points)

    # --- 評価 ---
    def _sample(self, fn: Any, t: float, label: str) -> Vec2:
        """`fn(t)` を評価して点を返す。評価できなければ HostCallArgumentError。"""
        if not isinstance(fn, ScriptFunction):
            raise HostCallArgumentError(f"{label} is not a function")
        try:
            result = self._engine.call_function(fn, t)
        except ScriptError as exc:
            raise HostCallArgumentError(f"{label}({t:g}) threw: {exc.message}") from exc
        point = to_point(result)
        if point is None:
            raise HostCallArgumentError(f"{label}({t:g}) did not return [x, y]")
        return point

    # --- ホスト関数の実体 ---
    def add_parametric_graph(
        self,
        arena: FrameBuilder,
        name: str,
        fn: Any,
        range_: Any = None,
        style: Any = None,
    ) -> Curve | None:
        """`fn(t)` を等間隔にサンプルした曲線を追加する。"""
        issues = CallIssues(f"addParametricGraph('{name}')")
        if not isinstance(fn, ScriptFunction):
            issues.note("second argument is not a function")
            issues.report(self._warn)
            return None

        t_min = to_number(field(range_, "min"), DEFAULT_RANGE_MIN)
        t_max = to_number(field(range_, "max"), DEFAULT_RANGE_MAX)
        n_raw = to_number(field(range_, "num_points"), float(DEFAULT_NUM_POINTS))
        num_points = int(n_raw)
        if num_points < 1:
            issues.note(f"num_points {n_raw:g} < 1, using 1")
            num_points = 1
        elif num_points > self._max_num_points:
            cap = self._max_num_points
            issues.note(f"num_points {n_raw:g} > {cap}, using {cap}")
            num_points = cap

        color = _style_color(style, "color", DEFAULT_GRAPH_COLOR, issues)
        weight = _style_weight(style, issues)

        points: list[Vec2] = []
        failures: list[HostCallArgumentError] = []
        ts = sample_parameters(t_min, t_max, num_points)
        for t in ts:
            try:
                points.append(self._sample(fn, float(t), "fn"))
            except HostCallArgumentError as exc:
                failures.append(exc)
        if failures:
            issues.note(
                f"skipped {len(failures)} of {len(ts)} samples ({failures[0].message})"
            )
        issues.report(self._warn)

        curve = Curve(name=name, points=points, color=color, weight=weight)
        arena.add_curve(curve)
        return curve

    def add_vector(
        self,
        arena: FrameBuilder,
        name: str,
        start_fn: Any,
        delta_fn: Any,
        t: Any = None,
        style: Any = None,
    ) -> Vector | None:
        """`start_fn(t)` を始点、`delta_fn(t)` を変位とする矢印を 1 本追加する。"""
        issues = CallIssues(f"addVector('{name}')")
        color = _style_color(style, "color", DEFAULT_VECTOR_COLOR, issues)
        weight = _style_weight(style, issues)
        if not is_number(t):
            issues.note(f"invalid t {t!r}, using 0")
        tv = to_number(t, 0.0)

        try:
            ox, oy = self._sample(start_fn, tv, "start")
            dx, dy = self._sample(delta_fn, tv, "delta")
        except HostCallArgumentError as exc:
            issues.note(exc.message)
            issues.report(self._warn)
            return None
        issues.report(self._warn)

        origin = (ox, oy)
        tip = (ox + dx, oy + dy)
        vector = Vector(
            name=name,
            origin=origin,
            tip=tip,
            color=color,
            weight=weight,
            head=arrow_head(origin, tip),
        )
        arena.add_vector(vector)
        return vector

    def add_polygon(
        self,
        arena: FrameBuilder,
        name: str,
        points: Any,
        style: Any = None,
    ) -> Polygon | None:
        """任意個の `[x, y]` を頂点とする多角形を追加する。"""
        issues = CallIssues(f"addPolygon('{name}')")
        stroke = _style_color(style, "color", DEFAULT_POLYGON_STROKE, issues)
        fill = _style_color(style, "fill", DEFAULT_POLYGON_FILL, issues)
        weight = _style_weight(style, issues)

        if not isinstance(points, (list, tuple)):
            issues.note("points is not an array")
            issues.report(self._warn)
            return None
        vertices = [p for p in (to_point(item) for item in points) if p is not None]
        if len(vertices) != len(points):
            issues.note(f"skipped {len(points) - len(vertices)} of {len(points)} points")
        if not vertices:
            issues.note("no valid vertices")
            issues.report(self._warn)
            return None
        issues.report(self._warn)

        polygon = Polygon(
            name=name,
            vertices=vertices,
            stroke_color=stroke,
            fill_color=fill,
            weight=weight,
        )
        arena.add_polygon(polygon)
        return polygon

    # --- 束縛 ---
    def host_functions(self, arena: ArenaProvider) -> list[HostFunction]:
        """ホスト関数の束縛定義。書き込み先は呼び出し時点の `arena()`。"""

        def _target(call: str) -> FrameBuilder | None:
            target = arena()
            if target is None and self._warn is not None:
                self._warn(f"{call}: ignored outside draw()")
            return target

        def add_parametric_graph(name: Any, fn: Any, range_: Any, style: Any) -> None:
            target = _target("addParametricGraph")
            if target is not None:
                self.add_parametric_graph(target, js_string(name), fn, range_, style)

        def add_vector(name: Any, start_fn: Any, delta_fn: Any, t: Any, style: Any) -> None:
            target = _target("addVector")
            if target is not None:
                self.add_vector(target, js_string(name), start_fn, delta_fn, t, style)

        def add_polygon(name: Any, points: Any, style: Any) -> None:
            target = _target("addPolygon")
            if target is not None:
                self.add_polygon(target, js_string(name), points, style)

        return [
            HostFunction("addParametricGraph", 4, add_parametric_graph),
            HostFunction("addVector", 5, add_vector),
            HostFunction("addPolygon", 3, add_polygon),
        ]


__all__ = [
    "GeometrySampler",
    "sample_parameters",
    "DEFAULT_GRAPH_COLOR",
    "DEFAULT_VECTOR_COLOR",
    "DEFAULT_POLYGON_STROKE",
    "DEFAULT_POLYGON_FILL",
    "DEFAULT_WEIGHT",
    "DEFAULT_RANGE_MIN",
    "DEFAULT_RANGE_MAX",
    "DEFAULT_NUM_POINTS",
    "DEFAULT_MAX_NUM_POINTS",
]
