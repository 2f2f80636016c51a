from __future__ import annotations

import math

import numpy as np
import pytest

from paramplot.engine.geometry import FrameBuilder, GeometrySampler, sample_parameters
from paramplot.engine.geometry.sampler import (
    DEFAULT_GRAPH_COLOR,
    DEFAULT_POLYGON_FILL,
    DEFAULT_POLYGON_STROKE,
    DEFAULT_VECTOR_COLOR,
    DEFAULT_WEIGHT,
)
from paramplot.engine.script import HostBindingTable, ScriptEngine

FUNCTIONS = """
function line(t) { return [t, 2 * t]; }
function origin(t) { return [0, 0]; }
function unitX(t) { return [1, 0]; }
function tiny(t) { return [1e-8, 0]; }
function halfBad(t) { return t < 0.5 ? [t, t] : 'oops'; }
function throws(t) { if (t > 0.5) { throw new Error('boom'); } return [t, 0]; }
function shortArr(t) { return [t]; }
"""


@pytest.fixture()
def warnings() -> list[str]:
    return []


@pytest.fixture()
def sampler(engine: ScriptEngine, warnings: list[str]) -> GeometrySampler:
    engine.eval_source(FUNCTIONS)
    return GeometrySampler(engine, warn=warnings.append)


def _fn(engine: ScriptEngine, name: str):
    return engine.get_global(name)


def test_sample_parameters_include_both_ends() -> None:
    ts = sample_parameters(0.0, 1.0, 4)
    np.testing.assert_allclose(ts, [0.0, 0.25, 0.5, 0.75, 1.0])
    with pytest.raises(ValueError):
        sample_parameters(0.0, 1.0, 0)


def test_graph_has_n_plus_one_points(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(
        arena, "c", _fn(engine, "line"), {"min": -1, "max": 1, "num_points": 8}, None
    )
    assert curve is not None
    assert curve.points.shape == (9, 2)
    expected_t = -1 + np.arange(9) * (2 / 8)
    np.testing.assert_allclose(curve.points[:, 0], expected_t)
    np.testing.assert_allclose(curve.points[:, 1], 2 * expected_t)
    assert arena.curves == [curve]
    assert warnings == []


def test_graph_defaults(engine, sampler) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(arena, "c", _fn(engine, "line"), None, None)
    assert curve.points.shape == (501, 2)
    assert curve.points[-1, 0] == pytest.approx(2 * math.pi)
    assert curve.color == DEFAULT_GRAPH_COLOR == (200, 100, 0)
    assert curve.weight == DEFAULT_WEIGHT == 1.5


def test_graph_style(engine, sampler) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(
        arena,
        "c",
        _fn(engine, "line"),
        {"num_points": 2},
        {"color": [1, 2, 3], "weight": 4},
    )
    assert curve.color == (1, 2, 3)
    assert curve.weight == 4.0


def test_malformed_samples_are_skipped(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(
        arena, "c", _fn(engine, "halfBad"), {"min": 0, "max": 1, "num_points": 4}, None
    )
    # t = 0, 0.25 のみ有効
    np.testing.assert_allclose(curve.points[:, 0], [0.0, 0.25])
    assert len(warnings) == 1
    assert warnings[0].startswith("addParametricGraph('c'): skipped 3 of 5 samples")


def test_throwing_samples_are_skipped(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(
        arena, "c", _fn(engine, "throws"), {"min": 0, "max": 1, "num_points": 4}, None
    )
    assert len(curve.points) == 3
    assert "boom" in warnings[0]


def test_num_points_below_one_falls_back(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    curve = sampler.add_parametric_graph(
        arena, "c", _fn(engine, "line"), {"min": 0, "max": 1, "num_points": 0}, None
    )
    assert len(curve.points) == 2
    assert "num_points" in warnings[0]


def test_num_points_above_cap_is_clamped(engine, warnings) -> None:
    engine.eval_source(FUNCTIONS)
    capped = GeometrySampler(engine, warn=warnings.append, max_num_points=10)
    arena = FrameBuilder(generation=1)
    curve = capped.add_parametric_graph(
        arena, "c", _fn(engine, "line"), {"min": 0, "max": 1, "num_points": 5000}, None
    )
    assert len(curve.points) == 11
    assert curve.points[-1].tolist() == [1.0, 2.0]
    assert warnings == ["addParametricGraph('c'): num_points 5000 > 10, using 10"]
    with pytest.raises(ValueError):
        GeometrySampler(engine, max_num_points=0)


def test_graph_requires_function(sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    assert sampler.add_parametric_graph(arena, "c", [1, 2], None, None) is None
    assert len(arena) == 0
    assert "not a function" in warnings[0]


def test_vector_tip_and_head(engine, sampler) -> None:
    arena = FrameBuilder(generation=1)
    v = sampler.add_vector(
        arena, "v", _fn(engine, "origin"), _fn(engine, "unitX"), 0.3, None
    )
    assert v is not None
    assert v.origin == (0.0, 0.0)
    assert v.tip == (1.0, 0.0)
    assert v.color == DEFAULT_VECTOR_COLOR == (0, 150, 200)
    assert v.weight == 1.5
    assert v.head is not None
    for wing in v.head:
        assert math.dist(wing, v.tip) == pytest.approx(0.15)
    assert arena.vectors == [v]


def test_tiny_vector_is_body_only(engine, sampler) -> None:
    arena = FrameBuilder(generation=1)
    v = sampler.add_vector(arena, "v", _fn(engine, "origin"), _fn(engine, "tiny"), 0, None)
    assert v is not None and v.head is None
    names = [pl.name for pl in arena.freeze().lines()]
    assert names == ["v_main"]


def test_vector_with_bad_function_is_not_emitted(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    bad_delta = _fn(engine, "shortArr")
    assert sampler.add_vector(arena, "v", _fn(engine, "origin"), bad_delta, 0, None) is None
    assert sampler.add_vector(arena, "w", None, _fn(engine, "unitX"), 0, None) is None
    assert len(arena) == 0
    assert warnings == [
        "addVector('v'): delta(0) did not return [x, y]",
        "addVector('w'): start is not a function",
    ]


def test_polygon(engine, sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    p = sampler.add_polygon(arena, "tri", [[0, 0], [1, 0], [0, 1], [5, 5]], None)
    assert p is not None
    assert p.vertices.shape == (4, 2)
    assert p.stroke_color == DEFAULT_POLYGON_STROKE == (0, 0, 0)
    assert p.fill_color == DEFAULT_POLYGON_FILL == (128, 128, 255)
    assert p.weight == 1.5
    assert warnings == []


def test_polygon_skips_bad_points_and_rejects_empty(sampler, warnings) -> None:
    arena = FrameBuilder(generation=1)
    p = sampler.add_polygon(arena, "p", [[0, 0], "x", [1]], {"fill": [1, 2, 3]})
    assert p is not None and len(p.vertices) == 1
    assert p.fill_color == (1, 2, 3)
    assert sampler.add_polygon(arena, "q", [["a", "b"]], None) is None
    assert sampler.add_polygon(arena, "r", 5, None) is None
    assert [poly.name for poly in arena.polygons] == ["p"]
    assert len(warnings) == 3


def test_host_functions_write_to_current_arena(engine: ScriptEngine, warnings) -> None:
    arena: list[FrameBuilder | None] = [None]
    sampler = GeometrySampler(engine, warn=warnings.append)
    HostBindingTable(sampler.host_functions(lambda: arena[0])).bind_all(engine)
    engine.eval_source(
        """
        function draw() {
            addParametricGraph('c', function(t) { return [t, t]; }, { num_points: 3 });
            addVector('v', function(t) { return [0, 0]; }, function(t) { return [0, t]; }, 2);
            addPolygon('p', [[0, 0], [1, 0], [1, 1]], { color: [9, 9, 9] });
        }
        """
    )

    engine.call_global("draw")
    assert warnings == [
        "addParametricGraph: ignored outside draw()",
        "addVector: ignored outside draw()",
        "addPolygon: ignored outside draw()",
    ]

    warnings.clear()
    arena[0] = FrameBuilder(generation=1)
    engine.call_global("draw")
    frame = arena[0].freeze()
    assert [c.name for c in frame.curves] == ["c"]
    assert len(frame.curves[0].points) == 4
    assert frame.vectors[0].tip == (0.0, 2.0)
    assert frame.polygons[0].stroke_color == (9, 9, 9)
    assert warnings == []
