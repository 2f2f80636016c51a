from __future__ import annotations

import json

import numpy as np
import pytest

from paramplot.api import DEFAULT_SCRIPT, PlotSession, parse_control_text
from paramplot.engine.controls import Checkbox, ColorPicker, Slider
from paramplot.engine.runtime import EvalState


def test_default_script_declares_demo_controls() -> None:
    session = PlotSession()
    assert session.source == DEFAULT_SCRIPT
    assert session.tick() is EvalState.NEEDS_FULL_RELOAD

    names = [c.name for c in session.controls]
    assert names == ["radius", "lineColor", "show"]
    assert session.control("radius").value == 1.0
    assert session.control("lineColor").value == (255, 0, 0)
    show = session.control("show")
    assert isinstance(show, Checkbox) and show.label == "円を表示する"

    (curve,) = session.frame.curves
    assert curve.name == "円"
    assert len(curve.points) == 101
    assert curve.color == (255, 0, 0)
    np.testing.assert_allclose(np.hypot(curve.points[:, 0], curve.points[:, 1]), 1.0)


def test_controls_drive_redraw() -> None:
    session = PlotSession()
    session.tick()
    assert session.set_control("radius", 2.0)
    assert session.tick() is EvalState.NEEDS_REDRAW_ONLY
    radii = np.hypot(*session.frame.curves[0].points.T)
    np.testing.assert_allclose(radii, 2.0)

    session.set_control("show", False)
    session.tick()
    assert session.lines() == []


def test_set_color_unit() -> None:
    session = PlotSession()
    session.tick()
    assert session.set_color_unit("lineColor", (0.0, 0.5, 1.0))
    session.tick()
    assert session.frame.curves[0].color == (0, 127, 255)
    with pytest.raises(TypeError):
        session.set_color_unit("radius", (0, 0, 0))


def test_apply_overrides_parses_by_kind() -> None:
    session = PlotSession()
    session.tick()
    unknown = session.apply_overrides(
        {"radius": "2.5", "show": "off", "lineColor": "#00ff80", "nope": "1"}
    )
    assert unknown == ["nope"]
    assert session.control("radius").value == 2.5
    assert session.control("show").value is False
    assert session.control("lineColor").value == (0, 255, 128)

    with pytest.raises(ValueError):
        session.apply_overrides({"show": "maybe"})


def test_parse_control_text() -> None:
    slider = Slider.declare("s", min=0, max=1, step=0.1, default=0)
    checkbox = Checkbox.declare("c", label="c", default=True)
    color = ColorPicker.declare("k", default=(0, 0, 0))
    assert parse_control_text(slider, " 0.5 ") == 0.5
    assert parse_control_text(checkbox, "YES") is True
    assert parse_control_text(checkbox, "0") is False
    assert parse_control_text(color, "10, 20, 30") == (10, 20, 30)
    assert parse_control_text(color, "#0A141E") == (10, 20, 30)
    with pytest.raises(ValueError):
        parse_control_text(slider, "abc")
    with pytest.raises(ValueError):
        parse_control_text(color, "1,2")


def test_rerun_and_reset() -> None:
    session = PlotSession()
    session.tick()
    session.set_control("radius", 3.0)
    session.tick()

    session.rerun()
    assert session.tick() is EvalState.NEEDS_FULL_RELOAD
    assert session.control("radius").value == 3.0

    session.reset()
    session.tick()
    assert session.control("radius").value == 1.0


def test_source_setter_and_errors() -> None:
    session = PlotSession()
    session.tick()
    before = session.frame
    session.source = "function draw( {"
    session.tick()
    assert session.last_error is not None
    assert session.frame is before
    assert any(e.kind == "stderr" for e in session.logs)


def test_from_file(tmp_path) -> None:
    path = tmp_path / "sketch.js"
    path.write_text(
        "function setup() {}\n"
        "function draw() { addVector('v', t => [0, 0], t => [1, 0], 0); }\n",
        encoding="utf-8",
    )
    session = PlotSession.from_file(path)
    session.tick()
    assert [pl.name for pl in session.lines()] == ["v_main", "v_arrow1", "v_arrow2"]


def test_to_dict_is_json_serializable() -> None:
    session = PlotSession()
    session.tick()
    data = json.loads(json.dumps(session.to_dict(), ensure_ascii=False))
    assert [c["name"] for c in data["controls"]] == ["radius", "lineColor", "show"]
    assert data["controls"][1]["value"] == [255, 0, 0]
    assert data["frame"]["generation"] == 1
    assert len(data["frame"]["curves"][0]["points"]) == 101
    assert data["error"] is None


def test_describe_controls() -> None:
    session = PlotSession()
    session.tick()
    lines = session.describe_controls()
    assert lines[0].startswith("radius = 1  (slider 0.5..5, step 0.1)")
    assert lines[1] == "lineColor = #ff0000  (color)"
    assert lines[2] == "show = true  (checkbox '円を表示する')"


def test_svg_round_trip(tmp_path) -> None:
    session = PlotSession()
    session.tick()
    text = session.to_svg()
    assert text.startswith('<?xml version="1.0"')
    saved = session.save_svg(tmp_path / "out" / "plot.svg")
    assert saved.read_text(encoding="utf-8") == text
