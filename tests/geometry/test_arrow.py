from __future__ import annotations

import math

import numpy as np
import pytest

from paramplot.engine.geometry.arrow import (
    ARROW_HEAD_ANGLE,
    ARROW_HEAD_LENGTH,
    arrow_head,
    head_length,
)


def _angle_between(a: np.ndarray, b: np.ndarray) -> float:
    cos = float(a @ b) / (np.linalg.norm(a) * np.linalg.norm(b))
    return math.acos(max(-1.0, min(1.0, cos)))


def test_head_length_is_capped() -> None:
    assert head_length(10.0) == ARROW_HEAD_LENGTH
    assert head_length(0.2) == pytest.approx(0.08)


def test_unit_vector_wings() -> None:
    head = arrow_head((0.0, 0.0), (1.0, 0.0))
    assert head is not None
    tip = np.array([1.0, 0.0])
    back = np.array([-1.0, 0.0])
    for wing in head:
        w = np.asarray(wing) - tip
        assert np.linalg.norm(w) == pytest.approx(0.15)
        assert _angle_between(w, back) == pytest.approx(math.pi / 7)
    # 逆方向に対して対称
    (x1, y1), (x2, y2) = head
    assert x1 == pytest.approx(x2)
    assert y1 == pytest.approx(-y2)
    assert ARROW_HEAD_ANGLE == pytest.approx(math.pi / 7)


def test_short_vector_head_scales_with_length() -> None:
    head = arrow_head((1.0, 1.0), (1.0, 1.1))
    assert head is not None
    for wing in head:
        assert math.dist(wing, (1.0, 1.1)) == pytest.approx(0.04)


def test_degenerate_vector_has_no_head() -> None:
    assert arrow_head((0.0, 0.0), (0.0, 0.0)) is None
    assert arrow_head((0.0, 0.0), (1e-7, 0.0)) is None
