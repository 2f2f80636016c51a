from __future__ import annotations

import pytest

from paramplot.util.color import (
    clamp_byte,
    rgb_from_script,
    rgb_from_unit,
    rgb_to_hex,
    rgb_to_unit,
)


def test_clamp_byte_saturates_and_truncates() -> None:
    assert clamp_byte(-3) == 0
    assert clamp_byte(12.9) == 12
    assert clamp_byte(255.5) == 255
    assert clamp_byte(float("nan")) == 0
    assert clamp_byte("x") == 0  # type: ignore[arg-type]


def test_rgb_from_script_accepts_three_or_more_components() -> None:
    default = (255, 255, 255)
    assert rgb_from_script([10, 20, 30], default) == (10, 20, 30)
    assert rgb_from_script([10, 20, 30, 40], default) == (10, 20, 30)
    assert rgb_from_script([300, -1, 2.7], default) == (255, 0, 2)
    assert rgb_from_script(["12", None, 3], default) == (12, 0, 3)
    assert rgb_from_script([[1], "abc", 3], default) == (255, 0, 3)


@pytest.mark.parametrize("value", [None, 5, "red", [1, 2], {"r": 1}])
def test_rgb_from_script_rejects_non_triples(value) -> None:
    assert rgb_from_script(value, (0, 0, 0)) is None


def test_unit_conversions() -> None:
    assert rgb_to_unit((255, 0, 51)) == pytest.approx((1.0, 0.0, 0.2))
    assert rgb_from_unit((1.0, 0.0, 0.2)) == (255, 0, 51)
    assert rgb_from_unit((0.999, 0.5, 2.0)) == (254, 127, 255)
    with pytest.raises(ValueError):
        rgb_from_unit((1.0, 0.0))


def test_rgb_to_hex() -> None:
    assert rgb_to_hex((255, 0, 128)) == "#ff0080"
