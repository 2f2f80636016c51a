from __future__ import annotations

import pytest

from paramplot.engine.runtime import EvalState, FrameClock


class _Recorder:
    def __init__(self) -> None:
        self.dts: list[float] = []

    def tick(self, dt: float) -> None:
        self.dts.append(dt)


def test_clock_ticks_in_order_with_given_dt() -> None:
    order: list[str] = []

    class Named:
        def __init__(self, name: str) -> None:
            self.name = name

        def tick(self, dt: float) -> None:
            order.append(self.name)

    clock = FrameClock([Named("a"), Named("b")])
    clock.tick(0.1)
    assert order == ["a", "b"]
    assert clock.frames == 1


def test_clock_measures_dt_when_not_given() -> None:
    rec = _Recorder()
    clock = FrameClock([rec])
    clock.tick()
    assert len(rec.dts) == 1 and rec.dts[0] >= 0.0


def test_run_uses_fixed_dt() -> None:
    rec = _Recorder()
    FrameClock([rec]).run(3, fps=50)
    assert rec.dts == pytest.approx([0.02, 0.02, 0.02])
    with pytest.raises(ValueError):
        FrameClock([rec]).run(-1)


def test_clock_drives_orchestrator(make_orchestrator) -> None:
    orch = make_orchestrator()
    clock = FrameClock([orch])
    clock.run(3, fps=60)
    assert orch.last_state is EvalState.IDLE
    assert orch.engine.get_global("drawCalls") == 1
