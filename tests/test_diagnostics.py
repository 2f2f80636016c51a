from __future__ import annotations

import logging

from paramplot.common.logging import SCRIPT_LOGGER_NAME
from paramplot.engine.diagnostics import DiagnosticsSink, LogEntry
from paramplot.engine.script import ScriptRuntimeError


def test_entries_keep_order_and_kind() -> None:
    sink = DiagnosticsSink(mirror=False)
    sink.stdout("one")
    sink.warning("careful")
    sink.stderr(2)
    assert sink.entries() == (
        LogEntry("stdout", "one"),
        LogEntry("warning", "careful"),
        LogEntry("stderr", "2"),
    )
    assert sink.messages() == ["one", "careful", "2"]
    assert sink.messages("stdout") == ["one"]
    assert sink.has_errors()
    assert len(sink) == 3

    sink.clear()
    assert len(sink) == 0 and not sink.has_errors()


def test_log_is_bounded() -> None:
    sink = DiagnosticsSink(max_entries=2, mirror=False)
    for i in range(5):
        sink.stdout(f"m{i}")
    assert sink.messages() == ["m3", "m4"]


def test_record_error_uses_prefix() -> None:
    sink = DiagnosticsSink(mirror=False)
    sink.record_error("Draw error", ScriptRuntimeError("Error: x", stack="    at draw (<input>:1)"))
    (message,) = sink.messages("stderr")
    assert message.startswith("Draw error: Error: x\n")
    assert "at draw" in message


def test_output_is_mirrored_to_script_logger(caplog) -> None:
    sink = DiagnosticsSink(mirror=True)
    with caplog.at_level(logging.INFO, logger=SCRIPT_LOGGER_NAME):
        sink.stdout("hello")
        sink.stderr("oops")
    records = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == SCRIPT_LOGGER_NAME]
    assert records == [
        (logging.INFO, "[JS stdout]: hello"),
        (logging.ERROR, "[JS stderr]: oops"),
    ]


def test_mirroring_can_be_disabled(caplog) -> None:
    sink = DiagnosticsSink(mirror=False)
    with caplog.at_level(logging.INFO, logger=SCRIPT_LOGGER_NAME):
        sink.stdout("quiet")
    assert [r for r in caplog.records if r.name == SCRIPT_LOGGER_NAME] == []


def test_host_functions() -> None:
    sink = DiagnosticsSink(mirror=False)
    assert [(f.name, f.arity) for f in sink.host_functions()] == [("stdout", 1), ("stderr", 1)]
