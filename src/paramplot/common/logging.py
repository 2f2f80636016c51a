"""
Lightweight logging utilities for paramplot.

Default behavior: modules import logging and obtain a logger via
`logging.getLogger(__name__)`. This helper ensures a sane default
configuration if the application hasn't configured logging yet.

Script-originated output (`stdout`/`stderr` host functions) is mirrored
through the dedicated `SCRIPT_LOGGER_NAME` logger so that hosts can route
or silence it independently of the library's own messages.
"""

from __future__ import annotations

import logging

SCRIPT_LOGGER_NAME = "paramplot.script"


def setup_default_logging(level: int | str = "INFO") -> None:
    """Setup a minimal logging configuration once.

    - No-op if root logger already has handlers
    - Intended to be called from top-level runners/CLIs
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def script_logger() -> logging.Logger:
    """Return the logger that mirrors script stdout/stderr."""
    return logging.getLogger(SCRIPT_LOGGER_NAME)


__all__ = ["SCRIPT_LOGGER_NAME", "setup_default_logging", "script_logger"]
