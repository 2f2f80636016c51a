"""
どこで: `paramplot.engine.runtime.state`。
何を: 評価オーケストレータが 1 tick ごとに決定する状態。
"""

from __future__ import annotations

from enum import Enum


class EvalState(Enum):
    """1 tick で行うスクリプト処理の種類。"""

    IDLE = "idle"
    NEEDS_FULL_RELOAD = "needs_full_reload"
    NEEDS_REDRAW_ONLY = "needs_redraw_only"


__all__ = ["EvalState"]
