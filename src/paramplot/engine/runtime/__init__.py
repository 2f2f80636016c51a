"""
どこで: `paramplot.engine.runtime` パッケージ。
何を: 評価オーケストレータ（状態機械）と tick 駆動のフレームクロックを再輸出。
"""

from .frame_clock import FrameClock
from .orchestrator import EvaluationOrchestrator, FrameListener
from .state import EvalState
from .tickable import Tickable

__all__ = ["EvaluationOrchestrator", "EvalState", "FrameClock", "FrameListener", "Tickable"]
