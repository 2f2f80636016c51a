"""
どこで: `paramplot.api`（公開 API）。
何を: UI 層向けのセッションファサード、既定スクリプト、ヘッドレスランナーを再輸出。
"""

from .runner import main
from .script import DEFAULT_SCRIPT
from .session import PlotSession, control_to_dict, frame_to_dict, parse_control_text

__all__ = [
    "DEFAULT_SCRIPT",
    "PlotSession",
    "control_to_dict",
    "frame_to_dict",
    "parse_control_text",
    "main",
]
