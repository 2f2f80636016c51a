"""
どこで: `paramplot.engine.script.coerce`。
何を: スクリプトから受け取った値（Python 変換済み）を、既定値付きでベストエフォートに型変換する。
なぜ: ホスト関数は不正な引数でスクリプトを止めず、欠損は既定値・不正な点はスキップする方針のため。
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping

from ...common.types import Vec2


def js_string(value: Any) -> str:
    """JS の ToString 相当（名前引数用）。"""
    if isinstance(value, str):
        return value
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else js_string(v) for v in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any, default: float) -> float:
    """数値へ変換する。未指定/変換不能/非有限なら `default`。"""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        f = float(value)
        return f if math.isfinite(f) else default
    if isinstance(value, str):
        try:
            f = float(value.strip())
        except ValueError:
            return default
        return f if math.isfinite(f) else default
    return default


def to_bool(value: Any, default: bool) -> bool:
    """真偽値のみ採用し、それ以外は `default`。"""
    return value if isinstance(value, bool) else default


def field(obj: Any, key: str) -> Any:
    """オプション辞書からキーを取り出す（辞書でなければ None）。"""
    if isinstance(obj, Mapping):
        return obj.get(key)
    return None


def to_point(value: Any) -> Vec2 | None:
    """`[x, y]`（先頭 2 要素が有限数）を (x, y) へ。満たさなければ None。"""
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    x, y = value[0], value[1]
    if not (is_number(x) and is_number(y)):
        return None
    fx, fy = float(x), float(y)
    if not (math.isfinite(fx) and math.isfinite(fy)):
        return None
    return (fx, fy)


class CallIssues:
    """1 回のホスト関数呼び出し中に行った既定値補完/スキップの記録。

    呼び出し終了時に `report()` で 1 件の要約メッセージへまとめ、警告コールバックへ渡す。
    """

    __slots__ = ("call", "_notes")

    def __init__(self, call: str) -> None:
        self.call = call
        self._notes: list[str] = []

    def note(self, message: str) -> None:
        self._notes.append(message)

    def __bool__(self) -> bool:
        return bool(self._notes)

    def summary(self) -> str | None:
        if not self._notes:
            return None
        return f"{self.call}: " + "; ".join(self._notes)

    def report(self, warn: Callable[[str], None] | None) -> None:
        text = self.summary()
        if text is not None and warn is not None:
            warn(text)


__all__ = [
    "js_string",
    "is_number",
    "to_number",
    "to_bool",
    "field",
    "to_point",
    "CallIssues",
]
