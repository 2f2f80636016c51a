"""
どこで: `paramplot.engine.diagnostics`。
何を: スクリプト由来の `stdout`/`stderr` 呼び出し、ホスト側の警告、ロード/実行エラーを
      順序付きログとして蓄積する `DiagnosticsSink`。
なぜ: 外部のログ表示 UI へ、スクリプトの出力と失敗を一か所から渡すため。

補足:
- 蓄積件数は上限付き（古いものから破棄）。
- 受け取ったメッセージはプロセス側ロガー（`paramplot.script`）へもミラーする（設定で無効化可）。
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Literal

from ..common import settings as _settings
from ..common.logging import script_logger
from .script.bindings import HostFunction
from .script.coerce import js_string
from .script.errors import ScriptError

LogKind = Literal["stdout", "stderr", "warning"]


@dataclass(frozen=True)
class LogEntry:
    """ログ 1 件。"""

    kind: LogKind
    message: str


class DiagnosticsSink:
    """スクリプト出力と診断メッセージの順序付きログ。"""

    def __init__(self, *, max_entries: int | None = None, mirror: bool | None = None) -> None:
        cfg = _settings.get()
        self._max = max_entries if max_entries is not None else cfg.DIAGNOSTICS_MAX_ENTRIES
        self._mirror = cfg.MIRROR_SCRIPT_OUTPUT if mirror is None else bool(mirror)
        self._entries: deque[LogEntry] = deque(maxlen=max(1, int(self._max)))
        self._logger = script_logger()

    # --- 追記 ---
    def stdout(self, message: Any) -> None:
        msg = js_string(message)
        if self._mirror:
            self._logger.info("[JS stdout]: %s", msg)
        self._entries.append(LogEntry("stdout", msg))

    def stderr(self, message: Any) -> None:
        msg = js_string(message)
        if self._mirror:
            self._logger.error("[JS stderr]: %s", msg)
        self._entries.append(LogEntry("stderr", msg))

    def warning(self, message: str) -> None:
        if self._mirror:
            self._logger.warning("%s", message)
        self._entries.append(LogEntry("warning", message))

    def record_error(self, prefix: str, error: ScriptError) -> None:
        """ロード/実行エラーを stderr チャネルへ記録する。"""
        self.stderr(f"{prefix}: {error.describe()}")

    def clear(self) -> None:
        self._entries.clear()

    # --- 参照 ---
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def messages(self, kind: LogKind | None = None) -> list[str]:
        return [e.message for e in self._entries if kind is None or e.kind == kind]

    def has_errors(self) -> bool:
        return any(e.kind == "stderr" for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # --- ホスト関数 ---
    def host_functions(self) -> list[HostFunction]:
        """`stdout(message)` / `stderr(message)` の束縛定義。"""
        return [
            HostFunction("stdout", 1, self.stdout),
            HostFunction("stderr", 1, self.stderr),
        ]


__all__ = ["LogKind", "LogEntry", "DiagnosticsSink"]
