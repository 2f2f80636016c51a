"""
どこで: `paramplot.engine.script.bindings`。
何を: ホスト関数の登録表（名前・arity・ネイティブ実装）と、console シムのブートストラップ。
なぜ: リロードのたびに必要なホスト関数の再束縛を、表 1 つの一括適用という監査しやすい単一手順にするため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from .adapter import HostCallable, HostErrorSink, ScriptEngine
from .errors import ScriptError

logger = logging.getLogger(__name__)

# console.log/console.error を stdout/stderr へ JSON 文字列で転送する
CONSOLE_SHIM = r"""
try {
    if (typeof globalThis.console !== 'object' || globalThis.console === null) {
        globalThis.console = {};
    }
    globalThis.console.log = function(...args) {
        try { stdout(args.map(x => JSON.stringify(x)).join(" ")); } catch (e) {}
    };
    globalThis.console.error = function(...args) {
        try { stderr(args.map(x => JSON.stringify(x)).join(" ")); } catch (e) {}
    };
} catch (e) { stderr('[console patch error] ' + e); }
"""


@dataclass(frozen=True)
class HostFunction:
    """スクリプトのグローバル名前空間へ公開するホスト関数 1 件。"""

    name: str
    arity: int
    fn: HostCallable


class HostBindingTable:
    """HostFunction の順序付き表。`bind_all()` でエンジンへ一括適用する。"""

    def __init__(self, functions: Iterable[HostFunction] = ()) -> None:
        self._functions: dict[str, HostFunction] = {}
        for f in functions:
            self.add(f)

    def add(self, function: HostFunction) -> None:
        """登録（同名は置き換え、位置は維持）。"""
        self._functions[function.name] = function

    def extend(self, functions: Iterable[HostFunction]) -> None:
        for f in functions:
            self.add(f)

    def names(self) -> list[str]:
        return list(self._functions)

    def get(self, name: str) -> HostFunction:
        return self._functions[name]

    def __iter__(self) -> Iterator[HostFunction]:
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def bind_all(self, engine: ScriptEngine, *, on_error: HostErrorSink | None = None) -> None:
        """全ホスト関数をエンジンへ（再）束縛する。`on_error` はホスト関数の想定外の失敗を受け取る。"""
        for f in self._functions.values():
            engine.bind_function(f.name, f.arity, f.fn, on_error=on_error)
        logger.debug("bound %d host functions: %s", len(self._functions), ", ".join(self.names()))


def install_console_shim(engine: ScriptEngine) -> bool:
    """console シムを評価する。`stdout`/`stderr` の束縛後に呼ぶこと。"""
    try:
        engine.eval_source(CONSOLE_SHIM)
    except ScriptError as exc:
        logger.warning("console shim failed: %s", exc.describe())
        return False
    return True


__all__ = ["CONSOLE_SHIM", "HostFunction", "HostBindingTable", "install_console_shim"]
