"""
どこで: `paramplot.engine.script.adapter`（スクリプトエンジン境界）。
何を: QuickJS コンテキストを包み、ホスト関数の束縛・ソース評価・式評価・グローバル変数の
      読み書き・スクリプト関数の呼び出しを提供する。値は Python ネイティブ型へ変換して受け渡す。
なぜ: エンジン固有 API（`quickjs`）への依存をこのモジュールだけに閉じ込め、上位層をドメイン知識のみで
      記述できるようにするため。

値変換の規約:
- JS の number/bool/string/null/undefined は `int|float`/`bool`/`str`/`None` に対応。
- 配列/オブジェクトは JSON 経由で `list`/`dict` へ復元する（NaN/Infinity は `None` になる）。
- 関数は不透明なハンドル `ScriptFunction` として返し、`call_function()` でのみ呼び出せる。

注意:
- ホスト関数は JS から渡された引数の数にかかわらず、宣言 arity 個の引数で呼ばれる
  （不足分は `None` = undefined、余剰分は破棄）。
- ホスト関数内の例外はスクリプトへ伝播させず、ログへ記録してエラーコールバックへ渡す。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

import quickjs

from .errors import ScriptError, ScriptLoadError, ScriptRuntimeError

logger = logging.getLogger(__name__)

HostCallable = Callable[..., Any]
HostErrorSink = Callable[[str], None]


@dataclass(frozen=True, eq=False)
class ScriptFunction:
    """スクリプト側の関数への不透明な参照。"""

    handle: Any

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"ScriptFunction@{id(self.handle):x}"


def _split_exception(exc: BaseException) -> tuple[str, str | None]:
    """エンジン例外の文字列を（要約 1 行, スタック）へ分割する。"""
    text = str(exc).strip() or exc.__class__.__name__
    head, sep, rest = text.partition("\n")
    return head.strip(), (rest if sep and rest.strip() else None)


def _js_literal(value: Any) -> str:
    """グローバル代入用の JS リテラルを生成する（number/bool/string/数値配列）。"""
    if isinstance(value, tuple):
        value = list(value)
    if value is None or isinstance(value, (bool, int, float, str, list)):
        return json.dumps(value, allow_nan=True, ensure_ascii=False)
    raise TypeError(f"unsupported global value type: {type(value)!r}")


class ScriptEngine:
    """サンドボックス化されたスクリプト実行コンテキスト。

    1 つのインスタンスが 1 セッション（共有グローバルスコープ）を表し、`reset()` で破棄・再生成する。
    """

    def __init__(
        self,
        *,
        time_limit: float | None = None,
        memory_limit: int | None = None,
    ) -> None:
        self._time_limit = time_limit
        self._memory_limit = memory_limit
        self._bound: dict[str, int] = {}
        self._context = self._new_context()

    def _new_context(self) -> quickjs.Context:
        ctx = quickjs.Context()
        if self._time_limit is not None:
            ctx.set_time_limit(float(self._time_limit))
        if self._memory_limit is not None:
            ctx.set_memory_limit(int(self._memory_limit))
        return ctx

    # --- セッション ---
    def reset(self) -> None:
        """コンテキストを破棄して新しいグローバルスコープで再開する（束縛も消える）。"""
        self._context = self._new_context()
        self._bound.clear()
        logger.debug("script context reset")

    @property
    def bound_functions(self) -> dict[str, int]:
        """現在束縛済みのホスト関数名 → arity。"""
        return dict(self._bound)

    # --- 値変換 ---
    def to_python(self, value: Any) -> Any:
        """エンジン値を Python ネイティブ値へ変換する。"""
        if not isinstance(value, quickjs.Object):
            return value
        try:
            encoded = value.json()
        except quickjs.JSException:
            # 循環参照など JSON 化できないオブジェクト
            return ScriptFunction(value)
        if not isinstance(encoded, str):
            # 関数は JSON.stringify が undefined を返す
            return ScriptFunction(value)
        try:
            return json.loads(encoded)
        except ValueError:
            return ScriptFunction(value)

    # --- ホスト関数 ---
    def bind_function(
        self,
        name: str,
        arity: int,
        fn: HostCallable,
        *,
        on_error: HostErrorSink | None = None,
    ) -> None:
        """`name(...)` の呼び出しで `fn` が実行されるようグローバルへ束縛する（再束縛可）。

        `fn` が送出した例外はスクリプトへ伝播させず、ログに残して `on_error` へ 1 行で渡す。
        """
        if arity < 0:
            raise ValueError("arity must be >= 0")

        def _host_call(*raw: Any) -> Any:
            args = [self.to_python(v) for v in raw[:arity]]
            if len(args) < arity:
                args.extend([None] * (arity - len(args)))
            try:
                result = fn(*args)
            except Exception as exc:
                logger.exception("host function %s raised", name)
                if on_error is not None:
                    on_error(f"{name}: {exc.__class__.__name__}: {exc}")
                return None
            if isinstance(result, (bool, int, float, str)):
                return result
            return None

        self._context.add_callable(name, _host_call)
        self._bound[name] = arity

    # --- 評価 ---
    def eval_source(self, source: str) -> None:
        """トップレベルのソースを評価する。失敗は `ScriptLoadError`。"""
        try:
            self._context.eval(source)
        except quickjs.JSException as exc:
            message, stack = _split_exception(exc)
            raise ScriptLoadError(message, stack=stack, phase="load") from exc

    def eval_expression(self, source: str, *, phase: str | None = None) -> Any:
        """式/文（例: `"setup();"`）を評価し、結果を Python 値で返す。失敗は `ScriptRuntimeError`。"""
        try:
            result = self._context.eval(source)
        except quickjs.JSException as exc:
            message, stack = _split_exception(exc)
            raise ScriptRuntimeError(message, stack=stack, phase=phase) from exc
        return self.to_python(result)

    def call_global(self, name: str) -> None:
        """引数なしでグローバル関数 `name` を呼ぶ（`setup`/`draw` 用）。"""
        self.eval_expression(f"{name}();", phase=name)

    def call_function(self, fn: ScriptFunction, *args: Any) -> Any:
        """スクリプト関数を呼び出して結果を Python 値で返す。"""
        if not isinstance(fn, ScriptFunction):
            raise ScriptRuntimeError(f"{fn!r} is not a function")
        try:
            result = fn.handle(*args)
        except quickjs.JSException as exc:
            message, stack = _split_exception(exc)
            raise ScriptRuntimeError(message, stack=stack) from exc
        return self.to_python(result)

    # --- グローバル変数 ---
    def set_global(self, name: str, value: Any) -> None:
        """グローバル変数 `name` に値（number/bool/string/数値配列）を設定する。"""
        statement = f"globalThis[{json.dumps(name)}] = {_js_literal(value)};"
        try:
            self._context.eval(statement)
        except quickjs.JSException as exc:
            message, stack = _split_exception(exc)
            raise ScriptRuntimeError(message, stack=stack, phase="inject") from exc

    def get_global(self, name: str) -> Any:
        """グローバル変数 `name` の値を返す（未定義は None）。"""
        try:
            return self.to_python(self._context.get(name))
        except quickjs.JSException as exc:
            message, stack = _split_exception(exc)
            raise ScriptRuntimeError(message, stack=stack) from exc


__all__ = ["ScriptEngine", "ScriptFunction", "ScriptError", "HostCallable", "HostErrorSink"]
