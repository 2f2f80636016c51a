"""
どこで: `paramplot.engine.runtime.orchestrator`。
何を: UI の 1 tick ごとに「フルリロード（ロード + setup + draw）」「再描画のみ（draw）」「何もしない」を
      決定して実行する評価オーケストレータ。スクリプトエンジン・コントロールレジストリ・サンプラ・
      診断ログを束ね、確定済みフレームとコントロール一覧を読み取り専用スナップショットとして公開する。
なぜ: ソース編集とコントロール操作の 2 種類のトリガを、単一スレッドの tick 内で直列に処理し、
      失敗時も直前の正常状態（コントロール/フレーム）を保つため。

状態遷移（tick ごとに 1 回評価）:
1. 初回 tick / ソースが最終評価ソースと異なる / 再実行要求 → NEEDS_FULL_RELOAD
2. 値変更あり / 強制再描画要求 / リロード後まだ draw を試みていない → NEEDS_REDRAW_ONLY
3. それ以外 → IDLE（スクリプトを一切実行しない）

フルリロード:
  ホスト関数表の一括再束縛 → console シム → 診断ログのクリア → ソース評価 → `setup()` →
  レジストリ確定 → 再描画へ続行。ロード/setup の失敗は記録して打ち切り、以前のコントロールと
  フレームはそのまま残す。失敗したソースも「評価済み」とし、同じソースを毎 tick 再実行しない。
  ホスト関数自体の想定外の例外は、関数名付きの警告として診断ログへ残す（スクリプトは継続）。

再描画:
  コントロール値をグローバルへ注入 → 新しい `FrameBuilder`（世代付きの一時バッファ）を用意 →
  `draw()` → 成功時のみ確定フレームを差し替える。失敗時は直前の確定フレームを維持する。
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from ...common import settings as _settings
from ..controls.registry import ControlRegistry
from ..controls.state import Control
from ..diagnostics import DiagnosticsSink
from ..geometry.primitives import EMPTY_FRAME, Frame, FrameBuilder
from ..geometry.sampler import GeometrySampler
from ..script.adapter import ScriptEngine
from ..script.bindings import HostBindingTable, install_console_shim
from ..script.errors import ScriptError
from .state import EvalState

logger = logging.getLogger(__name__)

FrameListener = Callable[[Frame], None]

# ホストが呼び出すスクリプト側の入口
ENTRY_POINTS = ("setup", "draw")


class EvaluationOrchestrator:
    """スクリプトのライフサイクル（setup/draw）を tick 駆動で実行する状態機械。

    Parameters
    ----------
    source : str
        初期スクリプトソース。
    engine : ScriptEngine | None
        スクリプトエンジン。省略時は設定（時間/メモリ上限）から生成する。
    diagnostics : DiagnosticsSink | None
        診断ログ。省略時は新規生成。
    preserve_values : bool | None
        リロード時に UI で変更した値を引き継ぐか。省略時は設定値。
    report_coercions : bool | None
        ホスト関数の既定値補完/スキップを警告として診断ログへ残すか。省略時は設定値。
    """

    def __init__(
        self,
        source: str = "",
        *,
        engine: ScriptEngine | None = None,
        diagnostics: DiagnosticsSink | None = None,
        preserve_values: bool | None = None,
        report_coercions: bool | None = None,
    ) -> None:
        cfg = _settings.get()
        self._engine = engine or ScriptEngine(
            time_limit=cfg.SCRIPT_TIME_LIMIT, memory_limit=cfg.SCRIPT_MEMORY_LIMIT
        )
        self._diagnostics = diagnostics or DiagnosticsSink()
        self._preserve = cfg.PRESERVE_CONTROL_VALUES if preserve_values is None else preserve_values
        report = cfg.REPORT_COERCIONS if report_coercions is None else report_coercions
        warn = self._diagnostics.warning if report else None
        self._warn = warn

        self._registry = ControlRegistry(warn=warn)
        self._sampler = GeometrySampler(
            self._engine, warn=warn, max_num_points=cfg.MAX_NUM_POINTS
        )

        self._source = source
        self._last_evaluated_source: str | None = None
        self._rerun_requested = False
        self._redraw_requested = False
        self._draw_pending = False

        self._frame: Frame = EMPTY_FRAME
        self._arena: FrameBuilder | None = None
        self._generation = 0
        self._last_error: ScriptError | None = None
        self._last_state = EvalState.IDLE
        self._listeners: list[FrameListener] = []

    # --- 入力（UI からのトリガ） ---
    @property
    def source(self) -> str:
        return self._source

    def set_source(self, source: str) -> None:
        """スクリプトソースを差し替える（次の tick で差分があればフルリロード）。"""
        self._source = source

    @property
    def last_evaluated_source(self) -> str | None:
        return self._last_evaluated_source

    def request_rerun(self) -> None:
        """ソースが同じでも次の tick でフルリロードする。"""
        self._rerun_requested = True

    def request_redraw(self) -> None:
        """次の tick で `draw()` のみ再実行する。"""
        self._redraw_requested = True

    def set_control_value(self, name: str, value: Any) -> bool:
        """UI からの値変更。値が変われば次の tick で再描画される。"""
        return self._registry.set_value(name, value)

    def reset_control_value(self, name: str) -> bool:
        return self._registry.reset_value(name)

    # --- 出力（読み取り専用スナップショット） ---
    @property
    def frame(self) -> Frame:
        """最後に `draw()` が成功したフレーム。"""
        return self._frame

    @property
    def controls(self) -> tuple[Control, ...]:
        return self._registry.snapshot()

    @property
    def registry(self) -> ControlRegistry:
        return self._registry

    @property
    def diagnostics(self) -> DiagnosticsSink:
        return self._diagnostics

    @property
    def engine(self) -> ScriptEngine:
        return self._engine

    @property
    def last_error(self) -> ScriptError | None:
        """直近のリロード/再描画で発生したエラー（成功すれば None に戻る）。"""
        return self._last_error

    @property
    def last_state(self) -> EvalState:
        """直近の tick で処理した状態。"""
        return self._last_state

    # --- リスナー ---
    def subscribe(self, listener: FrameListener) -> None:
        """フレーム確定時に呼ばれるリスナーを登録する。"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: FrameListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, frame: Frame) -> None:
        for listener in list(self._listeners):
            try:
                listener(frame)
            except Exception:
                logger.exception("frame listener failed")

    # --- 状態遷移 ---
    def next_state(self) -> EvalState:
        """次の tick で行う処理を返す（副作用なし）。"""
        if (
            self._last_evaluated_source is None
            or self._rerun_requested
            or self._source != self._last_evaluated_source
        ):
            return EvalState.NEEDS_FULL_RELOAD
        if self._registry.has_changes or self._redraw_requested or self._draw_pending:
            return EvalState.NEEDS_REDRAW_ONLY
        return EvalState.IDLE

    def tick(self, dt: float = 0.0) -> EvalState:
        """1 tick 分の評価を行い、処理した状態を返す。例外は送出しない。"""
        state = self.next_state()
        if state is EvalState.NEEDS_FULL_RELOAD:
            if self._reload():
                self._redraw()
        elif state is EvalState.NEEDS_REDRAW_ONLY:
            self._redraw()
        self._last_state = state
        return state

    def reset(self) -> None:
        """スクリプトセッションを破棄し、初回 tick 前の状態へ戻す（ソースは維持）。"""
        self._engine.reset()
        self._registry = ControlRegistry(warn=self._warn)
        self._diagnostics.clear()
        self._frame = EMPTY_FRAME
        self._arena = None
        self._last_evaluated_source = None
        self._rerun_requested = False
        self._redraw_requested = False
        self._draw_pending = False
        self._last_error = None
        logger.debug("session reset")

    # --- フルリロード ---
    def _binding_table(self) -> HostBindingTable:
        table = HostBindingTable()
        table.extend(self._diagnostics.host_functions())
        table.extend(self._registry.host_functions())
        table.extend(self._sampler.host_functions(lambda: self._arena))
        return table

    def _reload(self) -> bool:
        started = time.perf_counter()
        source = self._source
        self._rerun_requested = False
        self._last_evaluated_source = source

        table = self._binding_table()
        table.bind_all(self._engine, on_error=self._diagnostics.warning)
        self._registry.reserve_names([*table.names(), *ENTRY_POINTS, "console"])
        install_console_shim(self._engine)
        self._diagnostics.clear()

        try:
            self._engine.eval_source(source)
        except ScriptError as exc:
            self._fail("Load error", exc)
            return False

        self._registry.begin_setup()
        try:
            self._engine.call_global("setup")
        except ScriptError as exc:
            self._registry.abort_setup()
            self._fail("Setup error", exc)
            return False
        self._registry.commit_setup(preserve=self._preserve)

        self._last_error = None
        self._draw_pending = True
        logger.debug(
            "reload ok: %d controls (%.2f ms)",
            len(self._registry),
            (time.perf_counter() - started) * 1000.0,
        )
        return True

    # --- 再描画 ---
    def _redraw(self) -> bool:
        started = time.perf_counter()
        self._registry.consume_changes()
        self._redraw_requested = False
        self._draw_pending = False
        self._generation += 1

        try:
            self._registry.inject_into_script(self._engine)
        except ScriptError as exc:
            self._fail("Draw error", exc)
            return False

        builder = FrameBuilder(generation=self._generation)
        self._arena = builder
        try:
            self._engine.call_global("draw")
        except ScriptError as exc:
            self._fail("Draw error", exc)
            return False
        finally:
            self._arena = None

        self._frame = builder.freeze()
        self._last_error = None
        logger.debug(
            "redraw ok: generation=%d primitives=%d (%.2f ms)",
            self._frame.generation,
            len(self._frame),
            (time.perf_counter() - started) * 1000.0,
        )
        self._notify(self._frame)
        return True

    def _fail(self, prefix: str, error: ScriptError) -> None:
        self._last_error = error
        self._diagnostics.record_error(prefix, error)
        logger.warning("%s: %s", prefix, error.message)


__all__ = ["EvaluationOrchestrator", "FrameListener", "ENTRY_POINTS"]
