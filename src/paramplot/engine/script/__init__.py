"""
どこで: `paramplot.engine.script` パッケージ。
何を: スクリプトエンジンアダプタ・ホスト関数表・値変換・エラー階層を再輸出。
"""

from .adapter import ScriptEngine, ScriptFunction
from .bindings import CONSOLE_SHIM, HostBindingTable, HostFunction, install_console_shim
from .errors import HostCallArgumentError, ScriptError, ScriptLoadError, ScriptRuntimeError

__all__ = [
    "ScriptEngine",
    "ScriptFunction",
    "CONSOLE_SHIM",
    "HostBindingTable",
    "HostFunction",
    "install_console_shim",
    "ScriptError",
    "ScriptLoadError",
    "ScriptRuntimeError",
    "HostCallArgumentError",
]
