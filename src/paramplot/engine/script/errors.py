"""
どこで: `paramplot.engine.script` のエラー定義。
何を: スクリプト起因の失敗を表す例外階層（ロード/実行時/ホスト関数引数）。
なぜ: エンジン固有の例外をアダプタ境界で包み、文脈（フェーズ/スタック）付きで上位へ伝えるため。
"""

from __future__ import annotations


class ScriptError(Exception):
    """スクリプト由来の失敗の基底。

    `message` は利用者向けの 1 行要約、`stack` はエンジンが返したスタックトレース（無ければ None）。
    `phase` は失敗した段階（"load"/"setup"/"draw" など、未確定なら None）。
    """

    def __init__(
        self,
        message: str,
        *,
        stack: str | None = None,
        phase: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stack = stack
        self.phase = phase

    def describe(self) -> str:
        """診断表示用の文字列（メッセージ + スタック）。"""
        if self.stack and self.stack.strip() and self.stack.strip() not in self.message:
            return f"{self.message}\n{self.stack.rstrip()}"
        return self.message


class ScriptLoadError(ScriptError):
    """トップレベルのソース評価（構文/初期化）に失敗した。"""


class ScriptRuntimeError(ScriptError):
    """`setup()`/`draw()` などの呼び出し中に捕捉されない例外が発生した。"""


class HostCallArgumentError(ScriptError):
    """ホスト関数が不正な引数を受け取った。

    ホスト関数本体の内部でのみ送出・捕捉し、スクリプト側へは決して伝播させない。
    """


__all__ = [
    "ScriptError",
    "ScriptLoadError",
    "ScriptRuntimeError",
    "HostCallArgumentError",
]
