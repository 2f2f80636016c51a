"""
どこで: `paramplot.engine.runtime` の更新インターフェース。
何を: 1 フレーム更新 `tick(dt)` を持つ `Tickable` Protocol を定義。
なぜ: オーケストレータやホスト側のフレーム駆動オブジェクトを一様に扱うため。
"""

from typing import Any, Protocol


class Tickable(Protocol):
    """1 フレーム分の更新を行うインターフェース。"""

    def tick(self, dt: float) -> Any:
        """内部状態を `dt` 秒ぶん進める。"""
