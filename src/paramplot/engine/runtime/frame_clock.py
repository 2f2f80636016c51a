"""
どこで: `paramplot.engine.runtime` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定とループ管理）。
なぜ: UI ループやヘッドレスランナーから呼び出すだけで、複数コンポーネントの更新順を統一するため。
"""

from __future__ import annotations

import time
from typing import Sequence

from .tickable import Tickable


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。"""

    def __init__(self, tickables: Sequence[Tickable]):
        self._tickables = tuple(tickables)
        self._last_time = time.perf_counter()
        self._frames = 0

    @property
    def frames(self) -> int:
        """これまでに進めたフレーム数。"""
        return self._frames

    # UI フレームワークのタイマーから呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # dt を渡さないループ用
            now = time.perf_counter()
            dt = now - self._last_time
            self._last_time = now

        for t in self._tickables:
            t.tick(dt)
        self._frames += 1

    def run(self, frames: int, *, fps: float | None = None) -> None:
        """`frames` 回 tick する。`fps` 指定時は固定 dt（1/fps）で進め、待機はしない。"""
        if frames < 0:
            raise ValueError("frames must be >= 0")
        dt = None if not fps else 1.0 / float(fps)
        for _ in range(frames):
            self.tick(dt)


__all__ = ["FrameClock"]
