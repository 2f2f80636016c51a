"""共通フィクスチャ。

- 設定（環境変数由来）のテスト後リセット
- 新しいスクリプトエンジン/オーケストレータ
- よく使う小さなスクリプト
"""

from __future__ import annotations

from typing import Callable, Iterator

import pytest

from paramplot.common import settings
from paramplot.engine.runtime import EvaluationOrchestrator
from paramplot.engine.script import ScriptEngine

COUNTING_SCRIPT = """
var setupCalls;
var drawCalls;
function setup() {
    setupCalls = (setupCalls || 0) + 1;
    addSlider('r', { min: 0, max: 2, step: 0.5, default: 1 });
    addCheckbox('show', 'Show curve', { default: true });
    addColorpicker('tint', { default: [10, 20, 30] });
}
function draw() {
    drawCalls = (drawCalls || 0) + 1;
    if (show) {
        addParametricGraph(
            'line',
            function(t) { return [r * t, t]; },
            { min: 0, max: 1, num_points: 4 },
            { color: tint, weight: 2 }
        );
    }
}
"""


@pytest.fixture(autouse=True)
def _reset_settings() -> Iterator[None]:
    """テストが環境変数を変えても、後続テストへ設定を持ち越さない。"""
    yield
    settings.reload_from_env()


@pytest.fixture()
def engine() -> ScriptEngine:
    return ScriptEngine()


@pytest.fixture()
def make_orchestrator() -> Callable[..., EvaluationOrchestrator]:
    def _make(source: str = COUNTING_SCRIPT, **kwargs) -> EvaluationOrchestrator:
        return EvaluationOrchestrator(source, **kwargs)

    return _make


@pytest.fixture()
def counting_script() -> str:
    return COUNTING_SCRIPT
