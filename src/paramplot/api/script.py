"""
どこで: `paramplot.api.script`。
何を: 新規セッションの初期スクリプト（スライダー/カラーピッカー/チェックボックスと円のデモ）。
"""

DEFAULT_SCRIPT = """\
function setup() {
    addSlider('radius', { min: 0.5, max: 5.0, step: 0.1, default: 1.0 });
    addColorpicker('lineColor', { default: [255, 0, 0] });
    addCheckbox('show', '円を表示する', { default: true });
}
function draw() {
    if (show) {
        addParametricGraph(
            '円',
            function(t) { return [radius * Math.cos(t), radius * Math.sin(t)]; },
            { min: 0, max: 2 * Math.PI, num_points: 100 },
            { color: lineColor, weight: 2.0 }
        );
    }
}
"""

__all__ = ["DEFAULT_SCRIPT"]
