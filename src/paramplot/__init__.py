"""
paramplot: スクリプト駆動のパラメトリック 2D プロット用コア。

ユーザのスクリプト（JavaScript）が `setup()` でコントロール（スライダー/チェックボックス/
カラーピッカー）を宣言し、`draw()` で曲線・ベクトル・多角形を描く。ホストはスクリプトの
ライフサイクルを tick 駆動で実行し、コントロール一覧と描画プリミティブを外部 UI へ公開する。

主な入口:
- `paramplot.api.PlotSession`: UI 層向けファサード
- `paramplot.engine.runtime.EvaluationOrchestrator`: 再評価の状態機械
- `python -m paramplot`: ヘッドレスランナー
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
