"""
どこで: `paramplot.engine` パッケージ。
何を: スクリプト実行・コントロール・ジオメトリ・診断・評価ランタイムのコア層。
なぜ: UI/レンダラ（外部）から独立した、スクリプト→ジオメトリの反応的ブリッジを提供するため。
"""
