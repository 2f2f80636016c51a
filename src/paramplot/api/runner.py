"""
どこで: `paramplot.api.runner`（ヘッドレスランナー / CLI）。
何を: スクリプトファイルを読み込み、コントロール値の上書きを適用して数フレーム評価し、
      診断ログを表示してフレームを SVG/JSON で出力する。`python -m paramplot` の実体。
なぜ: 対話ウィンドウ（外部）なしでスクリプトの動作確認・出力を反復可能にするため。

使い方:
    python -m paramplot sketch.js --set radius=2.5 --set show=false --svg out.svg
    python -m paramplot --json               # 既定のデモスクリプト

終了コード: 0 = 成功、1 = スクリプトエラー（ロード/setup/draw）、2 = 引数/入力エラー。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from ..common.logging import setup_default_logging
from ..engine.runtime.frame_clock import FrameClock
from ..util.config import config_section
from .session import PlotSession

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60


def resolve_fps(requested_fps: int | None, *, default: int = DEFAULT_FPS) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（<=0 は 1 に丸める）。
    - それ以外は設定ファイルの `session.fps`、無効なら既定値。
    """
    if requested_fps is not None:
        return max(1, int(requested_fps))
    raw = config_section("session").get("fps", default)
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return max(1, int(default))


def parse_assignment(text: str) -> tuple[str, str]:
    """`name=value` を分割する（argparse の type 用）。"""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paramplot",
        description="Evaluate a parametric plot script headlessly and export the frame.",
    )
    parser.add_argument(
        "script",
        nargs="?",
        help="script file (JavaScript). '-' reads stdin. Omit to use the built-in demo.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="NAME=VALUE",
        action="append",
        type=parse_assignment,
        default=[],
        help="override a control value after setup (repeatable)",
    )
    parser.add_argument("--svg", metavar="OUT", help="write the frame as SVG")
    parser.add_argument("--json", action="store_true", help="print controls/frame/logs as JSON")
    parser.add_argument(
        "--frames", type=int, default=1, help="ticks to run after applying overrides"
    )
    parser.add_argument("--fps", type=int, default=None, help="tick rate (default: config)")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    return parser


def _load_session(script: str | None) -> PlotSession:
    if script is None:
        return PlotSession()
    if script == "-":
        return PlotSession(sys.stdin.read())
    return PlotSession.from_file(script)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_default_logging(args.log_level)

    try:
        session = _load_session(args.script)
    except OSError as exc:
        print(f"error: cannot read script: {exc}", file=sys.stderr)
        return 2

    # 初回 tick でロード + setup + draw
    session.tick()

    try:
        unknown = session.apply_overrides(dict(args.overrides))
    except (TypeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    for name in unknown:
        print(f"warning: no control named '{name}'", file=sys.stderr)

    fps = resolve_fps(args.fps)
    FrameClock([session]).run(max(0, args.frames), fps=fps)
    logger.debug("ran %d frame(s) at %d fps", args.frames, fps)

    if args.json:
        print(json.dumps(session.to_dict(), indent=2, ensure_ascii=False))
    else:
        for line in session.describe_controls():
            print(line)
        for entry in session.logs:
            stream = sys.stdout if entry.kind == "stdout" else sys.stderr
            print(f"[{entry.kind}] {entry.message}", file=stream)
        print(f"primitives: {len(session.frame)} (generation {session.frame.generation})")

    if args.svg:
        session.save_svg(args.svg)

    return 1 if session.last_error is not None else 0


__all__ = ["main", "build_parser", "parse_assignment", "resolve_fps"]
