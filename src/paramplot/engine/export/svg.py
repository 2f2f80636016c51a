"""
どこで: `paramplot.engine.export.svg`。
何を: 確定済み `Frame` を SVG 文書へ変換/保存する関数を提供する。
なぜ: 対話ウィンドウ（外部）なしでも描画結果を確認・保存できる最小の headless export を用意するため。

座標系:
- スクリプトは数学座標（y 上向き）で描くため、SVG 出力では y を反転する。
- viewBox はフレームの全点の外接矩形に余白を足したもの。線幅はピクセル単位
  （`vector-effect="non-scaling-stroke"`）で、`weight` をそのまま使う。
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np

from ...util.color import rgb_to_hex
from ..geometry.primitives import Frame

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 4
_EMPTY_BOUNDS = (-1.0, -1.0, 1.0, 1.0)


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _path_d(points: np.ndarray, *, closed: bool = False) -> str:
    """点列（shape (N,2)）を y 反転した SVG path の d 属性へ変換して返す。"""
    parts = [f"M {_fmt(points[0, 0])} {_fmt(-points[0, 1])}"]
    for x, y in points[1:]:
        parts.append(f"L {_fmt(x)} {_fmt(-y)}")
    if closed:
        parts.append("Z")
    return " ".join(parts)


def _stroke_attrs(color: Sequence[int], weight: float) -> str:
    return (
        f'stroke="{rgb_to_hex(color)}" stroke-width="{_fmt(weight)}" '
        'stroke-linecap="round" stroke-linejoin="round" vector-effect="non-scaling-stroke"'
    )


def _view_box(frame: Frame, margin: float) -> tuple[float, float, float, float]:
    """(min_x, min_y, width, height)（SVG 座標、y 反転後）。"""
    xmin, ymin, xmax, ymax = frame.bounds() or _EMPTY_BOUNDS
    width = xmax - xmin
    height = ymax - ymin
    # 水平/垂直な線だけのフレームでも潰れないよう最小幅を持たせる
    span = max(width, height, 1e-9)
    width = max(width, span * 0.01)
    height = max(height, span * 0.01)
    pad = max(width, height) * max(0.0, float(margin))
    cx = (xmin + xmax) / 2.0
    cy = (ymin + ymax) / 2.0
    return (
        cx - width / 2.0 - pad,
        -(cy + height / 2.0) - pad,
        width + 2.0 * pad,
        height + 2.0 * pad,
    )


def frame_to_svg(
    frame: Frame,
    *,
    size: tuple[int, int] = (800, 600),
    margin: float = 0.05,
    background: Sequence[int] | None = (255, 255, 255),
) -> str:
    """Frame を SVG 文書（文字列）へ変換する。

    Parameters
    ----------
    frame : Frame
        確定済みフレーム。
    size : tuple[int, int]
        出力の width/height（ピクセル）。
    margin : float
        外接矩形の長辺に対する余白の比率。
    background : Sequence[int] or None
        背景色（RGB 0–255）。None で透明。

    Raises
    ------
    ValueError
        size が正でない場合。
    """
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError("size must be positive")
    vx, vy, vw, vh = _view_box(frame, margin)

    lines: list[str] = ['<?xml version="1.0" encoding="UTF-8"?>']
    lines.append(
        f'<svg xmlns="{_SVG_NS}" viewBox="{_fmt(vx)} {_fmt(vy)} {_fmt(vw)} {_fmt(vh)}" '
        f'width="{int(width)}" height="{int(height)}" preserveAspectRatio="xMidYMid meet">'
    )
    if background is not None:
        lines.append(
            f'  <rect x="{_fmt(vx)}" y="{_fmt(vy)}" width="{_fmt(vw)}" height="{_fmt(vh)}" '
            f'fill="{rgb_to_hex(background)}" />'
        )

    # 塗りを一番下に敷く
    for polygon in frame.polygons:
        if len(polygon.vertices) < 2:
            continue
        d = _path_d(polygon.vertices, closed=True)
        lines.append(
            f'  <path data-name="{_escape(polygon.name)}" d="{d}" '
            f'fill="{rgb_to_hex(polygon.fill_color)}" '
            f"{_stroke_attrs(polygon.stroke_color, polygon.weight)} />"
        )
    for curve in frame.curves:
        if len(curve.points) < 2:
            continue
        lines.append(
            f'  <path data-name="{_escape(curve.name)}" d="{_path_d(curve.points)}" fill="none" '
            f"{_stroke_attrs(curve.color, curve.weight)} />"
        )
    for vector in frame.vectors:
        body = np.array([vector.origin, vector.tip], dtype=np.float64)
        segments = [_path_d(body)]
        if vector.head is not None:
            for wing in vector.head:
                segments.append(_path_d(np.array([vector.tip, wing], dtype=np.float64)))
        lines.append(
            f'  <path data-name="{_escape(vector.name)}" d="{" ".join(segments)}" fill="none" '
            f"{_stroke_attrs(vector.color, vector.weight)} />"
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def export_svg(frame: Frame, path: str | Path, **kwargs) -> Path:
    """Frame を SVG として保存し、保存先パスを返す（親ディレクトリは作成する）。"""
    _path = Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(frame_to_svg(frame, **kwargs))
    return _path


__all__ = ["frame_to_svg", "export_svg"]
