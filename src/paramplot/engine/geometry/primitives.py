"""
どこで: `paramplot.engine.geometry.primitives`。
何を: `draw()` 1 回分の描画プリミティブ（Curve/Vector/Polygon）と、それを蓄積する `FrameBuilder`、
      確定済みの不変スナップショット `Frame`、レンダラ向けの平坦化表現 `Polyline`。
なぜ: 描画途中の失敗で半端なジオメトリを見せないよう、一時バッファに積んで成功時のみ差し替えるため。

データモデル（不変条件）:
- 点列は `float64 ndarray (N, 2)`、読み取り専用。
- `Frame` は生成世代 `generation` を持ち、`draw()` 成功ごとに単調増加する。
- `EMPTY_FRAME`（generation=0）はまだ一度も描画に成功していない状態。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from ...common.types import RGB, Vec2


def _as_points(points: Iterable[Sequence[float]] | np.ndarray) -> np.ndarray:
    """点列を読み取り専用の `(N, 2) float64` 配列へ正規化する。"""
    if not isinstance(points, np.ndarray):
        points = list(points)
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        arr = np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"points must have shape (N, 2), got {arr.shape}")
    arr = np.ascontiguousarray(arr)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Curve:
    """名前付きの折れ線（パラメトリック曲線のサンプル列）。"""

    name: str
    points: np.ndarray
    color: RGB
    weight: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _as_points(self.points))


@dataclass(frozen=True)
class Vector:
    """origin → tip の矢印 1 本。`head` は矢じり 2 辺の端点（極短ベクトルは None）。"""

    name: str
    origin: Vec2
    tip: Vec2
    color: RGB
    weight: float
    head: tuple[Vec2, Vec2] | None = None

    @property
    def delta(self) -> Vec2:
        return (self.tip[0] - self.origin[0], self.tip[1] - self.origin[1])

    @property
    def length(self) -> float:
        dx, dy = self.delta
        return float(np.hypot(dx, dy))


@dataclass(frozen=True, eq=False)
class Polygon:
    """塗りつぶし多角形（頂点数は任意）。"""

    name: str
    vertices: np.ndarray
    stroke_color: RGB
    fill_color: RGB
    weight: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", _as_points(self.vertices))


@dataclass(frozen=True, eq=False)
class Polyline:
    """レンダラがそのまま描ける名前付き折れ線。"""

    name: str
    points: np.ndarray
    color: RGB
    weight: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _as_points(self.points))


@dataclass(frozen=True, eq=False)
class Frame:
    """確定済みの 1 フレーム分のプリミティブ（読み取り専用スナップショット）。"""

    generation: int = 0
    curves: tuple[Curve, ...] = ()
    vectors: tuple[Vector, ...] = ()
    polygons: tuple[Polygon, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.curves or self.vectors or self.polygons)

    def __len__(self) -> int:
        return len(self.curves) + len(self.vectors) + len(self.polygons)

    def lines(self) -> list[Polyline]:
        """描画用に平坦化する。

        - Curve はそのまま。
        - Vector は `<name>_main`（本体）と、矢じりがあれば `<name>_arrow1`/`<name>_arrow2`。
        - Polygon は始点へ戻る閉じた輪郭。
        """
        out: list[Polyline] = []
        for c in self.curves:
            out.append(Polyline(c.name, c.points, c.color, c.weight))
        for v in self.vectors:
            out.append(Polyline(f"{v.name}_main", [v.origin, v.tip], v.color, v.weight))
            if v.head is not None:
                w1, w2 = v.head
                out.append(Polyline(f"{v.name}_arrow1", [v.tip, w1], v.color, v.weight))
                out.append(Polyline(f"{v.name}_arrow2", [v.tip, w2], v.color, v.weight))
        for p in self.polygons:
            pts = p.vertices
            if len(pts) > 1:
                pts = np.vstack([pts, pts[:1]])
            out.append(Polyline(p.name, pts, p.stroke_color, p.weight))
        return out

    def bounds(self) -> tuple[float, float, float, float] | None:
        """全点の (xmin, ymin, xmax, ymax)。点が無ければ None。"""
        chunks = [pl.points for pl in self.lines() if len(pl.points)]
        if not chunks:
            return None
        allpts = np.concatenate(chunks, axis=0)
        xmin, ymin = allpts.min(axis=0)
        xmax, ymax = allpts.max(axis=0)
        return float(xmin), float(ymin), float(xmax), float(ymax)


EMPTY_FRAME = Frame()


@dataclass
class FrameBuilder:
    """`draw()` 実行中にホスト関数が書き込む一時バッファ。"""

    generation: int
    curves: list[Curve] = field(default_factory=list)
    vectors: list[Vector] = field(default_factory=list)
    polygons: list[Polygon] = field(default_factory=list)

    def add_curve(self, curve: Curve) -> None:
        self.curves.append(curve)

    def add_vector(self, vector: Vector) -> None:
        self.vectors.append(vector)

    def add_polygon(self, polygon: Polygon) -> None:
        self.polygons.append(polygon)

    def __len__(self) -> int:
        return len(self.curves) + len(self.vectors) + len(self.polygons)

    def freeze(self) -> Frame:
        return Frame(
            generation=self.generation,
            curves=tuple(self.curves),
            vectors=tuple(self.vectors),
            polygons=tuple(self.polygons),
        )


__all__ = ["Curve", "Vector", "Polygon", "Polyline", "Frame", "FrameBuilder", "EMPTY_FRAME"]
