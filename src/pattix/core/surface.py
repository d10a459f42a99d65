"""
どこで: `src/pattix/core/surface.py`。
何を: generator が描画命令を発行する先の「描画面」抽象（Protocol）と、命令を記録するだけの実装を提供する。
なぜ: core をラスタライザ（Pillow / pyglet）から切り離し、描画結果を命令列として検査できるようにするため。

描画面の契約
------------
- `fill_rect(x, y, w, h, color, alpha=...)`: 矩形塗り（alpha<1 なら下地とブレンド）。
- `begin_path()` / `move_to(x, y)` / `line_to(x, y)`: パス構築。`move_to` ごとにサブパスが始まる。
  現在点が無い状態の `line_to` は `move_to` として扱う。
- `stroke(style, segment_colors=None)`: 現在パスの全セグメントを線描する。
  パスは消費しない（同じパスを glow 付きでもう一度 stroke できる）。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pattix.core.color import RGB01

Point = tuple[float, float]


@dataclass(frozen=True, slots=True)
class StrokeStyle:
    """1 回の stroke に適用する線スタイル。

    Attributes
    ----------
    color : tuple[float, float, float]
        線色 RGB（0..1）。`segment_colors` を渡した場合、線本体はそちらが優先される。
        glow 付きの場合、光彩は常にこの色で描く。
    width : float
        線幅 [px]。
    cap : {"round", "butt"}
        線端の形状。
    alpha : float
        不透明度（0..1）。
    glow : float
        0 より大きい場合、線本体に加えてこのぼかし量の光彩（halo）を描く（canvas の shadowBlur 相当）。
    """

    color: RGB01
    width: float = 1.0
    cap: str = "round"
    alpha: float = 1.0
    glow: float = 0.0


@runtime_checkable
class Surface(Protocol):
    """generator が要求する描画面の最小インターフェース。"""

    width: int
    height: int

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: RGB01, *, alpha: float = 1.0
    ) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def stroke(
        self, style: StrokeStyle, *, segment_colors: Sequence[RGB01] | None = None
    ) -> None: ...


class PathBuilder:
    """`move_to` / `line_to` からサブパス列を組み立てる。"""

    def __init__(self) -> None:
        self._subpaths: list[list[Point]] = []

    def clear(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([(float(x), float(y))])

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((float(x), float(y)))

    def subpaths(self) -> tuple[tuple[Point, ...], ...]:
        """点が 2 つ以上あるサブパスだけを返す。"""
        return tuple(tuple(sp) for sp in self._subpaths if len(sp) >= 2)

    def segment_count(self) -> int:
        return sum(max(len(sp) - 1, 0) for sp in self._subpaths)


def check_segment_colors(
    segment_colors: Sequence[RGB01] | None, n_segments: int
) -> Sequence[RGB01] | None:
    """segment_colors の長さがセグメント数と一致することを検証する。"""

    if segment_colors is None:
        return None
    if len(segment_colors) != int(n_segments):
        raise ValueError(
            "segment_colors の長さはパスのセグメント数と一致する必要がある"
            f": got={len(segment_colors)} segments={n_segments}"
        )
    return segment_colors


@dataclass(frozen=True, slots=True)
class FillRecord:
    x: float
    y: float
    w: float
    h: float
    color: RGB01
    alpha: float


@dataclass(frozen=True, slots=True)
class StrokeRecord:
    subpaths: tuple[tuple[Point, ...], ...]
    style: StrokeStyle
    segment_colors: tuple[RGB01, ...] | None

    @property
    def is_glow(self) -> bool:
        return float(self.style.glow) > 0.0

    def segments(self) -> list[tuple[Point, Point]]:
        """このストロークを (始点, 終点) の列に展開して返す。"""
        out: list[tuple[Point, Point]] = []
        for sp in self.subpaths:
            out.extend(zip(sp[:-1], sp[1:]))
        return out

    def points(self) -> list[Point]:
        """全サブパスの頂点を順に連結して返す。"""
        return [p for sp in self.subpaths for p in sp]


class RecordingSurface:
    """描画命令を記録するだけの描画面。

    テストとヘッドレスの検査用。ラスタライズは行わない。
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"surface の寸法は正である必要がある: got=({width}, {height})")
        self.width = int(width)
        self.height = int(height)
        self.commands: list[FillRecord | StrokeRecord] = []
        self._path = PathBuilder()

    @property
    def fills(self) -> list[FillRecord]:
        return [c for c in self.commands if isinstance(c, FillRecord)]

    @property
    def strokes(self) -> list[StrokeRecord]:
        return [c for c in self.commands if isinstance(c, StrokeRecord)]

    def plain_strokes(self) -> list[StrokeRecord]:
        """glow ではない通常の stroke だけを返す。"""
        return [s for s in self.strokes if not s.is_glow]

    def glow_strokes(self) -> list[StrokeRecord]:
        return [s for s in self.strokes if s.is_glow]

    def reset(self) -> None:
        self.commands.clear()
        self._path.clear()

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: RGB01, *, alpha: float = 1.0
    ) -> None:
        self.commands.append(
            FillRecord(float(x), float(y), float(w), float(h), tuple(color), float(alpha))  # type: ignore[arg-type]
        )

    def begin_path(self) -> None:
        self._path.clear()

    def move_to(self, x: float, y: float) -> None:
        self._path.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.line_to(x, y)

    def stroke(
        self, style: StrokeStyle, *, segment_colors: Sequence[RGB01] | None = None
    ) -> None:
        colors = check_segment_colors(segment_colors, self._path.segment_count())
        self.commands.append(
            StrokeRecord(
                subpaths=self._path.subpaths(),
                style=style,
                segment_colors=None if colors is None else tuple(colors),
            )
        )


__all__ = [
    "FillRecord",
    "PathBuilder",
    "Point",
    "RecordingSurface",
    "StrokeRecord",
    "StrokeStyle",
    "Surface",
    "check_segment_colors",
]
