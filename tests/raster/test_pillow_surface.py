from __future__ import annotations

import numpy as np
import pytest

from pattix.core.animation import PatternKind
from pattix.core.color import ColorMode
from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)
from pattix.core.renderer import render
from pattix.core.surface import StrokeStyle, Surface
from pattix.raster.pillow_surface import RasterSurface

_BLACK = (0.0, 0.0, 0.0)
_WHITE = (1.0, 1.0, 1.0)
_RED = (1.0, 0.0, 0.0)
_BLUE = (0.0, 0.0, 1.0)


def _hline(surface: RasterSurface, y: float, x0: float, x1: float) -> None:
    surface.begin_path()
    surface.move_to(x0, y)
    surface.line_to(x1, y)


def test_new_surface_is_filled_with_background() -> None:
    surface = RasterSurface(8, 6)

    arr = surface.to_array()
    assert isinstance(surface, Surface)
    assert arr.shape == (6, 8, 3)
    assert arr.dtype == np.uint8
    assert np.all(arr == np.array([10, 10, 21], dtype=np.uint8))


@pytest.mark.parametrize("size", [(0, 5), (5, 0), (-3, 3)])
def test_non_positive_size_is_rejected(size: tuple[int, int]) -> None:
    with pytest.raises(ValueError):
        RasterSurface(*size)


def test_fill_rect_opaque_and_blended() -> None:
    surface = RasterSurface(20, 20, background=_BLACK)

    surface.fill_rect(0, 0, 10, 20, _RED)
    surface.fill_rect(10, 0, 10, 20, _WHITE, alpha=0.5)

    arr = surface.to_array()
    assert arr[5, 5].tolist() == [255, 0, 0]
    assert np.all(np.abs(arr[5, 15].astype(int) - 128) <= 2)
    # 矩形の外側は触らない。
    assert arr[5, 9].tolist() == [255, 0, 0]


def test_stroke_draws_line_with_width() -> None:
    surface = RasterSurface(100, 100, background=_BLACK)
    _hline(surface, 50.0, 10.0, 90.0)

    surface.stroke(StrokeStyle(color=_WHITE, width=3.0))

    arr = surface.to_array()
    assert arr[50, 50].tolist() == [255, 255, 255]
    assert arr[49, 50].tolist() == [255, 255, 255]
    assert arr[40, 50].tolist() == [0, 0, 0]


def test_segment_colors_override_style_color() -> None:
    surface = RasterSurface(100, 20, background=_BLACK)
    surface.begin_path()
    surface.move_to(0.0, 10.0)
    surface.line_to(50.0, 10.0)
    surface.line_to(100.0, 10.0)

    surface.stroke(StrokeStyle(color=_WHITE, width=3.0, cap="butt"), segment_colors=[_RED, _BLUE])

    arr = surface.to_array()
    assert arr[10, 20].tolist() == [255, 0, 0]
    assert arr[10, 80].tolist() == [0, 0, 255]


def test_segment_colors_length_mismatch_raises() -> None:
    surface = RasterSurface(10, 10)
    _hline(surface, 5.0, 0.0, 9.0)

    with pytest.raises(ValueError):
        surface.stroke(StrokeStyle(color=_WHITE), segment_colors=[_RED, _BLUE])


def test_glow_spreads_halo_around_line() -> None:
    plain = RasterSurface(100, 100, background=_BLACK)
    glowing = RasterSurface(100, 100, background=_BLACK)
    for s in (plain, glowing):
        _hline(s, 50.0, 20.0, 80.0)
    plain.stroke(StrokeStyle(color=_RED, width=1.0))
    glowing.stroke(StrokeStyle(color=_RED, width=1.0, glow=10.0))

    a = plain.to_array()
    b = glowing.to_array()
    assert a[54, 50].tolist() == [0, 0, 0]
    assert b[54, 50, 0] > 0
    assert b[54, 50, 1] == 0
    # 光彩はパスの外接矩形（余白込み）より外へ出ない。
    assert b[5, 50].tolist() == [0, 0, 0]


def test_transparent_stroke_leaves_image_unchanged() -> None:
    surface = RasterSurface(30, 30, background=_BLACK)
    _hline(surface, 15.0, 0.0, 30.0)

    surface.stroke(StrokeStyle(color=_WHITE, width=4.0, alpha=0.0))

    assert not surface.to_array().any()


@pytest.mark.parametrize("kind", list(PatternKind))
def test_every_pattern_rasterizes_something(kind: PatternKind) -> None:
    surface = RasterSurface(160, 120)
    before = surface.to_array()

    render(
        surface,
        160,
        120,
        kind,
        TreeParameters(depth=4),
        SpirographParameters(outer_radius=50.0, inner_radius=20.0, offset=10.0, iterations=120),
        FlowFieldParameters(particle_count=20, step_count=20, alpha=1.0, flow_strength=3.0),
        ColorMode(),
        rng=np.random.default_rng(0),
    )

    after = surface.to_array()
    assert after.shape == before.shape
    assert np.count_nonzero(np.any(after != before, axis=2)) > 50


def test_to_image_returns_independent_copy() -> None:
    surface = RasterSurface(10, 10, background=_BLACK)
    img = surface.to_image()

    surface.fill_rect(0, 0, 10, 10, _WHITE)

    assert img.getpixel((0, 0)) == (0, 0, 0)
    assert img.size == (10, 10)
    assert img.mode == "RGB"
