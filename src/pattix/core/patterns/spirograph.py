"""
どこで: `src/pattix/core/patterns/spirograph.py`。スピログラフ（hypotrochoid 風）曲線の実体生成。
何を: 外円/内円の半径とペン位置から曲線を等間隔サンプリングし、1 本の連続ポリラインとして描画する。
なぜ: 少ないパラメータで対称性の高い周期曲線を得て、パラメータのゆらぎで「呼吸」させるため。
"""

from __future__ import annotations

import dataclasses
import math

import numpy as np

from pattix.core.color import ColorMode, RGB01, hsl_to_rgb01
from pattix.core.parameters.patterns import (
    SpirographParameters,
    spirograph_meta,
    validate_spirograph_parameters,
)
from pattix.core.pattern_registry import pattern
from pattix.core.render_settings import DEFAULT_RENDER_SETTINGS, RenderSettings
from pattix.core.surface import StrokeStyle, Surface

# 半径比に関わらず t ∈ [0, 20π]（10 周）を掃引する。
_SWEEP = 20.0 * math.pi


def spirograph_points(
    params: SpirographParameters,
    *,
    center: tuple[float, float] = (0.0, 0.0),
) -> np.ndarray:
    """曲線上の `iterations + 1` 点を返す。

    Parameters
    ----------
    params : SpirographParameters
        スピログラフパラメータ。
    center : tuple[float, float], optional
        曲線の中心 (cx, cy)。

    Returns
    -------
    np.ndarray
        float64 shape `(iterations + 1, 2)` の点列。

    Raises
    ------
    ValueError
        `inner_radius` が 0 以下、または `iterations` が 1 未満の場合。

    Notes
    -----
    `offset = 0` のとき曲線は半径 `R - r` の円に縮退する。
    10 周固定の掃引は真の周期と一致しないため、半径比によっては曲線が閉じない。
    """

    r_in = float(params.inner_radius)
    if r_in <= 0.0:
        raise ValueError(
            f"spirograph の inner_radius は正の値である必要がある: got={params.inner_radius!r}"
        )
    n = int(params.iterations)
    if n < 1:
        raise ValueError(f"spirograph の iterations は 1 以上である必要がある: got={params.iterations!r}")

    r_out = float(params.outer_radius)
    d = float(params.offset)
    cx, cy = float(center[0]), float(center[1])

    t = np.arange(n + 1, dtype=np.float64) / float(n) * _SWEEP
    k = (r_out - r_in) / r_in
    x = cx + (r_out - r_in) * np.cos(t) + d * np.cos(k * t)
    y = cy + (r_out - r_in) * np.sin(t) - d * np.sin(k * t)
    return np.stack([x, y], axis=1)


def segment_colors(n_segments: int, color_mode: ColorMode) -> list[RGB01]:
    """各セグメントの線色を返す。rainbow なら色相を base_hue から 1 周掃引する。"""

    n = int(n_segments)
    base = float(color_mode.base_hue)
    if not color_mode.rainbow:
        mono = hsl_to_rgb01(base, 60.0, 60.0)
        return [mono] * n
    return [hsl_to_rgb01((base + (i / n) * 360.0) % 360.0, 70.0, 60.0) for i in range(n)]


@pattern(
    "spirograph",
    params_type=SpirographParameters,
    meta=spirograph_meta,
    validate=validate_spirograph_parameters,
)
def generate(
    surface: Surface,
    width: int,
    height: int,
    params: SpirographParameters,
    color_mode: ColorMode,
    *,
    settings: RenderSettings | None = None,
    rng: np.random.Generator | None = None,
) -> None:
    """背景をクリアし、曲線を 1 本のポリラインとして stroke したあと glow で重ね描きする。"""

    s = DEFAULT_RENDER_SETTINGS if settings is None else settings
    surface.fill_rect(0.0, 0.0, float(width), float(height), s.background_color)

    pts = spirograph_points(params, center=(float(width) / 2.0, float(height) / 2.0))
    colors = segment_colors(int(pts.shape[0]) - 1, color_mode)

    surface.begin_path()
    surface.move_to(float(pts[0, 0]), float(pts[0, 1]))
    for x, y in pts[1:].tolist():
        surface.line_to(x, y)

    glow_color = hsl_to_rgb01(float(color_mode.base_hue), 70.0, 60.0)
    style = StrokeStyle(color=colors[0], width=float(s.spirograph_line_width), cap="round")
    surface.stroke(style, segment_colors=colors)
    surface.stroke(
        dataclasses.replace(style, color=glow_color, glow=float(s.spirograph_glow_blur)),
        segment_colors=colors,
    )


__all__ = ["generate", "segment_colors", "spirograph_points"]
