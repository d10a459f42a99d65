"""
どこで: `src/pattix/core/patterns/flow.py`。flow field（ノイズ場による粒子移流）の実体生成。
何を: 粒子をノイズ場の向きへ少しずつ進め、1 ステップ = 1 セグメントとして色を変えながら描画する。
なぜ: 軌跡に沿ったグラデーションと、呼び出しを重ねるほど残る残像（ソフトフェード）で流れを可視化するため。

移流の規則（1 ステップ）
------------------------
- 向き: `θ = sample(x * noise_scale, y * noise_scale) * 4π (+ jitter)`
- 前進: `(x, y) += flow_strength * (cos θ, sin θ)`
- 端: トーラス状に折り返す（反射/クランプはしない）。各ステップ後に `0 <= x < width`, `0 <= y < height`。

線分は「折り返し前の前進先」まで引き、次の線分は折り返し後の点から新しいサブパスとして始める。
こうすると端をまたぐ粒子でも画面を横切る線が出ない。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from pattix.core.color import ColorMode, RGB01, hsl_to_rgb01
from pattix.core.noise import _sample_njit
from pattix.core.parameters.patterns import FlowFieldParameters, flow_meta, validate_flow_parameters
from pattix.core.pattern_registry import pattern
from pattix.core.render_settings import DEFAULT_RENDER_SETTINGS, RenderSettings
from pattix.core.surface import StrokeStyle, Surface

_ANGLE_GAIN = 4.0 * math.pi


@dataclass(frozen=True, slots=True)
class FlowTrajectories:
    """粒子群の軌跡。

    Attributes
    ----------
    positions : np.ndarray
        float64 shape `(steps + 1, n, 2)`。各ステップ後の折り返し済み位置（先頭は開始位置）。
    heads : np.ndarray
        float64 shape `(steps, n, 2)`。各ステップの折り返し前の前進先（線分の終点）。
    """

    positions: np.ndarray
    heads: np.ndarray

    @property
    def n_particles(self) -> int:
        return int(self.positions.shape[1])

    @property
    def n_steps(self) -> int:
        return int(self.heads.shape[0])


@njit(cache=True, fastmath=False)
def _wrap(v: float, size: float) -> float:
    if v < 0.0 or v >= size:
        v = v - math.floor(v / size) * size
        # 丸めで v == size になる場合がある（例: 負の極小値）。
        if v >= size:
            v -= size
        if v < 0.0:
            v = 0.0
    return v


@njit(cache=True, fastmath=False)
def _advect_njit(
    starts: np.ndarray,
    jitter: np.ndarray,
    width: float,
    height: float,
    noise_scale: float,
    strength: float,
    steps: int,
    use_jitter: bool,
) -> tuple[np.ndarray, np.ndarray]:
    n = starts.shape[0]
    positions = np.empty((steps + 1, n, 2), dtype=np.float64)
    heads = np.empty((steps, n, 2), dtype=np.float64)
    for p in range(n):
        x = _wrap(starts[p, 0], width)
        y = _wrap(starts[p, 1], height)
        positions[0, p, 0] = x
        positions[0, p, 1] = y
        for k in range(steps):
            angle = _sample_njit(x * noise_scale, y * noise_scale) * _ANGLE_GAIN
            if use_jitter:
                angle += jitter[k, p]
            nx = x + math.cos(angle) * strength
            ny = y + math.sin(angle) * strength
            heads[k, p, 0] = nx
            heads[k, p, 1] = ny
            x = _wrap(nx, width)
            y = _wrap(ny, height)
            positions[k + 1, p, 0] = x
            positions[k + 1, p, 1] = y
    return positions, heads


def advect_particles(
    starts: np.ndarray,
    *,
    width: float,
    height: float,
    noise_scale: float,
    flow_strength: float,
    steps: int,
    jitter: np.ndarray | None = None,
) -> FlowTrajectories:
    """開始位置から粒子を `steps` ステップ移流し、軌跡を返す。

    乱数は使わない。同じ入力なら常に同じ軌跡になる。

    Parameters
    ----------
    starts : np.ndarray
        shape `(n, 2)` の開始位置。範囲外の値は最初に折り返す。
    width, height : float
        描画面の寸法（折り返しの周期）。
    noise_scale : float
        ノイズ場へ渡す座標の倍率。
    flow_strength : float
        1 ステップの前進量。
    steps : int
        ステップ数。
    jitter : np.ndarray or None, optional
        shape `(steps, n)` の向きの加算値 [rad]。None ならゆらぎ無し。

    Returns
    -------
    FlowTrajectories
        軌跡。
    """

    w = float(width)
    h = float(height)
    if w <= 0.0 or h <= 0.0:
        raise ValueError(f"width/height は正の値である必要がある: got=({width}, {height})")
    n_steps = int(steps)
    if n_steps < 0:
        raise ValueError(f"steps は 0 以上である必要がある: got={steps!r}")

    s = np.ascontiguousarray(np.asarray(starts, dtype=np.float64))
    if s.ndim != 2 or s.shape[1] != 2:
        raise ValueError(f"starts は shape (n, 2) の配列である必要がある: got={s.shape}")
    n = int(s.shape[0])

    if jitter is None:
        jit = np.zeros((0, 0), dtype=np.float64)
        use_jitter = False
    else:
        jit = np.ascontiguousarray(np.asarray(jitter, dtype=np.float64))
        if jit.shape != (n_steps, n):
            raise ValueError(
                f"jitter は shape (steps, n) = {(n_steps, n)} である必要がある: got={jit.shape}"
            )
        use_jitter = True

    positions, heads = _advect_njit(
        s, jit, w, h, float(noise_scale), float(flow_strength), n_steps, use_jitter
    )
    return FlowTrajectories(positions=positions, heads=heads)


def step_colors(n_steps: int, color_mode: ColorMode) -> list[RGB01]:
    """ステップ番号ごとの線色を返す。rainbow なら軌跡に沿って色相を 1 周掃引する。"""

    n = int(n_steps)
    base = float(color_mode.base_hue)
    if not color_mode.rainbow:
        return [hsl_to_rgb01(base, 60.0, 60.0)] * n
    return [hsl_to_rgb01((base + (k / n) * 360.0) % 360.0, 70.0, 60.0) for k in range(n)]


def seed_particles(
    rng: np.random.Generator, params: FlowFieldParameters, width: float, height: float
) -> tuple[np.ndarray, np.ndarray | None]:
    """一様乱数で開始位置と向きのゆらぎを引く。"""

    n = int(params.particle_count)
    starts = rng.random((n, 2)) * np.array([float(width), float(height)], dtype=np.float64)
    jitter_width = float(params.jitter)
    if jitter_width <= 0.0:
        return starts, None
    jitter = (rng.random((int(params.step_count), n)) - 0.5) * jitter_width
    return starts, jitter


def stroke_trajectories(
    surface: Surface,
    traj: FlowTrajectories,
    colors: list[RGB01],
    style: StrokeStyle,
) -> None:
    """粒子ごとに 1 パスを組み、ステップごとに色の違うセグメントとしてまとめて stroke する。"""

    positions = traj.positions.tolist()
    heads = traj.heads.tolist()
    for p in range(traj.n_particles):
        surface.begin_path()
        prev_head: list[float] | None = None
        for k in range(traj.n_steps):
            start = positions[k][p]
            if prev_head is None or start != prev_head:
                surface.move_to(start[0], start[1])
            head = heads[k][p]
            surface.line_to(head[0], head[1])
            prev_head = head
        surface.stroke(style, segment_colors=colors)


@pattern(
    "flow",
    params_type=FlowFieldParameters,
    meta=flow_meta,
    validate=validate_flow_parameters,
)
def generate(
    surface: Surface,
    width: int,
    height: int,
    params: FlowFieldParameters,
    color_mode: ColorMode,
    *,
    settings: RenderSettings | None = None,
    rng: np.random.Generator | None = None,
) -> None:
    """背景色を薄く重ねて（ハードクリアせず）から、粒子の軌跡を描画する。

    `rng` が None の場合はシード無しの Generator を使う。
    """

    s = DEFAULT_RENDER_SETTINGS if settings is None else settings
    surface.fill_rect(
        0.0, 0.0, float(width), float(height), s.background_color, alpha=float(s.flow_fade_alpha)
    )

    gen = np.random.default_rng() if rng is None else rng
    starts, jitter = seed_particles(gen, params, width, height)
    traj = advect_particles(
        starts,
        width=width,
        height=height,
        noise_scale=float(params.noise_scale),
        flow_strength=float(params.flow_strength),
        steps=int(params.step_count),
        jitter=jitter,
    )

    if traj.n_steps == 0:
        return
    colors = step_colors(traj.n_steps, color_mode)
    style = StrokeStyle(
        color=colors[0],
        width=float(s.flow_line_width),
        cap="round",
        alpha=float(params.alpha),
    )
    stroke_trajectories(surface, traj, colors, style)


__all__ = [
    "FlowTrajectories",
    "advect_particles",
    "generate",
    "seed_particles",
    "step_colors",
    "stroke_trajectories",
]
