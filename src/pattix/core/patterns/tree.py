"""
どこで: `src/pattix/core/patterns/tree.py`。再帰ツリーパターンの実体生成。
何を: 幹から `branch_count` 本ずつ対称に枝分かれする線分列を生成し、深さに応じた色で描画面へ stroke する。
なぜ: 深さ（残り再帰段数）だけを停止条件にした、単純で予測可能な枝分かれ図形を得るため。
"""

from __future__ import annotations

import dataclasses
import math
import warnings
from dataclasses import dataclass

import numpy as np

from pattix.core.color import ColorMode, RGB01, hsl_to_rgb01
from pattix.core.parameters.patterns import TreeParameters, tree_meta, validate_tree_parameters
from pattix.core.pattern_registry import pattern
from pattix.core.render_settings import DEFAULT_RENDER_SETTINGS, RenderSettings
from pattix.core.surface import StrokeStyle, Surface

# 幹の始点は下端からこの距離だけ上に置く。
_TRUNK_BOTTOM_MARGIN = 50.0
# 子枝の線幅は親の 0.7 倍。
_THICKNESS_DECAY = 0.7
# 残り段数が `total - _GLOW_LEVELS` より大きい枝（幹側の数段）は glow を重ねる。
_GLOW_LEVELS = 3


@dataclass(frozen=True, slots=True)
class Branch:
    """1 本の枝（線分）。

    `depth` は描画時点の残り再帰段数で、幹が最大・末端が 0。
    """

    x0: float
    y0: float
    x1: float
    y1: float
    depth: int
    thickness: float

    @property
    def length(self) -> float:
        return math.hypot(self.x1 - self.x0, self.y1 - self.y0)


def tree_branches(width: float, height: float, params: TreeParameters) -> list[Branch]:
    """ツリーの枝を描画順（深さ優先・前順、子はオフセット i の昇順）で返す。

    角度は y 上向きの数学座標で扱い、画面座標へは
    `end = (x + L cos θ, y - L sin θ)` で写す。初期向きは真上（θ = 90°）。

    停止条件は `depth` だけで、長さによる打ち切りは無い。
    枝数は `branch_count` の等比級数 `(b**(d+1) - 1) / (b - 1)`（b=1 なら d+1）になる。

    Parameters
    ----------
    width, height : float
        描画面の寸法。
    params : TreeParameters
        ツリーパラメータ。検証は呼び出し側の責務。

    Returns
    -------
    list[Branch]
        枝の列。
    """

    total_depth = int(params.depth)
    n_branches = int(params.branch_count)
    ratio = float(params.length_ratio)
    if ratio >= 1.0:
        warnings.warn(
            f"tree の length_ratio が 1 以上のため枝が縮まずに伸び続けます: got={ratio}",
            UserWarning,
            stacklevel=2,
        )

    angle_step = float(params.branch_angle_degrees) * math.pi / 180.0
    spread = [angle_step * (i - (n_branches - 1) / 2.0) for i in range(n_branches)]

    out: list[Branch] = []
    # (x, y, length, angle, depth, thickness)
    stack: list[tuple[float, float, float, float, int, float]] = [
        (
            float(width) / 2.0,
            float(height) - _TRUNK_BOTTOM_MARGIN,
            float(height) / 4.0,
            math.pi / 2.0,
            total_depth,
            float(params.thickness),
        )
    ]
    while stack:
        x, y, length, angle, depth, thickness = stack.pop()
        end_x = x + length * math.cos(angle)
        end_y = y - length * math.sin(angle)
        out.append(Branch(x, y, end_x, end_y, depth, thickness))

        if depth <= 0:
            continue

        new_length = length * ratio
        new_thickness = thickness * _THICKNESS_DECAY
        # スタックは後入れ先出しなので、i の大きい子から積んで i=0 の子を先に描く。
        for offset in reversed(spread):
            stack.append((end_x, end_y, new_length, angle + offset, depth - 1, new_thickness))
    return out


def branch_color(depth: int, total_depth: int, color_mode: ColorMode) -> RGB01:
    """残り段数 `depth` の枝の線色を返す。

    `total_depth == 0` のときは比率を 1.0（幹 = 最上段）とみなす。
    """

    frac = 1.0 if int(total_depth) <= 0 else float(depth) / float(total_depth)
    base = float(color_mode.base_hue)
    if color_mode.rainbow:
        return hsl_to_rgb01(base + frac * 120.0, 70.0, 50.0 + float(depth) * 2.0)
    return hsl_to_rgb01(base, 60.0, 30.0 + frac * 50.0)


@pattern(
    "tree",
    params_type=TreeParameters,
    meta=tree_meta,
    validate=validate_tree_parameters,
)
def generate(
    surface: Surface,
    width: int,
    height: int,
    params: TreeParameters,
    color_mode: ColorMode,
    *,
    settings: RenderSettings | None = None,
    rng: np.random.Generator | None = None,
) -> None:
    """背景をクリアしてツリーを描画する。`rng` は使わない。"""

    s = DEFAULT_RENDER_SETTINGS if settings is None else settings
    surface.fill_rect(0.0, 0.0, float(width), float(height), s.background_color)

    total_depth = int(params.depth)
    for br in tree_branches(width, height, params):
        style = StrokeStyle(
            color=branch_color(br.depth, total_depth, color_mode),
            width=br.thickness,
            cap="round",
        )
        surface.begin_path()
        surface.move_to(br.x0, br.y0)
        surface.line_to(br.x1, br.y1)
        surface.stroke(style)
        if br.depth > total_depth - _GLOW_LEVELS:
            surface.stroke(dataclasses.replace(style, glow=float(s.tree_glow_blur)))


__all__ = ["Branch", "branch_color", "generate", "tree_branches"]
