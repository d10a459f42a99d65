"""
どこで: `src/pattix/core/parameters/patterns.py`。
何を: tree / spirograph / flow の各パラメータレコード（不変スナップショット）と、その検証関数を定義する。
なぜ: generator へ「その描画呼び出しの間だけ読む値」を明示的に渡し、
      値域の検証を generator の外側（設定ロード・CLI・driver）の 1 箇所へ寄せるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .meta import ParamMeta

TREE_MAX_DEPTH = 12
TREE_MAX_BRANCHES = 5


@dataclass(frozen=True, slots=True)
class TreeParameters:
    """再帰ツリーのパラメータ。

    Attributes
    ----------
    branch_angle_degrees : float
        兄弟枝どうしの開き角 [deg]。
    depth : int
        再帰の残り段数（0 以上）。
    branch_count : int
        1 ノードあたりの子枝数（1 以上）。
    length_ratio : float
        子/親の長さ比（(0, 1)）。
    thickness : float
        幹の線幅（正）。
    """

    branch_angle_degrees: float = 25.0
    depth: int = 9
    branch_count: int = 2
    length_ratio: float = 0.67
    thickness: float = 10.0


@dataclass(frozen=True, slots=True)
class SpirographParameters:
    """スピログラフ曲線のパラメータ。

    `speed` はアニメーション用の予約値で、静的なサンプリングでは使わない。
    """

    outer_radius: float = 200.0
    inner_radius: float = 100.0
    offset: float = 50.0
    speed: float = 0.05
    iterations: int = 500


@dataclass(frozen=True, slots=True)
class FlowFieldParameters:
    """flow field（粒子移流）のパラメータ。

    `jitter` は 1 ステップごとの進行方向ゆらぎの幅 [rad]。`(u - 0.5) * jitter` を加える。
    """

    particle_count: int = 100
    step_count: int = 100
    noise_scale: float = 0.01
    flow_strength: float = 2.0
    alpha: float = 0.3
    jitter: float = 0.1


tree_meta = {
    "branch_angle_degrees": ParamMeta(kind="float", ui_min=0.0, ui_max=90.0),
    "depth": ParamMeta(kind="int", ui_min=0, ui_max=TREE_MAX_DEPTH),
    "branch_count": ParamMeta(kind="int", ui_min=1, ui_max=TREE_MAX_BRANCHES),
    "length_ratio": ParamMeta(kind="float", ui_min=0.3, ui_max=0.9),
    "thickness": ParamMeta(kind="float", ui_min=1.0, ui_max=20.0),
}

spirograph_meta = {
    "outer_radius": ParamMeta(kind="float", ui_min=50.0, ui_max=300.0),
    "inner_radius": ParamMeta(kind="float", ui_min=10.0, ui_max=200.0),
    "offset": ParamMeta(kind="float", ui_min=0.0, ui_max=150.0),
    "speed": ParamMeta(kind="float", ui_min=0.01, ui_max=0.2),
    "iterations": ParamMeta(kind="int", ui_min=100, ui_max=2000),
}

flow_meta = {
    "particle_count": ParamMeta(kind="int", ui_min=10, ui_max=500),
    "step_count": ParamMeta(kind="int", ui_min=10, ui_max=300),
    "noise_scale": ParamMeta(kind="float", ui_min=0.001, ui_max=0.05),
    "flow_strength": ParamMeta(kind="float", ui_min=0.5, ui_max=10.0),
    "alpha": ParamMeta(kind="float", ui_min=0.05, ui_max=1.0),
    "jitter": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
}


def _require(cond: bool, message: str) -> None:
    if not cond:
        raise ValueError(message)


def validate_tree_parameters(params: TreeParameters) -> TreeParameters:
    """TreeParameters を検証して、そのまま返す。

    深さと枝数の上限は描画コスト（節点数 ~ branch_count**depth）を抑えるためのもの。

    Raises
    ------
    ValueError
        値域外の値を含む場合。
    """

    _require(
        0 <= int(params.depth) <= TREE_MAX_DEPTH,
        f"tree の depth は 0..{TREE_MAX_DEPTH} である必要がある: got={params.depth!r}",
    )
    _require(
        1 <= int(params.branch_count) <= TREE_MAX_BRANCHES,
        f"tree の branch_count は 1..{TREE_MAX_BRANCHES} である必要がある: got={params.branch_count!r}",
    )
    _require(
        0.0 < float(params.length_ratio) < 1.0,
        f"tree の length_ratio は (0, 1) である必要がある: got={params.length_ratio!r}",
    )
    _require(
        float(params.thickness) > 0.0,
        f"tree の thickness は正の値である必要がある: got={params.thickness!r}",
    )
    return params


def validate_spirograph_parameters(params: SpirographParameters) -> SpirographParameters:
    """SpirographParameters を検証して、そのまま返す。

    `outer_radius > inner_radius` は期待値だが強制しない（逆転しても曲線は定義される）。
    """

    _require(
        float(params.inner_radius) > 0.0,
        f"spirograph の inner_radius は正の値である必要がある: got={params.inner_radius!r}",
    )
    _require(
        float(params.outer_radius) > 0.0,
        f"spirograph の outer_radius は正の値である必要がある: got={params.outer_radius!r}",
    )
    _require(
        int(params.iterations) > 0,
        f"spirograph の iterations は 1 以上である必要がある: got={params.iterations!r}",
    )
    return params


def validate_flow_parameters(params: FlowFieldParameters) -> FlowFieldParameters:
    """FlowFieldParameters を検証して、そのまま返す。"""

    _require(
        int(params.particle_count) > 0,
        f"flow の particle_count は 1 以上である必要がある: got={params.particle_count!r}",
    )
    _require(
        int(params.step_count) > 0,
        f"flow の step_count は 1 以上である必要がある: got={params.step_count!r}",
    )
    _require(
        float(params.noise_scale) > 0.0,
        f"flow の noise_scale は正の値である必要がある: got={params.noise_scale!r}",
    )
    _require(
        float(params.flow_strength) > 0.0,
        f"flow の flow_strength は正の値である必要がある: got={params.flow_strength!r}",
    )
    _require(
        0.0 < float(params.alpha) <= 1.0,
        f"flow の alpha は (0, 1] である必要がある: got={params.alpha!r}",
    )
    _require(
        float(params.jitter) >= 0.0,
        f"flow の jitter は 0 以上である必要がある: got={params.jitter!r}",
    )
    return params


__all__ = [
    "FlowFieldParameters",
    "SpirographParameters",
    "TREE_MAX_BRANCHES",
    "TREE_MAX_DEPTH",
    "TreeParameters",
    "flow_meta",
    "spirograph_meta",
    "tree_meta",
    "validate_flow_parameters",
    "validate_spirograph_parameters",
    "validate_tree_parameters",
]
