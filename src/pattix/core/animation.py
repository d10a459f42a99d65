"""
どこで: `src/pattix/core/animation.py`。
何を: 1 フレームごとに進行度 `progress` を進め、選択中パターンのパラメータを 1 つだけサイン波で揺らす。
なぜ: パラメータを単調に流すのではなく、基準値のまわりで「呼吸」させて連続的な動きを作るため。

Notes
-----
進行度の増分はフレームあたり固定（0.01）で、実時間には依存しない。
アニメーション速度は tick を呼ぶ頻度で決まる。
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum

from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)

PROGRESS_STEP = 0.01
# 0.01 の累積誤差で 100 tick 後に 0 へ戻らなくなるのを防ぐため、加算結果をこの桁で丸める。
_PROGRESS_DECIMALS = 12

# (基準値, 振幅)
TREE_BRANCH_ANGLE_WAVE = (25.0, 10.0)
SPIROGRAPH_INNER_RADIUS_WAVE = (100.0, 30.0)
FLOW_NOISE_SCALE_WAVE = (0.01, 0.005)


class PatternKind(str, Enum):
    """選択可能なパターン。"""

    TREE = "tree"
    SPIROGRAPH = "spirograph"
    FLOW = "flow"


@dataclass(frozen=True, slots=True)
class AnimationState:
    """アニメーション状態。

    Attributes
    ----------
    progress : float
        `[0, 1)` を巡回する進行度。
    active_pattern : PatternKind
        選択中のパターン。
    running : bool
        False の間はドライバが `tick` を呼ばない（停止）。
    """

    progress: float = 0.0
    active_pattern: PatternKind = PatternKind.TREE
    running: bool = False


def advance_progress(progress: float) -> float:
    """進行度を 1 tick 分進めて `[0, 1)` に折り返す。"""

    return round(float(progress) + PROGRESS_STEP, _PROGRESS_DECIMALS) % 1.0


def _wave(progress: float, base_and_amp: tuple[float, float]) -> float:
    base, amp = base_and_amp
    return base + math.sin(float(progress) * 2.0 * math.pi) * amp


def modulate(
    kind: PatternKind,
    progress: float,
    tree: TreeParameters,
    spiro: SpirographParameters,
    flow: FlowFieldParameters,
) -> tuple[TreeParameters, SpirographParameters, FlowFieldParameters]:
    """`kind` のパラメータのうち 1 フィールドだけを `progress` に応じた値へ置き換える。

    - tree: `branch_angle_degrees = 25 + sin(2πp) * 10`
    - spirograph: `inner_radius = 100 + sin(2πp) * 30`
    - flow: `noise_scale = 0.01 + sin(2πp) * 0.005`

    他のフィールドと、選択されていないパターンのレコードはそのまま返す。
    """

    k = PatternKind(kind)
    if k is PatternKind.TREE:
        tree = dataclasses.replace(
            tree, branch_angle_degrees=_wave(progress, TREE_BRANCH_ANGLE_WAVE)
        )
    elif k is PatternKind.SPIROGRAPH:
        spiro = dataclasses.replace(
            spiro, inner_radius=_wave(progress, SPIROGRAPH_INNER_RADIUS_WAVE)
        )
    elif k is PatternKind.FLOW:
        flow = dataclasses.replace(flow, noise_scale=_wave(progress, FLOW_NOISE_SCALE_WAVE))
    return tree, spiro, flow


def tick(
    state: AnimationState,
    tree: TreeParameters,
    spiro: SpirographParameters,
    flow: FlowFieldParameters,
) -> tuple[TreeParameters, SpirographParameters, FlowFieldParameters, AnimationState]:
    """アニメーションを 1 フレーム進める。

    入力は変更せず、新しいスナップショットを返す。`state.running` は見ない（停止はドライバ側の責務）。

    Returns
    -------
    tuple
        `(tree', spiro', flow', state')`。
    """

    progress = advance_progress(state.progress)
    tree, spiro, flow = modulate(state.active_pattern, progress, tree, spiro, flow)
    return tree, spiro, flow, dataclasses.replace(state, progress=progress)


__all__ = [
    "AnimationState",
    "PROGRESS_STEP",
    "PatternKind",
    "advance_progress",
    "modulate",
    "tick",
]
