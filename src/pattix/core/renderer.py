"""
どこで: `src/pattix/core/renderer.py`。
何を: 選択中のパターンに対応する generator を registry から引き、対応するパラメータだけを渡して描画させる。
なぜ: driver 側を「tick → render」の配線だけにし、パターン追加時の分岐を registry に閉じ込めるため。
"""

from __future__ import annotations

import logging

import numpy as np

from pattix.core.animation import PatternKind
from pattix.core.builtins import ensure_builtin_patterns_registered
from pattix.core.color import ColorMode
from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)
from pattix.core.pattern_registry import pattern_registry
from pattix.core.render_settings import DEFAULT_RENDER_SETTINGS, RenderSettings
from pattix.core.surface import RecordingSurface, Surface

_logger = logging.getLogger(__name__)


def render(
    surface: Surface,
    width: int,
    height: int,
    pattern: PatternKind | str,
    tree_params: TreeParameters,
    spiro_params: SpirographParameters,
    flow_params: FlowFieldParameters,
    color_mode: ColorMode,
    *,
    settings: RenderSettings | None = None,
    rng: np.random.Generator | None = None,
) -> None:
    """1 フレーム分のパターンを描画面へ描く。

    Parameters
    ----------
    surface : Surface
        描画先。描画面自体の失敗（不正な寸法など）はそのまま呼び出し側へ伝播する。
    width, height : int
        描画範囲の寸法。
    pattern : PatternKind or str
        描くパターン。
    tree_params, spiro_params, flow_params
        各パターンのパラメータ。`pattern` に対応する 1 つだけが使われる。
    color_mode : ColorMode
        配色モード。
    settings : RenderSettings or None, optional
        描画定数。None なら既定値。
    rng : numpy.random.Generator or None, optional
        flow の粒子配置とゆらぎに使う乱数源。

    Raises
    ------
    KeyError
        未登録のパターン名が指定された場合。
    """

    ensure_builtin_patterns_registered()

    kind = pattern.value if isinstance(pattern, PatternKind) else str(pattern)
    entry = pattern_registry.get(kind)
    params_by_kind = {
        PatternKind.TREE.value: tree_params,
        PatternKind.SPIROGRAPH.value: spiro_params,
        PatternKind.FLOW.value: flow_params,
    }
    params = params_by_kind[kind]

    _logger.debug("render pattern=%s size=%dx%d params=%r", kind, int(width), int(height), params)
    n_before = len(surface.commands) if isinstance(surface, RecordingSurface) else 0
    entry.generate(
        surface,
        int(width),
        int(height),
        params,
        color_mode,
        settings=DEFAULT_RENDER_SETTINGS if settings is None else settings,
        rng=rng,
    )
    if isinstance(surface, RecordingSurface):
        _logger.debug("render done pattern=%s ops=%d", kind, len(surface.commands) - n_before)


__all__ = ["render"]
