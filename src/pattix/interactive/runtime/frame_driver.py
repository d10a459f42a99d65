# どこで: `src/pattix/interactive/runtime/frame_driver.py`。
# 何を: 1 フレーム分の「tick → render」と、UI 操作（パターン選択/再生切替/配色/パラメータ変更）の状態を持つ。
# なぜ: pyglet ウィンドウとヘッドレス bench で同じフレーム進行を共有し、UI 層を入力の配線だけにするため。

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import numpy as np

from pattix.core.animation import AnimationState, PatternKind, tick
from pattix.core.builtins import ensure_builtin_patterns_registered
from pattix.core.color import ColorMode, validate_color_mode
from pattix.core.parameters.patterns import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)
from pattix.core.pattern_registry import pattern_registry
from pattix.core.render_settings import DEFAULT_RENDER_SETTINGS, RenderSettings
from pattix.core.renderer import render
from pattix.core.runtime_config import RuntimeConfig
from pattix.core.surface import Surface

_logger = logging.getLogger(__name__)


class FrameDriver:
    """描画面とパラメータのスナップショットを保持し、フレームを進める。

    Notes
    -----
    再描画は「アニメーション再生中」または「前回の描画以降に何かが変わった（dirty）」場合だけ行う。
    初回の `step()` は必ず描画する。
    """

    def __init__(
        self,
        surface: Surface,
        *,
        tree: TreeParameters | None = None,
        spirograph: SpirographParameters | None = None,
        flow: FlowFieldParameters | None = None,
        color_mode: ColorMode | None = None,
        settings: RenderSettings | None = None,
        rng: np.random.Generator | None = None,
        active_pattern: PatternKind | str = PatternKind.TREE,
        running: bool = False,
    ) -> None:
        ensure_builtin_patterns_registered()
        self._surface = surface
        self._tree = TreeParameters() if tree is None else tree
        self._spirograph = SpirographParameters() if spirograph is None else spirograph
        self._flow = FlowFieldParameters() if flow is None else flow
        self._color_mode = ColorMode() if color_mode is None else validate_color_mode(color_mode)
        self._settings = DEFAULT_RENDER_SETTINGS if settings is None else settings
        self._rng = np.random.default_rng() if rng is None else rng
        self._state = AnimationState(active_pattern=PatternKind(active_pattern), running=bool(running))
        self._dirty = True
        self._frames_rendered = 0

    @classmethod
    def from_config(cls, surface: Surface, cfg: RuntimeConfig) -> "FrameDriver":
        """実行時設定の初期値から driver を作る。"""

        return cls(
            surface,
            tree=cfg.tree,
            spirograph=cfg.spirograph,
            flow=cfg.flow,
            color_mode=cfg.color_mode,
            settings=cfg.render,
            rng=np.random.default_rng(cfg.flow_seed),
        )

    @property
    def surface(self) -> Surface:
        return self._surface

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def tree(self) -> TreeParameters:
        return self._tree

    @property
    def spirograph(self) -> SpirographParameters:
        return self._spirograph

    @property
    def flow(self) -> FlowFieldParameters:
        return self._flow

    @property
    def color_mode(self) -> ColorMode:
        return self._color_mode

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def frames_rendered(self) -> int:
        return int(self._frames_rendered)

    def step(self) -> bool:
        """1 フレーム進める。

        Returns
        -------
        bool
            このフレームで描画した場合 True。
        """

        if self._state.running:
            self._tree, self._spirograph, self._flow, self._state = tick(
                self._state, self._tree, self._spirograph, self._flow
            )
        elif not self._dirty:
            return False

        render(
            self._surface,
            self._surface.width,
            self._surface.height,
            self._state.active_pattern,
            self._tree,
            self._spirograph,
            self._flow,
            self._color_mode,
            settings=self._settings,
            rng=self._rng,
        )
        self._dirty = False
        self._frames_rendered += 1
        return True

    def select(self, kind: PatternKind | str) -> None:
        """描くパターンを切り替える。"""

        k = PatternKind(kind)
        if k is self._state.active_pattern:
            return
        self._state = dataclasses.replace(self._state, active_pattern=k)
        self._dirty = True
        _logger.info("パターンを切り替えました: %s", k.value)

    def toggle_running(self) -> bool:
        """アニメーションの再生/停止を切り替え、切替後の状態を返す。"""

        running = not self._state.running
        self._state = dataclasses.replace(self._state, running=running)
        _logger.info("アニメーション: %s", "再生" if running else "停止")
        return running

    def set_color_mode(self, *, rainbow: bool | None = None, base_hue: float | None = None) -> ColorMode:
        """配色モードを更新する（None の引数は現状維持）。"""

        mode = self._color_mode
        if rainbow is not None:
            mode = dataclasses.replace(mode, rainbow=bool(rainbow))
        if base_hue is not None:
            mode = dataclasses.replace(mode, base_hue=float(base_hue))
        self._color_mode = validate_color_mode(mode)
        self._dirty = True
        return self._color_mode

    def shift_hue(self, delta: float) -> ColorMode:
        """基準色相を `delta` 度ずらす（[0, 360) に折り返す）。"""

        h = (self._color_mode.base_hue + float(delta)) % 360.0
        # 負の極小値は浮動小数で 360.0 に丸まる
        if h >= 360.0:
            h -= 360.0
        return self.set_color_mode(base_hue=h)

    def update_params(self, kind: PatternKind | str, **changes: Any) -> Any:
        """`kind` のパラメータの一部を置き換え、検証して保持する。

        Raises
        ------
        TypeError
            存在しないフィールド名が指定された場合。
        ValueError
            検証に失敗した場合（状態は変更しない）。
        """

        k = PatternKind(kind)
        entry = pattern_registry.get(k.value)
        if k is PatternKind.TREE:
            updated = entry.validate(dataclasses.replace(self._tree, **changes))
            self._tree = updated
        elif k is PatternKind.SPIROGRAPH:
            updated = entry.validate(dataclasses.replace(self._spirograph, **changes))
            self._spirograph = updated
        else:
            updated = entry.validate(dataclasses.replace(self._flow, **changes))
            self._flow = updated
        self._dirty = True
        return updated


__all__ = ["FrameDriver"]
