"""
どこで: `src/pattix/__init__.py`。
何を: 生成パターン（tree / spirograph / flow）の描画とアニメーションの公開 API を集約する。
なぜ: 利用側が内部モジュール配置を意識せずに `from pattix import render, tick` で使えるようにするため。
"""

from __future__ import annotations

from pattix.core.animation import AnimationState, PatternKind, modulate, tick
from pattix.core.color import ColorMode
from pattix.core.noise import sample
from pattix.core.parameters import (
    FlowFieldParameters,
    SpirographParameters,
    TreeParameters,
)
from pattix.core.render_settings import RenderSettings
from pattix.core.renderer import render
from pattix.core.runtime_config import RuntimeConfig, runtime_config, set_config_path
from pattix.core.surface import RecordingSurface, StrokeStyle, Surface

__all__ = [
    "AnimationState",
    "ColorMode",
    "FlowFieldParameters",
    "PatternKind",
    "RecordingSurface",
    "RenderSettings",
    "RuntimeConfig",
    "SpirographParameters",
    "StrokeStyle",
    "Surface",
    "TreeParameters",
    "modulate",
    "render",
    "runtime_config",
    "sample",
    "set_config_path",
    "tick",
]
