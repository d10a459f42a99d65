# どこで: `src/pattix/core/render_settings.py`。
# 何を: generator が参照する描画定数（背景色・glow 量・flow の残像）の束を表すデータクラスを定義する。
# なぜ: generator の引数を簡潔に保ちつつ、config.yaml からの上書きを 1 箇所で受けるため。

from __future__ import annotations

from dataclasses import dataclass

from pattix.core.color import BACKGROUND_COLOR, RGB01


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """パターン描画に用いる設定値の集合。"""

    background_color: RGB01 = BACKGROUND_COLOR
    tree_glow_blur: float = 10.0
    spirograph_glow_blur: float = 15.0
    spirograph_line_width: float = 2.0
    # flow は毎回ハードクリアせず、この不透明度で背景色を重ねて残像を残す。
    flow_fade_alpha: float = 0.1
    flow_line_width: float = 1.0


DEFAULT_RENDER_SETTINGS = RenderSettings()
