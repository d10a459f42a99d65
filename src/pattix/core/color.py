"""
どこで: `src/pattix/core/color.py`。
何を: 3 つの generator が共有する配色モード（rainbow / mono）と HSL→RGB 変換を提供する。
なぜ: 色の決め方（色相の掃引・固定色相）を generator 間で揃え、描画面には RGB01 だけを渡すため。
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass

RGB01 = tuple[float, float, float]

BACKGROUND_COLOR: RGB01 = (10.0 / 255.0, 10.0 / 255.0, 21.0 / 255.0)
"""全パターン共通の背景色（`#0a0a15`）。"""


@dataclass(frozen=True, slots=True)
class ColorMode:
    """配色モード。

    Attributes
    ----------
    rainbow : bool
        True なら生成の進行度に応じて色相を掃引する。False なら `base_hue` 固定の単色。
    base_hue : float
        基準色相 [deg]。`[0, 360)`。
    """

    rainbow: bool = True
    base_hue: float = 200.0


def validate_color_mode(mode: ColorMode) -> ColorMode:
    """ColorMode の値域を検証して、そのまま返す。"""

    hue = float(mode.base_hue)
    if not (0.0 <= hue < 360.0):
        raise ValueError(f"base_hue は [0, 360) の範囲である必要がある: got={mode.base_hue!r}")
    return mode


def hsl_to_rgb01(hue: float, saturation: float, lightness: float) -> RGB01:
    """CSS の `hsl(h, s%, l%)` 相当の値を RGB（0..1）に変換する。

    Parameters
    ----------
    hue : float
        色相 [deg]。360 で折り返す（負値も可）。
    saturation : float
        彩度 [%]。0..100 にクランプする。
    lightness : float
        明度 [%]。0..100 にクランプする。

    Returns
    -------
    tuple[float, float, float]
        RGB（0..1）。
    """

    h = (float(hue) % 360.0) / 360.0
    s = min(max(float(saturation), 0.0), 100.0) / 100.0
    light = min(max(float(lightness), 0.0), 100.0) / 100.0
    r, g, b = colorsys.hls_to_rgb(h, light, s)
    return float(r), float(g), float(b)


def parse_hex_color(text: str) -> RGB01:
    """`#rrggbb` 形式の文字列を RGB（0..1）に変換する。"""

    s = str(text).strip()
    if len(s) != 7 or not s.startswith("#"):
        raise ValueError(f"色は '#rrggbb' 形式である必要がある: got={text!r}")
    try:
        r = int(s[1:3], 16)
        g = int(s[3:5], 16)
        b = int(s[5:7], 16)
    except ValueError as exc:
        raise ValueError(f"色は '#rrggbb' 形式である必要がある: got={text!r}") from exc
    return r / 255.0, g / 255.0, b / 255.0


def rgb01_to_rgb255(rgb01: RGB01) -> tuple[int, int, int]:
    """RGB（0..1）を RGB255 に変換する（丸め + 0..255 clamp）。"""

    def _to255(v: float) -> int:
        iv = int(round(float(v) * 255.0))
        return 0 if iv < 0 else 255 if iv > 255 else iv

    r, g, b = rgb01
    return _to255(r), _to255(g), _to255(b)


__all__ = [
    "BACKGROUND_COLOR",
    "ColorMode",
    "RGB01",
    "hsl_to_rgb01",
    "parse_hex_color",
    "rgb01_to_rgb255",
    "validate_color_mode",
]
