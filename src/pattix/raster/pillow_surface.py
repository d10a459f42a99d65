"""
どこで: `src/pattix/raster/pillow_surface.py`。
何を: `Surface` 契約を Pillow の RGB 画像へラスタライズする実装。
なぜ: preview ウィンドウとヘッドレス（bench / 画像書き出し）で同じ描画結果を得るため。

Notes
-----
- 半透明の塗り・線は `ImageDraw.Draw(img, "RGBA")` で下地とブレンドする。
- 光彩（glow）は L マスクに線を太めに描いて GaussianBlur し、glow 色を mask 付きで paste する。
  処理範囲はパスの外接矩形（余白込み）に限定する。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from pattix.core.color import BACKGROUND_COLOR, RGB01, rgb01_to_rgb255
from pattix.core.surface import PathBuilder, Point, StrokeStyle, check_segment_colors


def _alpha255(alpha: float) -> int:
    a = min(max(float(alpha), 0.0), 1.0)
    return int(round(a * 255.0))


class RasterSurface:
    """Pillow の RGB 画像へ描く描画面。

    Parameters
    ----------
    width, height : int
        画像サイズ [px]。0 以下は `ValueError`。
    background : tuple[float, float, float], optional
        初期化時の塗り色 RGB（0..1）。
    """

    def __init__(self, width: int, height: int, *, background: RGB01 = BACKGROUND_COLOR) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"surface の寸法は正である必要がある: got=({width}, {height})")
        self.width = int(width)
        self.height = int(height)
        self._image = Image.new("RGB", (self.width, self.height), rgb01_to_rgb255(background))
        self._draw = ImageDraw.Draw(self._image, "RGBA")
        self._path = PathBuilder()

    def to_image(self) -> Image.Image:
        """現在の画像のコピーを返す。"""
        return self._image.copy()

    def to_array(self) -> np.ndarray:
        """uint8 shape `(height, width, 3)` の画素配列を返す。"""
        return np.asarray(self._image, dtype=np.uint8).copy()

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: RGB01, *, alpha: float = 1.0
    ) -> None:
        x0 = int(math.floor(float(x)))
        y0 = int(math.floor(float(y)))
        x1 = int(math.ceil(float(x) + float(w))) - 1
        y1 = int(math.ceil(float(y) + float(h))) - 1
        if x1 < x0 or y1 < y0:
            return
        r, g, b = rgb01_to_rgb255(color)
        a = _alpha255(alpha)
        if a >= 255:
            self._draw.rectangle([x0, y0, x1, y1], fill=(r, g, b))
        elif a > 0:
            self._draw.rectangle([x0, y0, x1, y1], fill=(r, g, b, a))

    def begin_path(self) -> None:
        self._path.clear()

    def move_to(self, x: float, y: float) -> None:
        self._path.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.line_to(x, y)

    def stroke(
        self, style: StrokeStyle, *, segment_colors: Sequence[RGB01] | None = None
    ) -> None:
        colors = check_segment_colors(segment_colors, self._path.segment_count())
        subpaths = self._path.subpaths()
        if not subpaths:
            return
        if float(style.glow) > 0.0:
            self._stroke_glow(subpaths, style)
        self._stroke_body(subpaths, style, colors)

    def _stroke_body(
        self,
        subpaths: tuple[tuple[Point, ...], ...],
        style: StrokeStyle,
        colors: Sequence[RGB01] | None,
    ) -> None:
        a = _alpha255(style.alpha)
        if a == 0:
            return
        width = max(1, int(round(float(style.width))))
        radius = float(style.width) / 2.0
        round_cap = style.cap == "round" and width > 1
        default_rgb = rgb01_to_rgb255(style.color)

        i = 0
        for sp in subpaths:
            for p0, p1 in zip(sp[:-1], sp[1:]):
                rgb = default_rgb if colors is None else rgb01_to_rgb255(colors[i])
                fill = (*rgb, a)
                self._draw.line([p0, p1], fill=fill, width=width)
                if round_cap:
                    for px, py in (p0, p1):
                        self._draw.ellipse(
                            [px - radius, py - radius, px + radius, py + radius], fill=fill
                        )
                i += 1

    def _stroke_glow(self, subpaths: tuple[tuple[Point, ...], ...], style: StrokeStyle) -> None:
        blur = float(style.glow)
        pad = float(style.width) + blur * 2.0
        xs = [p[0] for sp in subpaths for p in sp]
        ys = [p[1] for sp in subpaths for p in sp]
        left = max(int(math.floor(min(xs) - pad)), 0)
        top = max(int(math.floor(min(ys) - pad)), 0)
        right = min(int(math.ceil(max(xs) + pad)), self.width)
        bottom = min(int(math.ceil(max(ys) + pad)), self.height)
        if right <= left or bottom <= top:
            return

        size = (right - left, bottom - top)
        mask = Image.new("L", size, 0)
        mask_draw = ImageDraw.Draw(mask)
        level = _alpha255(style.alpha)
        width = max(1, int(round(float(style.width))))
        for sp in subpaths:
            shifted = [(px - left, py - top) for px, py in sp]
            mask_draw.line(shifted, fill=level, width=width, joint="curve")
        mask = mask.filter(ImageFilter.GaussianBlur(blur / 2.0))

        halo = Image.new("RGB", size, rgb01_to_rgb255(style.color))
        self._image.paste(halo, (left, top), mask)


__all__ = ["RasterSurface"]
