# どこで: `src/pattix/interactive/runtime/preview.py`。
# 何を: pyglet ウィンドウで FrameDriver を fps 固定で回し、ラスタ画像を blit してキー入力を driver へ配線する。
# なぜ: interactive 依存（pyglet）をこの層に閉じ込め、core / raster をヘッドレスに保つため。

from __future__ import annotations

import logging
from typing import Any

import pyglet
from pyglet.window import key

from pattix.core.animation import PatternKind
from pattix.core.runtime_config import RuntimeConfig, runtime_config
from pattix.interactive.runtime.frame_driver import FrameDriver
from pattix.raster.pillow_surface import RasterSurface

_logger = logging.getLogger(__name__)

HUE_STEP_DEGREES = 10.0

_PATTERN_KEYS: dict[int, PatternKind] = {
    key._1: PatternKind.TREE,
    key._2: PatternKind.SPIROGRAPH,
    key._3: PatternKind.FLOW,
}


def create_preview_window(cfg: RuntimeConfig) -> Any:
    """設定に基づき preview ウィンドウを生成する。"""

    canvas_w, canvas_h = cfg.canvas_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(canvas_w),
        height=int(canvas_h),
        resizable=False,
        caption="pattix",
    )
    x, y = cfg.window_position
    window.set_location(int(x), int(y))
    return window


def _to_image_data(surface: RasterSurface) -> Any:
    # Pillow は上の行から並ぶので、負の pitch で pyglet（下から）へ渡す。
    data = surface.to_image().tobytes()
    return pyglet.image.ImageData(
        surface.width, surface.height, "RGB", data, pitch=-surface.width * 3
    )


def handle_key(driver: FrameDriver, symbol: int) -> bool:
    """キー入力を driver 操作へ変換する。処理した場合 True。

    - 1 / 2 / 3: パターン選択
    - SPACE: 再生/停止
    - R: rainbow 切替
    - UP / DOWN: 基準色相を ±10°
    """

    kind = _PATTERN_KEYS.get(int(symbol))
    if kind is not None:
        driver.select(kind)
        return True
    if symbol == key.SPACE:
        driver.toggle_running()
        return True
    if symbol == key.R:
        driver.set_color_mode(rainbow=not driver.color_mode.rainbow)
        return True
    if symbol == key.UP:
        driver.shift_hue(HUE_STEP_DEGREES)
        return True
    if symbol == key.DOWN:
        driver.shift_hue(-HUE_STEP_DEGREES)
        return True
    return False


def run_preview(
    cfg: RuntimeConfig | None = None,
    *,
    pattern: PatternKind | str = PatternKind.TREE,
    running: bool = True,
) -> None:
    """preview ウィンドウを開き、閉じられるまでループを回す。"""

    cfg = runtime_config() if cfg is None else cfg
    width, height = cfg.canvas_size
    surface = RasterSurface(width, height, background=cfg.render.background_color)
    driver = FrameDriver.from_config(surface, cfg)
    driver.select(pattern)
    if running:
        driver.toggle_running()

    window = create_preview_window(cfg)
    image: Any = None

    def on_draw() -> None:
        window.clear()
        if image is not None:
            image.blit(0, 0)

    def on_key_press(symbol: int, modifiers: int) -> Any:
        if symbol == key.ESCAPE:
            window.close()
            return pyglet.event.EVENT_HANDLED
        if handle_key(driver, symbol):
            return pyglet.event.EVENT_HANDLED
        return None

    def on_close() -> None:
        pyglet.app.exit()

    def update(dt: float) -> None:
        nonlocal image
        if driver.step() or image is None:
            image = _to_image_data(surface)

    window.push_handlers(on_draw=on_draw, on_key_press=on_key_press, on_close=on_close)

    fps = float(cfg.fps)
    pyglet.clock.schedule_interval(update, 1.0 / fps)
    _logger.info("preview を開始します: size=%dx%d fps=%.1f", width, height, fps)
    try:
        pyglet.app.run()
    finally:
        pyglet.clock.unschedule(update)
    _logger.info("preview を終了しました: frames=%d", driver.frames_rendered)


__all__ = ["HUE_STEP_DEGREES", "create_preview_window", "handle_key", "run_preview"]
