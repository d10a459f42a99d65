"""
どこで: `src/pattix/devtools/export_frame.py`。
何を: `python -m pattix export ...` で指定パターンを headless で描き、PNG に書き出す。
なぜ: 対話ウィンドウ無しでパラメータ違いの画像を並べて比較できるようにするため。
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from pattix.core.animation import PatternKind
from pattix.core.runtime_config import runtime_config, set_config_path
from pattix.interactive.runtime.frame_driver import FrameDriver
from pattix.raster.pillow_surface import RasterSurface


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m pattix export")
    p.add_argument(
        "--pattern",
        default=PatternKind.TREE.value,
        choices=[k.value for k in PatternKind],
        help="描くパターン（既定: tree）",
    )
    p.add_argument(
        "--frames",
        type=int,
        default=1,
        help="アニメーションを進めるフレーム数（1 なら初期状態をそのまま描く）",
    )
    p.add_argument("--out", required=True, help="出力 PNG パス")
    p.add_argument("--seed", type=int, default=None, help="flow の乱数 seed（既定: config の flow.seed）")
    p.add_argument(
        "--config",
        default=None,
        help="config.yaml のパス（指定した場合は探索より優先）",
    )

    args = p.parse_args(argv)
    if args.frames <= 0:
        p.error("--frames は正の整数である必要があります")
    return args


def export_png(
    path: Path,
    *,
    pattern: PatternKind | str,
    frames: int = 1,
    seed: int | None = None,
) -> Path:
    """パターンを `frames` フレーム分描き、最後のフレームを PNG として保存する。"""

    cfg = runtime_config()
    width, height = cfg.canvas_size
    surface = RasterSurface(width, height, background=cfg.render.background_color)
    driver = FrameDriver(
        surface,
        tree=cfg.tree,
        spirograph=cfg.spirograph,
        flow=cfg.flow,
        color_mode=cfg.color_mode,
        settings=cfg.render,
        rng=np.random.default_rng(cfg.flow_seed if seed is None else int(seed)),
        active_pattern=pattern,
    )

    driver.step()
    if int(frames) > 1:
        driver.toggle_running()
        for _ in range(int(frames) - 1):
            driver.step()

    path.parent.mkdir(parents=True, exist_ok=True)
    surface.to_image().save(path, format="PNG")
    return path


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.config is not None:
        set_config_path(args.config)

    out = export_png(
        Path(str(args.out)),
        pattern=args.pattern,
        frames=int(args.frames),
        seed=args.seed,
    )
    print(f"Saved PNG: {out} (pattern={args.pattern}, frames={int(args.frames)})")  # noqa: T201
    return 0


__all__ = ["export_png", "main"]
