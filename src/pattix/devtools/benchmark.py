"""
どこで: `src/pattix/devtools/benchmark.py`。
何を: パターンごとに FrameDriver をヘッドレス（RasterSurface）で N フレーム回し、ms/frame を計測する。
なぜ: どのパターン・どのパラメータが重いかを、ウィンドウ無しで比較できるようにするため。

入出力と副作用:
- 標準出力: パターンごとの要約行（`--json` 指定時は JSON）
- 初回フレームは numba の JIT コンパイルを含むため、`--warmup` 分は集計から除く
"""

from __future__ import annotations

import argparse
import gc
import json
import platform
import statistics
import sys
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

import numpy as np

from pattix.core.animation import PatternKind
from pattix.core.runtime_config import runtime_config, set_config_path
from pattix.interactive.runtime.frame_driver import FrameDriver
from pattix.raster.pillow_surface import RasterSurface


@dataclass(frozen=True, slots=True)
class _BenchStats:
    """計測結果（ns の列）を ms 単位で要約した統計量。"""

    mean_ms: float
    stdev_ms: float
    min_ms: float
    max_ms: float
    n: int


def _summarize(samples_ns: list[int]) -> _BenchStats:
    ms = [float(s) / 1e6 for s in samples_ns]
    return _BenchStats(
        mean_ms=float(statistics.fmean(ms)),
        stdev_ms=float(statistics.stdev(ms)) if len(ms) >= 2 else 0.0,
        min_ms=float(min(ms)),
        max_ms=float(max(ms)),
        n=len(ms),
    )


def _parse_patterns(text: str | None) -> list[PatternKind]:
    if not text:
        return list(PatternKind)
    out: list[PatternKind] = []
    for s in str(text).split(","):
        name = s.strip()
        if not name:
            continue
        try:
            out.append(PatternKind(name))
        except ValueError as exc:
            raise ValueError(f"未知のパターン名です: got={name!r}") from exc
    return out


def bench_pattern(
    kind: PatternKind,
    *,
    width: int,
    height: int,
    frames: int,
    warmup: int,
    seed: int,
    disable_gc: bool = False,
) -> _BenchStats:
    """1 パターンを `warmup + frames` フレーム回し、後半 `frames` 件の統計を返す。"""

    cfg = runtime_config()
    surface = RasterSurface(width, height, background=cfg.render.background_color)
    driver = FrameDriver(
        surface,
        tree=cfg.tree,
        spirograph=cfg.spirograph,
        flow=cfg.flow,
        color_mode=cfg.color_mode,
        settings=cfg.render,
        rng=np.random.default_rng(int(seed)),
        active_pattern=kind,
        running=True,
    )

    for _ in range(int(warmup)):
        driver.step()

    samples: list[int] = []
    gc_was_enabled = gc.isenabled()
    if disable_gc:
        gc.disable()
    try:
        for _ in range(int(frames)):
            t0 = time.perf_counter_ns()
            driver.step()
            samples.append(time.perf_counter_ns() - t0)
    finally:
        if disable_gc and gc_was_enabled:
            gc.enable()
    return _summarize(samples)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m pattix bench")
    p.add_argument("--frames", type=int, default=30, help="計測フレーム数（既定: 30）")
    p.add_argument("--warmup", type=int, default=2, help="集計から除く先頭フレーム数（既定: 2）")
    p.add_argument(
        "--patterns",
        default=None,
        help="計測するパターン（カンマ区切り、既定: 全パターン）",
    )
    p.add_argument(
        "--size",
        nargs=2,
        type=int,
        default=None,
        metavar=("W", "H"),
        help="描画面サイズ（既定: config の canvas.size）",
    )
    p.add_argument("--seed", type=int, default=0, help="flow の乱数 seed（既定: 0）")
    p.add_argument("--disable-gc", action="store_true", help="計測中は gc を止める")
    p.add_argument("--json", action="store_true", help="結果を JSON で標準出力へ書く")
    p.add_argument(
        "--config",
        default=None,
        help="config.yaml のパス（指定した場合は探索より優先）",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """ベンチマーク CLI のエントリポイント。

    Returns
    -------
    int
        終了コード（0: 成功、2: 入力不備などで実行不可）。
    """

    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.frames <= 0 or args.warmup < 0:
        print("--frames は正、--warmup は 0 以上である必要があります。")  # noqa: T201
        return 2
    try:
        patterns = _parse_patterns(args.patterns)
    except ValueError as exc:
        print(str(exc))  # noqa: T201
        return 2
    if not patterns:
        print("パターンが 0 件です。--patterns を確認してください。")  # noqa: T201
        return 2

    if args.config is not None:
        set_config_path(args.config)
    cfg = runtime_config()
    width, height = cfg.canvas_size if args.size is None else (int(args.size[0]), int(args.size[1]))

    results: dict[str, Any] = {}
    for kind in patterns:
        stats = bench_pattern(
            kind,
            width=width,
            height=height,
            frames=int(args.frames),
            warmup=int(args.warmup),
            seed=int(args.seed),
            disable_gc=bool(args.disable_gc),
        )
        results[kind.value] = asdict(stats)
        if not args.json:
            print(  # noqa: T201
                f"{kind.value:<11} {stats.mean_ms:8.2f} ms/frame"
                f" (stdev={stats.stdev_ms:.2f} min={stats.min_ms:.2f} max={stats.max_ms:.2f} n={stats.n})"
            )

    if args.json:
        payload = {
            "meta": {
                "created_at": datetime.now().isoformat(timespec="seconds"),
                "python": sys.version.replace("\n", " "),
                "platform": platform.platform(),
                "size": [width, height],
                "frames": int(args.frames),
                "warmup": int(args.warmup),
                "seed": int(args.seed),
            },
            "patterns": results,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))  # noqa: T201
    return 0


__all__ = ["bench_pattern", "main"]
