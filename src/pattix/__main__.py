# どこで: `src/pattix/__main__.py`。
# 何を: `python -m pattix ...` の CLI エントリポイントを提供する。
# なぜ: preview / ベンチ / 一覧 / PNG 書き出しを短い導線で実行できるようにするため。

from __future__ import annotations

import argparse
import logging
import sys


def _strip_separator(rest: list[str]) -> list[str]:
    out = list(rest)
    if out and out[0] == "--":
        out = out[1:]
    return out


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="python -m pattix")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="ログレベル（既定: WARNING）",
    )
    p.add_argument(
        "--config",
        default=None,
        help="config.yaml のパス（指定した場合は探索より優先）",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    preview = sub.add_parser("preview", help="pyglet ウィンドウでパターンをアニメーション表示する")
    preview.add_argument(
        "--pattern",
        default="tree",
        choices=("tree", "spirograph", "flow"),
        help="起動時のパターン（既定: tree）",
    )
    preview.add_argument("--paused", action="store_true", help="停止状態で起動する")

    sub.add_parser("bench", help="パターンごとの ms/frame を計測する", add_help=False)
    sub.add_parser("list", help="登録済みパターンを一覧表示する", add_help=False)
    sub.add_parser("export", help="パターンを PNG に書き出す", add_help=False)

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config is not None:
        from pattix.core.runtime_config import set_config_path

        set_config_path(args.config)

    if args.cmd == "preview":
        if rest:
            p.error(f"unrecognized arguments: {' '.join(rest)}")
        from pattix.interactive.runtime.preview import run_preview

        run_preview(pattern=args.pattern, running=not args.paused)
        return 0

    if args.cmd == "bench":
        from pattix.devtools import benchmark

        return int(benchmark.main(_strip_separator(rest)))

    if args.cmd == "list":
        from pattix.devtools import list_patterns

        return int(list_patterns.main(_strip_separator(rest)))

    if args.cmd == "export":
        from pattix.devtools import export_frame

        return int(export_frame.main(_strip_separator(rest)))

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
