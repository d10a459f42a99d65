"""
どこで: `src/pattix/devtools/list_patterns.py`。
何を: 登録済みパターンとそのパラメータ（既定値・UI レンジ）を CLI 用に列挙する。
なぜ: config.yaml の `patterns.<name>` に書けるキーを手早く確認できるようにするため。
"""

from __future__ import annotations

import argparse
import sys

from pattix.core.builtins import ensure_builtin_patterns_registered
from pattix.core.pattern_registry import PatternEntry, pattern_registry


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m pattix list")
    p.add_argument(
        "--params",
        action="store_true",
        help="各パターンのパラメータ（既定値と UI レンジ）も表示する",
    )
    return p.parse_args(argv)


def _format_params(entry: PatternEntry) -> list[str]:
    lines: list[str] = []
    for name, value in entry.defaults().items():
        meta = entry.meta.get(name)
        if meta is None:
            lines.append(f"  {name} = {value!r}")
            continue
        lines.append(
            f"  {name} = {value!r} ({meta.kind}, ui_min={meta.ui_min!r}, ui_max={meta.ui_max!r})"
        )
    return lines


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    ensure_builtin_patterns_registered()

    for name in pattern_registry.names():
        print(name)
        if args.params:
            for line in _format_params(pattern_registry.get(name)):
                print(line)
    return 0


__all__ = ["main"]
