"""
どこで: `src/pattix/core/builtins.py`。
何を: 組み込みパターン（tree / spirograph / flow）の登録（registry 初期化）を単一入口へ集約する。
なぜ: import 副作用の分散をなくし、renderer / CLI のどちらから呼んでも同じ登録状態にするため。
"""

from __future__ import annotations

import importlib

_BUILTIN_PATTERN_MODULES: tuple[str, ...] = (
    "pattix.core.patterns.tree",
    "pattix.core.patterns.spirograph",
    "pattix.core.patterns.flow",
)

_BUILTIN_PATTERNS_REGISTERED = False


def ensure_builtin_patterns_registered() -> None:
    """組み込みパターンを registry に登録する（idempotent）。"""

    global _BUILTIN_PATTERNS_REGISTERED
    if _BUILTIN_PATTERNS_REGISTERED:
        return
    for module in _BUILTIN_PATTERN_MODULES:
        importlib.import_module(module)
    _BUILTIN_PATTERNS_REGISTERED = True


__all__ = ["ensure_builtin_patterns_registered"]
