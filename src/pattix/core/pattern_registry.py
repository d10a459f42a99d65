# src/pattix/core/pattern_registry.py
# パターン名（tree / spirograph / flow）に対応する generator 関数のレジストリ。
# orchestrator がパターン名から generator とパラメータ型を引けるようにする。

from __future__ import annotations

import dataclasses
from collections.abc import ItemsView, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pattix.core.parameters.meta import ParamMeta

GeneratorFunc = Callable[..., None]
"""``generate(surface, width, height, params, color_mode, *, settings, rng) -> None``。"""


@dataclass(frozen=True, slots=True)
class PatternEntry:
    """登録済みパターン 1 件分の情報。"""

    name: str
    generate: GeneratorFunc
    params_type: type
    meta: dict[str, ParamMeta]
    validate: Callable[[Any], Any]

    def defaults(self) -> dict[str, Any]:
        """パラメータ型の既定値を {field: value} で返す。"""
        inst = self.params_type()
        return {f.name: getattr(inst, f.name) for f in dataclasses.fields(inst)}


class PatternRegistry:
    """パターン名と generator を対応付けるレジストリ。

    Notes
    -----
    登録は `@pattern` デコレータ経由に統一する。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, PatternEntry] = {}

    def _register(self, entry: PatternEntry, *, overwrite: bool = True) -> None:
        if not overwrite and entry.name in self._items:
            raise ValueError(f"pattern '{entry.name}' は既に登録されている")
        self._items[entry.name] = entry

    def get(self, name: str) -> PatternEntry:
        """パターン名に対応するエントリを取得する。

        Raises
        ------
        KeyError
            未登録のパターン名が指定された場合。
        """
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> PatternEntry:
        return self.get(name)

    def items(self) -> ItemsView[str, PatternEntry]:
        """登録済みエントリの (name, entry) ビューを返す。"""
        return self._items.items()

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._items))


pattern_registry = PatternRegistry()
"""グローバルな pattern レジストリインスタンス。"""


def pattern(
    name: str,
    *,
    params_type: type,
    meta: Mapping[str, ParamMeta],
    validate: Callable[[Any], Any],
    overwrite: bool = True,
) -> Callable[[GeneratorFunc], GeneratorFunc]:
    """グローバル pattern レジストリ用デコレータ。

    Parameters
    ----------
    name : str
        パターン名（`PatternKind.value` と一致させる）。
    params_type : type
        generator が受け取るパラメータレコードの dataclass 型。
    meta : Mapping[str, ParamMeta]
        フィールドごとの UI メタ情報。キーは `params_type` のフィールドに限る。
    validate : Callable
        パラメータレコードの検証関数（不正なら ValueError）。

    Examples
    --------
    @pattern("tree", params_type=TreeParameters, meta=tree_meta, validate=validate_tree_parameters)
    def generate(surface, width, height, params, color_mode, *, settings=None, rng=None):
        ...
    """

    if not dataclasses.is_dataclass(params_type):
        raise TypeError(f"pattern '{name}' の params_type は dataclass である必要がある: {params_type!r}")
    field_names = {f.name for f in dataclasses.fields(params_type)}
    unknown = [k for k in meta if k not in field_names]
    if unknown:
        raise ValueError(f"pattern '{name}' の meta 引数がフィールドに存在しない: {unknown!r}")

    def decorator(f: GeneratorFunc) -> GeneratorFunc:
        pattern_registry._register(
            PatternEntry(
                name=str(name),
                generate=f,
                params_type=params_type,
                meta=dict(meta),
                validate=validate,
            ),
            overwrite=overwrite,
        )
        return f

    return decorator


__all__ = ["GeneratorFunc", "PatternEntry", "PatternRegistry", "pattern", "pattern_registry"]
