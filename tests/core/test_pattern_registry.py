from __future__ import annotations

from dataclasses import dataclass

import pytest

from pattix.core.builtins import ensure_builtin_patterns_registered
from pattix.core.parameters.meta import ParamMeta
from pattix.core.parameters.patterns import TreeParameters, validate_tree_parameters
from pattix.core.pattern_registry import PatternRegistry, pattern, pattern_registry


def test_builtin_patterns_are_registered() -> None:
    ensure_builtin_patterns_registered()
    ensure_builtin_patterns_registered()

    assert pattern_registry.names() == ("flow", "spirograph", "tree")
    entry = pattern_registry["tree"]
    assert entry.params_type is TreeParameters
    assert entry.validate is validate_tree_parameters
    assert entry.defaults()["depth"] == 9
    assert set(entry.meta) == set(entry.defaults())


def test_registry_get_raises_for_unknown_name() -> None:
    registry = PatternRegistry()

    assert "tree" not in registry
    with pytest.raises(KeyError):
        registry.get("tree")


def test_pattern_decorator_rejects_non_dataclass_params_type() -> None:
    with pytest.raises(TypeError):
        pattern("bad", params_type=dict, meta={}, validate=lambda p: p)


def test_pattern_decorator_rejects_meta_for_unknown_field() -> None:
    @dataclass(frozen=True)
    class _P:
        size: float = 1.0

    with pytest.raises(ValueError):
        pattern("bad", params_type=_P, meta={"colour": ParamMeta(kind="float")}, validate=lambda p: p)


def test_duplicate_registration_can_be_refused() -> None:
    ensure_builtin_patterns_registered()
    registry = PatternRegistry()
    entry = pattern_registry["tree"]

    registry._register(entry)
    with pytest.raises(ValueError):
        registry._register(entry, overwrite=False)
