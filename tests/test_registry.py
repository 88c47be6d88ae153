"""Tests for the category registry lookups."""

from __future__ import annotations

from core.registry import DEFAULT_REGISTRY, CategoryRegistry


def test_categories_are_ordered_and_deduplicated():
    registry = CategoryRegistry.from_mapping({"A": ["x", "y"], "B": ["y", "z"]})

    assert registry.categories == ("x", "y", "z")
    assert registry.index_of("z") == 2
    assert registry.index_of("missing") is None
    assert registry.group_of("y") == "A"
    assert "z" in registry and "missing" not in registry


def test_ordered_categories_are_built_once(registry):
    first = registry.categories

    assert registry.categories is first
    assert [registry.index_of(c) for c in first] == list(range(len(first)))


def test_cached_lookups_do_not_affect_equality():
    left = CategoryRegistry.from_mapping({"A": ["x"]})
    right = CategoryRegistry.from_mapping({"A": ["x"]})
    left.index_of("x")

    assert left == right
    assert hash(left) == hash(right)


def test_default_registry_groups():
    assert DEFAULT_REGISTRY.group_names[0] == "Fresh Food"
    assert DEFAULT_REGISTRY.group_of("Household") == "Home & Personal"
