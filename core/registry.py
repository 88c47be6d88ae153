"""Canonical category universe used to seed and order budget editors."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, Mapping

__all__ = [
    "CategoryGroup",
    "CategoryRegistry",
    "DEFAULT_REGISTRY",
]


@dataclass(frozen=True)
class CategoryGroup:
    name: str
    categories: tuple[str, ...]


@dataclass(frozen=True)
class CategoryRegistry:
    """Read-only, ordered category hierarchy.

    The registry never computes anything about budgets; it only answers
    "which categories exist", "in what order", and "which group owns this".
    """

    groups: tuple[CategoryGroup, ...] = ()

    @cached_property
    def categories(self) -> tuple[str, ...]:
        ordered: list[str] = []
        seen: set[str] = set()
        for group in self.groups:
            for category in group.categories:
                if category not in seen:
                    seen.add(category)
                    ordered.append(category)
        return tuple(ordered)

    @cached_property
    def _positions(self) -> dict[str, int]:
        return {category: i for i, category in enumerate(self.categories)}

    @property
    def group_names(self) -> tuple[str, ...]:
        return tuple(group.name for group in self.groups)

    def __contains__(self, category: object) -> bool:
        return category in self._positions

    def index_of(self, category: str) -> int | None:
        return self._positions.get(category)

    def group_of(self, category: str) -> str | None:
        for group in self.groups:
            if category in group.categories:
                return group.name
        return None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "CategoryRegistry":
        """Build a registry from ``{group: [categories...]}`` preserving order."""

        return cls(
            groups=tuple(
                CategoryGroup(name=str(name), categories=tuple(str(c) for c in categories))
                for name, categories in mapping.items()
            )
        )


DEFAULT_REGISTRY = CategoryRegistry.from_mapping(
    {
        "Fresh Food": ["Fresh Produce", "Meat & Fish", "Dairy & Eggs", "Bakery"],
        "Pantry": ["Pantry Staples", "Frozen", "Snacks & Sweets"],
        "Drinks": ["Drinks (Soft/Soda)", "Drinks (Alcohol)", "Coffee & Tea"],
        "Home & Personal": ["Household", "Personal Care", "Baby & Kids", "Pet Supplies"],
    }
)
