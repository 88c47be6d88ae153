"""Shared fixtures for the budget test-suite."""

from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.models import EditableAllocation  # noqa: E402
from core.registry import CategoryRegistry  # noqa: E402


def editable(category: str, original, amount=None, locked: bool = False) -> EditableAllocation:
    return EditableAllocation(
        category=category,
        amount=Decimal(str(original if amount is None else amount)),
        original_amount=Decimal(str(original)),
        locked=locked,
    )


@pytest.fixture()
def registry() -> CategoryRegistry:
    return CategoryRegistry.from_mapping(
        {
            "Fresh Food": ["Produce", "Meat", "Dairy", "Bakery"],
            "Home": ["Household", "Snacks"],
        }
    )


@pytest.fixture()
def grocery_rows() -> tuple[EditableAllocation, ...]:
    return (
        editable("Produce", 100),
        editable("Meat", 200),
        editable("Dairy", 200),
        editable("Bakery", 0),
    )


@pytest.fixture()
def make_row():
    return editable
