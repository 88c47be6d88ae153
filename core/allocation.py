"""Category allocation editing: lock-aware proportional redistribution.

Every function here is pure. It takes the current working set of
:class:`~core.models.EditableAllocation` rows and returns a new tuple; nothing
is mutated in place, so the same inputs always give the same result and the
functions can be re-run on every keystroke of an interactive editor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Iterable, Sequence, Union

from core.models import EDIT_TOLERANCE, BalanceCheck, CategoryAllocation, EditableAllocation
from core.money import ZERO, money_sum, non_negative, split_proportionally, to_money
from core.registry import CategoryRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "SetAmount",
    "Remove",
    "Reset",
    "ResetAll",
    "AllocationAction",
    "redistribute",
    "set_amount",
    "remove",
    "reset",
    "reset_all",
    "apply_action",
    "balance_check",
    "has_edits",
    "start_session",
    "finish_session",
    "rebalance_to_total",
]

Allocations = tuple[EditableAllocation, ...]


@dataclass(frozen=True)
class SetAmount:
    index: int
    amount: Any


@dataclass(frozen=True)
class Remove:
    index: int


@dataclass(frozen=True)
class Reset:
    index: int


@dataclass(frozen=True)
class ResetAll:
    pass


AllocationAction = Union[SetAmount, Remove, Reset, ResetAll]


def _valid_index(allocations: Sequence[EditableAllocation], index: int) -> bool:
    if 0 <= index < len(allocations):
        return True
    logger.warning("Ignoring allocation edit for out-of-range index %s (size %d)", index, len(allocations))
    return False


def redistribute(allocations: Sequence[EditableAllocation], target_total: Any) -> Allocations:
    """Spread what the locked rows leave of ``target_total`` over the unlocked rows.

    Each unlocked row receives a share proportional to its
    ``original_amount``. The working set is returned unchanged when there is
    nothing to distribute (no unlocked rows, locks already use up the target)
    or no basis to distribute it on (every unlocked original is zero).
    """

    rows = tuple(allocations)
    locked_total = money_sum(a.amount for a in rows if a.locked)
    remaining = to_money(target_total) - locked_total

    unlocked = [i for i, a in enumerate(rows) if not a.locked]
    if not unlocked or remaining <= 0:
        return rows

    weights = [rows[i].original_amount for i in unlocked]
    if sum(weights, ZERO) <= 0:
        logger.debug("No redistribution basis: all %d unlocked originals are zero", len(unlocked))
        return rows

    shares = split_proportionally(remaining, weights)
    updated = list(rows)
    for i, share in zip(unlocked, shares):
        updated[i] = replace(rows[i], amount=share)
    return tuple(updated)


def set_amount(
    allocations: Sequence[EditableAllocation],
    index: int,
    new_amount: Any,
    target_total: Any,
) -> Allocations:
    """Pin row ``index`` at ``new_amount`` (locking it) and rebalance the rest."""

    rows = tuple(allocations)
    if not _valid_index(rows, index):
        return rows
    amount = to_money(new_amount)
    if amount < 0:
        logger.warning("Clamping negative amount %s for %s to 0", amount, rows[index].category)
    updated = list(rows)
    updated[index] = replace(rows[index], amount=non_negative(amount), locked=True)
    return redistribute(updated, target_total)


def remove(allocations: Sequence[EditableAllocation], index: int, target_total: Any) -> Allocations:
    """Zero out row ``index``; it stays in the set as a locked zero row."""

    return set_amount(allocations, index, ZERO, target_total)


def reset(allocations: Sequence[EditableAllocation], index: int, target_total: Any) -> Allocations:
    rows = tuple(allocations)
    if not _valid_index(rows, index):
        return rows
    updated = list(rows)
    updated[index] = replace(rows[index], amount=rows[index].original_amount, locked=False)
    return redistribute(updated, target_total)


def reset_all(allocations: Sequence[EditableAllocation]) -> Allocations:
    """Restore every row to its original amount and clear every lock.

    No redistribution pass runs; if the originals do not add up to the
    target the imbalance shows up in :func:`balance_check`.
    """

    return tuple(replace(a, amount=a.original_amount, locked=False) for a in allocations)


def apply_action(
    allocations: Sequence[EditableAllocation],
    action: AllocationAction,
    target_total: Any,
) -> Allocations:
    """Reducer entry point: ``(working set, action) -> working set``."""

    if isinstance(action, SetAmount):
        return set_amount(allocations, action.index, action.amount, target_total)
    if isinstance(action, Remove):
        return remove(allocations, action.index, target_total)
    if isinstance(action, Reset):
        return reset(allocations, action.index, target_total)
    if isinstance(action, ResetAll):
        return reset_all(allocations)
    logger.warning("Ignoring unknown allocation action %r", action)
    return tuple(allocations)


def balance_check(allocations: Iterable[EditableAllocation], target_total: Any) -> BalanceCheck:
    total_saved = money_sum(a.amount for a in allocations)
    target = to_money(target_total)
    difference = total_saved - target
    return BalanceCheck(
        total_saved=total_saved,
        target_total=target,
        difference=difference,
        balanced=abs(difference) < EDIT_TOLERANCE,
    )


def has_edits(allocations: Iterable[EditableAllocation]) -> bool:
    return any(a.is_edited for a in allocations)


def _display_key(registry: CategoryRegistry):
    def key(row: EditableAllocation) -> tuple:
        position = registry.index_of(row.category)
        registry_rank = (0, position, "") if position is not None else (1, 0, row.category)
        if row.original_amount > 0:
            return (0, -row.original_amount, registry_rank)
        return (1, ZERO, registry_rank)

    return key


def start_session(
    allocations: Iterable[CategoryAllocation],
    registry: CategoryRegistry,
) -> Allocations:
    """Open an edit session over a budget's persisted allocations.

    Every registry category missing from ``allocations`` is added as a zero
    row so the whole category universe can be edited. Rows are ordered once,
    here: budgeted rows by original amount (largest first), then zero rows in
    registry order. Locks are session-scoped and start cleared.
    """

    rows = [
        EditableAllocation(
            category=a.category,
            amount=a.amount,
            original_amount=a.amount,
            locked=False,
        )
        for a in allocations
    ]
    present = {row.category for row in rows}
    for category in registry.categories:
        if category not in present:
            rows.append(EditableAllocation(category=category))

    rows.sort(key=_display_key(registry))
    logger.debug("Started allocation session with %d rows", len(rows))
    return tuple(rows)


def finish_session(allocations: Iterable[EditableAllocation]) -> tuple[CategoryAllocation, ...]:
    """Convert the working set back into persistable allocations.

    Rows with money on them are kept. A locked zero row was removed on
    purpose and is kept as an explicit zero; unlocked zero rows were never
    budgeted and are dropped.
    """

    return tuple(
        CategoryAllocation(category=a.category, amount=a.amount, locked=a.locked)
        for a in allocations
        if a.amount > 0 or a.locked
    )


def rebalance_to_total(
    allocations: Sequence[CategoryAllocation],
    new_total: Any,
) -> tuple[CategoryAllocation, ...]:
    """Fit persisted allocations to a new monthly total.

    Locked rows keep their amounts. Whatever is left (never below zero) is
    shared among the unlocked rows in proportion to their current amounts,
    or equally when they are all zero.
    """

    rows = tuple(allocations)
    if not rows:
        return rows

    locked_total = money_sum(a.amount for a in rows if a.locked)
    remaining = max(ZERO, to_money(new_total) - locked_total)
    unlocked = [i for i, a in enumerate(rows) if not a.locked]
    if not unlocked:
        return rows

    weights = [rows[i].amount for i in unlocked]
    if sum(weights, ZERO) <= 0:
        weights = [Decimal(1)] * len(unlocked)

    shares = split_proportionally(remaining, weights)
    updated = list(rows)
    for i, share in zip(unlocked, shares):
        updated[i] = replace(rows[i], amount=share)
    return tuple(updated)
