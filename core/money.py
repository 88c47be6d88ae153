"""Decimal currency helpers shared by the allocation and progress code."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Final, Sequence

__all__ = [
    "CENT",
    "ZERO",
    "to_money",
    "non_negative",
    "money_sum",
    "split_proportionally",
]

CENT: Final[Decimal] = Decimal("0.01")
ZERO: Final[Decimal] = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Return ``value`` as a Decimal rounded to whole cents.

    Floats go through ``str`` first so ``0.1`` becomes ``Decimal("0.10")``
    rather than its binary expansion. ``None`` and unparsable input map to 0.
    """

    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def non_negative(value: Any) -> Decimal:
    """Return ``value`` as money, clamped at zero."""

    return max(ZERO, to_money(value))


def money_sum(values) -> Decimal:
    return sum((to_money(v) for v in values), ZERO)


def split_proportionally(total: Decimal, weights: Sequence[Decimal]) -> list[Decimal]:
    """Apportion ``total`` across ``weights`` so the parts sum to ``total`` exactly.

    Uses the largest-remainder method on whole cents: every share is floored,
    then leftover cents go to the largest fractional remainders (ties broken
    by larger weight, then by position). Weights must be non-negative with a
    positive sum; otherwise every part is zero.
    """

    total = to_money(total)
    weight_sum = sum(weights, Decimal(0))
    if total <= 0 or weight_sum <= 0:
        return [ZERO for _ in weights]

    total_cents = int(total / CENT)
    raw = [Decimal(total_cents) * w / weight_sum for w in weights]
    floors = [int(r.to_integral_value(rounding=ROUND_DOWN)) for r in raw]
    leftover = total_cents - sum(floors)

    order = sorted(
        range(len(weights)),
        key=lambda i: (-(raw[i] - floors[i]), -weights[i], i),
    )
    for i in order[:leftover]:
        floors[i] += 1

    return [(Decimal(cents) * CENT).quantize(CENT) for cents in floors]
