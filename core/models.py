"""Shared data model definitions for PlainSpend budgets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, TypedDict

from config import DEFAULT_ALERT_THRESHOLDS
from core.money import ZERO, money_sum, non_negative, to_money

__all__ = [
    "EDIT_TOLERANCE",
    "CategorySpend",
    "PeriodSpend",
    "ProgressSummary",
    "PaceStatus",
    "CategoryAllocation",
    "Budget",
    "EditableAllocation",
    "BalanceCheck",
]

# Half a currency unit: below this an amount change is rounding noise.
EDIT_TOLERANCE = Decimal("0.5")


class CategorySpend(TypedDict):
    category: str
    spend: float


class PeriodSpend(TypedDict):
    total_spend: float
    days_elapsed: int
    days_in_month: int


class ProgressSummary(TypedDict):
    monthly_amount: float
    current_spend: float
    remaining_budget: float
    spend_ratio: float
    expected_spend_ratio: float
    pace_status: str
    days_elapsed: int
    days_remaining: int
    days_in_month: int
    daily_budget_remaining: float
    projected_end_of_month: float
    projected_over_under: float
    over_budget_categories: list[str]
    warning_categories: list[str]


class PaceStatus(str, Enum):
    """Spending pace relative to the share of the month already elapsed."""

    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"
    OVER = "over"


@dataclass(frozen=True)
class CategoryAllocation:
    """One category's slice of the monthly budget."""

    category: str
    amount: Decimal = ZERO
    locked: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", non_negative(self.amount))

    def to_record(self) -> dict[str, Any]:
        return {"category": self.category, "amount": float(self.amount), "locked": self.locked}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CategoryAllocation":
        return cls(
            category=str(record["category"]),
            amount=to_money(record.get("amount")),
            locked=bool(record.get("locked", record.get("is_locked", False))),
        )


@dataclass(frozen=True)
class Budget:
    """The persisted monthly target and its optional per-category split.

    ``period`` is the ``YYYY-MM`` key the budget applies to; ``None`` means
    the caller has not bound it to a month yet.
    """

    monthly_amount: Decimal = ZERO
    category_allocations: tuple[CategoryAllocation, ...] = ()
    auto_renew: bool = True
    alert_thresholds: tuple[float, ...] = field(default=DEFAULT_ALERT_THRESHOLDS)
    period: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "monthly_amount", non_negative(self.monthly_amount))
        allocations = tuple(self.category_allocations)
        seen: set[str] = set()
        for allocation in allocations:
            if allocation.category in seen:
                raise ValueError(f"Duplicate category allocation: {allocation.category}")
            seen.add(allocation.category)
        object.__setattr__(self, "category_allocations", allocations)
        object.__setattr__(
            self, "alert_thresholds", tuple(float(t) for t in self.alert_thresholds)
        )

    @property
    def allocated_total(self) -> Decimal:
        return money_sum(a.amount for a in self.category_allocations)

    @property
    def has_category_budgets(self) -> bool:
        return any(a.amount > 0 for a in self.category_allocations)

    def allocation_for(self, category: str) -> CategoryAllocation | None:
        for allocation in self.category_allocations:
            if allocation.category == category:
                return allocation
        return None

    def with_allocations(self, allocations: Iterable[CategoryAllocation]) -> "Budget":
        return replace(self, category_allocations=tuple(allocations))

    def with_monthly_amount(self, amount: Any) -> "Budget":
        return replace(self, monthly_amount=to_money(amount))

    def for_period(self, period: str) -> "Budget":
        return replace(self, period=period)

    def to_record(self) -> dict[str, Any]:
        return {
            "monthly_amount": float(self.monthly_amount),
            "category_allocations": [a.to_record() for a in self.category_allocations],
            "auto_renew": self.auto_renew,
            "alert_thresholds": list(self.alert_thresholds),
            "period": self.period,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Budget":
        allocations = record.get("category_allocations") or []
        return cls(
            monthly_amount=to_money(record.get("monthly_amount")),
            category_allocations=tuple(CategoryAllocation.from_record(a) for a in allocations),
            auto_renew=bool(record.get("auto_renew", True)),
            alert_thresholds=tuple(record.get("alert_thresholds") or DEFAULT_ALERT_THRESHOLDS),
            period=record.get("period"),
        )


@dataclass(frozen=True)
class EditableAllocation:
    """Working copy of an allocation during an interactive edit session.

    ``original_amount`` is the amount when the session started. It is both
    the weight used when redistributing and the target of a reset.
    """

    category: str
    amount: Decimal = ZERO
    original_amount: Decimal = ZERO
    locked: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", non_negative(self.amount))
        object.__setattr__(self, "original_amount", non_negative(self.original_amount))

    @property
    def is_edited(self) -> bool:
        return abs(self.amount - self.original_amount) > EDIT_TOLERANCE or self.locked


@dataclass(frozen=True)
class BalanceCheck:
    """Whether the allocations add up to the target, within half a unit."""

    total_saved: Decimal
    target_total: Decimal
    difference: Decimal
    balanced: bool

    @property
    def is_over(self) -> bool:
        return not self.balanced and self.difference > 0

    @property
    def is_under(self) -> bool:
        return not self.balanced and self.difference < 0
