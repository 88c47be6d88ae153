"""Budget progress snapshots: spend ratios, pace and month-end projections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Final, Iterable, Mapping, Optional, Union

from core.models import Budget, CategorySpend, PaceStatus, PeriodSpend, ProgressSummary
from core.money import ZERO, non_negative, to_money

logger = logging.getLogger(__name__)

__all__ = [
    "PACE_TOLERANCE",
    "WARNING_RATIO",
    "OVER_RATIO",
    "CategoryBudgetProgress",
    "BudgetProgress",
    "classify_pace",
    "build_category_progress",
    "build_budget_progress",
    "summarize_progress",
]

PACE_TOLERANCE: Final[float] = 0.10
WARNING_RATIO: Final[float] = 0.85
OVER_RATIO: Final[float] = 1.0

SpendInput = Union[Mapping[str, Any], Iterable[CategorySpend], None]


def _ratio(numerator: Decimal, denominator: Decimal) -> float:
    if denominator <= 0:
        return 0.0
    return float(numerator / denominator)


def classify_pace(
    spend_ratio: float,
    expected_ratio: float,
    tolerance: float = PACE_TOLERANCE,
) -> PaceStatus:
    """Compare actual spend against the calendar's fair share of the budget."""

    if spend_ratio >= OVER_RATIO:
        return PaceStatus.OVER
    if spend_ratio - expected_ratio > tolerance:
        return PaceStatus.BEHIND
    if expected_ratio - spend_ratio > tolerance:
        return PaceStatus.AHEAD
    return PaceStatus.ON_TRACK


@dataclass(frozen=True)
class CategoryBudgetProgress:
    category: str
    budget_amount: Decimal
    current_spend: Decimal
    locked: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "budget_amount", non_negative(self.budget_amount))
        object.__setattr__(self, "current_spend", to_money(self.current_spend))

    @property
    def spend_ratio(self) -> float:
        return _ratio(self.current_spend, self.budget_amount)

    @property
    def displayed_percent(self) -> int:
        if self.budget_amount <= 0:
            return 0
        percent = self.current_spend / self.budget_amount * 100
        return int(percent.to_integral_value(rounding=ROUND_HALF_UP))

    @property
    def is_over_budget(self) -> bool:
        return self.current_spend > self.budget_amount

    @property
    def is_over_displayed(self) -> bool:
        """Over budget as the user sees it: the rounded percent reads 100+."""

        return self.is_over_budget or self.displayed_percent >= 100

    @property
    def is_warning(self) -> bool:
        # A row that already reads 100% is reported as over, never as a warning.
        return WARNING_RATIO <= self.spend_ratio < OVER_RATIO and not self.is_over_displayed

    @property
    def over_amount(self) -> Decimal:
        return max(ZERO, self.current_spend - self.budget_amount)

    @property
    def remaining_amount(self) -> Decimal:
        return max(ZERO, self.budget_amount - self.current_spend)


@dataclass(frozen=True)
class BudgetProgress:
    """Read-only view of a budget against the spend recorded so far this period."""

    budget: Budget
    current_spend: Decimal
    days_elapsed: int
    days_in_month: int
    category_progress: tuple[CategoryBudgetProgress, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_spend", to_money(self.current_spend))
        object.__setattr__(self, "days_elapsed", max(0, int(self.days_elapsed)))
        object.__setattr__(self, "days_in_month", max(0, int(self.days_in_month)))
        object.__setattr__(self, "category_progress", tuple(self.category_progress))

    @property
    def monthly_amount(self) -> Decimal:
        return self.budget.monthly_amount

    @property
    def spend_ratio(self) -> float:
        return _ratio(self.current_spend, self.monthly_amount)

    @property
    def expected_spend_ratio(self) -> float:
        if self.days_in_month <= 0:
            return 0.0
        return self.days_elapsed / self.days_in_month

    @property
    def pace_status(self) -> PaceStatus:
        return classify_pace(self.spend_ratio, self.expected_spend_ratio)

    @property
    def remaining_budget(self) -> Decimal:
        return max(ZERO, self.monthly_amount - self.current_spend)

    @property
    def days_remaining(self) -> int:
        return max(0, self.days_in_month - self.days_elapsed)

    @property
    def daily_budget_remaining(self) -> Decimal:
        if self.days_remaining <= 0:
            return ZERO
        return to_money(self.remaining_budget / self.days_remaining)

    @property
    def projected_end_of_month(self) -> Decimal:
        # Linear extrapolation of the average daily rate so far.
        if self.days_elapsed <= 0:
            return self.current_spend
        return to_money(self.current_spend / self.days_elapsed * self.days_in_month)

    @property
    def projected_over_under(self) -> Decimal:
        return self.projected_end_of_month - self.monthly_amount

    @property
    def over_budget_categories(self) -> list[CategoryBudgetProgress]:
        return [row for row in self.category_progress if row.is_over_displayed]

    @property
    def warning_categories(self) -> list[CategoryBudgetProgress]:
        return [row for row in self.category_progress if row.is_warning]


def _spend_by_category(category_spend: SpendInput) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    if not category_spend:
        return totals
    if isinstance(category_spend, Mapping):
        items = ((str(k), v) for k, v in category_spend.items())
    else:
        items = ((str(row["category"]), row.get("spend")) for row in category_spend)
    for category, spend in items:
        totals[category] = totals.get(category, ZERO) + to_money(spend)
    return totals


def build_category_progress(
    budget: Budget,
    category_spend: SpendInput = None,
) -> tuple[CategoryBudgetProgress, ...]:
    """Pair each allocation with its spend; categories with no spend read as 0."""

    spend = _spend_by_category(category_spend)
    return tuple(
        CategoryBudgetProgress(
            category=allocation.category,
            budget_amount=allocation.amount,
            current_spend=spend.get(allocation.category, ZERO),
            locked=allocation.locked,
        )
        for allocation in budget.category_allocations
    )


def build_budget_progress(
    budget: Budget,
    period_spend: Optional[PeriodSpend] = None,
    category_spend: SpendInput = None,
) -> BudgetProgress:
    """Assemble a :class:`BudgetProgress` snapshot from store-supplied figures.

    A missing ``period_spend`` (or a missing ``total_spend`` inside it) is a
    valid empty period: the aggregate falls back to the per-category spend,
    and to zero when there is none.
    """

    period: Mapping[str, Any] = period_spend or {}
    spend = _spend_by_category(category_spend)

    if period.get("total_spend") is not None:
        current_spend = to_money(period["total_spend"])
    else:
        current_spend = sum(spend.values(), ZERO)
        if not period:
            logger.debug("No period spend data; treating current spend as %s", current_spend)

    return BudgetProgress(
        budget=budget,
        current_spend=current_spend,
        days_elapsed=int(period.get("days_elapsed") or 0),
        days_in_month=int(period.get("days_in_month") or 0),
        category_progress=build_category_progress(budget, spend),
    )


def summarize_progress(progress: BudgetProgress) -> ProgressSummary:
    """Flatten a progress snapshot into plain values for rendering."""

    return {
        "monthly_amount": float(progress.monthly_amount),
        "current_spend": float(progress.current_spend),
        "remaining_budget": float(progress.remaining_budget),
        "spend_ratio": progress.spend_ratio,
        "expected_spend_ratio": progress.expected_spend_ratio,
        "pace_status": progress.pace_status.value,
        "days_elapsed": progress.days_elapsed,
        "days_remaining": progress.days_remaining,
        "days_in_month": progress.days_in_month,
        "daily_budget_remaining": float(progress.daily_budget_remaining),
        "projected_end_of_month": float(progress.projected_end_of_month),
        "projected_over_under": float(progress.projected_over_under),
        "over_budget_categories": [row.category for row in progress.over_budget_categories],
        "warning_categories": [row.category for row in progress.warning_categories],
    }
