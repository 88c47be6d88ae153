"""Budget storage boundary: the protocol callers depend on plus an in-memory store."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Protocol

import pandas as pd

from analytics.period import aggregate_period_spend, previous_period_key, resolve_target_period
from core.models import Budget, CategoryAllocation, CategorySpend, PeriodSpend
from core.money import to_money

logger = logging.getLogger(__name__)

__all__ = [
    "BudgetStoreError",
    "NoBudgetSetError",
    "BudgetStore",
    "InMemoryBudgetStore",
]


class BudgetStoreError(RuntimeError):
    """Raised when the budget store cannot complete a request."""


class NoBudgetSetError(BudgetStoreError):
    """Raised when no budget exists for the requested period."""


class BudgetStore(Protocol):
    def fetch_budget(self, period: str) -> Budget: ...

    def save_budget(self, budget: Budget) -> Budget: ...

    def update_allocations(self, period: str, allocations: Iterable[CategoryAllocation]) -> Budget: ...

    def update_monthly_amount(self, period: str, amount: Any) -> Budget: ...

    def set_auto_renew(self, period: str, enabled: bool) -> Budget: ...

    def delete_budget(self, period: str) -> None: ...

    def roll_over(self, period: str) -> Budget | None: ...

    def fetch_period_spend(self, period: str) -> PeriodSpend | None: ...

    def fetch_category_spend(self, period: str) -> list[CategorySpend]: ...


class InMemoryBudgetStore:
    """Dict-backed :class:`BudgetStore` keyed by ``YYYY-MM`` period."""

    def __init__(self) -> None:
        self._budgets: dict[str, Budget] = {}
        self._deleted: set[str] = set()
        self._period_spend: dict[str, PeriodSpend] = {}
        self._category_spend: dict[str, list[CategorySpend]] = {}

    def _require(self, period: str) -> Budget:
        budget = self._budgets.get(period)
        if budget is None:
            raise NoBudgetSetError(f"No budget set for {period}")
        return budget

    def fetch_budget(self, period: str) -> Budget:
        return self._require(period)

    def save_budget(self, budget: Budget) -> Budget:
        if not budget.period:
            raise BudgetStoreError("Budget must be bound to a period before saving")
        self._budgets[budget.period] = budget
        self._deleted.discard(budget.period)
        logger.info("Saved budget for %s (%s)", budget.period, budget.monthly_amount)
        return budget

    def update_allocations(self, period: str, allocations: Iterable[CategoryAllocation]) -> Budget:
        return self.save_budget(self._require(period).with_allocations(allocations))

    def update_monthly_amount(self, period: str, amount: Any) -> Budget:
        return self.save_budget(self._require(period).with_monthly_amount(to_money(amount)))

    def set_auto_renew(self, period: str, enabled: bool) -> Budget:
        return self.save_budget(replace(self._require(period), auto_renew=enabled))

    def delete_budget(self, period: str) -> None:
        self._require(period)
        del self._budgets[period]
        self._deleted.add(period)
        self._period_spend.pop(period, None)
        self._category_spend.pop(period, None)
        logger.info("Deleted budget for %s", period)

    def was_deleted(self, period: str) -> bool:
        return period in self._deleted

    def roll_over(self, period: str) -> Budget | None:
        """Carry last month's auto-renewing budget into ``period`` if it has none.

        A period whose budget the user deleted is never refilled.
        """

        if period in self._budgets:
            return self._budgets[period]
        if self.was_deleted(period):
            return None
        previous = previous_period_key(period)
        source = self._budgets.get(previous)
        if source is None or not source.auto_renew:
            return None
        logger.info("Rolling budget over from %s to %s", previous, period)
        return self.save_budget(source.for_period(period))

    def record_spend(
        self,
        period: str,
        period_spend: PeriodSpend,
        category_spend: Iterable[CategorySpend] | Mapping[str, Any] = (),
    ) -> None:
        self._period_spend[period] = period_spend
        if isinstance(category_spend, Mapping):
            rows: list[CategorySpend] = [
                {"category": str(k), "spend": float(v)} for k, v in category_spend.items()
            ]
        else:
            rows = list(category_spend)
        self._category_spend[period] = rows

    def load_transactions(self, transactions: pd.DataFrame, period: str, today: date) -> None:
        """Record spend for ``period`` aggregated from a transactions frame."""

        period_spend, category_spend = aggregate_period_spend(
            transactions, resolve_target_period(period), today
        )
        self.record_spend(period, period_spend, category_spend)

    def fetch_period_spend(self, period: str) -> PeriodSpend | None:
        return self._period_spend.get(period)

    def fetch_category_spend(self, period: str) -> list[CategorySpend]:
        return list(self._category_spend.get(period, []))
