"""Budget screen controller: loads budgets and progress through the store.

The controller owns the screen-level state machine::

    idle -> loading -> no_budget | active(progress) | error(message)

``refresh`` only runs from ``active`` and moves back through ``loading``;
a failed refresh lands in ``error``, and deleting the budget lands in
``no_budget``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from core.allocation import finish_session, rebalance_to_total, start_session
from core.models import Budget, CategoryAllocation, EditableAllocation
from core.progress import BudgetProgress, build_budget_progress
from core.registry import CategoryRegistry
from core.store import BudgetStore, BudgetStoreError, NoBudgetSetError

logger = logging.getLogger(__name__)

__all__ = [
    "ScreenPhase",
    "BudgetScreenState",
    "BudgetController",
]


class ScreenPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    NO_BUDGET = "no_budget"
    ACTIVE = "active"
    ERROR = "error"


@dataclass(frozen=True)
class BudgetScreenState:
    phase: ScreenPhase = ScreenPhase.IDLE
    progress: BudgetProgress | None = None
    message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is ScreenPhase.LOADING

    @property
    def is_active(self) -> bool:
        return self.phase is ScreenPhase.ACTIVE

    @property
    def budget(self) -> Budget | None:
        return self.progress.budget if self.progress else None


class BudgetController:
    """Composes the store, the allocation engine and the progress calculator."""

    def __init__(self, store: BudgetStore, registry: CategoryRegistry) -> None:
        self.store = store
        self.registry = registry
        self.period: str | None = None
        self.state = BudgetScreenState()

    def _transition(self, state: BudgetScreenState) -> BudgetScreenState:
        logger.debug("Budget screen %s -> %s", self.state.phase.value, state.phase.value)
        self.state = state
        return state

    def _fetch_progress(self, period: str) -> BudgetProgress:
        self.store.roll_over(period)
        budget = self.store.fetch_budget(period)
        return build_budget_progress(
            budget,
            self.store.fetch_period_spend(period),
            self.store.fetch_category_spend(period),
        )

    def load(self, period: str) -> BudgetScreenState:
        self.period = period
        self._transition(BudgetScreenState(ScreenPhase.LOADING))
        try:
            progress = self._fetch_progress(period)
        except NoBudgetSetError:
            return self._transition(BudgetScreenState(ScreenPhase.NO_BUDGET))
        except BudgetStoreError as exc:
            logger.warning("Loading budget for %s failed: %s", period, exc)
            return self._transition(BudgetScreenState(ScreenPhase.ERROR, message=str(exc)))
        return self._transition(BudgetScreenState(ScreenPhase.ACTIVE, progress=progress))

    def refresh(self) -> BudgetScreenState:
        if not self.state.is_active or self.period is None:
            logger.debug("Refresh skipped in %s state", self.state.phase.value)
            return self.state
        return self.load(self.period)

    def _require_period(self) -> str:
        if self.period is None:
            raise BudgetStoreError("No period loaded")
        return self.period

    def create_budget(self, budget: Budget) -> BudgetScreenState:
        period = budget.period or self._require_period()
        self.store.save_budget(budget.for_period(period))
        return self.load(period)

    def delete(self) -> BudgetScreenState:
        period = self._require_period()
        try:
            self.store.delete_budget(period)
        except NoBudgetSetError:
            logger.debug("No budget to delete for %s", period)
        return self._transition(BudgetScreenState(ScreenPhase.NO_BUDGET))

    def begin_edit(self) -> tuple[EditableAllocation, ...]:
        """Open an allocation editing session for the loaded budget."""

        budget = self.state.budget
        allocations: Iterable[CategoryAllocation] = budget.category_allocations if budget else ()
        return start_session(allocations, self.registry)

    def save_allocations(self, allocations: Iterable[EditableAllocation]) -> BudgetScreenState:
        period = self._require_period()
        self.store.update_allocations(period, finish_session(allocations))
        return self.load(period)

    def update_monthly_amount(self, amount: Any) -> BudgetScreenState:
        """Change the monthly total, refitting category allocations to it."""

        period = self._require_period()
        budget = self.store.fetch_budget(period)
        updated = budget.with_monthly_amount(amount)
        if budget.category_allocations:
            updated = updated.with_allocations(
                rebalance_to_total(budget.category_allocations, amount)
            )
        self.store.save_budget(updated)
        return self.load(period)

    def set_auto_renew(self, enabled: bool) -> BudgetScreenState:
        period = self._require_period()
        self.store.set_auto_renew(period, enabled)
        return self.load(period)
