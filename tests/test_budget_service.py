"""Tests for the budget screen controller, the in-memory store and settings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from config.settings import Settings, configure_logging, get_settings
from core.allocation import remove
from core.budget_service import BudgetController, ScreenPhase
from core.formatting import format_money
from core.models import Budget, CategoryAllocation
from core.store import BudgetStoreError, InMemoryBudgetStore, NoBudgetSetError

D = Decimal
PERIOD = "2026-10"


class FlakyStore(InMemoryBudgetStore):
    def __init__(self) -> None:
        super().__init__()
        self.offline = False

    def fetch_budget(self, period: str) -> Budget:
        if self.offline:
            raise BudgetStoreError("Store offline")
        return super().fetch_budget(period)


class CountingStore(InMemoryBudgetStore):
    def __init__(self) -> None:
        super().__init__()
        self.saves: list[Budget] = []

    def save_budget(self, budget: Budget) -> Budget:
        self.saves.append(budget)
        return super().save_budget(budget)


@pytest.fixture()
def store() -> InMemoryBudgetStore:
    return InMemoryBudgetStore()


@pytest.fixture()
def controller(store, registry) -> BudgetController:
    return BudgetController(store, registry)


def _budget(period: str = PERIOD, auto_renew: bool = True) -> Budget:
    return Budget(
        monthly_amount=D("500"),
        category_allocations=(
            CategoryAllocation("Produce", D("100"), locked=True),
            CategoryAllocation("Meat", D("200")),
            CategoryAllocation("Dairy", D("200")),
        ),
        auto_renew=auto_renew,
        period=period,
    )


def test_missing_budget_loads_as_no_budget(controller):
    state = controller.load(PERIOD)

    assert state.phase is ScreenPhase.NO_BUDGET
    assert state.progress is None


def test_saved_budget_and_spend_load_as_active(controller, store):
    store.save_budget(_budget())
    store.record_spend(
        PERIOD,
        {"total_spend": 300, "days_elapsed": 15, "days_in_month": 31},
        {"Meat": 180, "Produce": 20},
    )

    state = controller.load(PERIOD)

    assert state.is_active
    assert state.budget.period == PERIOD
    assert state.progress.current_spend == D("300.00")
    meat = [row for row in state.progress.category_progress if row.category == "Meat"][0]
    assert meat.current_spend == D("180.00")
    assert meat.is_warning


def test_refresh_outside_active_is_a_no_op(controller):
    controller.load(PERIOD)

    state = controller.refresh()

    assert state.phase is ScreenPhase.NO_BUDGET


def test_failed_refresh_lands_in_error(registry):
    store = FlakyStore()
    store.save_budget(_budget())
    controller = BudgetController(store, registry)
    assert controller.load(PERIOD).is_active

    store.offline = True
    state = controller.refresh()

    assert state.phase is ScreenPhase.ERROR
    assert state.message == "Store offline"
    assert controller.refresh() is state


def test_delete_moves_to_no_budget(controller, store):
    store.save_budget(_budget())
    controller.load(PERIOD)

    state = controller.delete()

    assert state.phase is ScreenPhase.NO_BUDGET
    assert store.was_deleted(PERIOD)
    assert controller.load(PERIOD).phase is ScreenPhase.NO_BUDGET
    with pytest.raises(NoBudgetSetError):
        store.fetch_budget(PERIOD)


def test_deleted_budget_is_not_rolled_over_again(controller, store):
    store.save_budget(_budget(period="2026-09"))
    assert controller.load(PERIOD).is_active

    controller.delete()
    state = controller.load(PERIOD)

    assert state.phase is ScreenPhase.NO_BUDGET
    assert store.was_deleted(PERIOD)
    assert store.roll_over(PERIOD) is None


def test_new_budget_after_delete_clears_the_deleted_mark(controller, store):
    store.save_budget(_budget(period="2026-09"))
    controller.load(PERIOD)
    controller.delete()

    state = controller.create_budget(Budget(monthly_amount=D("300")))

    assert state.is_active
    assert state.budget.monthly_amount == D("300.00")
    assert not store.was_deleted(PERIOD)


def test_delete_without_a_budget_lands_in_no_budget(controller):
    controller.load(PERIOD)

    state = controller.delete()

    assert state.phase is ScreenPhase.NO_BUDGET


def test_auto_renewing_budget_rolls_into_the_new_month(controller, store):
    store.save_budget(_budget(period="2026-09"))

    state = controller.load(PERIOD)

    assert state.is_active
    assert state.budget.period == PERIOD
    assert state.budget.monthly_amount == D("500.00")
    assert store.fetch_budget("2026-09").period == "2026-09"


def test_budget_without_auto_renew_does_not_roll_over(controller, store):
    store.save_budget(_budget(period="2026-09", auto_renew=False))

    assert controller.load(PERIOD).phase is ScreenPhase.NO_BUDGET


def test_edit_session_persists_removed_category_as_locked_zero(controller, store):
    store.save_budget(_budget())
    controller.load(PERIOD)

    rows = controller.begin_edit()
    assert [row.category for row in rows][:3] == ["Meat", "Dairy", "Produce"]
    assert not any(row.locked for row in rows)

    rows = remove(rows, 0, 500)
    state = controller.save_allocations(rows)

    meat = state.budget.allocation_for("Meat")
    assert meat.amount == D("0.00")
    assert meat.locked
    # Session locks start cleared, so Produce shares the freed amount too.
    assert state.budget.allocation_for("Dairy").amount == D("333.33")
    assert state.budget.allocation_for("Produce").amount == D("166.67")
    assert not state.budget.allocation_for("Produce").locked
    assert state.budget.allocation_for("Bakery") is None
    assert state.budget.allocated_total == D("500.00")


def test_monthly_amount_change_refits_unlocked_allocations(controller, store):
    store.save_budget(_budget())
    controller.load(PERIOD)

    state = controller.update_monthly_amount(900)

    assert state.budget.monthly_amount == D("900.00")
    assert [a.amount for a in state.budget.category_allocations] == [
        D("100.00"),
        D("400.00"),
        D("400.00"),
    ]


def test_monthly_amount_change_is_saved_in_one_write(registry):
    store = CountingStore()
    store.save_budget(_budget())
    controller = BudgetController(store, registry)
    controller.load(PERIOD)
    store.saves.clear()

    controller.update_monthly_amount(700)

    assert len(store.saves) == 1
    saved = store.saves[0]
    assert saved.monthly_amount == D("700.00")
    assert saved.allocated_total == D("700.00")


def test_store_updates_monthly_amount_directly(store):
    store.save_budget(_budget())

    updated = store.update_monthly_amount(PERIOD, "650.5")

    assert updated.monthly_amount == D("650.50")
    assert updated.allocated_total == D("500.00")


def test_create_budget_binds_to_the_loaded_period(controller, store):
    controller.load(PERIOD)

    state = controller.create_budget(Budget(monthly_amount=D("250")))

    assert state.is_active
    assert store.fetch_budget(PERIOD).monthly_amount == D("250.00")


def test_set_auto_renew(controller, store):
    store.save_budget(_budget())
    controller.load(PERIOD)

    state = controller.set_auto_renew(False)

    assert state.budget.auto_renew is False


def test_actions_before_load_raise(controller):
    with pytest.raises(BudgetStoreError, match="No period loaded"):
        controller.delete()


def test_store_requires_a_period_to_save(store):
    with pytest.raises(BudgetStoreError):
        store.save_budget(Budget(monthly_amount=D("10")))


def test_transactions_feed_progress(controller, store):
    store.save_budget(_budget(period="2024-02"))
    transactions = pd.DataFrame(
        [
            {"date": "2024-02-01", "category": "Meat", "amount": -50.0},
            {"date": "2024-02-03", "category": "Dairy", "amount": -30.0},
            {"date": "2024-02-12", "category": "Meat", "amount": -45.0},
        ]
    )
    store.load_transactions(transactions, "2024-02", date(2024, 2, 10))

    progress = controller.load("2024-02").progress

    assert progress.current_spend == D("80.00")
    assert progress.days_elapsed == 10
    assert progress.days_in_month == 29


@pytest.fixture()
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_read_prefixed_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("PLAINSPEND_CURRENCY_SYMBOL", "$")
    monkeypatch.setenv("PLAINSPEND_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.currency_symbol == "$"
    assert settings.numeric_log_level == 10
    assert format_money(D("5")) == "$5"


def test_unknown_log_level_falls_back_to_info():
    assert Settings(log_level="chatty").numeric_log_level == 20


def test_configure_logging_uses_the_settings_level(monkeypatch):
    calls = []
    monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(Settings(log_level="warning"))

    assert calls[0]["level"] == 30
