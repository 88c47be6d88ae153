"""Core domain package for PlainSpend budgets."""

from .money import CENT, ZERO, split_proportionally, to_money
from .models import (
    Budget,
    BalanceCheck,
    CategoryAllocation,
    CategorySpend,
    EditableAllocation,
    PaceStatus,
    PeriodSpend,
    ProgressSummary,
)
from .registry import DEFAULT_REGISTRY, CategoryGroup, CategoryRegistry
from .allocation import (
    AllocationAction,
    Remove,
    Reset,
    ResetAll,
    SetAmount,
    apply_action,
    balance_check,
    finish_session,
    has_edits,
    rebalance_to_total,
    redistribute,
    remove,
    reset,
    reset_all,
    set_amount,
    start_session,
)
from .progress import (
    BudgetProgress,
    CategoryBudgetProgress,
    build_budget_progress,
    build_category_progress,
    classify_pace,
    summarize_progress,
)
from .store import BudgetStore, BudgetStoreError, InMemoryBudgetStore, NoBudgetSetError
from .budget_service import BudgetController, BudgetScreenState, ScreenPhase

__all__ = [
    "CENT",
    "ZERO",
    "split_proportionally",
    "to_money",
    "Budget",
    "BalanceCheck",
    "CategoryAllocation",
    "CategorySpend",
    "EditableAllocation",
    "PaceStatus",
    "PeriodSpend",
    "ProgressSummary",
    "DEFAULT_REGISTRY",
    "CategoryGroup",
    "CategoryRegistry",
    "AllocationAction",
    "Remove",
    "Reset",
    "ResetAll",
    "SetAmount",
    "apply_action",
    "balance_check",
    "finish_session",
    "has_edits",
    "rebalance_to_total",
    "redistribute",
    "remove",
    "reset",
    "reset_all",
    "set_amount",
    "start_session",
    "BudgetProgress",
    "CategoryBudgetProgress",
    "build_budget_progress",
    "build_category_progress",
    "classify_pace",
    "summarize_progress",
    "BudgetStore",
    "BudgetStoreError",
    "InMemoryBudgetStore",
    "NoBudgetSetError",
    "BudgetController",
    "BudgetScreenState",
    "ScreenPhase",
]
