"""Formatting helpers for PlainSpend budget summaries."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from config import get_settings
from core.models import BalanceCheck, PaceStatus
from core.money import to_money
from core.progress import CategoryBudgetProgress

__all__ = [
    "format_money",
    "format_balance_status",
    "category_status_text",
    "format_pace_status",
]

_PACE_LABELS = {
    PaceStatus.AHEAD: "Under pace",
    PaceStatus.ON_TRACK: "On track",
    PaceStatus.BEHIND: "Spending fast",
    PaceStatus.OVER: "Over budget",
}


def format_money(amount: Any, *, symbol: str | None = None, decimals: int = 0) -> str:
    symbol = get_settings().currency_symbol if symbol is None else symbol
    value: Decimal = to_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_balance_status(check: BalanceCheck, *, symbol: str | None = None) -> str:
    if check.balanced:
        return "On target"
    direction = "over budget" if check.difference > 0 else "under budget"
    return f"{format_money(abs(check.difference), symbol=symbol)} {direction}"


def category_status_text(row: CategoryBudgetProgress, *, symbol: str | None = None) -> str:
    """Return ``"€20 left"`` or ``"+€15 over"`` for a category row."""

    if row.is_over_displayed:
        return f"+{format_money(row.over_amount, symbol=symbol)} over"
    return f"{format_money(row.remaining_amount, symbol=symbol)} left"


def format_pace_status(status: PaceStatus | str) -> str:
    return _PACE_LABELS[PaceStatus(status)]
