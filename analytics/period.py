"""Calendar-period helpers that turn transaction frames into spend figures."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from core.models import CategorySpend, PeriodSpend

__all__ = [
    "resolve_target_period",
    "period_key",
    "previous_period_key",
    "period_day_counts",
    "prepare_expenses",
    "build_daily_spend",
    "aggregate_period_spend",
]


def resolve_target_period(target: date | str | pd.Period) -> pd.Period:
    """Return the reporting month for a date, ``YYYY-MM`` key or period."""

    if isinstance(target, pd.Period):
        return target.asfreq("M")
    return pd.Period(target, freq="M")


def period_key(period: pd.Period) -> str:
    return period.strftime("%Y-%m")


def previous_period_key(key: str) -> str:
    return period_key(resolve_target_period(key) - 1)


def period_day_counts(period: pd.Period, today: date | pd.Timestamp) -> tuple[int, int]:
    """Return ``(days_elapsed, days_in_month)`` for ``period`` as of ``today``.

    ``today`` counts as elapsed. Dates before the period give 0 elapsed days
    and dates after it give the full month.
    """

    days_in_month = int(period.days_in_month)
    today = pd.Timestamp(today).normalize()
    month_start = period.to_timestamp(how="start")
    month_end = period.to_timestamp(how="end").normalize()

    if today < month_start:
        return 0, days_in_month
    if today >= month_end:
        return days_in_month, days_in_month
    return int((today - month_start).days) + 1, days_in_month


def prepare_expenses(transactions: pd.DataFrame) -> pd.DataFrame:
    """Return expense rows with a positive ``spend`` column.

    Expenses are negative amounts; positive non-income amounts are refunds
    and reduce spend. Income rows are dropped.
    """

    expenses = transactions[transactions["category"].str.lower() != "income"].copy()
    expenses["date"] = pd.to_datetime(expenses["date"])
    expenses["spend"] = -expenses["amount"].astype(float)
    return expenses


def build_daily_spend(
    expenses: pd.DataFrame,
    month_start: pd.Timestamp,
    current_day: pd.Timestamp,
) -> pd.Series:
    """Construct a daily spend series between ``month_start`` and ``current_day``."""

    if current_day < month_start:
        return pd.Series(dtype=float)

    index = pd.date_range(month_start, current_day, freq="D")
    grouped = (
        expenses.groupby(pd.Grouper(key="date", freq="D"))["spend"].sum().reindex(index, fill_value=0.0)
    )
    grouped = grouped.astype(float)
    grouped.index.name = "Day"
    return grouped


def aggregate_period_spend(
    transactions: pd.DataFrame,
    period: pd.Period,
    today: date | pd.Timestamp,
) -> tuple[PeriodSpend, list[CategorySpend]]:
    """Summarise one month of transactions up to and including ``today``."""

    days_elapsed, days_in_month = period_day_counts(period, today)
    if transactions.empty or days_elapsed == 0:
        return {"total_spend": 0.0, "days_elapsed": days_elapsed, "days_in_month": days_in_month}, []

    expenses = prepare_expenses(transactions)
    expenses = expenses[expenses["date"].dt.to_period("M") == period]

    month_start = period.to_timestamp(how="start")
    current_day = month_start + pd.Timedelta(days=days_elapsed - 1)
    expenses = expenses[expenses["date"].dt.normalize() <= current_day]

    daily = build_daily_spend(expenses, month_start, current_day)
    by_category = expenses.groupby("category")["spend"].sum().sort_values(ascending=False)

    category_spend: list[CategorySpend] = [
        {"category": str(category), "spend": float(round(amount, 2))}
        for category, amount in by_category.items()
    ]
    period_spend: PeriodSpend = {
        "total_spend": float(round(daily.sum(), 2)),
        "days_elapsed": days_elapsed,
        "days_in_month": days_in_month,
    }
    return period_spend, category_spend
