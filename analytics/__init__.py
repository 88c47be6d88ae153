"""Analytics helpers shared across PlainSpend budget services."""

from analytics.period import (
    aggregate_period_spend,
    build_daily_spend,
    period_day_counts,
    period_key,
    prepare_expenses,
    previous_period_key,
    resolve_target_period,
)
from analytics.review import (
    UNGROUPED,
    ReviewOrder,
    build_group_breakdown,
    build_review_frame,
    sort_category_progress,
)

__all__ = [
    "aggregate_period_spend",
    "build_daily_spend",
    "period_day_counts",
    "period_key",
    "prepare_expenses",
    "previous_period_key",
    "resolve_target_period",
    "UNGROUPED",
    "ReviewOrder",
    "build_group_breakdown",
    "build_review_frame",
    "sort_category_progress",
]
