"""Category review ordering and group roll-ups for budget progress rows."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from core.progress import CategoryBudgetProgress
from core.registry import CategoryRegistry

__all__ = [
    "ReviewOrder",
    "UNGROUPED",
    "sort_category_progress",
    "build_review_frame",
    "build_group_breakdown",
]

UNGROUPED = "Other"

_REVIEW_COLUMNS = [
    "Category",
    "Budget",
    "Spent",
    "Ratio",
    "Percent",
    "Remaining",
    "Over",
    "Status",
    "Locked",
]
_GROUP_COLUMNS = ["Group", "Budget", "Spent", "Ratio", "Categories"]


class ReviewOrder(str, Enum):
    WORST_FIRST = "worst_first"
    BEST_FIRST = "best_first"
    HIGHEST_SPEND = "highest_spend"
    ALPHABETICAL = "alphabetical"
    BY_GROUP = "by_group"


def _status(row: CategoryBudgetProgress) -> str:
    if row.is_over_displayed:
        return "over"
    if row.is_warning:
        return "warning"
    return "ok"


def _worst_first(rows: Iterable[CategoryBudgetProgress]) -> list[CategoryBudgetProgress]:
    return sorted(rows, key=lambda r: (-r.spend_ratio, -r.current_spend, r.category))


def _group_name(row: CategoryBudgetProgress, registry: CategoryRegistry | None) -> str:
    if registry is None:
        return UNGROUPED
    return registry.group_of(row.category) or UNGROUPED


def sort_category_progress(
    rows: Sequence[CategoryBudgetProgress],
    order: ReviewOrder | str = ReviewOrder.WORST_FIRST,
    registry: CategoryRegistry | None = None,
) -> list[CategoryBudgetProgress]:
    """Return ``rows`` in the requested review order.

    Worst-first ranks by spend ratio, then by absolute spend. Best-first is
    its exact reverse. Grouped order lists groups by their total spend and
    members worst-first within each group.
    """

    order = ReviewOrder(order)
    if order is ReviewOrder.WORST_FIRST:
        return _worst_first(rows)
    if order is ReviewOrder.BEST_FIRST:
        return list(reversed(_worst_first(rows)))
    if order is ReviewOrder.HIGHEST_SPEND:
        return sorted(rows, key=lambda r: (-r.current_spend, r.category))
    if order is ReviewOrder.ALPHABETICAL:
        return sorted(rows, key=lambda r: (r.category.casefold(), r.category))

    breakdown = build_group_breakdown(rows, registry)
    members: dict[str, list[CategoryBudgetProgress]] = {}
    for row in rows:
        members.setdefault(_group_name(row, registry), []).append(row)
    ordered: list[CategoryBudgetProgress] = []
    for group in breakdown["Group"]:
        ordered.extend(_worst_first(members.get(group, [])))
    return ordered


def build_review_frame(rows: Sequence[CategoryBudgetProgress]) -> pd.DataFrame:
    """Tabulate progress rows for review screens and exports."""

    if not rows:
        return pd.DataFrame(columns=_REVIEW_COLUMNS)

    records = [
        {
            "Category": row.category,
            "Budget": float(row.budget_amount),
            "Spent": float(row.current_spend),
            "Ratio": row.spend_ratio,
            "Percent": row.displayed_percent,
            "Remaining": float(row.remaining_amount),
            "Over": float(row.over_amount),
            "Status": _status(row),
            "Locked": row.locked,
        }
        for row in rows
    ]
    return pd.DataFrame(records, columns=_REVIEW_COLUMNS)


def build_group_breakdown(
    rows: Sequence[CategoryBudgetProgress],
    registry: CategoryRegistry | None,
) -> pd.DataFrame:
    """Sum budget and spend per registry group, largest spend first.

    Categories unknown to the registry are collected under ``Other``. Ties
    on spend keep registry group order.
    """

    if not rows:
        return pd.DataFrame(columns=_GROUP_COLUMNS)

    frame = pd.DataFrame(
        {
            "Group": [_group_name(row, registry) for row in rows],
            "Budget": [float(row.budget_amount) for row in rows],
            "Spent": [float(row.current_spend) for row in rows],
        }
    )
    grouped = frame.groupby("Group", sort=False).agg(
        Budget=("Budget", "sum"),
        Spent=("Spent", "sum"),
        Categories=("Spent", "size"),
    )
    budget = grouped["Budget"].to_numpy(dtype=float)
    spent = grouped["Spent"].to_numpy(dtype=float)
    grouped["Ratio"] = np.divide(spent, budget, out=np.zeros_like(spent), where=budget > 0)

    group_rank = {name: i for i, name in enumerate(registry.group_names)} if registry else {}
    grouped["_rank"] = [group_rank.get(name, len(group_rank)) for name in grouped.index]
    grouped = grouped.sort_values(["Spent", "_rank"], ascending=[False, True], kind="mergesort")

    result = grouped.reset_index()[_GROUP_COLUMNS]
    result["Budget"] = result["Budget"].round(2)
    result["Spent"] = result["Spent"].round(2)
    result["Categories"] = result["Categories"].astype(int)
    return result
