"""
Ranking and derived metrics.

Ratios are clamped to 0 when the divisor is zero (or, for margins, when
revenue is not positive) so Infinity/NaN never reach the dashboards. A
clamped growth rate of 0 means "no comparable base", not "no change".
"""

from __future__ import annotations

from typing import Sequence

from pnl_core.amounts import parse_amount
from pnl_core.report_tree import ReportRow

OTHER_EXPENSES = "Other Expenses"


def top_n_with_other(items: Sequence[dict], n: int, other_label: str = OTHER_EXPENSES) -> list[dict]:
    """
    Rank expense items and bucket the tail into a single "Other" entry.

    Items are sorted by value, largest first; ties keep their original order.
    If there are more than n items, the top n are kept and the rest are
    summed into {"name": other_label, "value": total}, appended last.

    Args:
        items: Dicts with "name" and "value" keys
        n: Number of items to keep before bucketing
        other_label: Name of the synthetic bucket

    Returns:
        New list of item dicts
    """
    ranked = sorted(items, key=lambda item: item["value"], reverse=True)

    if len(ranked) <= n:
        return [dict(item) for item in ranked]

    kept = [dict(item) for item in ranked[:n]]
    other_value = sum(item["value"] for item in ranked[n:])
    kept.append({"name": other_label, "value": other_value})
    return kept


def growth_rate(current: float, previous: float) -> float:
    """
    Percentage change from previous to current.

    Returns 0 when previous is 0. This is a clamp, not a real rate.
    """
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def profit_margin(net_profit: float, revenue: float) -> float:
    """Net profit as a percentage of revenue; 0 unless revenue > 0."""
    if revenue > 0:
        return net_profit / revenue * 100
    return 0.0


def latest_growth(series: dict) -> float:
    """Growth between the two most recent periods of a series."""
    values = list(series.values())
    if len(values) < 2:
        return 0.0
    return growth_rate(values[-1], values[-2])


def sum_series(series: dict) -> float:
    return sum(series.values())


def expense_items(rows: Sequence[ReportRow]) -> list[dict]:
    """Build {"name", "value"} items from item rows using their first period."""
    return [
        {"name": row.label, "value": parse_amount(row.values[0] if row.values else None)}
        for row in rows
    ]
