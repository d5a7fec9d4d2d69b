"""
Period series helpers.

A period series is a plain dict of period label -> value whose insertion
order is the column order of the source report. Values are aligned to
labels by position: upstream reports keep column order consistent between
the header row and every data row.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from pnl_core.amounts import parse_amount
from pnl_core.report_tree import Report

PERIOD_FIELD_IDS = ("Period", "Column")


def to_period_series(period_labels: Sequence[str], values: Sequence[Any]) -> dict:
    """
    Zip period labels with values positionally.

    Missing trailing values default to 0, extra values are dropped. String
    values are parsed with parse_amount.

    Args:
        period_labels: Ordered period labels, e.g. ["Jan 2024", "Feb 2024"]
        values: Ordered values (numbers or formatted strings)

    Returns:
        Dict of label -> float in label order
    """
    series = {}
    for index, label in enumerate(period_labels):
        series[label] = parse_amount(values[index]) if index < len(values) else 0.0
    return series


def filter_by_periods(series: dict, selected: Iterable[str]) -> dict:
    """Keep only the entries whose label is selected, preserving order."""
    wanted = set(selected)
    return {label: value for label, value in series.items() if label in wanted}


def period_labels(report: Optional[Report]) -> list[str]:
    """
    Column labels for a report.

    Uses the Period/Column entries of the report fields when present,
    otherwise the header row cells after the first.
    """
    if report is None:
        return []

    labels = [f.value for f in report.fields if f.id in PERIOD_FIELD_IDS and f.value]
    if labels:
        return labels

    header = report.header_row
    return header.values if header else []


def comparison_periods(available: Sequence[str], primary: str, comparisons: Sequence[str],
                       max_comparisons: int = 3) -> list[str]:
    """
    Build the [primary, *comparisons] selection shown by comparison charts.

    Unknown labels, duplicates and the primary itself are dropped from the
    comparisons, which are capped at max_comparisons.
    """
    if primary not in available:
        return []

    selected = [primary]
    for label in comparisons:
        if len(selected) > max_comparisons:
            break
        if label in available and label not in selected:
            selected.append(label)
    return selected


def series_to_points(labels: Sequence[str], **series: dict) -> list[dict]:
    """
    Combine several series into chart points.

    Example:
        series_to_points(["Q1"], revenue={"Q1": 10.0}) -> [{"name": "Q1", "revenue": 10.0}]
    """
    points = []
    for label in labels:
        point = {"name": label}
        for key, values in series.items():
            point[key] = values.get(label, 0.0)
        points.append(point)
    return points
