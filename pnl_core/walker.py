"""
Row classification and report tree flattening.

flatten() turns the nested report tree into the display rows used by the
table views: pre-order, section header first, then its children one level
deeper. Labels and values are kept verbatim; formatting is left to the
display layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from pnl_core.report_tree import ReportRow, RowType


class RowKind(Enum):
    HEADER = "header"
    SECTION = "section"
    SUMMARY = "summary"
    LINE_ITEM = "line_item"


_KIND_BY_TYPE = {
    RowType.HEADER: RowKind.HEADER,
    RowType.SECTION: RowKind.SECTION,
    RowType.SUMMARY_ROW: RowKind.SUMMARY,
    RowType.ROW: RowKind.LINE_ITEM,
}

TOTAL_MARKERS = ("Total", "Profit", "Loss")


def classify_row(row: ReportRow) -> RowKind:
    """Classify a row purely by its RowType."""
    return _KIND_BY_TYPE[row.row_type]


def is_total_label(label: str) -> bool:
    """True for labels that name a total, profit or loss line."""
    return any(marker in label for marker in TOTAL_MARKERS)


def _flat_row(label: str, values: list, level: int, is_total: bool, is_header: bool) -> dict:
    return {
        "label": label,
        "values": values,
        "level": level,
        "isTotal": is_total,
        "isHeader": is_header,
    }


def flatten(rows: Sequence[ReportRow], depth: int = 0) -> list[dict]:
    """
    Flatten a report tree into display rows, preserving document order.

    Each Section yields a header entry (label = section title, values = any
    cells the section row carries itself) followed by its children at
    depth + 1. A section with no children still yields its header entry.
    Header rows are dropped.

    Args:
        rows: Report rows at the current level
        depth: Nesting level of these rows

    Returns:
        List of dicts with label, values, level, isTotal and isHeader keys
    """
    flat = []

    for row in rows:
        kind = classify_row(row)

        if kind is RowKind.HEADER:
            continue

        if kind is RowKind.SECTION:
            flat.append(_flat_row(row.title or row.label, row.values, depth, False, True))
            flat.extend(flatten(row.rows, depth + 1))
        elif kind is RowKind.SUMMARY:
            flat.append(_flat_row(row.label, row.values, depth, True, False))
        elif kind is RowKind.LINE_ITEM:
            flat.append(_flat_row(row.label, row.values, depth, is_total_label(row.label), False))
        else:
            raise ValueError(f"Unhandled row kind: {kind}")

    return flat
