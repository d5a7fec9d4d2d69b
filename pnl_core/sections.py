"""
Section lookup within a report.

All searches are shallow: top-level sections and their direct children.
Upstream P&L reports have a fixed shape (Income, Less Cost of Sales, Gross
Profit, Less Operating Expenses, Net Profit), so a label nested deeper than
one level inside a section is not found and callers get None.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Union

from pnl_core.amounts import parse_amount
from pnl_core.report_tree import ReportRow, RowType

logger = logging.getLogger(__name__)

INCOME_TITLE = "Income"
OPERATING_EXPENSES_TITLE = "Less Operating Expenses"

TOTAL_LABELS = frozenset({
    "Total Income",
    "Total Cost of Sales",
    "Total Operating Expenses",
})

TitlePredicate = Union[str, Callable[[str], bool]]


# ============================================================================
# Title Predicates
# ============================================================================

def title_equals(text: str) -> Callable[[str], bool]:
    """Case-insensitive exact title match."""
    wanted = text.strip().lower()
    return lambda title: title.strip().lower() == wanted


def title_contains(*needles: str) -> Callable[[str], bool]:
    """Case-insensitive match on any of the given substrings."""
    lowered = [n.lower() for n in needles]
    return lambda title: any(n in title.lower() for n in lowered)


def _as_predicate(predicate: TitlePredicate) -> Callable[[str], bool]:
    if isinstance(predicate, str):
        return title_equals(predicate)
    return predicate


# ============================================================================
# Section Lookup
# ============================================================================

def find_section(rows: Sequence[ReportRow], title_predicate: TitlePredicate) -> Optional[ReportRow]:
    """
    Find the first top-level Section whose title satisfies the predicate.

    Args:
        rows: Top-level report rows
        title_predicate: Title string (case-insensitive exact match) or callable

    Returns:
        The matching section, or None if absent
    """
    matches = _as_predicate(title_predicate)
    for row in rows:
        if row.row_type is RowType.SECTION and matches(row.title):
            return row
    logger.debug(f"No section matching {title_predicate!r}")
    return None


def extract_summary_row(section: Optional[ReportRow]) -> Optional[ReportRow]:
    """Return the first direct SummaryRow child of a section."""
    if section is None:
        return None
    for row in section.rows:
        if row.row_type is RowType.SUMMARY_ROW:
            return row
    return None


def extract_item_rows(section: Optional[ReportRow], total_labels=TOTAL_LABELS) -> list[ReportRow]:
    """
    Return the itemised (RowType Row) direct children of a section.

    Rows labelled like a section total are skipped to avoid double counting.
    """
    if section is None:
        return []
    return [
        row for row in section.rows
        if row.row_type is RowType.ROW and row.label not in total_labels
    ]


def section_series(section: Optional[ReportRow]) -> list[float]:
    """Parsed per-period values of a section's summary row (empty if none)."""
    summary = extract_summary_row(section)
    if summary is None:
        return []
    return [parse_amount(v) for v in summary.values]


# ============================================================================
# Label Lookup
# ============================================================================

def find_value_by_title(rows: Sequence[ReportRow], title: str) -> Optional[str]:
    """
    Find the raw first-period value of a named total.

    Looks at the summary rows inside each top-level section first, then at
    top-level rows, for a row whose label equals title exactly.

    Args:
        rows: Top-level report rows
        title: Exact label, e.g. "Total Income" or "Net Profit"

    Returns:
        The second cell's raw value, or None if no row matches
    """
    for row in rows:
        if row.row_type is not RowType.SECTION:
            continue
        for child in row.rows:
            if child.row_type is RowType.SUMMARY_ROW and child.label == title:
                return child.values[0] if child.values else None

    for row in rows:
        if row.row_type is RowType.ROW and row.label == title:
            return row.values[0] if row.values else None

    return None


def find_row_by_label(rows: Sequence[ReportRow], label: str) -> Optional[ReportRow]:
    """
    Find a row by exact label among top-level rows and the direct children
    of top-level sections. Used for rows such as "Net Profit" that live in
    an untitled section.
    """
    for row in rows:
        if row.row_type is RowType.SECTION:
            for child in row.rows:
                if child.row_type is not RowType.SECTION and child.label == label:
                    return child
        elif row.row_type is not RowType.HEADER and row.label == label:
            return row
    logger.debug(f"No row labelled {label!r}")
    return None
