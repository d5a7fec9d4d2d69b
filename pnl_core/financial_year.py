"""
Financial-year view.

The financial-year charts work on a pre-normalised shape rather than the raw
report tree:

    {
        "headings": ["Feb 2025", "Jan 2025", ...],
        "grossProfitSections": [{"title": "Income", "dataRowObjects": [...]}, ...],
        "netProfitSections": [{"title": "Less Operating Expenses", ...}, ...],
        "grossProfitDataRow": ["1,200.00", ...],
        "netProfitDataRow": ["300.00", ...],
    }

where each data row object is {"rowTitle", "rowType", "rowData": [...]}.
normalize_financial_year() builds that shape from a raw report.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from pnl_core.amounts import parse_amount
from pnl_core.metrics import profit_margin, sum_series, top_n_with_other
from pnl_core.periods import filter_by_periods, period_labels, to_period_series
from pnl_core.report_tree import RowType, coerce_report
from pnl_core.sections import find_row_by_label

logger = logging.getLogger(__name__)

GROSS_PROFIT_LABEL = "Gross Profit"
NET_PROFIT_LABEL = "Net Profit"
REVENUE_KEYWORDS = ("income", "revenue")
EXPENSE_KEYWORDS = ("expense", "operating")
SUMMARY_ROW = RowType.SUMMARY_ROW.value


# ============================================================================
# Normalisation
# ============================================================================

def normalize_financial_year(payload: Any) -> dict:
    """
    Build the financial-year input shape from a raw report.

    Titled sections before the section holding the "Gross Profit" row are
    gross-profit sections; titled sections after it are net-profit sections.
    Reports without a Gross Profit row put every section in the net-profit
    group.

    Args:
        payload: Report, ReportResponse, raw dict or None

    Returns:
        Normalised dict (empty lists when there is no data)
    """
    report = coerce_report(payload)
    empty = {
        "headings": [],
        "grossProfitSections": [],
        "netProfitSections": [],
        "grossProfitDataRow": [],
        "netProfitDataRow": [],
    }
    if report is None:
        return empty

    gross_row = find_row_by_label(report.rows, GROSS_PROFIT_LABEL)
    net_row = find_row_by_label(report.rows, NET_PROFIT_LABEL)

    gross_sections = []
    net_sections = []
    past_gross_profit = gross_row is None

    for row in report.rows:
        if row.row_type is not RowType.SECTION:
            continue
        if gross_row is not None and any(child is gross_row for child in row.rows):
            past_gross_profit = True
            continue
        if not row.title:
            continue

        section = {
            "title": row.title,
            "dataRowObjects": [
                {"rowTitle": child.label, "rowType": child.row_type.value, "rowData": child.values}
                for child in row.rows
                if child.row_type in (RowType.ROW, RowType.SUMMARY_ROW)
            ],
        }
        if past_gross_profit:
            net_sections.append(section)
        else:
            gross_sections.append(section)

    return {
        "headings": period_labels(report),
        "grossProfitSections": gross_sections,
        "netProfitSections": net_sections,
        "grossProfitDataRow": gross_row.values if gross_row else [],
        "netProfitDataRow": net_row.values if net_row else [],
    }


# ============================================================================
# Section Helpers
# ============================================================================

def _matches(section: dict, keywords: Sequence[str]) -> bool:
    title = str(section.get("title") or "").lower()
    return any(k in title for k in keywords)


def _all_sections(data: dict) -> list:
    return list(data.get("grossProfitSections") or []) + list(data.get("netProfitSections") or [])


def _revenue_section(data: dict) -> Optional[dict]:
    for section in _all_sections(data):
        if _matches(section, REVENUE_KEYWORDS):
            return section
    logger.debug("No revenue section in financial-year data")
    return None


def _expense_sections(data: dict) -> list:
    return [s for s in _all_sections(data) if _matches(s, EXPENSE_KEYWORDS)]


def _item_rows(section: Optional[dict]) -> list:
    if not section:
        return []
    return [r for r in section.get("dataRowObjects") or [] if r.get("rowType") != SUMMARY_ROW]


def _summary_rows(section: Optional[dict]) -> list:
    if not section:
        return []
    return [r for r in section.get("dataRowObjects") or [] if r.get("rowType") == SUMMARY_ROW]


def _column_total(rows: Sequence[dict], index: int) -> float:
    total = 0.0
    for row in rows:
        data = row.get("rowData") or []
        if index < len(data):
            total += parse_amount(data[index])
    return total


def _row_total(row: dict) -> float:
    return sum(parse_amount(v) for v in row.get("rowData") or [])


# ============================================================================
# View Assembly
# ============================================================================

def financial_year_view(data: Optional[dict], selected_periods: Optional[Sequence[str]] = None,
                        oldest_first: bool = True) -> dict:
    """
    Assemble the financial-year view from normalised data.

    Args:
        data: Normalised financial-year dict (see module docstring)
        selected_periods: Optional primary + comparison month labels
        oldest_first: Reverse the trend points into chronological order
            (upstream headings run newest first)

    Returns:
        Dict with series, trend points, breakdowns, metrics and hasData
    """
    data = data or {}
    headings = list(data.get("headings") or [])

    revenue_section = _revenue_section(data)
    expense_sections = _expense_sections(data)
    revenue_rows = _item_rows(revenue_section)
    expense_rows = [row for section in expense_sections for row in _item_rows(section)]

    revenue = {h: _column_total(revenue_rows, i) for i, h in enumerate(headings)}
    expenses = {h: abs(_column_total(expense_rows, i)) for i, h in enumerate(headings)}
    gross_profit = to_period_series(headings, data.get("grossProfitDataRow") or [])
    net_profit = to_period_series(headings, data.get("netProfitDataRow") or [])

    trend = [
        {
            "name": h,
            "revenue": revenue[h],
            "expenses": expenses[h],
            "grossProfit": gross_profit[h],
            "profit": net_profit[h],
        }
        for h in headings
    ]
    if oldest_first:
        trend.reverse()

    revenue_breakdown = [
        {"name": row.get("rowTitle", ""), "value": abs(_row_total(row))}
        for row in revenue_rows
        if _row_total(row) != 0
    ]
    expense_breakdown = top_n_with_other(
        [
            {"name": row.get("rowTitle", ""), "value": abs(_row_total(row))}
            for row in expense_rows
            if _row_total(row) != 0
        ],
        8,
    )

    summary_rows = _summary_rows(revenue_section)
    total_revenue = sum(_row_total(r) for r in summary_rows) if summary_rows else sum_series(revenue)
    total_gross = sum_series(gross_profit)
    total_net = sum_series(net_profit)

    view = {
        "headings": headings,
        "revenue": revenue,
        "expenses": expenses,
        "grossProfit": gross_profit,
        "netProfit": net_profit,
        "trend": trend,
        "revenueBreakdown": revenue_breakdown,
        "expenseBreakdown": expense_breakdown,
        "metrics": {
            "totalRevenue": total_revenue,
            "totalExpenses": sum_series(expenses),
            "grossProfit": total_gross,
            "netProfit": total_net,
            "grossProfitMargin": profit_margin(total_gross, total_revenue),
            "netProfitMargin": profit_margin(total_net, total_revenue),
        },
        "hasData": bool(headings),
    }

    if selected_periods:
        view["comparison"] = {
            "periods": [p for p in headings if p in set(selected_periods)],
            "revenue": filter_by_periods(revenue, selected_periods),
            "expenses": filter_by_periods(expenses, selected_periods),
            "netProfit": filter_by_periods(net_profit, selected_periods),
        }

    return view


def financial_year_view_from_report(payload: Any, selected_periods: Optional[Sequence[str]] = None) -> dict:
    """Normalise a raw report and assemble its financial-year view."""
    return financial_year_view(normalize_financial_year(payload), selected_periods)
