"""
View Model Assemblers

Each assembler takes a report (Report, ReportResponse, raw dict or None) and
returns a fresh JSON-ready dict for one dashboard view. Missing reports or
sections produce zero-filled output with "hasData": False rather than an
error.

Used by:
- CLI tool (cli/pnl_refresh.py)
- Azure Function (azure-function/function_app.py)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pnl_core.amounts import format_amount, parse_amount
from pnl_core.export import export_csv, filter_rows
from pnl_core.financial_year import financial_year_view_from_report
from pnl_core.metrics import (
    expense_items,
    latest_growth,
    profit_margin,
    top_n_with_other,
)
from pnl_core.periods import (
    comparison_periods,
    filter_by_periods,
    period_labels,
    series_to_points,
    to_period_series,
)
from pnl_core.report_tree import Report, coerce_report
from pnl_core.sections import (
    INCOME_TITLE,
    OPERATING_EXPENSES_TITLE,
    extract_item_rows,
    extract_summary_row,
    find_row_by_label,
    find_section,
    find_value_by_title,
    section_series,
)
from pnl_core.walker import flatten

EXPENSE_CHART_SLICES = 8
DEFAULT_TOP_EXPENSES = 5

SUMMARY_TITLES = {
    "totalIncome": "Total Income",
    "totalCostOfSales": "Total Cost of Sales",
    "grossProfit": "Gross Profit",
    "totalOperatingExpenses": "Total Operating Expenses",
    "netProfit": "Net Profit",
}


# ============================================================================
# Shared Extraction
# ============================================================================

def _scalar_value(report: Optional[Report], title: str) -> Optional[str]:
    """Raw value of a named total: summary rows first, then any direct child row."""
    if report is None:
        return None
    value = find_value_by_title(report.rows, title)
    if value is not None:
        return value
    row = find_row_by_label(report.rows, title)
    if row is not None and row.values:
        return row.values[0]
    return None


def _headline_series(report: Optional[Report], periods: Sequence[str]) -> dict:
    """Revenue, expense and net profit series aligned to the report periods."""
    if report is None:
        zero = to_period_series(periods, [])
        return {"revenue": zero, "expenses": dict(zero), "netProfit": dict(zero)}

    income = find_section(report.rows, INCOME_TITLE)
    expenses = find_section(report.rows, OPERATING_EXPENSES_TITLE)
    net_row = find_row_by_label(report.rows, "Net Profit")

    return {
        "revenue": to_period_series(periods, section_series(income)),
        "expenses": to_period_series(periods, section_series(expenses)),
        "netProfit": to_period_series(periods, net_row.values if net_row else []),
    }


def _top_expense_series(report: Optional[Report], periods: Sequence[str], top_n: int) -> list[dict]:
    """
    Per-period series for the largest itemised operating expenses.

    Rows are ranked by their total across all periods; ties keep report order.
    """
    if report is None:
        return []
    section = find_section(report.rows, OPERATING_EXPENSES_TITLE)
    candidates = [
        {"name": row.label, "series": to_period_series(periods, row.values)}
        for row in extract_item_rows(section)
    ]
    candidates.sort(key=lambda c: sum(c["series"].values()), reverse=True)
    return candidates[:max(top_n, 0)]


def comparison_view(series_by_metric: dict, selected: Sequence[str]) -> dict:
    """Filter every series in a mapping down to the selected periods."""
    return {metric: filter_by_periods(series, selected) for metric, series in series_by_metric.items()}


def _with_comparison(view: dict, periods: Sequence[str], month: Optional[str],
                     compare: Optional[Sequence[str]]) -> dict:
    if not month:
        return view
    selected = comparison_periods(periods, month, compare or [])
    view["comparison"] = {
        "periods": selected,
        **comparison_view(view["series"], selected),
    }
    return view


# ============================================================================
# Single Period
# ============================================================================

def single_period_view(payload: Any, currency: str = "USD") -> dict:
    """
    Assemble the single-period Profit & Loss view (table + summary cards).

    Args:
        payload: Report, ReportResponse, raw dict or None
        currency: Currency code for the formatted summary values

    Returns:
        Dict with flattened rows, summary scalars (raw and formatted),
        isProfit, expense breakdown and report metadata
    """
    report = coerce_report(payload)
    periods = period_labels(report)

    summary = {key: parse_amount(_scalar_value(report, title)) for key, title in SUMMARY_TITLES.items()}
    formatted = {key: format_amount(value, currency) for key, value in summary.items()}

    expenses_section = find_section(report.rows, OPERATING_EXPENSES_TITLE) if report else None
    breakdown = top_n_with_other(expense_items(extract_item_rows(expenses_section)), EXPENSE_CHART_SLICES)

    return {
        "reportName": report.report_name if report else "",
        "reportTitles": list(report.report_titles) if report else [],
        "reportDate": report.report_date if report else "",
        "period": periods[0] if periods else "",
        "rows": flatten(report.rows) if report else [],
        "summary": summary,
        "formatted": formatted,
        "isProfit": summary["netProfit"] >= 0,
        "expenseBreakdown": breakdown,
        "hasData": report is not None and not report.is_empty,
    }


# ============================================================================
# Monthly Breakdown
# ============================================================================

def monthly_view(payload: Any, search: str = "", month: Optional[str] = None,
                 compare: Optional[Sequence[str]] = None) -> dict:
    """
    Assemble the month-by-month breakdown table.

    Rows keep the report's section nesting as their level. search filters
    rows by label and values; month/compare select the periods of the
    comparison charts.
    """
    report = coerce_report(payload)
    periods = period_labels(report)
    rows = flatten(report.rows) if report else []

    view = {
        "periods": periods,
        "rows": rows,
        "filteredRows": filter_rows(rows, search),
        "search": search or "",
        "series": _headline_series(report, periods),
        "hasData": report is not None and not report.is_empty,
    }
    return _with_comparison(view, periods, month, compare)


def monthly_csv(payload: Any, search: str = "") -> str:
    """CSV text of the filtered monthly breakdown."""
    view = monthly_view(payload, search)
    return export_csv(view["filteredRows"], view["periods"])


# ============================================================================
# Quarterly / Annual
# ============================================================================

def _period_comparison_view(payload: Any, granularity: str, top_n: int,
                            month: Optional[str], compare: Optional[Sequence[str]]) -> dict:
    report = coerce_report(payload)
    periods = period_labels(report)
    series = _headline_series(report, periods)
    top_expenses = _top_expense_series(report, periods, top_n)

    details = []
    for period in periods:
        revenue = series["revenue"][period]
        net_profit = series["netProfit"][period]
        details.append({
            "period": period,
            "revenue": revenue,
            "expenses": series["expenses"][period],
            "netProfit": net_profit,
            "profitMargin": profit_margin(net_profit, revenue),
        })

    view = {
        "granularity": granularity,
        "periods": periods,
        "series": series,
        "growth": {
            "revenue": latest_growth(series["revenue"]),
            "expenses": latest_growth(series["expenses"]),
            "netProfit": latest_growth(series["netProfit"]),
        },
        "chart": series_to_points(
            periods,
            revenue=series["revenue"],
            expenses=series["expenses"],
            netProfit=series["netProfit"],
        ),
        "topExpenses": top_expenses,
        "expenseTrend": [
            {"name": period, **{e["name"]: e["series"][period] for e in top_expenses}}
            for period in periods
        ],
        "details": details,
        "hasData": report is not None and not report.is_empty,
    }
    return _with_comparison(view, periods, month, compare)


def quarterly_view(payload: Any, top_n: int = DEFAULT_TOP_EXPENSES, month: Optional[str] = None,
                   compare: Optional[Sequence[str]] = None) -> dict:
    """Quarterly breakdown: headline series, latest-quarter growth, top expense trends."""
    return _period_comparison_view(payload, "quarterly", top_n, month, compare)


def annual_view(payload: Any, top_n: int = DEFAULT_TOP_EXPENSES, month: Optional[str] = None,
                compare: Optional[Sequence[str]] = None) -> dict:
    """Year-over-year comparison; same shape as the quarterly view."""
    return _period_comparison_view(payload, "annual", top_n, month, compare)


# ============================================================================
# Visual Dashboard
# ============================================================================

def visual_dashboard_view(payload: Any, top_n: int = DEFAULT_TOP_EXPENSES) -> dict:
    """Income/expense breakdowns and headline totals for the visual dashboard."""
    report = coerce_report(payload)
    rows = report.rows if report else ()

    income = find_section(rows, INCOME_TITLE)
    expenses = find_section(rows, OPERATING_EXPENSES_TITLE)
    expense_data = sorted(expense_items(extract_item_rows(expenses)), key=lambda i: i["value"], reverse=True)

    def summary_value(section) -> str:
        summary = extract_summary_row(section)
        return summary.values[0] if summary and summary.values else "0"

    net_row = find_row_by_label(rows, "Net Profit")

    return {
        "totals": {
            "totalIncome": summary_value(income),
            "totalExpenses": summary_value(expenses),
            "netProfit": net_row.values[0] if net_row and net_row.values else "0",
        },
        "incomeBreakdown": expense_items(extract_item_rows(income)),
        "expenseBreakdown": expense_data,
        "topExpenses": expense_data[:max(top_n, 0)],
        "hasData": report is not None and not report.is_empty,
    }


# ============================================================================
# Dispatch
# ============================================================================

VIEW_NAMES = ("single-period", "monthly", "quarterly", "annual", "financial-year", "visual")


def build_view(name: str, payload: Any, search: str = "", month: Optional[str] = None,
               compare: Optional[Sequence[str]] = None, top_n: int = DEFAULT_TOP_EXPENSES,
               currency: str = "USD") -> dict:
    """
    Build a view model by name.

    Raises:
        ValueError: If the view name is unknown
    """
    if name == "single-period":
        return single_period_view(payload, currency)
    if name == "monthly":
        return monthly_view(payload, search, month, compare)
    if name == "quarterly":
        return quarterly_view(payload, top_n, month, compare)
    if name == "annual":
        return annual_view(payload, top_n, month, compare)
    if name == "financial-year":
        report = coerce_report(payload)
        selected = comparison_periods(period_labels(report), month, compare or []) if month else None
        return financial_year_view_from_report(report, selected)
    if name == "visual":
        return visual_dashboard_view(payload, top_n)
    raise ValueError(f"Unknown view '{name}'. Expected one of: {', '.join(VIEW_NAMES)}")
