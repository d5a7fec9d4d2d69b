"""
Profit & Loss report transformation core.

Turns the nested report documents produced by the accounting integration
into the view models rendered by the client dashboards.
"""

from pnl_core.amounts import format_amount, parse_amount
from pnl_core.export import csv_filename, export_csv, filter_rows
from pnl_core.financial_year import financial_year_view, normalize_financial_year
from pnl_core.metrics import growth_rate, profit_margin, top_n_with_other
from pnl_core.periods import filter_by_periods, to_period_series
from pnl_core.report_tree import Report, ReportResponse, ReportRow, RowType
from pnl_core.sections import extract_item_rows, extract_summary_row, find_section, find_value_by_title
from pnl_core.views import (
    annual_view,
    build_view,
    monthly_view,
    quarterly_view,
    single_period_view,
    visual_dashboard_view,
)
from pnl_core.walker import classify_row, flatten

__all__ = [
    "Report",
    "ReportResponse",
    "ReportRow",
    "RowType",
    "annual_view",
    "build_view",
    "classify_row",
    "csv_filename",
    "export_csv",
    "extract_item_rows",
    "extract_summary_row",
    "filter_by_periods",
    "filter_rows",
    "financial_year_view",
    "find_section",
    "find_value_by_title",
    "flatten",
    "format_amount",
    "growth_rate",
    "monthly_view",
    "normalize_financial_year",
    "parse_amount",
    "profit_margin",
    "quarterly_view",
    "single_period_view",
    "to_period_series",
    "top_n_with_other",
    "visual_dashboard_view",
]
