"""
Tests for section and label lookup.
"""

import pytest
from conftest import row, section, summary

from pnl_core.report_tree import Report, parse_rows
from pnl_core.sections import (
    extract_item_rows,
    extract_summary_row,
    find_row_by_label,
    find_section,
    find_value_by_title,
    section_series,
    title_contains,
)


@pytest.fixture
def rows(single_period_report):
    return Report.from_dict(single_period_report["Reports"][0]).rows


class TestFindSection:
    """Test find_section."""

    def test_exact_title(self, rows):
        assert find_section(rows, "Income").title == "Income"

    def test_case_insensitive(self, rows):
        assert find_section(rows, "less operating expenses") is not None

    def test_predicate(self, rows):
        assert find_section(rows, title_contains("cost of")).title == "Less Cost of Sales"

    def test_missing(self, rows):
        assert find_section(rows, "Other Income") is None

    def test_top_level_only(self):
        nested = parse_rows([section("Outer", section("Inner"))])
        assert find_section(nested, "Inner") is None


class TestExtraction:
    """Test summary and item row extraction."""

    def test_summary_row(self, rows):
        income = find_section(rows, "Income")
        assert extract_summary_row(income).label == "Total Income"

    def test_item_rows_skip_totals(self):
        income = parse_rows([section(
            "Income",
            row("Sales", "10"),
            row("Total Income", "10"),
            summary("Total Income", "10"),
        )])[0]
        assert [r.label for r in extract_item_rows(income)] == ["Sales"]

    def test_none_section(self):
        assert extract_summary_row(None) is None
        assert extract_item_rows(None) == []
        assert section_series(None) == []

    def test_section_series(self):
        income = parse_rows([section("Income", summary("Total Income", "1,000", "1,500"))])[0]
        assert section_series(income) == [1000.0, 1500.0]


class TestLabelLookup:
    """Test find_value_by_title and find_row_by_label."""

    def test_value_from_summary_row(self, rows):
        assert find_value_by_title(rows, "Total Operating Expenses") == "590.00"

    def test_value_from_top_level_row(self):
        flat = parse_rows([row("Net Profit", "42.00")])
        assert find_value_by_title(flat, "Net Profit") == "42.00"

    def test_no_match(self, rows):
        assert find_value_by_title(rows, "Net Loss") is None

    def test_row_inside_untitled_section(self, rows):
        assert find_row_by_label(rows, "Gross Profit").values == ["850.00"]

    def test_row_not_found(self, rows):
        assert find_row_by_label(rows, "Depreciation") is None
