"""Shared report fixtures shaped like the accounting integration's P&L JSON."""

import pytest


def cells(*values):
    return [{"Value": v} for v in values]


def header(*periods):
    return {"RowType": "Header", "Cells": cells("", *periods)}


def row(label, *values):
    return {"RowType": "Row", "Cells": cells(label, *values)}


def summary(label, *values):
    return {"RowType": "SummaryRow", "Cells": cells(label, *values)}


def section(title, *rows):
    return {"RowType": "Section", "Title": title, "Rows": list(rows)}


def response(report):
    return {
        "Id": "c1d2e3",
        "Status": "OK",
        "ProviderName": "Dashboard",
        "DateTimeUTC": "/Date(1706659200000)/",
        "Reports": [report],
    }


@pytest.fixture
def single_period_report():
    return response({
        "ReportID": "ProfitAndLoss",
        "ReportName": "Profit and Loss",
        "ReportType": "ProfitAndLoss",
        "ReportTitles": ["Profit & Loss", "Demo Company", "1 January 2024 to 31 January 2024"],
        "ReportDate": "31 January 2024",
        "Rows": [
            header("31 Jan 2024"),
            section(
                "Income",
                row("Sales", "1,000.00"),
                row("Interest Income", "50.00"),
                summary("Total Income", "1,050.00"),
            ),
            section(
                "Less Cost of Sales",
                row("Purchases", "200.00"),
                summary("Total Cost of Sales", "200.00"),
            ),
            section("", row("Gross Profit", "850.00")),
            section(
                "Less Operating Expenses",
                row("Wages", "250.00"),
                row("Rent", "300.00"),
                row("Power", "40.00"),
                summary("Total Operating Expenses", "590.00"),
            ),
            section("", row("Net Profit", "260.00")),
        ],
    })


@pytest.fixture
def monthly_report():
    return response({
        "ReportName": "Profit and Loss",
        "Rows": [
            header("Jan", "Feb", "Mar"),
            section(
                "Income",
                row("Sales", "1,000", "1,200", "900"),
                summary("Total Income", "1,000", "1,200", "900"),
            ),
            section(
                "Less Operating Expenses",
                row("Rent", "400", "400", "400"),
                row("Advertising", "50", "0", "75"),
                summary("Total Operating Expenses", "450", "400", "475"),
            ),
            section("", row("Net Profit", "550", "800", "425")),
        ],
    })


@pytest.fixture
def quarterly_report():
    return response({
        "ReportName": "Profit and Loss",
        "Rows": [
            header("P1", "P2"),
            section(
                "Income",
                row("Sales", "1000", "1500"),
                summary("Total Income", "1000", "1500"),
            ),
            section(
                "Less Operating Expenses",
                row("Wages", "100", "100"),
                row("Rent", "300", "350"),
                summary("Total Operating Expenses", "400", "450"),
            ),
            section("", row("Net Profit", "600", "1050")),
        ],
    })


@pytest.fixture
def financial_year_report():
    # Columns run newest first, as the upstream report does
    return response({
        "ReportName": "Profit and Loss",
        "Rows": [
            header("Feb 2025", "Jan 2025"),
            section(
                "Income",
                row("Sales", "1,000.00", "800.00"),
                row("Other Revenue", "0.00", "0.00"),
                summary("Total Income", "1,000.00", "800.00"),
            ),
            section(
                "Less Cost of Sales",
                row("Purchases", "200.00", "100.00"),
                summary("Total Cost of Sales", "200.00", "100.00"),
            ),
            section("", row("Gross Profit", "800.00", "700.00")),
            section(
                "Less Operating Expenses",
                row("Rent", "300.00", "300.00"),
                row("Wages", "100.00", "50.00"),
                summary("Total Operating Expenses", "400.00", "350.00"),
            ),
            section("", row("Net Profit", "400.00", "350.00")),
        ],
    })
