"""
Report Tree Model

Typed representation of the Profit & Loss report documents returned by the
accounting integration. The raw JSON uses PascalCase keys (RowType, Cells,
Rows, ...); camelCase keys are accepted as well since some pre-built report
files are re-serialised by the web app.

Parsing never raises for missing or oddly shaped data: absent keys fall back
to empty values so every downstream extractor can stay total.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class RowType(str, Enum):
    HEADER = "Header"
    SECTION = "Section"
    SUMMARY_ROW = "SummaryRow"
    ROW = "Row"

    @classmethod
    def parse(cls, raw: Any) -> "RowType":
        """Map a raw RowType string to the enum; unknown types become HEADER."""
        for member in cls:
            if str(raw or "").lower() == member.value.lower():
                return member
        return cls.HEADER


def _get(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key, trying each spelling in turn."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_list(value: Any) -> list:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


# ============================================================================
# Cells and Rows
# ============================================================================

@dataclass(frozen=True)
class Attribute:
    id: str
    value: str

    @classmethod
    def from_dict(cls, data: dict) -> "Attribute":
        return cls(
            id=str(_get(data, "Id", "id", default="")),
            value=str(_get(data, "Value", "value", default="")),
        )


@dataclass(frozen=True)
class Cell:
    value: str = ""
    attributes: tuple[Attribute, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Cell":
        if not isinstance(data, dict):
            return cls(value="" if data is None else str(data))
        attributes = tuple(
            Attribute.from_dict(a)
            for a in _as_list(_get(data, "Attributes", "attributes"))
            if isinstance(a, dict)
        )
        return cls(value=str(_get(data, "Value", "value", default="")), attributes=attributes)

    def attribute(self, attr_id: str) -> Optional[str]:
        """Return the value of the attribute with the given id, if any."""
        for attr in self.attributes:
            if attr.id == attr_id:
                return attr.value
        return None


@dataclass(frozen=True)
class ReportRow:
    """
    One node of the report tree.

    Only Section rows carry nested rows; the parser drops any nested rows
    found on SummaryRow/Row/Header nodes.
    """

    row_type: RowType
    title: str = ""
    cells: tuple[Cell, ...] = ()
    rows: tuple["ReportRow", ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ReportRow":
        row_type = RowType.parse(_get(data, "RowType", "rowType", "type"))
        cells = tuple(Cell.from_dict(c) for c in _as_list(_get(data, "Cells", "cells")))
        rows: tuple[ReportRow, ...] = ()
        if row_type is RowType.SECTION:
            rows = parse_rows(_get(data, "Rows", "rows"))
        return cls(
            row_type=row_type,
            title=str(_get(data, "Title", "title", default="")),
            cells=cells,
            rows=rows,
        )

    @property
    def label(self) -> str:
        """First cell value (the row label), or an empty string."""
        return self.cells[0].value if self.cells else ""

    @property
    def values(self) -> list[str]:
        """Raw per-period cell values following the label cell."""
        return [cell.value for cell in self.cells[1:]]

    @property
    def is_section(self) -> bool:
        return self.row_type is RowType.SECTION


def parse_rows(raw_rows: Any) -> tuple[ReportRow, ...]:
    """Parse a raw list of row dicts, skipping anything that is not a dict."""
    return tuple(ReportRow.from_dict(r) for r in _as_list(raw_rows) if isinstance(r, dict))


# ============================================================================
# Reports
# ============================================================================

@dataclass(frozen=True)
class Field:
    id: str
    value: str
    description: str = ""


@dataclass(frozen=True)
class Report:
    report_id: str = ""
    report_name: str = ""
    report_type: str = ""
    report_titles: tuple[str, ...] = ()
    report_date: str = ""
    fields: tuple[Field, ...] = ()
    rows: tuple[ReportRow, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Report":
        if not isinstance(data, dict):
            return cls()
        fields = tuple(
            Field(
                id=str(_get(f, "Id", "id", "FieldID", default="")),
                value=str(_get(f, "Value", "value", default="")),
                description=str(_get(f, "Description", "description", default="")),
            )
            for f in _as_list(_get(data, "Fields", "fields"))
            if isinstance(f, dict)
        )
        return cls(
            report_id=str(_get(data, "ReportID", "reportId", "ReportId", default="")),
            report_name=str(_get(data, "ReportName", "reportName", default="")),
            report_type=str(_get(data, "ReportType", "reportType", default="")),
            report_titles=tuple(str(t) for t in _as_list(_get(data, "ReportTitles", "reportTitles"))),
            report_date=str(_get(data, "ReportDate", "reportDate", default="")),
            fields=fields,
            rows=parse_rows(_get(data, "Rows", "rows")),
        )

    @property
    def header_row(self) -> Optional[ReportRow]:
        """The first Header row, which carries the column titles."""
        for row in self.rows:
            if row.row_type is RowType.HEADER and row.cells:
                return row
        return None

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class ReportResponse:
    id: str = ""
    status: str = ""
    provider_name: str = ""
    date_time_utc: str = ""
    reports: tuple[Report, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ReportResponse":
        if not isinstance(data, dict):
            return cls()
        return cls(
            id=str(_get(data, "Id", "id", default="")),
            status=str(_get(data, "Status", "status", default="")),
            provider_name=str(_get(data, "ProviderName", "providerName", default="")),
            date_time_utc=str(_get(data, "DateTimeUTC", "dateTimeUtc", default="")),
            reports=tuple(
                Report.from_dict(r)
                for r in _as_list(_get(data, "Reports", "reports"))
                if isinstance(r, dict)
            ),
        )

    def first_report(self) -> Optional[Report]:
        """The first report, or None when the response carries no data."""
        return self.reports[0] if self.reports else None


def coerce_report(payload: Any) -> Optional[Report]:
    """
    Accept a Report, ReportResponse, raw dict or None and return the report.

    Raw dicts are recognised as a response when they carry a Reports list,
    otherwise they are parsed as a single report. Returns None when there is
    no data available.
    """
    if payload is None:
        return None
    if isinstance(payload, Report):
        return payload
    if isinstance(payload, ReportResponse):
        return payload.first_report()
    if isinstance(payload, dict):
        if "Reports" in payload or "reports" in payload:
            return ReportResponse.from_dict(payload).first_report()
        return Report.from_dict(payload)
    return None
