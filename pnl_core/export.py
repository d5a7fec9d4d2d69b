"""
Monthly breakdown filtering and CSV export.

The CSV is built by plain joining: values are the report's display strings
(e.g. "1,000") and are not quoted or escaped. Report labels come from a
controlled vocabulary, so this matches what the dashboard has always
exported.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Union

CSV_HEADER_LABEL = "Item"


def filter_rows(rows: Sequence[dict], search: str) -> list[dict]:
    """
    Case-insensitive substring filter over a row's label and all its values.

    An empty search returns every row.
    """
    needle = (search or "").strip().lower()
    if not needle:
        return list(rows)

    return [
        row for row in rows
        if needle in row["label"].lower()
        or any(needle in str(value).lower() for value in row["values"])
    ]


def export_csv(rows: Sequence[dict], periods: Sequence[str]) -> str:
    """
    Render flattened rows as CSV text.

    Args:
        rows: Flattened rows (label + values)
        periods: Period labels for the header row

    Returns:
        "Item,<period>,...\\n<label>,<value>,..." joined with newlines
    """
    lines = [",".join([CSV_HEADER_LABEL, *periods])]
    for row in rows:
        lines.append(",".join([row["label"], *[str(v) for v in row["values"]]]))
    return "\n".join(lines)


def csv_filename(on: Optional[Union[date, datetime]] = None) -> str:
    """Download name for the monthly export, e.g. monthly_breakdown_2024-05-31.csv."""
    on = on or datetime.now()
    if isinstance(on, datetime):
        on = on.date()
    return f"monthly_breakdown_{on.isoformat()}.csv"
