"""
Amount parsing and display formatting.

Report cells carry display strings such as "1,234.50", "-400.00" or
"$ 1,000". parse_amount turns them into floats and never raises, so a blank
or malformed cell only degrades a total instead of breaking a view.
format_amount is the display-side counterpart; the two are not inverses
(formatting always fixes two decimals).
"""

from __future__ import annotations

import math
import re
from typing import Any

CURRENCY_SYMBOLS = {
    "USD": "$",
    "AUD": "$",
    "NZD": "$",
    "CAD": "$",
    "EUR": "€",
    "GBP": "£",
    "ZAR": "R",
}

# Everything except digits, decimal point and minus sign
_NON_NUMERIC = re.compile(r"[^\d.\-]")
# Same, but keeping parentheses so "$(1,200.00)" still reads as negative
_NON_NUMERIC_OR_PAREN = re.compile(r"[^\d.()\-]")

UNICODE_MINUS = "\u2212"


def parse_amount(raw: Any) -> float:
    """
    Parse a formatted amount string into a float.

    Strips thousands separators, currency symbols and whitespace, keeps a
    leading minus sign (ASCII or U+2212) and treats "(1,200.00)" as negative,
    including when a currency symbol or code comes first ("$(1,200.00)").

    Args:
        raw: Cell value (string, number or None)

    Returns:
        Parsed value, or 0.0 for blank, None or unparseable input
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else 0.0

    text = str(raw).strip().replace(UNICODE_MINUS, "-")
    if not text:
        return 0.0

    core = _NON_NUMERIC_OR_PAREN.sub("", text)
    negative = core.startswith("(") and core.endswith(")")
    cleaned = _NON_NUMERIC.sub("", text)

    if cleaned in ("", ".", "-", "-."):
        return 0.0

    try:
        value = float(cleaned)
    except ValueError:
        return 0.0

    if not math.isfinite(value):
        return 0.0

    return -abs(value) if negative else value


def format_amount(value: Any, currency: str = "USD") -> str:
    """
    Format a number as currency with two decimals and thousands grouping.

    Strings are parsed with float() first, so "1200.5" formats as "$1,200.50".
    NaN, None and unparseable input render as "$0.00".
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "$0.00"

    if not math.isfinite(number):
        return "$0.00"

    code = (currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if number < 0 else ""
    return f"{sign}{symbol}{abs(number):,.2f}"


def format_number(raw: Any) -> Any:
    """
    Format a value with thousands separators and two decimals, no symbol.

    "-" passes through unchanged and so does anything float() rejects.
    """
    if raw == "-":
        return "-"
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return raw
    if math.isnan(number):
        return raw
    return f"{number:,.2f}"


def format_percent(value: float, digits: int = 1) -> str:
    """Format a percentage value, e.g. 12.5 -> "12.5%"."""
    if value is None or not math.isfinite(value):
        value = 0.0
    return f"{value:.{digits}f}%"
