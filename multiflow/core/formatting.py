"""Numeric input sanitisation and display formatting.

Rent roll and purchase fields arrive as free-form text; these helpers turn
them into floats before they reach the engines.
"""

from __future__ import annotations

import re

_NON_DECIMAL = re.compile(r"[^0-9.]")
_NON_CURRENCY = re.compile(r"[^0-9.\-]")


def sanitize_decimal(value: str) -> str:
    """Keep digits and the first decimal point only.

    >>> sanitize_decimal("1,250.5.0")
    '1250.50'
    """
    filtered = _NON_DECIMAL.sub("", value or "")
    head, dot, tail = filtered.partition(".")
    if not dot:
        return head
    return head + "." + tail.replace(".", "")


def parse_currency(value: str | None) -> float | None:
    """Parse a currency string such as ``"$1,800.00"``.

    Returns None when nothing numeric is left.
    """
    if value is None:
        return None
    filtered = _NON_CURRENCY.sub("", value)
    try:
        return float(filtered)
    except ValueError:
        return None


def parse_percent(value: str | None) -> float | None:
    """Parse ``"6.5%"`` or ``"6.5"`` into 6.5."""
    if value is None:
        return None
    cleaned = sanitize_decimal(value)
    try:
        return float(cleaned)
    except ValueError:
        return None


def format_currency_live(raw: str) -> str:
    """Format typed digits as cents, e.g. ``"123456"`` -> ``"$1,234.56"``."""
    digits = "".join(ch for ch in raw if ch.isdigit())
    if not digits:
        return ""
    return format_currency(int(digits) / 100.0, decimals=2)


def format_currency(value: float, decimals: int = 0) -> str:
    """Format a dollar amount with thousands separators."""
    sign = "-" if round(value, decimals) < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_signed_currency(value: float, decimals: int = 0) -> str:
    """Currency with an explicit sign, for deltas."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(ratio: float, decimals: int = 1) -> str:
    """Format a ratio (0.0702) as a percentage string (7.0%)."""
    return f"{ratio * 100.0:.{decimals}f}%"
