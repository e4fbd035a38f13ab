"""Display helpers for calculator output."""

from __future__ import annotations


def format_currency(amount: float | None, *, symbol: str = "$") -> str:
    value = float(amount or 0.0)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(fraction: float | None, *, digits: int = 2) -> str:
    """Render a decimal fraction (0.0825) as a percentage string (8.25%)."""
    return f"{(fraction or 0.0) * 100:.{digits}f}%"


def format_duration(months: int) -> str:
    """Render a month count as ``"N years M months"``, omitting empty parts."""

    months = max(int(months), 0)
    years, remainder = divmod(months, 12)
    parts = []
    if years:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if remainder or not years:
        parts.append(f"{remainder} month{'s' if remainder != 1 else ''}")
    return " ".join(parts)
