"""Permissive numeric parsing for raw form input.

Calculator forms accept whatever users type: ``$25,000``, ``18.9%``,
``15k``, ``2.5M``. Every boundary (HTTP forms, CLI options) funnels its
raw strings through these helpers so the rules live in one place.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")
_SUFFIX_RE = re.compile(r"(?<![a-z])([kmb])(?![a-z])")
_MULTIPLIERS = {"k": 1e3, "m": 1e6, "b": 1e9}


def parse_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Extract the first number from ``value``.

    Currency symbols, thousands separators, whitespace and ``%`` are ignored.
    A standalone ``k``/``m``/``b`` suffix multiplies the result by a thousand,
    million or billion. Returns ``default`` when no finite number is present.
    """

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default

    text = str(value).strip().lower().replace(",", "").replace("_", "")
    if not text:
        return default

    match = _NUMBER_RE.search(text)
    if match is None:
        return default

    number = float(match.group(0))
    suffix = _SUFFIX_RE.search(text[match.end():].lstrip())
    if suffix is not None and suffix.start() == 0:
        number *= _MULTIPLIERS[suffix.group(1)]
    return number if math.isfinite(number) else default


def parse_percent(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Parse a percentage (``"18.9%"`` or ``18.9``) into a decimal fraction."""

    number = parse_number(value)
    if number is None:
        return default
    return number / 100.0


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse an integer, truncating any fractional part."""

    number = parse_number(value)
    if number is None:
        return default
    return int(number)


def coerce_amount(value: Any) -> float:
    """Return a non-negative float, treating junk and negatives as zero."""

    number = parse_number(value, default=0.0)
    return max(number or 0.0, 0.0)
