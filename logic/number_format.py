"""Utilities for converting and formatting numeric values consistently.

Every amount written into an AIA document goes through this module so the
G702 summary fields prepared by callers and the G703 schedule rows filled
by the exporter share one canonical representation.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

NumberLike = Union[int, float, str, None]

_AMOUNT_DECIMALS = 2
_PERCENT_DECIMALS = 1
_CURRENCY_SYMBOL = "$"

_NOISE_RE = re.compile(r"[\s$,%]")


def amount_decimal_places() -> int:
    """Return the standard amount of decimal places for monetary amounts."""
    return _AMOUNT_DECIMALS


def percent_decimal_places() -> int:
    """Return the standard amount of decimal places for percentages."""
    return _PERCENT_DECIMALS


def parse_number(value: NumberLike) -> float:
    """Convert *value* to ``float`` in a tolerant manner.

    Currency symbols, grouping commas, spaces and percent signs are ignored.
    Anything that still does not parse yields ``0.0``.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = _NOISE_RE.sub("", value or "")
    if not text:
        return 0.0
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return -number if negative else number


def _round_half_up(number: float, places: int) -> Decimal:
    """Round the exact binary value of *number*, halves away from zero."""
    return Decimal(number).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_currency(value: NumberLike) -> str:
    """Format *value* as US dollars, e.g. ``1234.5`` -> ``"$1,234.50"``.

    Negative amounts keep the sign in front of the symbol (``"-$12.00"``);
    non-finite values render as zero.
    """
    number = parse_number(value)
    if not math.isfinite(number):
        number = 0.0
    places = amount_decimal_places()
    amount = _round_half_up(number, places)
    text = f"{abs(amount):,.{places}f}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{_CURRENCY_SYMBOL}{text}"


def format_percent(value: NumberLike) -> str:
    """Format *value* (already in percent units) with one decimal place."""
    number = parse_number(value)
    if not math.isfinite(number):
        number = 0.0
    places = percent_decimal_places()
    return f"{_round_half_up(number, places):.{places}f}%"


def format_date(value: Optional[Union[date, datetime, str]]) -> str:
    """Return *value* as ``MM/DD/YYYY``; empty input gives an empty string."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return value.strftime("%m/%d/%Y")


__all__ = [
    "NumberLike",
    "amount_decimal_places",
    "format_currency",
    "format_date",
    "format_percent",
    "parse_number",
    "percent_decimal_places",
]
