#!/usr/bin/env python3
"""
Currency and Quantity Handling Utilities

Amounts are persisted as JSON numbers, so every derived value is rounded
through Decimal before it is stored.

Key Principles:
- Currency amounts round half-up to 2 decimal places
- Fund units and NAV keep up to 4 decimal places
- Missing or unparseable numeric input counts as zero (or a caller default)
- Percentage returns are 0 when nothing was invested
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CURRENCY_PLACES = Decimal("0.01")
UNIT_PLACES = Decimal("0.0001")

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        # repr() gives the shortest round-tripping form, avoiding binary noise
        return Decimal(repr(value))
    return Decimal(value)


def round_currency(value: Any) -> float:
    """
    Round an amount to 2 decimal places, half-up.

    Example:
        round_currency(1.005) -> 1.01
    """
    if value is None:
        return 0.0
    return float(_to_decimal(value).quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP))


def round_units(value: Any) -> float:
    """Round a unit count or NAV to 4 decimal places, half-up."""
    if value is None:
        return 0.0
    return float(_to_decimal(value).quantize(UNIT_PLACES, rounding=ROUND_HALF_UP))


def safe_parse_float(value: Any, default: float = 0.0) -> float:
    """
    Parse user input into a currency amount rounded to 2 places.

    Keeps only digits and dots, so signs, currency symbols and separators
    are dropped and the result is never negative. Dots after the first are
    removed. Returns ``default`` for None, empty strings and anything that
    still is not a number.

    Examples:
        safe_parse_float("₹1,234.50") -> 1234.5
        safe_parse_float("-500") -> 500.0
        safe_parse_float("1.2.3") -> 1.23
        safe_parse_float("") -> 0.0
        safe_parse_float(None, 7.1) -> 7.1
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return abs(round_currency(value))

    clean = _NON_NUMERIC.sub("", str(value))
    whole, dot, fraction = clean.partition(".")
    clean = whole + dot + fraction.replace(".", "")
    if not clean or clean == ".":
        return default
    try:
        return round_currency(Decimal(clean))
    except InvalidOperation:
        return default


def safe_parse_units(value: Any, default: float = 0.0) -> float:
    """Like safe_parse_float but keeps 4 decimal places."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return abs(round_units(_to_decimal(value) if isinstance(value, (int, float)) else Decimal(str(value).strip())))
    except InvalidOperation:
        return default


def safe_parse_int(value: Any, default: int = 0) -> int:
    """
    Parse an integer, rounding numbers and reading the leading digits of
    strings, so ``"10.5"`` gives 10. Returns ``default`` when a string has
    no leading digits.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(round(value))
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group(1))


def calculate_returns(current_value: Any, invested_amount: Any) -> float:
    """
    Percentage gain of current value over invested amount, 2 places.

    Returns 0 when invested amount is 0 or missing.
    """
    invested = _to_decimal(invested_amount or 0)
    if invested == 0:
        return 0.0
    current = _to_decimal(current_value or 0)
    pct = (current - invested) / invested * 100
    return float(pct.quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP))


def multiply_currency(quantity: Any, price: Any) -> float:
    """Value of ``quantity`` units at ``price``, rounded to 2 places."""
    return round_currency(_to_decimal(quantity or 0) * _to_decimal(price or 0))


def sum_currency(values) -> float:
    """Sum amounts exactly and round once; None entries count as 0."""
    total = Decimal(0)
    for value in values:
        if value is None:
            continue
        total += _to_decimal(value)
    return round_currency(total)


def format_inr(amount: Any) -> str:
    """Format an amount for display, e.g. ``₹1,234.50``."""
    value = round_currency(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}₹{abs(value):,.2f}"
