from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, str]

PENNY = Decimal("0.01")
BASIS_POINT = Decimal("0.0001")
MILLI = Decimal("0.001")

ZERO = Decimal("0")
WEEKS_PER_YEAR = Decimal("52")
MONTHS_PER_YEAR = Decimal("12")


def _quantize(value: Number, quantum: Decimal) -> Decimal:
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def round2(value: Number) -> Decimal:
    """Currency and hours: 2 decimal places, half-up."""
    return _quantize(value, PENNY)


def round3(value: Number) -> Decimal:
    return _quantize(value, MILLI)


def round4(value: Number) -> Decimal:
    """Fractional percentages (0.0923 == 9.23%)."""
    return _quantize(value, BASIS_POINT)


def contracted_monthly_hours(contracted_hours_weekly: Number) -> Decimal:
    # Unrounded; callers round at their own display boundary.
    return Decimal(contracted_hours_weekly) * WEEKS_PER_YEAR / MONTHS_PER_YEAR


def format_gbp(value: Number) -> str:
    d = Decimal(value)
    sign = "-" if d < 0 else ""
    return f"{sign}£{abs(d):,.2f}"


def format_plain(value: Number) -> str:
    """Render a Decimal without trailing zeros, e.g. 151.67, 35, 0.8."""
    d = Decimal(value)
    if d == d.to_integral_value():
        return f"{d.to_integral_value():f}"
    return f"{d.normalize():f}"
