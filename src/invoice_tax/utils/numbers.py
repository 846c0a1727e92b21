"""Numeric coercion and rounding for amounts read from invoice documents."""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, localcontext

CENT = Decimal("0.01")
# Enough digits to quantize any finite float to cents
QUANTIZE_PRECISION = 320


def to_number(value) -> float:
    """Coerce an untyped document value to float.

    Missing, empty, non-numeric and non-finite values all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str):
        return 0.0
    s = value.strip()
    if not s:
        return 0.0
    try:
        result = float(s)
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0


def round2(value) -> float:
    """Round to 2 decimals, halves away from zero.

    Goes through the shortest repr of the float so that 0.125 rounds to 0.13
    rather than to the binary neighbour below it.
    """
    number = to_number(value)
    with localcontext() as ctx:
        ctx.prec = QUANTIZE_PRECISION
        try:
            return float(Decimal(repr(number)).quantize(CENT, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return number


def sum_values(values) -> float:
    """Sum a sequence of untyped values, coercing each one."""
    return sum((to_number(v) for v in values), 0.0)
