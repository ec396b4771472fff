"""Numeric functions.

Arithmetic keeps the current value when the other operand is None.
Rounding is half-up, independent of locale and float representation.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from squiggly.functions.registry import squiggly_function


@squiggly_function()
def abs_(value: int | float | None) -> int | float | None:
    return None if value is None else abs(value)


@squiggly_function()
def ceil(value: int | float | None) -> int | None:
    return None if value is None else math.ceil(value)


@squiggly_function()
def floor(value: int | float | None) -> int | None:
    return None if value is None else math.floor(value)


@squiggly_function()
def round_(value: int | float | None, places: int = 0) -> int | float | None:
    if value is None:
        return None
    rounded = Decimal(str(value)).quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP
    )
    return int(rounded) if places <= 0 else float(rounded)


@squiggly_function()
def add(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value
    return value + other


@squiggly_function()
def subtract(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value
    return value - other


@squiggly_function()
def multiply(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value
    return value * other


@squiggly_function()
def divide(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value
    return value / other


@squiggly_function()
def mod(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value
    return value % other


@squiggly_function()
def max_(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value if other is None else other
    return max(value, other)


@squiggly_function()
def min_(value: int | float | None, other: int | float | None) -> int | float | None:
    if value is None or other is None:
        return value if other is None else other
    return min(value, other)
