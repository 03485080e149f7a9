"""
Numeric helpers shared by every calculation in the engine.

Event payloads, store documents and configuration values arrive as whatever
the upstream system sent (numbers, numeric strings, blanks, nulls). All of
them pass through `coerce` before any arithmetic, so invalid input becomes
NaN instead of an exception.
"""
import math
from decimal import Decimal, InvalidOperation
from typing import Any


INVALID = math.nan


def coerce(value: Any) -> float:
    """
    Convert an arbitrary value to a float.

    Returns a finite float, or NaN when the value is not a usable number.
    Never raises.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (InvalidOperation, OverflowError, ValueError):
            return INVALID
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return INVALID
        try:
            number = float(text)
        except ValueError:
            return INVALID
    else:
        return INVALID

    if not math.isfinite(number):
        return INVALID
    return number


def is_number(value: Any) -> bool:
    """True for finite int/float values. Booleans and NaN are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def round2(value: float) -> float:
    """Round to two decimal places, ties away from zero."""
    if not math.isfinite(value):
        return value
    cents = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(cents / 100, value) if cents else 0.0


def format_total(value: float) -> str:
    """Render a total the way the output contract expects ("210", "107.5")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
