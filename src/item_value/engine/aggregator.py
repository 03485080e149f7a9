"""
Aggregator - sums resolved item values into the final total.

1. Sum every valid number (anything else is skipped with a warning)
2. Add shipping cost if positive
3. Subtract fulfillment cost if positive
4. Floor at zero
5. Render as text
"""
from typing import Any, Iterable, Optional

from ..diagnostics import DiagnosticSink, LoggingSink
from .numeric import coerce, format_total, is_number


def sum_values(values: Iterable[Any], sink: Optional[DiagnosticSink] = None) -> float:
    """Sum the numeric entries of values, skipping and reporting the rest."""
    sink = sink or LoggingSink()
    total = 0.0
    for index, value in enumerate(values):
        if is_number(value):
            total += value
        else:
            sink.warning(f"Skipping non-numeric item value at position {index}: {value!r}")
    return total


def adjust_total(total: float, shipping_cost: Any = 0, fulfillment_cost: Any = 0) -> float:
    """Apply shipping/fulfillment adjustments and clamp at zero."""
    shipping = coerce(shipping_cost)
    if shipping > 0:
        total += shipping

    fulfillment = coerce(fulfillment_cost)
    if fulfillment > 0:
        total -= fulfillment

    return max(total, 0.0)


def aggregate(
    values: Iterable[Any],
    shipping_cost: Any = 0,
    fulfillment_cost: Any = 0,
    sink: Optional[DiagnosticSink] = None,
) -> str:
    """Aggregate resolved item values into the output total string."""
    total = adjust_total(sum_values(values, sink), shipping_cost, fulfillment_cost)
    return format_total(total)
