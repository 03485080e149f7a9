"""
Value calculators - turn an item (and its store document) into a value.

fallback_value is used when the store has no document for the item,
document_value when it does. Both dispatch on the configured strategy and
raise ConfigurationError for a strategy they do not know.
"""
from ..config.settings import FallbackValue, Settings, ValueCalculation
from ..errors import ConfigurationError
from ..store.base import Document
from .models import Item
from .numeric import coerce, round2


def fallback_value(item: Item, settings: Settings) -> float:
    """
    Estimate an item's value without a store document.

    - zero:    0
    - revenue: price × quantity
    - percent: price × fallback percent × quantity, rounded to cents
    """
    strategy = settings.fallback_value_if_not_found

    if strategy == FallbackValue.ZERO:
        return 0.0

    elif strategy == FallbackValue.REVENUE:
        return item.price * item.quantity

    elif strategy == FallbackValue.PERCENT:
        percent = coerce(settings.fallback_percent)
        return round2(item.price * percent * item.quantity)

    raise ConfigurationError(f"Unknown fallbackValueIfNotFound '{strategy}'")


def document_value(item: Item, document: Document, settings: Settings) -> float:
    """
    Value an item from its store document.

    - valueQuantity:     value × quantity
    - returnRate:        (1 - return rate) × value × quantity, rounded to cents
    - valueWithDiscount: (value - discount) × quantity
    """
    strategy = settings.value_calculation
    value = coerce(document.get(settings.value_field))

    if strategy == ValueCalculation.VALUE_QUANTITY:
        return value * item.quantity

    elif strategy == ValueCalculation.RETURN_RATE:
        # Not clamped: a rate above 1 gives a negative line value
        return_rate = coerce(document.get(settings.return_rate_field))
        return round2((1 - return_rate) * value * item.quantity)

    elif strategy == ValueCalculation.VALUE_WITH_DISCOUNT:
        return (value - item.discount) * item.quantity

    raise ConfigurationError(f"Unknown valueCalculation '{strategy}'")
