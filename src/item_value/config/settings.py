"""
Centralized settings for the item value engine.

Settings come either from the hosting environment's field map
(`Settings.from_mapping`) or from ITEM_VALUE_* environment variables
(`Settings.load`). Strategy selectors are parsed into enums here, so an
unknown strategy fails before any item is valued.
"""
import os
from enum import Enum
from pathlib import Path
from dataclasses import dataclass, replace
from typing import Any, Optional

from ..errors import ConfigurationError


class ValueCalculation(str, Enum):
    """How a found store document is turned into an item value."""
    VALUE_QUANTITY = "valueQuantity"
    RETURN_RATE = "returnRate"
    VALUE_WITH_DISCOUNT = "valueWithDiscount"


class FallbackValue(str, Enum):
    """How an item is valued when the store has no document for it."""
    ZERO = "zero"
    REVENUE = "revenue"
    PERCENT = "percent"


# Hosting environment field names → Settings attribute names
FIELD_ALIASES = {
    'collectionId': 'collection_id',
    'valueField': 'value_field',
    'valueCalculation': 'value_calculation',
    'returnRateField': 'return_rate_field',
    'fallbackValueIfNotFound': 'fallback_value_if_not_found',
    'fallBackPercent': 'fallback_percent',
    'fallbackPercent': 'fallback_percent',
    'shippingCost': 'shipping_cost',
    'fulfillmentCost': 'fulfillment_cost',
    'projectId': 'project_id',
}

ENV_PREFIX = 'ITEM_VALUE_'


def parse_enum(enum_cls, value: Any, field_name: str):
    """Parse a strategy selector, raising ConfigurationError on unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Unknown {field_name} '{value}'. Expected one of: {allowed}"
        ) from None


@dataclass(frozen=True)
class Settings:
    """Engine configuration with sensible defaults."""

    # Store lookup
    collection_id: str = ""
    value_field: str = ""
    project_id: Optional[str] = None

    # Strategies
    value_calculation: ValueCalculation = ValueCalculation.VALUE_QUANTITY
    return_rate_field: Optional[str] = None
    fallback_value_if_not_found: FallbackValue = FallbackValue.ZERO

    # Numeric inputs stay raw; they are coerced where they are used
    fallback_percent: Any = 0.1
    shipping_cost: Any = 0
    fulfillment_cost: Any = 0

    # Store backends
    store_csv: Optional[Path] = None
    firestore_timeout: float = 10.0
    firestore_token: Optional[str] = None

    log_level: str = "INFO"

    def __post_init__(self):
        object.__setattr__(
            self, 'value_calculation',
            parse_enum(ValueCalculation, self.value_calculation, 'valueCalculation')
        )
        object.__setattr__(
            self, 'fallback_value_if_not_found',
            parse_enum(FallbackValue, self.fallback_value_if_not_found, 'fallbackValueIfNotFound')
        )
        if self.store_csv is not None and not isinstance(self.store_csv, Path):
            object.__setattr__(self, 'store_csv', Path(self.store_csv))

    def validate(self) -> 'Settings':
        """Check required fields. Returns self so calls can be chained."""
        missing = []
        if not self.collection_id:
            missing.append('collectionId')
        if not self.value_field:
            missing.append('valueField')
        if self.value_calculation is ValueCalculation.RETURN_RATE and not self.return_rate_field:
            missing.append('returnRateField')
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
        return self

    def with_overrides(self, overrides: Optional[dict]) -> 'Settings':
        """Return a copy with the given fields (either naming style) replaced."""
        if not overrides:
            return self
        return replace(self, **normalize_keys(overrides))

    @classmethod
    def from_mapping(cls, data: dict) -> 'Settings':
        """
        Build settings from a field map such as a tag's template data.

        Blank fields fall back to their defaults, as with load().
        """
        fields = {
            key: value for key, value in data.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }
        return cls(**normalize_keys(fields))

    @classmethod
    def load(cls, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from ITEM_VALUE_* environment variables."""
        env = os.environ if environ is None else environ

        def get(name: str, default=None):
            value = env.get(ENV_PREFIX + name)
            return default if value in (None, '') else value

        timeout = get('FIRESTORE_TIMEOUT', '10')
        try:
            firestore_timeout = float(timeout)
        except ValueError:
            raise ConfigurationError(f"Invalid ITEM_VALUE_FIRESTORE_TIMEOUT '{timeout}'") from None

        return cls(
            collection_id=get('COLLECTION_ID', ''),
            value_field=get('VALUE_FIELD', ''),
            project_id=get('PROJECT_ID'),
            value_calculation=get('VALUE_CALCULATION', ValueCalculation.VALUE_QUANTITY.value),
            return_rate_field=get('RETURN_RATE_FIELD'),
            fallback_value_if_not_found=get('FALLBACK_VALUE_IF_NOT_FOUND', FallbackValue.ZERO.value),
            fallback_percent=get('FALLBACK_PERCENT', 0.1),
            shipping_cost=get('SHIPPING_COST', 0),
            fulfillment_cost=get('FULFILLMENT_COST', 0),
            store_csv=get('STORE_CSV'),
            firestore_timeout=firestore_timeout,
            firestore_token=get('FIRESTORE_TOKEN'),
            log_level=get('LOG_LEVEL', 'INFO'),
        )


def normalize_keys(data: dict) -> dict:
    """Map camelCase field names onto Settings attributes and drop unknown keys."""
    known = set(Settings.__dataclass_fields__)
    normalized = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key, key)
        if name in known:
            normalized[name] = value
    return normalized


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
