"""Exception types raised by the item value engine."""


class ItemValueError(Exception):
    """Base class for all item value errors."""


class ConfigurationError(ItemValueError):
    """Configuration is missing, malformed, or names an unknown strategy."""


class StoreError(ItemValueError):
    """A document store read failed."""

    def __init__(self, message: str, key: str = None):
        super().__init__(message)
        self.key = key


class DocumentNotFound(StoreError):
    """The document store holds no record for the key."""

    def __init__(self, key: str):
        super().__init__(f"No document found at '{key}'", key=key)


class ValuationError(ItemValueError):
    """The valuation as a whole could not be produced."""
