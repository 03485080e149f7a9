"""
Item Resolver - resolves one item to exactly one value.

Resolution order:
1. Compute the fallback value up front
2. No item id → fallback, no store read
3. Read "{collection_id}/{item id}" from the store
4. Document found → value calculator
5. Not found, store failure or calculation failure → fallback (logged, not raised)
"""
from typing import Optional

from ..config.settings import Settings
from ..diagnostics import DiagnosticSink, LoggingSink
from ..errors import ConfigurationError, DocumentNotFound
from ..store.base import DocumentStore
from .calculators import document_value, fallback_value
from .models import Item, ItemValue


def build_key(collection_id: str, item_id: str) -> str:
    """Build the store lookup key for an item."""
    return f"{collection_id}/{item_id}"


class ItemResolver:
    """Resolves items against a document store with a configured strategy."""

    def __init__(
        self,
        settings: Settings,
        store: DocumentStore,
        sink: Optional[DiagnosticSink] = None,
    ):
        self.settings = settings
        self.store = store
        self.sink = sink or LoggingSink()

    async def resolve(self, item: Item) -> ItemValue:
        """
        Resolve a single item. Never raises for per-item failures.

        ConfigurationError from an unknown strategy is not a per-item failure
        and propagates to the caller.
        """
        fallback = fallback_value(item, self.settings)
        line = ItemValue(item_id=item.id, value=fallback, source="Fallback")
        line.add_trace(
            "Fallback",
            f"{self.settings.fallback_value_if_not_found.value} fallback computed",
            fallback,
        )

        if not item.id:
            message = "Item has no id, using fallback value"
            self.sink.warning(message)
            line.add_warning(message)
            line.add_trace("Lookup", "Skipped, item has no id")
            return line

        key = build_key(self.settings.collection_id, item.id)
        line.key = key
        line.add_trace("Lookup", "Reading store document", key)

        try:
            document = await self.store.read(key, self.settings.project_id)
        except DocumentNotFound:
            document = None
        except Exception as e:
            message = f"Store read failed for key '{key}': {e}"
            self.sink.error(message)
            line.add_warning(message)
            line.add_trace("Lookup", "Store read failed, using fallback value", fallback)
            return line

        if document is None:
            message = f"No document found for key '{key}', using fallback value"
            self.sink.error(message)
            line.add_warning(message)
            line.add_trace("Lookup", "Document not found, using fallback value", fallback)
            return line

        try:
            line.value = document_value(item, document, self.settings)
        except ConfigurationError:
            raise
        except Exception as e:
            message = f"Value calculation failed for key '{key}': {e}"
            self.sink.error(message)
            line.add_warning(message)
            line.add_trace("Calculation", "Failed, using fallback value", fallback)
            return line

        line.source = "Store"
        line.add_trace(
            "Calculation",
            f"{self.settings.value_calculation.value} from '{self.settings.value_field}'",
            line.value,
        )
        return line
