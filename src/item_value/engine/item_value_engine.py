"""
Item Value Engine - values every item of an event and aggregates the total.

Reads the item list, resolves all items concurrently (one task per item, no
cap), waits for every one of them, then sums the resolved values with the
configured shipping and fulfillment adjustments.
"""
import asyncio
import json
from typing import Any, Optional

from ..config.settings import Settings, get_settings
from ..diagnostics import DiagnosticSink, LoggingSink
from ..errors import ItemValueError, ValuationError
from ..sources import ItemSource
from ..store.base import DocumentStore
from .aggregator import adjust_total, sum_values
from .models import Item, ItemValue, Result
from .numeric import format_total
from .resolver import ItemResolver


class ItemValueEngine:
    """
    Core engine that values an event's items.

    Collaborators are injected: the document store to look items up in, an
    optional item source for run(), and the diagnostic sink.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[Settings] = None,
        source: Optional[ItemSource] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        self.settings = (settings or get_settings()).validate()
        self.store = store
        self.source = source
        self.sink = sink or LoggingSink()
        self.resolver = ItemResolver(self.settings, store, self.sink)

    async def run(self) -> str:
        """Value the items of the configured source and return the total text."""
        if self.source is None:
            raise ValuationError("No item source configured")
        result = await self.calculate(self.source.get_items())
        return result.value

    async def calculate(self, raw_items: Optional[list[Any]]) -> Result:
        """
        Value a list of raw event items.

        Args:
            raw_items: Item mappings as sent by the event (id, price,
                quantity, discount). None is treated as an empty list.

        Returns:
            Result with the total string, numeric total and one line per item
        """
        raw_items = list(raw_items or [])
        self.sink.info(f"Items: {_describe(raw_items)}")

        try:
            if self.store is None:
                raise ValuationError("No document store available")
            items = [Item.from_dict(raw) for raw in raw_items]
            # Every task is joined before any failure is raised
            lines = await asyncio.gather(
                *(self.resolver.resolve(item) for item in items),
                return_exceptions=True,
            )
            failures = [line for line in lines if isinstance(line, BaseException)]
            if failures:
                raise failures[0]
        except ItemValueError as e:
            self.sink.error(f"Item valuation failed: {e}")
            raise
        except Exception as e:
            self.sink.error(f"Item valuation failed: {e}")
            raise ValuationError(f"Item valuation failed: {e}") from e

        return self._build_result(list(lines))

    def _build_result(self, lines: list[ItemValue]) -> Result:
        subtotal = sum_values([line.value for line in lines], self.sink)
        total = adjust_total(subtotal, self.settings.shipping_cost, self.settings.fulfillment_cost)

        result = Result(value=format_total(total), total=total, lines=lines)
        result.add_trace("Items", f"{len(lines)} items resolved")
        result.add_trace("Subtotal", "Sum of item values", format_total(subtotal))
        result.add_trace("Adjustments", "Shipping added, fulfillment subtracted, floored at 0", result.value)

        for line in lines:
            for warning in line.warnings:
                result.add_warning(warning)
        return result


def _describe(raw_items: list) -> str:
    """Render the raw item list for the diagnostic log."""
    try:
        return json.dumps(raw_items, default=str)
    except (TypeError, ValueError):
        return repr(raw_items)
