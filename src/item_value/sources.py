"""Event item sources - where the engine gets its item list from."""
from typing import Optional


class ItemSource:
    """Returns the ordered item list of the current event."""

    def get_items(self) -> list[dict]:
        raise NotImplementedError


class StaticItemSource(ItemSource):
    """Serves a fixed item list."""

    def __init__(self, items: Optional[list[dict]] = None):
        self.items = list(items or [])

    def get_items(self) -> list[dict]:
        return list(self.items)


class EventDataItemSource(ItemSource):
    """
    Reads the item list from an event payload.

    A missing key, or a value that is not a list, yields an empty list.
    """

    def __init__(self, event: dict, key: str = "items"):
        self.event = event or {}
        self.key = key

    def get_items(self) -> list[dict]:
        items = self.event.get(self.key)
        if not isinstance(items, list):
            return []
        return list(items)
