"""
Document store interface.

A store maps a key of the form "{collection}/{id}" to a document. The engine
issues exactly one read per item and never retries.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Document:
    """A record returned by a document store."""
    key: str
    data: dict = field(default_factory=dict)

    def get(self, field_name: Optional[str], default: Any = None) -> Any:
        """Read a field by name. Missing fields return the default."""
        if not field_name:
            return default
        return self.data.get(field_name, default)


class DocumentStore(ABC):
    """Keyed, read-only document source."""

    name = "store"

    @abstractmethod
    async def read(self, key: str, project_id: Optional[str] = None) -> Document:
        """
        Read the document stored at key.

        Raises DocumentNotFound when there is no such document and StoreError
        (or any transport exception) when the read itself fails.
        """

    async def close(self):
        """Release any client resources. No-op by default."""
