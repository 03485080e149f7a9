"""In-memory document store, used for tests and local runs."""
from typing import Optional

from ..errors import DocumentNotFound
from .base import Document, DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store keyed by the full "{collection}/{id}" key.

    Every key read is recorded in `reads`, in call order.
    """

    name = "memory"

    def __init__(self, documents: Optional[dict[str, dict]] = None):
        self.documents = dict(documents or {})
        self.reads: list[tuple[str, Optional[str]]] = []

    def put(self, key: str, data: dict):
        """Add or replace a document."""
        self.documents[key] = dict(data)

    async def read(self, key: str, project_id: Optional[str] = None) -> Document:
        self.reads.append((key, project_id))
        if key not in self.documents:
            raise DocumentNotFound(key)
        return Document(key=key, data=dict(self.documents[key]))

    @property
    def keys_read(self) -> list[str]:
        """Keys read so far, without project context."""
        return [key for key, _ in self.reads]
