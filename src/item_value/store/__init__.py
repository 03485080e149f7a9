"""Store subpackage - document store interface and backends."""
from .base import Document, DocumentStore
from .memory import InMemoryDocumentStore
from .catalog import CatalogDocumentStore
from .firestore import FirestoreRestStore
from .factory import build_store

__all__ = [
    'Document', 'DocumentStore', 'InMemoryDocumentStore',
    'CatalogDocumentStore', 'FirestoreRestStore', 'build_store',
]
