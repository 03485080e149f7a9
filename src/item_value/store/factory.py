"""Builds the document store selected by the settings."""
import logging

from ..config.settings import Settings
from .base import DocumentStore
from .catalog import CatalogDocumentStore
from .firestore import FirestoreRestStore
from .memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> DocumentStore:
    """
    Pick a store backend.

    Resolution order:
    1. CSV catalog when store_csv is set
    2. Firestore when project_id is set
    3. Empty in-memory store (every lookup falls back)
    """
    if settings.store_csv:
        return CatalogDocumentStore.from_csv(settings.store_csv, collection_id=settings.collection_id)

    if settings.project_id:
        return FirestoreRestStore(
            project_id=settings.project_id,
            token=settings.firestore_token,
            timeout=settings.firestore_timeout,
        )

    logger.warning("No document store configured, every item will use the fallback value")
    return InMemoryDocumentStore()
