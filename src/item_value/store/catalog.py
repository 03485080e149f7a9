"""
Catalog Document Store - serves documents from a CSV catalog.

One row per document. The `id` column holds the item id, an optional
`collection` column holds the collection; every other column is a document
field. Blank cells are left out of the document.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..errors import ConfigurationError, DocumentNotFound
from .base import Document, DocumentStore

logger = logging.getLogger(__name__)


def _plain(value):
    """Unwrap numpy scalars so downstream coercion sees plain Python numbers."""
    return value.item() if hasattr(value, 'item') else value


class CatalogDocumentStore(DocumentStore):
    """Document store backed by a pandas DataFrame."""

    name = "catalog"

    def __init__(self, catalog: pd.DataFrame, collection_id: Optional[str] = None):
        if 'id' not in catalog.columns:
            raise ConfigurationError("Catalog must have an 'id' column")
        if 'collection' not in catalog.columns and not collection_id:
            raise ConfigurationError(
                "Catalog has no 'collection' column and no collection_id was given"
            )

        self.catalog = catalog.copy()
        self.catalog['id'] = self.catalog['id'].astype(str).str.strip()
        if 'collection' in self.catalog.columns:
            self.catalog['collection'] = self.catalog['collection'].astype(str).str.strip()
        else:
            self.catalog['collection'] = collection_id

        self.catalog['key'] = self.catalog['collection'] + '/' + self.catalog['id']

        # Handle duplicate keys by taking the first entry
        duplicates = self.catalog['key'].duplicated()
        if duplicates.any():
            logger.warning(
                "Catalog has %d duplicate keys, keeping first entry for each",
                int(duplicates.sum())
            )
        self.catalog = self.catalog[~duplicates].set_index('key')

        self.fields = [c for c in self.catalog.columns if c not in ('id', 'collection')]

    @classmethod
    def from_csv(cls, path: Path, collection_id: Optional[str] = None) -> 'CatalogDocumentStore':
        """Load a catalog CSV."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog not found at {path}")
        catalog = pd.read_csv(path, dtype={'id': str})
        logger.info("Loaded %d catalog rows from %s", len(catalog), path)
        return cls(catalog, collection_id=collection_id)

    def __len__(self) -> int:
        return len(self.catalog)

    async def read(self, key: str, project_id: Optional[str] = None) -> Document:
        if key not in self.catalog.index:
            raise DocumentNotFound(key)
        row = self.catalog.loc[key, self.fields].dropna()
        data = {name: _plain(value) for name, value in row.items()}
        return Document(key=key, data=data)
