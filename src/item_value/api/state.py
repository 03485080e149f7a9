"""
Shared API state: the loaded settings and the document store.

The store is built once from the settings on first use. Tests (or an
embedding application) can inject their own with configure().
"""
from typing import Optional

from ..config.settings import Settings, get_settings
from ..diagnostics import LoggingSink
from ..engine import ItemValueEngine
from ..store import DocumentStore, build_store


class AppState:
    """Holds the settings and store used by the API endpoints."""

    def __init__(self):
        self._settings: Optional[Settings] = None
        self._store: Optional[DocumentStore] = None

    def configure(self, settings: Optional[Settings] = None, store: Optional[DocumentStore] = None):
        """Replace the settings and/or store."""
        if settings is not None:
            self._settings = settings
        if store is not None:
            self._store = store

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> DocumentStore:
        if self._store is None:
            self._store = build_store(self.settings)
        return self._store

    def engine_for(self, overrides: Optional[dict] = None) -> ItemValueEngine:
        """Build an engine on the shared store with optional config overrides."""
        settings = self.settings.with_overrides(overrides)
        return ItemValueEngine(self.store, settings=settings, sink=LoggingSink())

    def reset(self):
        """Forget the settings and store; they are rebuilt on next use."""
        self._settings = None
        self._store = None

    async def close(self):
        if self._store is not None:
            await self._store.close()
            self._store = None


state = AppState()
