"""
Firestore REST Store - reads documents over the Firestore REST API.

Documents live at
    {base_url}/projects/{project}/databases/(default)/documents/{key}
and come back with typed field values, which are decoded into plain Python
values here. One GET per read, no retries; the request timeout is the only
time limit applied to a lookup.
"""
import logging
from typing import Any, Optional

import httpx

from ..errors import DocumentNotFound, StoreError
from .base import Document, DocumentStore

logger = logging.getLogger(__name__)

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"


def decode_value(value: dict) -> Any:
    """Decode a single Firestore typed value."""
    if 'nullValue' in value:
        return None
    if 'booleanValue' in value:
        return bool(value['booleanValue'])
    if 'integerValue' in value:
        return int(value['integerValue'])
    if 'doubleValue' in value:
        return float(value['doubleValue'])
    if 'mapValue' in value:
        return decode_fields(value['mapValue'].get('fields', {}))
    if 'arrayValue' in value:
        return [decode_value(v) for v in value['arrayValue'].get('values', [])]
    if 'geoPointValue' in value:
        return dict(value['geoPointValue'])
    for name in ('stringValue', 'timestampValue', 'referenceValue', 'bytesValue'):
        if name in value:
            return value[name]
    return None


def decode_fields(fields: dict) -> dict:
    """Decode a Firestore `fields` map into a plain dict."""
    return {name: decode_value(value) for name, value in fields.items()}


class FirestoreRestStore(DocumentStore):
    """Async Firestore client using httpx."""

    name = "firestore"

    def __init__(
        self,
        project_id: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 10.0,
        base_url: str = FIRESTORE_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.project_id = project_id
        self.base_url = base_url.rstrip('/')
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    def document_url(self, key: str, project_id: str) -> str:
        return f"{self.base_url}/projects/{project_id}/databases/(default)/documents/{key}"

    async def read(self, key: str, project_id: Optional[str] = None) -> Document:
        project = project_id or self.project_id
        if not project:
            raise StoreError("No Firestore project configured", key=key)

        try:
            response = await self.client.get(self.document_url(key, project))
        except httpx.HTTPError as e:
            raise StoreError(f"Firestore request failed for '{key}': {e}", key=key) from e

        if response.status_code == 404:
            raise DocumentNotFound(key)
        if response.is_error:
            raise StoreError(
                f"Firestore returned HTTP {response.status_code} for '{key}'", key=key
            )

        payload = response.json()
        return Document(key=key, data=decode_fields(payload.get('fields', {})))

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
