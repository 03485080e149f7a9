import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from item_value.config.settings import Settings
from item_value.diagnostics import RecordingSink
from item_value.store import InMemoryDocumentStore


@pytest.fixture
def make_settings():
    """Build Settings for the test-products collection with overrides."""
    def _make(**overrides):
        fields = {
            'collection_id': 'test-products',
            'value_field': 'value',
            'return_rate_field': 'returnRate',
        }
        fields.update(overrides)
        return Settings(**fields)
    return _make


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def store():
    """Two products: sku1 worth 100 (rate 0.5), sku2 worth 10 (rate 0.25)."""
    return InMemoryDocumentStore({
        'test-products/sku1': {'value': 100, 'returnRate': 0.5},
        'test-products/sku2': {'value': 10, 'returnRate': 0.25},
    })
