"""Engine subpackage - item valuation and aggregation."""
from .item_value_engine import ItemValueEngine
from .models import Item, ItemValue, Result
from .aggregator import aggregate

__all__ = ['ItemValueEngine', 'Item', 'ItemValue', 'Result', 'aggregate']
