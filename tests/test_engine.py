"""
End-to-end valuation cases for the item value engine.

Each case runs a full event through fan-out, fallback and aggregation
against an in-memory store.
"""
import asyncio

import pytest

from item_value.diagnostics import ERROR, INFO
from item_value.engine import ItemValueEngine
from item_value.errors import ConfigurationError, StoreError, ValuationError
from item_value.sources import EventDataItemSource, StaticItemSource
from item_value.store import InMemoryDocumentStore

EVENT_ITEMS = [
    {'id': 'sku1', 'price': 120, 'quantity': 2, 'discount': 20},
    {'id': 'sku2', 'price': 12},
]


def engine_for(settings, store, sink, items=None):
    source = StaticItemSource(items if items is not None else EVENT_ITEMS)
    return ItemValueEngine(store, settings=settings, source=source, sink=sink)


@pytest.mark.asyncio
async def test_value_quantity(make_settings, store, sink):
    engine = engine_for(make_settings(value_calculation="valueQuantity"), store, sink)
    assert await engine.run() == "210"


@pytest.mark.asyncio
async def test_return_rate(make_settings, store, sink):
    engine = engine_for(make_settings(value_calculation="returnRate"), store, sink)
    assert await engine.run() == "107.5"


@pytest.mark.asyncio
async def test_value_with_discount(make_settings, store, sink):
    engine = engine_for(make_settings(value_calculation="valueWithDiscount"), store, sink)
    assert await engine.run() == "170"


@pytest.mark.asyncio
@pytest.mark.parametrize("fallback, expected", [
    ("percent", "15"),
    ("revenue", "150"),
    ("zero", "0"),
])
async def test_fallback_when_document_missing(make_settings, sink, fallback, expected):
    settings = make_settings(fallback_value_if_not_found=fallback, fallback_percent=0.1)
    engine = engine_for(settings, InMemoryDocumentStore(), sink, [{'id': 'sku9', 'price': 150, 'quantity': 1}])
    assert await engine.run() == expected


@pytest.mark.asyncio
async def test_percent_fallback_rounding(make_settings, sink):
    settings = make_settings(fallback_value_if_not_found="percent", fallback_percent=0.17)
    items = [{'id': 'sku9', 'price': 37.123456, 'quantity': 1}]
    engine = engine_for(settings, InMemoryDocumentStore(), sink, items)
    assert await engine.run() == "6.31"


@pytest.mark.asyncio
async def test_negative_total_clamped(make_settings, store, sink):
    settings = make_settings(shipping_cost=0, fulfillment_cost=1000)
    engine = engine_for(settings, store, sink)
    assert await engine.run() == "0"


@pytest.mark.asyncio
async def test_shipping_and_fulfillment(make_settings, store, sink):
    settings = make_settings(shipping_cost="5", fulfillment_cost=15)
    engine = engine_for(settings, store, sink)
    assert await engine.run() == "200"


@pytest.mark.asyncio
async def test_idempotent(make_settings, store, sink):
    engine = engine_for(make_settings(value_calculation="returnRate"), store, sink)
    assert await engine.run() == await engine.run()


@pytest.mark.asyncio
async def test_one_line_per_item_in_order(make_settings, store, sink):
    items = [
        {'id': 'sku2', 'price': 1},
        {'price': 5},
        {'id': 'missing', 'price': 3},
        {'id': 'sku1', 'price': 1},
    ]
    engine = engine_for(make_settings(fallback_value_if_not_found="revenue"), store, sink, items)

    result = await engine.calculate(items)

    assert [line.item_id for line in result.lines] == ['sku2', '', 'missing', 'sku1']
    assert [line.value for line in result.lines] == [10, 5, 3, 100]
    assert result.value == "118"
    assert result.total == 118
    assert len(result.warnings) == 2


@pytest.mark.asyncio
async def test_logs_raw_items(make_settings, store, sink):
    engine = engine_for(make_settings(), store, sink)
    await engine.run()
    assert '"sku1"' in sink.messages(INFO)[0]


@pytest.mark.asyncio
async def test_empty_event(make_settings, store, sink):
    engine = ItemValueEngine(store, settings=make_settings(), source=EventDataItemSource({}), sink=sink)
    assert await engine.run() == "0"
    assert store.reads == []


@pytest.mark.asyncio
async def test_invalid_numbers_are_skipped_in_total(make_settings, store, sink):
    items = [{'id': 'sku1', 'price': 1, 'quantity': 'lots'}, {'id': 'sku2', 'price': 1}]
    engine = engine_for(make_settings(), store, sink, items)

    result = await engine.calculate(items)

    assert result.value == "10"


@pytest.mark.asyncio
async def test_reads_run_concurrently(make_settings, sink):
    class SlowStore(InMemoryDocumentStore):
        def __init__(self):
            super().__init__({f'test-products/sku{i}': {'value': 1} for i in range(5)})
            self.in_flight = 0
            self.peak = 0

        async def read(self, key, project_id=None):
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            await asyncio.sleep(0.01)
            self.in_flight -= 1
            return await super().read(key, project_id)

    store = SlowStore()
    items = [{'id': f'sku{i}', 'price': 1} for i in range(5)]
    engine = engine_for(make_settings(), store, sink, items)

    assert await engine.run() == "5"
    assert store.peak == 5


@pytest.mark.asyncio
async def test_store_errors_never_reach_caller(make_settings, sink):
    class BrokenStore(InMemoryDocumentStore):
        async def read(self, key, project_id=None):
            raise StoreError("boom", key=key)

    engine = engine_for(make_settings(fallback_value_if_not_found="revenue"), BrokenStore(), sink)
    assert await engine.run() == "252"
    assert len(sink.messages(ERROR)) == 2


@pytest.mark.asyncio
async def test_unknown_strategy_surfaces_as_configuration_error(make_settings, store, sink):
    settings = make_settings()
    object.__setattr__(settings, 'value_calculation', 'bogus')
    engine = engine_for(settings, store, sink)

    with pytest.raises(ConfigurationError):
        await engine.run()
    assert "Item valuation failed" in sink.messages(ERROR)[-1]


@pytest.mark.asyncio
async def test_fan_out_failure_raises_valuation_error(make_settings, sink):
    engine = engine_for(make_settings(), None, sink)

    with pytest.raises(ValuationError):
        await engine.run()
    assert sink.messages(ERROR)


@pytest.mark.asyncio
async def test_run_without_source(make_settings, store, sink):
    engine = ItemValueEngine(store, settings=make_settings(), sink=sink)
    with pytest.raises(ValuationError):
        await engine.run()


def test_requires_collection_and_value_field(make_settings, store):
    with pytest.raises(ConfigurationError):
        ItemValueEngine(store, settings=make_settings(collection_id=""))
    with pytest.raises(ConfigurationError):
        ItemValueEngine(store, settings=make_settings(value_field=""))


@pytest.mark.asyncio
async def test_huge_price_item_does_not_sink_event(make_settings, store, sink):
    items = [{'id': 'a', 'price': 10**400}, {'id': 'sku1', 'price': 1}]
    engine = engine_for(make_settings(fallback_value_if_not_found="revenue"), store, sink, items)

    assert await engine.run() == "100"


@pytest.mark.asyncio
async def test_huge_document_value_does_not_sink_event(make_settings, sink):
    store = InMemoryDocumentStore({
        'test-products/sku1': {'value': 10**400},
        'test-products/sku2': {'value': 10},
    })
    items = [{'id': 'sku1', 'price': 1}, {'id': 'sku2', 'price': 1}]
    engine = engine_for(make_settings(), store, sink, items)

    assert await engine.run() == "10"
