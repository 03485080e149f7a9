#!/usr/bin/env python
"""
Value a JSON list of event items against a CSV catalog.

Usage:
    python scripts/value_items.py items.json catalog.csv --collection products --field price
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from item_value.config.settings import Settings
from item_value.config.log_setup import configure_logging
from item_value.engine import ItemValueEngine
from item_value.sources import EventDataItemSource, StaticItemSource
from item_value.store import CatalogDocumentStore


def parse_args():
    parser = argparse.ArgumentParser(description="Value event items against a catalog")
    parser.add_argument("items", type=Path, help="JSON file: an item list or an event with an 'items' key")
    parser.add_argument("catalog", type=Path, help="CSV catalog with an 'id' column")
    parser.add_argument("--collection", required=True)
    parser.add_argument("--field", required=True, help="Document field holding the item value")
    parser.add_argument("--calculation", default="valueQuantity")
    parser.add_argument("--return-rate-field")
    parser.add_argument("--fallback", default="zero")
    parser.add_argument("--fallback-percent", default=0.1)
    parser.add_argument("--shipping", default=0)
    parser.add_argument("--fulfillment", default=0)
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args()


async def value(args) -> int:
    settings = Settings(
        collection_id=args.collection,
        value_field=args.field,
        value_calculation=args.calculation,
        return_rate_field=args.return_rate_field,
        fallback_value_if_not_found=args.fallback,
        fallback_percent=args.fallback_percent,
        shipping_cost=args.shipping,
        fulfillment_cost=args.fulfillment,
    )

    with open(args.items, 'r', encoding='utf-8') as f:
        payload = json.load(f)
    source = StaticItemSource(payload) if isinstance(payload, list) else EventDataItemSource(payload)

    store = CatalogDocumentStore.from_csv(args.catalog, collection_id=args.collection)
    engine = ItemValueEngine(store, settings=settings, source=source)
    result = await engine.calculate(source.get_items())

    for line in result.lines:
        print(f"\n{line.item_id or '(no id)'} [{line.source}]")
        print(line.get_trace_text())
    print()
    print(result.get_trace_text())
    print(f"\nValue: {result.value}")
    return 0


def main():
    args = parse_args()
    configure_logging(args.log_level)
    sys.exit(asyncio.run(value(args)))


if __name__ == "__main__":
    main()
