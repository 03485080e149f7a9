"""
Item Value Package

Resolves the monetary value of commerce event line items.
Looks up each item in a keyed document store, applies the configured
valuation strategy, falls back to a local estimate when the store has no
record, and aggregates everything into a single adjusted total.
"""

__version__ = "1.0.0"
