"""
Data models for the item value engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from .numeric import coerce, is_number


@dataclass
class TraceStep:
    """A single step in an item's value resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Item:
    """One line item of a commerce event, with numeric fields coerced."""
    id: str
    price: float
    quantity: float = 1.0
    discount: float = 0.0

    @classmethod
    def from_dict(cls, raw: dict) -> 'Item':
        """
        Build an Item from a raw event item.

        quantity and discount fall back to their defaults only when the key
        is absent. A present-but-blank value is coerced like any other.
        The id is kept verbatim; only a missing or empty id counts as absent.
        """
        if not isinstance(raw, dict):
            raw = {}
        item_id = raw.get('id')
        return cls(
            id='' if item_id is None else str(item_id),
            price=coerce(raw.get('price')),
            quantity=coerce(raw['quantity']) if 'quantity' in raw else 1.0,
            discount=coerce(raw['discount']) if 'discount' in raw else 0.0,
        )


@dataclass
class ItemValue:
    """The resolved value of a single item."""
    item_id: str
    value: float
    source: str = ""  # "Store" or "Fallback"
    key: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: Any = None):
        """Add a step to the trace for this item."""
        self.trace.append(TraceStep(
            step=step,
            description=description,
            value=None if value is None else str(value),
        ))

    def add_warning(self, warning: str):
        """Add a warning for this item."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass
class Result:
    """Complete result of valuing an event's items."""
    value: str
    total: float
    lines: list[ItemValue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: Any = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(
            step=step,
            description=description,
            value=None if value is None else str(value),
        ))

    def add_warning(self, warning: str):
        """Add a result-level warning."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Plain dict form used by the API and exports."""
        return {
            "value": self.value,
            "total": self.total,
            "lines": [
                {
                    "id": line.item_id,
                    "key": line.key,
                    "value": line.value if is_number(line.value) else None,
                    "source": line.source,
                    "warnings": list(line.warnings),
                    "trace": line.get_trace_text(),
                }
                for line in self.lines
            ],
            "warnings": list(self.warnings),
        }
