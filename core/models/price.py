"""Price history model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from core.models.fields import as_float, as_timestamp, require_mapping


@dataclass(frozen=True)
class PricePoint:
    timestamp: datetime
    price: float

    @classmethod
    def from_dict(cls, data: Any) -> "PricePoint":
        data = require_mapping(data, "price")
        return cls(
            timestamp=as_timestamp(data, "timestamp", "price"),
            price=as_float(data, "price", "price"),
        )


def chronological(points: Iterable[PricePoint]) -> tuple[PricePoint, ...]:
    """Return points oldest first.

    The server orders newest first, but the order is not relied on: this is a
    stable sort, so equal timestamps keep their received order.
    """
    return tuple(sorted(points, key=lambda p: p.timestamp))
