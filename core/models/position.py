"""Portfolio holding model."""

from dataclasses import dataclass
from typing import Any

from core.models.fields import as_float, as_str, require_mapping


@dataclass(frozen=True)
class PortfolioPosition:
    """Open holding marked at the latest recorded price. Identity is ``id``."""
    id: str
    symbol: str
    quantity: float
    average_buy_price: float
    current_price: float
    current_value: float
    unrealized_pnl: float

    @property
    def unrealized_pct(self) -> float:
        cost = self.quantity * self.average_buy_price
        if cost == 0:
            return 0.0
        return self.unrealized_pnl / cost * 100

    @classmethod
    def from_dict(cls, data: Any) -> "PortfolioPosition":
        data = require_mapping(data, "position")
        return cls(
            id=as_str(data, "id", "position"),
            symbol=as_str(data, "symbol", "position"),
            quantity=as_float(data, "quantity", "position"),
            average_buy_price=as_float(data, "average_buy_price", "position"),
            current_price=as_float(data, "current_price", "position"),
            current_value=as_float(data, "current_value", "position"),
            unrealized_pnl=as_float(data, "unrealized_pnl", "position"),
        )
