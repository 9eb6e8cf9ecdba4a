"""Executed trade model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from core.models.fields import as_float, as_str, as_timestamp, require_mapping


@dataclass(frozen=True)
class Trade:
    """One executed BUY/SELL. Identity is ``id``."""
    id: str
    timestamp: datetime
    trade_type: str
    quantity: float
    price: float
    profit_loss: Optional[float]
    symbol: Optional[str] = None

    @property
    def is_buy(self) -> bool:
        return self.trade_type.upper() == "BUY"

    @classmethod
    def from_dict(cls, data: Any) -> "Trade":
        data = require_mapping(data, "trade")
        symbol = data.get("symbol")
        return cls(
            id=as_str(data, "id", "trade"),
            timestamp=as_timestamp(data, "timestamp", "trade"),
            trade_type=as_str(data, "trade_type", "trade").upper(),
            quantity=as_float(data, "quantity", "trade"),
            price=as_float(data, "price", "trade"),
            # Opening trades carry no realized P/L yet
            profit_loss=as_float(data, "profit_loss", "trade") if data.get("profit_loss") is not None else None,
            symbol=str(symbol) if symbol is not None else None,
        )
