"""Account balance model."""

from dataclasses import dataclass
from typing import Any

from core.models.fields import as_float, require_mapping


@dataclass(frozen=True)
class AccountSnapshot:
    """Cash balance plus marked-to-market holdings for one mode."""
    balance: float
    portfolio_value: float
    total_value: float

    @classmethod
    def from_dict(cls, data: Any) -> "AccountSnapshot":
        data = require_mapping(data, "account")
        return cls(
            balance=as_float(data, "balance", "account"),
            portfolio_value=as_float(data, "portfolio_value", "account"),
            total_value=as_float(data, "total_value", "account"),
        )
