"""Operating modes that scope the bot's account, trade, portfolio and price data."""

from enum import Enum
from typing import Union


class Mode(str, Enum):
    TRAINING = "TRAINING"
    TRADING = "TRADING"

    @classmethod
    def parse(cls, value: Union["Mode", str]) -> "Mode":
        """Accept a Mode or a case-insensitive name ("training" -> TRAINING)."""
        if isinstance(value, cls):
            return value
        if not value or not isinstance(value, str):
            raise ValueError(f"Mode must be a non-empty string, got {value!r}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid mode: {value}. Valid: {valid}") from None

    def __str__(self) -> str:
        return self.value
