"""Typed data models for the bot monitor."""

from core.models.account import AccountSnapshot
from core.models.position import PortfolioPosition
from core.models.price import PricePoint, chronological
from core.models.snapshot import Snapshot
from core.models.status import BotStatus, ControlAck
from core.models.trade import Trade

__all__ = [
    "AccountSnapshot",
    "BotStatus",
    "ControlAck",
    "PortfolioPosition",
    "PricePoint",
    "Snapshot",
    "Trade",
    "chronological",
]
