"""Atomic bundle of everything the dashboard shows for one mode."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.models.account import AccountSnapshot
from core.models.position import PortfolioPosition
from core.models.price import PricePoint
from core.models.status import BotStatus
from core.models.trade import Trade
from core.modes import Mode


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """Account, trades, portfolio and prices all fetched under ``mode``.

    ``status`` is the only mode-independent field. Snapshots are replaced
    whole, never patched.
    """
    mode: Mode
    account: AccountSnapshot
    trades: tuple[Trade, ...]
    portfolio: tuple[PortfolioPosition, ...]
    prices: tuple[PricePoint, ...]
    status: BotStatus
    fetched_at: datetime = field(default_factory=_utc_now, compare=False)

    @property
    def latest_price(self) -> float | None:
        return self.prices[-1].price if self.prices else None

    @property
    def realized_pnl(self) -> float:
        return sum(t.profit_loss for t in self.trades if t.profit_loss is not None)
