"""Collaborator interfaces for the bot server and the snapshot fetcher."""

from typing import Protocol

from core.models import (
    AccountSnapshot,
    BotStatus,
    ControlAck,
    PortfolioPosition,
    PricePoint,
    Snapshot,
    Trade,
)
from core.modes import Mode


class IDataApi(Protocol):
    """Read-only, mode-scoped data endpoints (status is unscoped)."""

    async def get_account(self, mode: Mode) -> AccountSnapshot:
        ...

    async def get_trades(self, mode: Mode) -> list[Trade]:
        ...

    async def get_portfolio(self, mode: Mode) -> list[PortfolioPosition]:
        ...

    async def get_prices(self, mode: Mode) -> list[PricePoint]:
        ...

    async def get_status(self) -> BotStatus:
        ...


class IControlApi(Protocol):
    """Commands that mutate bot state on the server."""

    async def start_bot(self, mode: Mode) -> ControlAck:
        ...

    async def pause_bot(self) -> ControlAck:
        ...

    async def reset_bot(self) -> ControlAck:
        ...


class ISnapshotFetcher(Protocol):
    """Produces one consistent Snapshot per mode or raises FetchError."""

    async def fetch_all(self, mode: Mode) -> Snapshot:
        ...
