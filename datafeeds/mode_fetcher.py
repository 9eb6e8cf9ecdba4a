"""
Mode-scoped batch reader.

Issues the five reads that make up one dashboard Snapshot concurrently and
returns them as a single unit:
- account, trades, portfolio, prices scoped by mode
- bot status (unscoped)

All five settle before anything is returned. If any read failed the whole
batch fails; a partial Snapshot is never produced.
"""

import asyncio
import time
from typing import Optional, Union

from core.errors import FetchError, MalformedDataError
from core.interfaces import IDataApi
from core.logging_utils import get_logger
from core.models import Snapshot, chronological
from core.modes import Mode

logger = get_logger(__name__, tag="FETCH")

_READS = ("account", "trades", "portfolio", "prices", "status")


class ModeScopedFetcher:
    """Builds consistent Snapshots from an IDataApi."""

    def __init__(self, api: IDataApi):
        self.api = api

        # Stats
        self.batches_ok = 0
        self.batches_failed = 0
        self.last_error: Optional[FetchError] = None
        self.last_duration_s = 0.0

    async def fetch_all(self, mode: Union[Mode, str]) -> Snapshot:
        """Read everything for ``mode``. Raises FetchError if any read fails."""
        if mode is None:
            raise ValueError("mode is required")
        mode = Mode.parse(mode)

        started = time.monotonic()
        results = await asyncio.gather(
            self.api.get_account(mode),
            self.api.get_trades(mode),
            self.api.get_portfolio(mode),
            self.api.get_prices(mode),
            self.api.get_status(),
            return_exceptions=True,
        )
        self.last_duration_s = time.monotonic() - started

        for name, result in zip(_READS, results):
            if isinstance(result, BaseException):
                self.batches_failed += 1
                error = self._as_fetch_error(name, result)
                self.last_error = error
                logger.debug("%s batch failed at %s: %s", mode.value, name, error)
                if error is result:
                    raise error
                raise error from result

        account, trades, portfolio, prices, status = results
        snapshot = Snapshot(
            mode=mode,
            account=account,
            trades=tuple(trades),
            portfolio=tuple(portfolio),
            prices=chronological(prices),
            status=status,
        )
        self.batches_ok += 1
        logger.debug(
            "%s batch ok in %.0fms (%d trades, %d positions, %d prices)",
            mode.value, self.last_duration_s * 1000, len(trades), len(portfolio), len(prices),
        )
        return snapshot

    @staticmethod
    def _as_fetch_error(name: str, exc: BaseException) -> FetchError:
        if isinstance(exc, FetchError):
            return exc
        if not isinstance(exc, Exception):
            raise exc
        # Anything else from the api layer means it handed back something unusable
        return MalformedDataError(f"{type(exc).__name__}: {exc}", endpoint=name)

    def get_stats(self) -> dict:
        """Get fetcher statistics."""
        return {
            "batches_ok": self.batches_ok,
            "batches_failed": self.batches_failed,
            "last_error": str(self.last_error) if self.last_error else None,
            "last_duration_ms": round(self.last_duration_s * 1000, 1),
        }
