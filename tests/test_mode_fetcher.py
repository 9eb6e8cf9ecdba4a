"""Tests for the atomic mode-scoped batch reader."""

import asyncio

import pytest

from core.errors import MalformedDataError, NetworkError, ServerError
from core.modes import Mode
from datafeeds.mode_fetcher import ModeScopedFetcher


@pytest.mark.asyncio
async def test_fetch_all_builds_snapshot_for_mode(server):
    fetcher = ModeScopedFetcher(server)
    snap = await fetcher.fetch_all(Mode.TRADING)

    assert snap.mode is Mode.TRADING
    assert snap.account.balance == pytest.approx(2500.0)
    assert [t.id for t in snap.trades] == ["2"]
    assert [p.symbol for p in snap.portfolio] == ["ETH"]
    scoped = [mode for name, mode in server.calls if name != "status"]
    assert scoped == [Mode.TRADING] * 4
    assert ("status", None) in server.calls


@pytest.mark.asyncio
async def test_prices_normalized_to_ascending(server):
    snap = await ModeScopedFetcher(server).fetch_all(Mode.TRAINING)
    stamps = [p.timestamp for p in snap.prices]
    assert stamps == sorted(stamps)
    # Source order was newest first
    assert server.prices[Mode.TRAINING][0].timestamp == stamps[-1]


@pytest.mark.asyncio
async def test_reads_are_issued_concurrently():
    started: list[str] = []
    gate = asyncio.Event()

    class SlowApi:
        async def _hold(self, name):
            started.append(name)
            await gate.wait()

        async def get_account(self, mode):
            await self._hold("account")
            raise NetworkError("down", "GET /account")

        async def get_trades(self, mode):
            await self._hold("trades")
            return []

        async def get_portfolio(self, mode):
            await self._hold("portfolio")
            return []

        async def get_prices(self, mode):
            await self._hold("prices")
            return []

        async def get_status(self):
            await self._hold("status")
            return None

    fetcher = ModeScopedFetcher(SlowApi())
    task = asyncio.create_task(fetcher.fetch_all(Mode.TRAINING))
    for _ in range(5):
        await asyncio.sleep(0)
    assert sorted(started) == ["account", "portfolio", "prices", "status", "trades"]

    gate.set()
    with pytest.raises(NetworkError):
        await task


@pytest.mark.asyncio
async def test_any_failure_fails_whole_batch(server):
    server.failures["trades"] = MalformedDataError("trade: missing 'price'", "GET /trades")
    fetcher = ModeScopedFetcher(server)
    with pytest.raises(MalformedDataError):
        await fetcher.fetch_all(Mode.TRAINING)
    assert fetcher.batches_failed == 1
    assert fetcher.batches_ok == 0


@pytest.mark.asyncio
async def test_failure_waits_for_all_reads(server):
    server.failures["account"] = ServerError("HTTP 500", "GET /account", 500)
    server.delays[Mode.TRAINING] = 0.02
    with pytest.raises(ServerError):
        await ModeScopedFetcher(server).fetch_all(Mode.TRAINING)
    names = {name for name, _ in server.calls}
    assert names == {"account", "trades", "portfolio", "prices", "status"}


@pytest.mark.asyncio
async def test_first_failure_in_request_order_is_raised(server):
    server.failures["prices"] = NetworkError("reset", "GET /prices")
    server.failures["status"] = ServerError("HTTP 502", "GET /bot/status", 502)
    with pytest.raises(NetworkError):
        await ModeScopedFetcher(server).fetch_all(Mode.TRAINING)


@pytest.mark.asyncio
async def test_unexpected_api_exception_becomes_malformed(server):
    server.failures["portfolio"] = KeyError("symbol")
    with pytest.raises(MalformedDataError) as exc_info:
        await ModeScopedFetcher(server).fetch_all(Mode.TRAINING)
    assert exc_info.value.endpoint == "portfolio"
    assert isinstance(exc_info.value.__cause__, KeyError)


@pytest.mark.asyncio
async def test_fetch_all_is_idempotent(server):
    fetcher = ModeScopedFetcher(server)
    first = await fetcher.fetch_all(Mode.TRAINING)
    second = await fetcher.fetch_all(Mode.TRAINING)
    assert first.account == second.account
    assert first.trades == second.trades
    assert first.portfolio == second.portfolio
    assert first.prices == second.prices
    assert first == second


@pytest.mark.asyncio
async def test_mode_is_required(server):
    fetcher = ModeScopedFetcher(server)
    with pytest.raises(ValueError):
        await fetcher.fetch_all(None)
    assert server.calls == []

    snap = await fetcher.fetch_all("trading")
    assert snap.mode is Mode.TRADING
