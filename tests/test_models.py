"""Tests for payload parsing into typed models."""

from datetime import timedelta

import pytest

from core.errors import FetchError, MalformedDataError
from core.models import (
    AccountSnapshot,
    BotStatus,
    ControlAck,
    PortfolioPosition,
    PricePoint,
    Trade,
    chronological,
)
from core.modes import Mode
from tests.test_helpers import (
    BASE_TS,
    account_payload,
    position_payload,
    status_payload,
    trade_payload,
)


def test_mode_parse_is_case_insensitive():
    assert Mode.parse("training") is Mode.TRAINING
    assert Mode.parse(" Trading ") is Mode.TRADING
    assert Mode.parse(Mode.TRADING) is Mode.TRADING


@pytest.mark.parametrize("value", ["", None, "paper", 3])
def test_mode_parse_rejects_unknown(value):
    with pytest.raises(ValueError):
        Mode.parse(value)


def test_account_parses_numeric_strings():
    acct = AccountSnapshot.from_dict({"balance": "100.50", "portfolio_value": 0, "total_value": "100.5"})
    assert acct.balance == pytest.approx(100.5)
    assert acct.total_value == pytest.approx(100.5)


def test_account_missing_field_is_malformed():
    payload = account_payload()
    del payload["total_value"]
    with pytest.raises(MalformedDataError, match="total_value"):
        AccountSnapshot.from_dict(payload)


@pytest.mark.parametrize("bad", ["abc", True, [1], {"x": 1}])
def test_account_non_numeric_is_malformed(bad):
    payload = account_payload()
    payload["balance"] = bad
    with pytest.raises(MalformedDataError):
        AccountSnapshot.from_dict(payload)


def test_account_requires_object():
    with pytest.raises(MalformedDataError):
        AccountSnapshot.from_dict([account_payload()])


def test_malformed_error_is_a_fetch_error():
    assert issubclass(MalformedDataError, FetchError)


def test_trade_parses_and_normalizes_type():
    trade = Trade.from_dict(trade_payload(7, "sell", 12.5))
    assert trade.id == "7"
    assert trade.trade_type == "SELL"
    assert not trade.is_buy
    assert trade.profit_loss == pytest.approx(12.5)
    assert trade.symbol == "BTC"
    assert trade.timestamp == BASE_TS


def test_trade_without_profit_loss_keeps_none():
    trade = Trade.from_dict(trade_payload(1, "BUY", None))
    assert trade.profit_loss is None
    assert trade.is_buy


def test_position_parses_all_fields():
    pos = PortfolioPosition.from_dict(position_payload(3, "ETH"))
    assert pos.id == "3"
    assert pos.symbol == "ETH"
    assert pos.current_value == pytest.approx(510.0)
    assert pos.unrealized_pct == pytest.approx(10.0 / 500.0 * 100)


def test_timestamp_epoch_millis_and_naive_iso_are_utc():
    by_ms = PricePoint.from_dict({"timestamp": 1748779200000, "price": 1})
    naive = PricePoint.from_dict({"timestamp": "2025-06-01T12:00:00", "price": 1})
    zulu = PricePoint.from_dict({"timestamp": "2025-06-01T12:00:00Z", "price": 1})
    assert by_ms.timestamp == BASE_TS
    assert naive.timestamp == BASE_TS
    assert zulu.timestamp == BASE_TS
    assert naive.timestamp.tzinfo is not None


def test_bad_timestamp_is_malformed():
    with pytest.raises(MalformedDataError):
        PricePoint.from_dict({"timestamp": "yesterday", "price": 1})


def test_chronological_sorts_ascending_and_is_stable():
    t0 = BASE_TS
    points = [
        PricePoint(t0 + timedelta(minutes=2), 3.0),
        PricePoint(t0, 1.0),
        PricePoint(t0 + timedelta(minutes=1), 2.0),
        PricePoint(t0 + timedelta(minutes=1), 2.5),
    ]
    ordered = chronological(points)
    assert [p.price for p in ordered] == [1.0, 2.0, 2.5, 3.0]


def test_status_allows_null_last_run_and_mode():
    status = BotStatus.from_dict({"mode": None, "is_running": False, "last_run": None})
    assert status.mode is None
    assert status.last_run is None
    assert status.is_running is False


def test_status_parses_lowercase_mode():
    status = BotStatus.from_dict(status_payload(mode="trading"))
    assert status.mode is Mode.TRADING
    assert status.last_run == BASE_TS


def test_status_rejects_unknown_mode_and_non_bool_running():
    with pytest.raises(MalformedDataError):
        BotStatus.from_dict(status_payload(mode="PAPER"))
    with pytest.raises(MalformedDataError):
        BotStatus.from_dict({"mode": "TRAINING", "is_running": "yes"})


def test_control_ack():
    ack = ControlAck.from_dict({"status": "success", "message": "Bot stopped"})
    assert ack.ok
    assert not ControlAck.from_dict({"status": "error"}).ok


def test_models_are_immutable():
    acct = AccountSnapshot(balance=1.0, portfolio_value=0.0, total_value=1.0)
    with pytest.raises(AttributeError):
        acct.balance = 2.0  # type: ignore[misc]
