"""Shared test fixtures."""

import itertools

import pytest

from tradejournal.services.analytics import TradeRecord, TradeWithPL, compute_pl
from tradejournal.services.journal import TradeJournal
from tradejournal.services.repository import InMemoryTradeRepository

_ids = itertools.count(1)


def _make_trade(**kwargs) -> TradeRecord:
    """Build a valid trade with sensible defaults; override any field via kwargs."""
    defaults = {
        "id": f"t-{next(_ids)}",
        "symbol": "EURUSD",
        "date": "2025-01-10",
        "time": "09:30",
        "trade_type": "Long",
        "session": "London",
        "entry_price": 100.0,
        "exit_price": 110.0,
        "stop_loss": 95.0,
        "take_profit": 120.0,
        "size": 1.0,
    }
    defaults.update(kwargs)
    return TradeRecord(**defaults)


def _with_pl(trade: TradeRecord) -> TradeWithPL:
    return TradeWithPL.from_record(trade, compute_pl(trade))


@pytest.fixture
def make_trade():
    return _make_trade


@pytest.fixture
def with_pl():
    return _with_pl


@pytest.fixture
def trade_fields() -> dict:
    """Fields for TradeJournal.add_trade (no id)."""
    return {
        "symbol": "GBPUSD",
        "date": "2025-02-03",
        "time": "14:05",
        "trade_type": "Short",
        "session": "New York",
        "entry_price": 1.2650,
        "exit_price": 1.2600,
        "stop_loss": 1.2700,
        "take_profit": 1.2550,
        "size": 10000,
        "strategy": "London breakout fade",
        "emotions": "calm",
    }


@pytest.fixture
def repository() -> InMemoryTradeRepository:
    return InMemoryTradeRepository()


@pytest.fixture
def journal(repository) -> TradeJournal:
    """Fresh journal over an empty in-memory repository."""
    return TradeJournal(repository)
