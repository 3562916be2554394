"""Trade journal service: the trade collection plus its derived analytics.

Owns the in-memory collection (newest first), assigns trade ids, persists
through an injected TradeRepository and hands the collection to the
AnalyticsEngine for every read.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from tradejournal.services.analytics import (
    AnalyticsEngine,
    AnalyticsSnapshot,
    EquityPoint,
    Stats,
    TradeRecord,
    TradeValidationError,
    TradeWithPL,
    compute_pl,
)
from tradejournal.services.repository import JournalStorageError, TradeRepository

logger = logging.getLogger(__name__)


class TradeNotFoundError(LookupError):
    """No trade with the requested id."""


def new_trade_id() -> str:
    return uuid.uuid4().hex


class TradeJournal:
    """Ordered, append-only trade collection.

    The collection is an immutable tuple replaced wholesale on every add,
    so the analytics memo (keyed on collection identity) never goes stale.
    Only one add may be in flight at a time.
    """

    def __init__(
        self,
        repository: TradeRepository,
        engine: AnalyticsEngine | None = None,
        id_factory: Callable[[], str] = new_trade_id,
    ) -> None:
        self._repository = repository
        self._engine = engine or AnalyticsEngine()
        self._id_factory = id_factory
        self._trades: tuple[TradeRecord, ...] | None = None
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> tuple[TradeRecord, ...]:
        if self._trades is None:
            self._trades = tuple(await self._repository.load())
            logger.info("Loaded %d trades from storage", len(self._trades))
        return self._trades

    async def current_trades(self) -> tuple[TradeRecord, ...]:
        """Newest first. Falls back to an empty collection if storage can't be read."""
        try:
            return await self._ensure_loaded()
        except JournalStorageError as e:
            # Not cached: the next read retries, and add_trade refuses to overwrite
            logger.error("Trade storage unavailable, serving empty journal: %s", e)
            return ()

    async def add_trade(self, fields: Mapping[str, Any]) -> TradeWithPL:
        """Validate, assign an id, prepend and persist a new trade.

        Raises TradeValidationError for bad input and JournalStorageError if
        the collection can't be loaded or saved; in both cases the in-memory
        collection is left unchanged.
        """
        if "id" in fields:
            raise TradeValidationError("Trade id is assigned by the journal")

        async with self._lock:
            trades = await self._ensure_loaded()
            trade_id = self._id_factory()
            if any(t.id == trade_id for t in trades):
                raise TradeValidationError(f"Duplicate trade id {trade_id!r}")
            try:
                record = TradeRecord(id=trade_id, **fields)
            except TypeError as e:
                raise TradeValidationError(f"Invalid trade fields: {e}") from e

            updated = (record, *trades)
            await self._repository.save(updated)
            self._trades = updated

        pl = compute_pl(record)
        logger.info(
            "Trade added: %s %s %s x %s, P/L %.2f",
            record.id,
            record.trade_type.value,
            record.symbol,
            record.size,
            pl,
        )
        return TradeWithPL.from_record(record, pl)

    async def snapshot(self) -> AnalyticsSnapshot:
        return self._engine.snapshot(await self.current_trades())

    async def trades_with_pl(self) -> tuple[TradeWithPL, ...]:
        return (await self.snapshot()).trades

    async def stats(self) -> Stats:
        return (await self.snapshot()).stats

    async def equity_curve(self) -> tuple[EquityPoint, ...]:
        return (await self.snapshot()).equity

    async def get_trade(self, trade_id: str) -> TradeWithPL:
        for trade in await self.trades_with_pl():
            if trade.id == trade_id:
                return trade
        raise TradeNotFoundError(f"Trade {trade_id!r} not found")
