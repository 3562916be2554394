"""Trade collection storage. The journal only depends on the TradeRepository protocol.

Collections are saved wholesale, newest trade first, and loaded back in
the same order.
"""

import asyncio
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tradejournal.database import async_session
from tradejournal.models.trade import TradeRow
from tradejournal.services.analytics.models import TradeRecord, TradeValidationError

logger = logging.getLogger(__name__)


class JournalStorageError(RuntimeError):
    """Reading or writing the trade collection failed."""


class TradeRepository(Protocol):
    async def load(self) -> list[TradeRecord]:
        ...

    async def save(self, trades: Sequence[TradeRecord]) -> None:
        ...


class InMemoryTradeRepository:
    """Keeps the collection in process memory. Used for tests and throwaway sessions."""

    def __init__(self, trades: Sequence[TradeRecord] = ()) -> None:
        self._trades: list[TradeRecord] = list(trades)
        self.save_count = 0

    async def load(self) -> list[TradeRecord]:
        return list(self._trades)

    async def save(self, trades: Sequence[TradeRecord]) -> None:
        self._trades = list(trades)
        self.save_count += 1


def _row_to_record(row: TradeRow) -> TradeRecord:
    return TradeRecord(
        id=row.id,
        symbol=row.symbol,
        date=row.trade_date,
        time=row.trade_time,
        trade_type=row.trade_type,
        session=row.session,
        entry_price=row.entry_price,
        exit_price=row.exit_price,
        stop_loss=row.stop_loss,
        take_profit=row.take_profit,
        size=row.size,
        emotions=row.emotions,
        strategy=row.strategy,
        notes=row.notes,
        pre_trade_analysis=row.pre_trade_analysis,
        post_trade_analysis=row.post_trade_analysis,
        image_url=row.image_url,
    )


def _record_to_row(record: TradeRecord, position: int) -> TradeRow:
    return TradeRow(
        id=record.id,
        position=position,
        symbol=record.symbol,
        trade_date=record.date,
        trade_time=record.time,
        trade_type=record.trade_type.value,
        session=record.session.value,
        entry_price=record.entry_price,
        exit_price=record.exit_price,
        stop_loss=record.stop_loss,
        take_profit=record.take_profit,
        size=record.size,
        emotions=record.emotions,
        strategy=record.strategy,
        notes=record.notes,
        pre_trade_analysis=record.pre_trade_analysis,
        post_trade_analysis=record.post_trade_analysis,
        image_url=record.image_url,
    )


class SqlTradeRepository:
    """Persists the collection in the journal_trades table via async SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or async_session

    async def load(self) -> list[TradeRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(TradeRow).order_by(TradeRow.position.asc()))
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise JournalStorageError(f"Failed to load trades: {e}") from e

        trades = []
        invalid = []
        for row in rows:
            try:
                trades.append(_row_to_record(row))
            except TradeValidationError as e:
                logger.error("Invalid stored trade %s: %s", row.id, e)
                invalid.append(row.id)
        if invalid:
            # save() replaces wholesale: a partial collection must never reach the journal
            raise JournalStorageError(
                f"{len(invalid)} stored trades failed validation: {', '.join(invalid)}"
            )
        return trades

    async def save(self, trades: Sequence[TradeRecord]) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(TradeRow))
                    session.add_all(
                        [_record_to_row(t, position) for position, t in enumerate(trades)]
                    )
        except SQLAlchemyError as e:
            raise JournalStorageError(f"Failed to save trades: {e}") from e
        logger.debug("Saved %d trades", len(trades))


class JsonFileTradeRepository:
    """Stores the collection as a JSON array in one file.

    Reads the browser journal's export format (camelCase keys) as well as
    its own snake_case output. A missing file is an empty journal.

    Entries that fail validation are left out of the loaded collection but
    kept verbatim, and written back on save at the same distance from the
    end of the array. New trades are prepended, so they keep their place
    among the older trades around them.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        # (position counted from the end of the array, raw entry)
        self._rejected: list[tuple[int, Any]] = []

    @property
    def rejected_count(self) -> int:
        return len(self._rejected)

    def _read(self) -> Any:
        if not self._path.exists():
            return []
        return json.loads(self._path.read_text(encoding="utf-8"))

    def _write(self, payload: str) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)

    async def load(self) -> list[TradeRecord]:
        try:
            data = await asyncio.to_thread(self._read)
        except (OSError, json.JSONDecodeError) as e:
            raise JournalStorageError(f"Failed to read {self._path}: {e}") from e
        if not isinstance(data, list):
            raise JournalStorageError(f"{self._path} does not contain a JSON array of trades")

        trades = []
        rejected = []
        for index, item in enumerate(data):
            try:
                trades.append(TradeRecord.from_dict(item))
            except (TradeValidationError, AttributeError) as e:
                logger.warning(
                    "Keeping invalid trade in %s out of the journal: %s", self._path.name, e
                )
                rejected.append((len(data) - index, item))
        self._rejected = rejected
        return trades

    async def save(self, trades: Sequence[TradeRecord]) -> None:
        entries: list[Any] = [t.to_dict() for t in trades]
        total = len(entries) + len(self._rejected)
        for from_end, item in sorted(self._rejected, key=lambda r: r[0], reverse=True):
            entries.insert(min(max(total - from_end, 0), len(entries)), item)

        payload = json.dumps(entries, indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write, payload)
        except OSError as e:
            raise JournalStorageError(f"Failed to write {self._path}: {e}") from e
        logger.debug("Saved %d trades to %s", len(entries), self._path)
