"""Tests for trade storage backends: JSON file and SQLAlchemy (SQLite in memory)."""

import json
import threading

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tradejournal.database import Base
from tradejournal.models.trade import TradeRow
from tradejournal.services.journal import TradeJournal
from tradejournal.services.repository import (
    JournalStorageError,
    JsonFileTradeRepository,
    SqlTradeRepository,
    _record_to_row,
)

BROWSER_EXPORT = [
    {
        "id": "2025-01-02T10:00:00.000Z",
        "symbol": "EURUSD",
        "date": "2025-01-02",
        "time": "10:00",
        "tradeType": "Long",
        "session": "London",
        "entryPrice": 1.1000,
        "exitPrice": 1.1050,
        "stopLoss": 1.0950,
        "takeProfit": 1.1100,
        "size": 10000,
        "emotions": "confident",
    },
    {
        "id": "2025-01-01T09:00:00.000Z",
        "symbol": "USDJPY",
        "date": "2025-01-01",
        "time": "09:00",
        "tradeType": "Short",
        "session": "Tokyo",
        "entryPrice": 157.20,
        "exitPrice": 157.50,
        "stopLoss": 157.60,
        "takeProfit": 156.50,
        "size": 100,
    },
]


class TestJsonFileTradeRepository:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        repo = JsonFileTradeRepository(tmp_path / "trades.json")
        assert await repo.load() == []

    @pytest.mark.asyncio
    async def test_save_then_load_keeps_order_and_fields(self, tmp_path, make_trade):
        trades = [
            make_trade(date="2025-01-03", notes="late entry", image_url="https://img/1.png"),
            make_trade(date="2025-01-01", trade_type="Short", session="Sydney"),
        ]
        repo = JsonFileTradeRepository(tmp_path / "trades.json")
        await repo.save(trades)
        assert await repo.load() == trades

    @pytest.mark.asyncio
    async def test_reads_browser_export(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(BROWSER_EXPORT), encoding="utf-8")
        trades = await JsonFileTradeRepository(path).load()
        assert [t.symbol for t in trades] == ["EURUSD", "USDJPY"]
        assert trades[0].emotions == "confident"
        assert trades[1].session.value == "Tokyo"

    @pytest.mark.asyncio
    async def test_skips_invalid_entries(self, tmp_path):
        bad = {**BROWSER_EXPORT[0], "id": "bad", "size": 0}
        path = tmp_path / "export.json"
        path.write_text(json.dumps([bad, BROWSER_EXPORT[1], "garbage"]), encoding="utf-8")
        repo = JsonFileTradeRepository(path)
        trades = await repo.load()
        assert [t.symbol for t in trades] == ["USDJPY"]
        assert repo.rejected_count == 2

    @pytest.mark.asyncio
    async def test_invalid_entries_survive_save(self, tmp_path, make_trade):
        bad = {**BROWSER_EXPORT[0], "id": "bad", "size": 0}
        path = tmp_path / "export.json"
        path.write_text(json.dumps([bad, BROWSER_EXPORT[1]]), encoding="utf-8")
        repo = JsonFileTradeRepository(path)
        trades = await repo.load()

        new = make_trade(id="new")
        await repo.save([new, *trades])

        stored = json.loads(path.read_text(encoding="utf-8"))
        assert [entry["id"] for entry in stored] == ["new", "bad", BROWSER_EXPORT[1]["id"]]
        assert stored[1] == bad

    @pytest.mark.asyncio
    async def test_journal_add_keeps_invalid_stored_entries(self, tmp_path, trade_fields):
        bad = {**BROWSER_EXPORT[0], "id": "a", "size": 0}
        good = {**BROWSER_EXPORT[1], "id": "b"}
        path = tmp_path / "trades.json"
        path.write_text(json.dumps([bad, good]), encoding="utf-8")

        journal = TradeJournal(JsonFileTradeRepository(path))
        added = await journal.add_trade(trade_fields)

        ids = [entry["id"] for entry in json.loads(path.read_text(encoding="utf-8"))]
        assert ids == [added.id, "a", "b"]
        assert [t.id for t in await journal.current_trades()] == [added.id, "b"]

    @pytest.mark.asyncio
    async def test_reload_after_save_round_trips_rejected(self, tmp_path, make_trade):
        path = tmp_path / "trades.json"
        path.write_text(json.dumps(["garbage", BROWSER_EXPORT[0]]), encoding="utf-8")
        repo = JsonFileTradeRepository(path)
        await repo.save([make_trade(), *await repo.load()])

        reloaded = JsonFileTradeRepository(path)
        assert len(await reloaded.load()) == 2
        assert reloaded.rejected_count == 1


    @pytest.mark.asyncio
    async def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(JournalStorageError):
            await JsonFileTradeRepository(path).load()

    @pytest.mark.asyncio
    async def test_non_array_raises(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"trades": []}), encoding="utf-8")
        with pytest.raises(JournalStorageError, match="JSON array"):
            await JsonFileTradeRepository(path).load()

    @pytest.mark.asyncio
    async def test_file_io_runs_off_event_loop(self, tmp_path, monkeypatch, make_trade):
        threads = []
        read, write = JsonFileTradeRepository._read, JsonFileTradeRepository._write

        def recording_read(repo):
            threads.append(threading.get_ident())
            return read(repo)

        def recording_write(repo, payload):
            threads.append(threading.get_ident())
            write(repo, payload)

        monkeypatch.setattr(JsonFileTradeRepository, "_read", recording_read)
        monkeypatch.setattr(JsonFileTradeRepository, "_write", recording_write)
        repo = JsonFileTradeRepository(tmp_path / "trades.json")
        await repo.save([make_trade()])
        assert len(await repo.load()) == 1

        assert len(threads) == 2
        assert threading.get_ident() not in threads

    @pytest.mark.asyncio
    async def test_unwritable_path_raises(self, tmp_path, make_trade):
        repo = JsonFileTradeRepository(tmp_path / "missing-dir" / "trades.json")
        with pytest.raises(JournalStorageError):
            await repo.save([make_trade()])


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


class TestSqlTradeRepository:
    @pytest.mark.asyncio
    async def test_empty_table(self, session_factory):
        assert await SqlTradeRepository(session_factory).load() == []

    @pytest.mark.asyncio
    async def test_round_trip(self, session_factory, make_trade):
        trades = [
            make_trade(date="2025-01-03", time="16:45", notes="news spike",
                       pre_trade_analysis="Bull flag", image_url="data:image/png;base64,AA"),
            make_trade(date="2025-01-05", trade_type="Short", session="New York",
                       entry_price=1.23456, exit_price=1.23123, size=25000),
            make_trade(date="2025-01-01"),
        ]
        repo = SqlTradeRepository(session_factory)
        await repo.save(trades)
        assert await repo.load() == trades

    @pytest.mark.asyncio
    async def test_save_replaces_collection(self, session_factory, make_trade):
        repo = SqlTradeRepository(session_factory)
        first = make_trade()
        await repo.save([first])
        second = make_trade()
        await repo.save([second, first])
        assert [t.id for t in await repo.load()] == [second.id, first.id]

        await repo.save([])
        assert await repo.load() == []

    @pytest.mark.asyncio
    async def test_invalid_row_fails_load(self, session_factory, make_trade):
        row = _record_to_row(make_trade(id="stored"), 0)
        row.session = "Frankfurt"
        async with session_factory() as session:
            async with session.begin():
                session.add(row)

        with pytest.raises(JournalStorageError, match="stored"):
            await SqlTradeRepository(session_factory).load()

    @pytest.mark.asyncio
    async def test_invalid_row_is_never_overwritten(self, session_factory, make_trade,
                                                   trade_fields):
        valid = _record_to_row(make_trade(id="ok"), 0)
        broken = _record_to_row(make_trade(id="broken"), 1)
        broken.session = "Frankfurt"
        async with session_factory() as session:
            async with session.begin():
                session.add_all([valid, broken])

        journal = TradeJournal(SqlTradeRepository(session_factory))
        with pytest.raises(JournalStorageError):
            await journal.add_trade(trade_fields)
        assert await journal.current_trades() == ()

        async with session_factory() as session:
            ids = (await session.execute(select(TradeRow.id))).scalars().all()
        assert sorted(ids) == ["broken", "ok"]
