"""Trade journal data structures. Prices and P/L are plain floats in quote currency."""

import math
from dataclasses import MISSING, dataclass, fields
from datetime import date, datetime, time
from enum import Enum
from typing import Any


class TradeValidationError(ValueError):
    """A trade record failed ingestion checks (non-finite price, bad size, unknown enum)."""


class TradeType(str, Enum):
    """Trade direction. Decides the P/L sign convention."""

    LONG = "Long"
    SHORT = "Short"


class TradingSession(str, Enum):
    """Market session the trade was taken in. Informational only."""

    LONDON = "London"
    NEW_YORK = "New York"
    TOKYO = "Tokyo"
    SYDNEY = "Sydney"


_NUMERIC_FIELDS = ("entry_price", "exit_price", "stop_loss", "take_profit", "size")

# Largest per-trade P/L accepted at ingestion, in quote currency
MAX_ABS_PL = 1e15

# Keys used by the browser export (localStorage JSON) -> field names
_CAMEL_TO_FIELD = {
    "tradeType": "trade_type",
    "entryPrice": "entry_price",
    "exitPrice": "exit_price",
    "stopLoss": "stop_loss",
    "takeProfit": "take_profit",
    "preTradeAnalysis": "pre_trade_analysis",
    "postTradeAnalysis": "post_trade_analysis",
    "imageUrl": "image_url",
}


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise TradeValidationError(f"Invalid trade date {value!r}") from e
    raise TradeValidationError(f"Invalid trade date {value!r}")


def _coerce_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError as e:
            raise TradeValidationError(f"Invalid trade time {value!r}") from e
    raise TradeValidationError(f"Invalid trade time {value!r}")


@dataclass(frozen=True, kw_only=True)
class TradeRecord:
    """A single logged trade. Immutable once created.

    Construction validates the record: all prices and the size must be
    finite, the size strictly positive, and direction/session must be one
    of the known enum values. Invalid input raises TradeValidationError
    instead of letting NaN leak into aggregate statistics.
    """

    id: str
    symbol: str
    date: date
    time: time
    trade_type: TradeType
    session: TradingSession
    entry_price: float
    exit_price: float
    stop_loss: float
    take_profit: float
    size: float
    emotions: str | None = None
    strategy: str | None = None
    notes: str | None = None
    pre_trade_analysis: str | None = None
    post_trade_analysis: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        # frozen dataclass: normalise through object.__setattr__
        set_ = object.__setattr__

        if not self.id:
            raise TradeValidationError("Trade id must not be empty")
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise TradeValidationError("Trade symbol must not be empty")
        set_(self, "symbol", self.symbol.strip())

        try:
            set_(self, "trade_type", TradeType(self.trade_type))
        except ValueError as e:
            raise TradeValidationError(f"Unknown trade type {self.trade_type!r}") from e
        try:
            set_(self, "session", TradingSession(self.session))
        except ValueError as e:
            raise TradeValidationError(f"Unknown trading session {self.session!r}") from e

        set_(self, "date", _coerce_date(self.date))
        set_(self, "time", _coerce_time(self.time))

        for name in _NUMERIC_FIELDS:
            raw = getattr(self, name)
            if isinstance(raw, bool):
                raise TradeValidationError(f"{name} must be a number, got {raw!r}")
            try:
                value = float(raw)
            except (TypeError, ValueError) as e:
                raise TradeValidationError(f"{name} must be a number, got {raw!r}") from e
            if not math.isfinite(value):
                raise TradeValidationError(f"{name} must be finite, got {value}")
            set_(self, name, value)

        if self.size <= 0:
            raise TradeValidationError(f"size must be greater than zero, got {self.size}")

        # |P/L| is the same for both directions
        move = abs(self.exit_price - self.entry_price) * self.size
        if not move <= MAX_ABS_PL:
            raise TradeValidationError(
                f"P/L magnitude {move} exceeds {MAX_ABS_PL:g} for trade {self.id!r}"
            )


    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TradeRecord":
        """Build a record from a JSON-style dict. Accepts snake_case or the browser's camelCase keys."""
        known = {f.name for f in fields(TradeRecord)}
        kwargs = {}
        for key, value in data.items():
            name = _CAMEL_TO_FIELD.get(key, key)
            if name in known:
                kwargs[name] = value
        missing = [
            f.name for f in fields(TradeRecord)
            if f.name not in kwargs and f.default is MISSING
        ]
        if missing:
            raise TradeValidationError(f"Missing trade fields: {', '.join(sorted(missing))}")
        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Serialize to JSON-safe dict for API response."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "date": self.date.isoformat(),
            "time": self.time.strftime("%H:%M"),
            "trade_type": self.trade_type.value,
            "session": self.session.value,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "size": self.size,
            "emotions": self.emotions,
            "strategy": self.strategy,
            "notes": self.notes,
            "pre_trade_analysis": self.pre_trade_analysis,
            "post_trade_analysis": self.post_trade_analysis,
            "image_url": self.image_url,
        }


@dataclass(frozen=True, kw_only=True)
class TradeWithPL(TradeRecord):
    """A TradeRecord annotated with its derived P/L. Never persisted."""

    pl: float

    @classmethod
    def from_record(cls, record: TradeRecord, pl: float) -> "TradeWithPL":
        values = {f.name: getattr(record, f.name) for f in fields(TradeRecord)}
        return cls(**values, pl=pl)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["pl"] = self.pl
        return d


@dataclass(frozen=True)
class Stats:
    """Aggregate performance snapshot over a trade set."""

    total_pl: float
    win_rate: float  # percentage, 0-100
    total_trades: int
    winning_trades: int
    losing_trades: int
    profit_factor: float | None  # None when there are no losing trades
    avg_win: float
    avg_loss: float  # positive magnitude

    @classmethod
    def empty(cls) -> "Stats":
        return cls(
            total_pl=0.0,
            win_rate=0.0,
            total_trades=0,
            winning_trades=0,
            losing_trades=0,
            profit_factor=None,
            avg_win=0.0,
            avg_loss=0.0,
        )

    def to_dict(self, decimals: int | None = None) -> dict:
        """Serialize to JSON-safe dict. Rounds money and ratios when decimals is given."""

        def _r(value: float) -> float:
            return round(value, decimals) if decimals is not None else value

        return {
            "total_pl": _r(self.total_pl),
            "win_rate": _r(self.win_rate),
            "total_trades": self.total_trades,
            "winning_trades": self.winning_trades,
            "losing_trades": self.losing_trades,
            "profit_factor": _r(self.profit_factor) if self.profit_factor is not None else None,
            "avg_win": _r(self.avg_win),
            "avg_loss": _r(self.avg_loss),
        }


@dataclass(frozen=True)
class EquityPoint:
    """One vertex of the cumulative P/L curve."""

    name: str  # "Trade 1", "Trade 2", ...
    equity: float
    date: date

    def to_dict(self, decimals: int | None = None) -> dict:
        return {
            "name": self.name,
            "equity": round(self.equity, decimals) if decimals is not None else self.equity,
            "date": self.date.isoformat(),
        }
