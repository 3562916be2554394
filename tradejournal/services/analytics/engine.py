"""Memoizing facade over the analytics derivations."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tradejournal.services.analytics.equity import equity_curve
from tradejournal.services.analytics.models import EquityPoint, Stats, TradeRecord, TradeWithPL
from tradejournal.services.analytics.pnl import annotate_pl
from tradejournal.services.analytics.stats import compute_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Every derived view of one trade collection."""

    trades: tuple[TradeWithPL, ...]
    stats: Stats
    equity: tuple[EquityPoint, ...]

    def to_dict(self, decimals: int | None = None) -> dict:
        return {
            "trades": [t.to_dict() for t in self.trades],
            "stats": self.stats.to_dict(decimals),
            "equity": [p.to_dict(decimals) for p in self.equity],
        }


def derive(trades: Sequence[TradeRecord]) -> AnalyticsSnapshot:
    """Recompute everything from scratch: raw trades -> P/L -> {stats, equity}."""
    with_pl = annotate_pl(trades)
    return AnalyticsSnapshot(
        trades=tuple(with_pl),
        stats=compute_stats(with_pl),
        equity=tuple(equity_curve(with_pl)),
    )


class AnalyticsEngine:
    """Derives P/L, stats and the equity curve for a trade collection.

    Results are memoized on the identity of the collection object. Only
    tuples are memoized: a list could be mutated in place behind the cache.
    A cached snapshot is always identical to derive() on the same input.
    """

    def __init__(self) -> None:
        # Strong reference to the source keeps its id() from being reused
        self._source: tuple[TradeRecord, ...] | None = None
        self._snapshot: AnalyticsSnapshot | None = None

    def snapshot(self, trades: Sequence[TradeRecord]) -> AnalyticsSnapshot:
        if self._snapshot is not None and trades is self._source:
            return self._snapshot

        result = derive(trades)
        if isinstance(trades, tuple):
            self._source = trades
            self._snapshot = result
            logger.debug("Analytics recomputed for %d trades", len(trades))
        return result

    def trades_with_pl(self, trades: Sequence[TradeRecord]) -> tuple[TradeWithPL, ...]:
        return self.snapshot(trades).trades

    def stats(self, trades: Sequence[TradeRecord]) -> Stats:
        return self.snapshot(trades).stats

    def equity(self, trades: Sequence[TradeRecord]) -> tuple[EquityPoint, ...]:
        return self.snapshot(trades).equity

    def clear(self) -> None:
        self._source = None
        self._snapshot = None
