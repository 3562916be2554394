"""Trade analytics for TradeJournal.

Pure derivations over an in-memory trade collection: per-trade P/L,
aggregate statistics and the cumulative equity curve. No I/O.
"""

from tradejournal.services.analytics.engine import AnalyticsEngine, AnalyticsSnapshot, derive
from tradejournal.services.analytics.equity import equity_curve
from tradejournal.services.analytics.models import (
    MAX_ABS_PL,
    EquityPoint,
    Stats,
    TradeRecord,
    TradeType,
    TradeValidationError,
    TradeWithPL,
    TradingSession,
)
from tradejournal.services.analytics.pnl import annotate_pl, compute_pl
from tradejournal.services.analytics.stats import compute_stats

__all__ = [
    "MAX_ABS_PL",
    "AnalyticsEngine",
    "AnalyticsSnapshot",
    "EquityPoint",
    "Stats",
    "TradeRecord",
    "TradeType",
    "TradeValidationError",
    "TradeWithPL",
    "TradingSession",
    "annotate_pl",
    "compute_pl",
    "compute_stats",
    "derive",
    "equity_curve",
]
