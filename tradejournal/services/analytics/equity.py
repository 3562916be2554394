"""Cumulative equity curve in execution order."""

from collections.abc import Sequence
from fractions import Fraction
from itertools import accumulate

from tradejournal.services.analytics.models import EquityPoint, TradeWithPL


def equity_curve(trades: Sequence[TradeWithPL]) -> list[EquityPoint]:
    """Running P/L per trade, oldest trade first.

    `trades` is newest first (display order). It is replayed in reverse so
    the curve accumulates in the order trades were executed.

    Running sums are exact and rounded once per point, so the last point
    always equals compute_stats(trades).total_pl.
    """
    replay = list(reversed(trades))
    running = accumulate(Fraction(t.pl) for t in replay)
    return [
        EquityPoint(name=f"Trade {i}", equity=float(total), date=trade.date)
        for i, (trade, total) in enumerate(zip(replay, running), start=1)
    ]
