"""Aggregate statistics over P/L-annotated trades."""

import math
from collections.abc import Sequence

from tradejournal.services.analytics.models import Stats, TradeWithPL


def compute_stats(trades: Sequence[TradeWithPL]) -> Stats:
    """Win rate, profit factor, average win/loss and total P/L.

    Breakeven trades (pl == 0) count toward total_trades only. Division by
    zero is modelled, not raised: profit_factor is None without losers,
    avg_win / avg_loss are 0 without winners / losers.
    """
    total_trades = len(trades)
    if total_trades == 0:
        return Stats.empty()

    wins = [t.pl for t in trades if t.pl > 0]
    losses = [t.pl for t in trades if t.pl < 0]

    # fsum is exact and order-independent
    total_pl = math.fsum(t.pl for t in trades)
    total_gains = math.fsum(wins)
    total_losses = abs(math.fsum(losses))

    return Stats(
        total_pl=total_pl,
        win_rate=len(wins) / total_trades * 100,
        total_trades=total_trades,
        winning_trades=len(wins),
        losing_trades=len(losses),
        profit_factor=total_gains / total_losses if total_losses > 0 else None,
        avg_win=total_gains / len(wins) if wins else 0.0,
        avg_loss=total_losses / len(losses) if losses else 0.0,
    )
