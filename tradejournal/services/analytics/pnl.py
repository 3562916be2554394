"""Per-trade profit/loss."""

from collections.abc import Iterable

from tradejournal.services.analytics.models import TradeRecord, TradeType, TradeWithPL


def compute_pl(trade: TradeRecord) -> float:
    """Signed P/L of one trade. Full float precision, no rounding.

    Long:  (exit - entry) * size
    Short: (entry - exit) * size
    """
    if trade.trade_type == TradeType.LONG:
        return (trade.exit_price - trade.entry_price) * trade.size
    if trade.trade_type == TradeType.SHORT:
        return (trade.entry_price - trade.exit_price) * trade.size
    raise ValueError(f"Unknown trade direction {trade.trade_type!r} for trade {trade.id!r}")


def annotate_pl(trades: Iterable[TradeRecord]) -> list[TradeWithPL]:
    """Attach P/L to every trade and order newest first by date.

    The sort is stable: trades sharing a date keep their collection order.
    """
    annotated = [TradeWithPL.from_record(t, compute_pl(t)) for t in trades]
    annotated.sort(key=lambda t: t.date, reverse=True)
    return annotated
