"""Dashboard API routes: performance stats, equity curve, overview."""

import logging

from fastapi import APIRouter, Depends, Query

from tradejournal.api.deps import get_journal
from tradejournal.config import settings
from tradejournal.services.ai.coach import Language
from tradejournal.services.formatting import (
    format_currency,
    format_date,
    format_percent,
    format_profit_factor,
)
from tradejournal.services.journal import TradeJournal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
async def get_stats(journal: TradeJournal = Depends(get_journal)):
    """Aggregate performance. profit_factor is null when there are no losing trades."""
    stats = await journal.stats()
    return stats.to_dict(settings.display_decimals)


@router.get("/equity")
async def get_equity(journal: TradeJournal = Depends(get_journal)):
    """Cumulative P/L per trade, oldest trade first."""
    points = await journal.equity_curve()
    return {"points": [p.to_dict(settings.display_decimals) for p in points]}


@router.get("/overview")
async def get_overview(
    language: Language = Query(Language.EN),
    journal: TradeJournal = Depends(get_journal),
):
    """Stats and equity curve plus display strings for the dashboard cards."""
    snapshot = await journal.snapshot()
    stats = snapshot.stats
    decimals = settings.display_decimals

    return {
        "stats": stats.to_dict(decimals),
        "equity": [
            {**p.to_dict(decimals), "date_display": format_date(p.date, language)}
            for p in snapshot.equity
        ],
        "display": {
            "total_pl": format_currency(stats.total_pl, language, decimals),
            "win_rate": format_percent(stats.win_rate, language),
            "profit_factor": format_profit_factor(stats.profit_factor, language, decimals),
            "avg_win": format_currency(stats.avg_win, language, decimals),
            "avg_loss": format_currency(stats.avg_loss, language, decimals),
            "total_trades": str(stats.total_trades),
        },
        "language": language.value,
    }


@router.get("/health")
async def health_check():
    """System health status."""
    return {"status": "ok"}
