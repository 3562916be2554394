"""Trade API routes: log trades, view history, AI coaching per trade."""

import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from tradejournal.api.deps import get_coach, get_journal
from tradejournal.services.ai.coach import Language, TradeCoach
from tradejournal.services.analytics import TradeType, TradeValidationError, TradingSession
from tradejournal.services.journal import TradeJournal, TradeNotFoundError
from tradejournal.services.repository import JournalStorageError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trades", tags=["trades"])


class TradeCreate(BaseModel):
    """Request body for logging a trade. The id is assigned by the journal."""

    symbol: str = Field(..., min_length=1, max_length=20)
    date: dt.date
    time: dt.time
    trade_type: TradeType
    session: TradingSession
    entry_price: float = Field(..., allow_inf_nan=False)
    exit_price: float = Field(..., allow_inf_nan=False)
    stop_loss: float = Field(..., allow_inf_nan=False)
    take_profit: float = Field(..., allow_inf_nan=False)
    size: float = Field(..., gt=0, allow_inf_nan=False, description="Position size, must be positive")
    emotions: str | None = Field(None, max_length=2000)
    strategy: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=5000)
    pre_trade_analysis: str | None = Field(None, max_length=5000)
    post_trade_analysis: str | None = Field(None, max_length=5000)
    image_url: str | None = Field(None, description="Opaque image reference: data URI or URL")


@router.get("/")
async def list_trades(journal: TradeJournal = Depends(get_journal)):
    """All trades with P/L, newest first."""
    trades = await journal.trades_with_pl()
    return {"trades": [t.to_dict() for t in trades]}


@router.post("/", status_code=201)
async def add_trade(req: TradeCreate, journal: TradeJournal = Depends(get_journal)):
    """Log a new trade. Returns it with its P/L."""
    try:
        trade = await journal.add_trade(req.model_dump())
    except TradeValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except JournalStorageError as e:
        logger.error("Failed to persist trade: %s", e)
        raise HTTPException(status_code=503, detail="Trade storage unavailable") from e
    return trade.to_dict()


@router.get("/{trade_id}")
async def get_trade(trade_id: str, journal: TradeJournal = Depends(get_journal)):
    try:
        trade = await journal.get_trade(trade_id)
    except TradeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return trade.to_dict()


@router.post("/{trade_id}/analysis")
async def analyze_trade(
    trade_id: str,
    language: Language = Query(Language.EN),
    journal: TradeJournal = Depends(get_journal),
    coach: TradeCoach = Depends(get_coach),
):
    """AI coaching feedback for one trade. Falls back to a localized message on failure."""
    try:
        trade = await journal.get_trade(trade_id)
    except TradeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    analysis = await coach.analyze(trade, language)
    return {"trade_id": trade.id, "language": language.value, "analysis": analysis}
