"""Shared service singletons, exposed as FastAPI dependencies so tests can override them."""

import logging

from tradejournal.config import settings
from tradejournal.services.ai.coach import TradeCoach
from tradejournal.services.journal import TradeJournal
from tradejournal.services.repository import (
    JsonFileTradeRepository,
    SqlTradeRepository,
    TradeRepository,
)

logger = logging.getLogger(__name__)

_journal: TradeJournal | None = None
_coach: TradeCoach | None = None


def build_repository() -> TradeRepository:
    """JSON file storage when JOURNAL_FILE is set, the database otherwise."""
    if settings.journal_file:
        logger.info("Using JSON trade storage at %s", settings.journal_file)
        return JsonFileTradeRepository(settings.journal_file)
    return SqlTradeRepository()


def get_journal() -> TradeJournal:
    global _journal
    if _journal is None:
        _journal = TradeJournal(build_repository())
    return _journal


def get_coach() -> TradeCoach:
    global _coach
    if _coach is None:
        _coach = TradeCoach()
    return _coach
