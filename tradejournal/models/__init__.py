"""SQLAlchemy models for TradeJournal."""

from tradejournal.models.trade import TradeRow

__all__ = ["TradeRow"]
