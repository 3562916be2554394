"""Persisted journal trade. One row per TradeRecord."""

from datetime import date, time

from sqlalchemy import CheckConstraint, Date, Float, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from tradejournal.database import Base


class TradeRow(Base):
    """Raw trade as logged by the trader. P/L is never stored, always derived."""

    __tablename__ = "journal_trades"
    __table_args__ = (
        CheckConstraint("trade_type IN ('Long', 'Short')", name="ck_journal_trades_trade_type"),
        CheckConstraint("size > 0", name="ck_journal_trades_size_positive"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # 0 = newest
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    trade_date: Mapped[date] = mapped_column(Date, nullable=False)
    trade_time: Mapped[time] = mapped_column(Time, nullable=False)
    trade_type: Mapped[str] = mapped_column(String(5), nullable=False)  # Long, Short
    session: Mapped[str] = mapped_column(String(10), nullable=False)  # London, New York, Tokyo, Sydney
    entry_price: Mapped[float] = mapped_column(Float, nullable=False)
    exit_price: Mapped[float] = mapped_column(Float, nullable=False)
    stop_loss: Mapped[float] = mapped_column(Float, nullable=False)
    take_profit: Mapped[float] = mapped_column(Float, nullable=False)
    size: Mapped[float] = mapped_column(Float, nullable=False)
    emotions: Mapped[str | None] = mapped_column(Text, nullable=True)
    strategy: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    pre_trade_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_trade_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)  # opaque: data URI or URL
