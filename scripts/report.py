"""CLI for journal performance reports.

Usage:
    python scripts/report.py                         # trades from the database
    python scripts/report.py --file trades.json      # trades from a JSON export
    python scripts/report.py --file trades.json --json
    python scripts/report.py --language fa
"""

import argparse
import asyncio
import json
import logging
import sys

from tradejournal.config import settings
from tradejournal.services.ai.coach import Language
from tradejournal.services.analytics import AnalyticsSnapshot, derive
from tradejournal.services.formatting import (
    format_currency,
    format_date,
    format_percent,
    format_profit_factor,
)
from tradejournal.services.repository import (
    JournalStorageError,
    JsonFileTradeRepository,
    SqlTradeRepository,
    TradeRepository,
)


def format_report(snapshot: AnalyticsSnapshot, language: Language = Language.EN) -> str:
    """Format journal analytics as a readable console report."""
    stats = snapshot.stats
    lines = []
    sep = "=" * 60

    lines.append(sep)
    lines.append("  TradeJournal Performance Report")
    lines.append(sep)

    lines.append("  PERFORMANCE")
    lines.append(f"  Total P/L:        {format_currency(stats.total_pl, language):>16}")
    lines.append(f"  Win Rate:         {format_percent(stats.win_rate, language):>16}")
    lines.append(f"  Profit Factor:    {format_profit_factor(stats.profit_factor, language):>16}")
    lines.append(f"  Avg Win:          {format_currency(stats.avg_win, language):>16}")
    lines.append(f"  Avg Loss:         {format_currency(stats.avg_loss, language):>16}")
    lines.append(
        f"  Trades:           {stats.total_trades:>16d}"
        f"  ({stats.winning_trades}W / {stats.losing_trades}L)"
    )
    lines.append("-" * 60)

    lines.append("  EQUITY CURVE (oldest first)")
    if not snapshot.equity:
        lines.append("  No trades logged yet.")
    for point in snapshot.equity:
        lines.append(
            f"  {point.name:<12} {format_date(point.date, language):<14} "
            f"{format_currency(point.equity, language):>16}"
        )
    lines.append(sep)
    return "\n".join(lines)


async def run_report(args: argparse.Namespace) -> None:
    repository: TradeRepository = (
        JsonFileTradeRepository(args.file) if args.file else SqlTradeRepository()
    )
    try:
        trades = await repository.load()
    except JournalStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    snapshot = derive(trades)
    if args.json:
        print(json.dumps(snapshot.to_dict(settings.display_decimals), indent=2))
    else:
        print(format_report(snapshot, Language(args.language)))


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="TradeJournal report: P/L statistics and equity curve"
    )
    parser.add_argument(
        "--file",
        help="JSON trade export to read instead of the database",
    )
    parser.add_argument(
        "--language", default="en",
        choices=[lang.value for lang in Language],
        help="Display language (default: en)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Output analytics as JSON instead of formatted report",
    )
    args = parser.parse_args()

    asyncio.run(run_report(args))


if __name__ == "__main__":
    main()
