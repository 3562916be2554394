"""Import a JSON trade export into the journal database.

Accepts the browser journal's localStorage export (camelCase keys) or a
file written by JsonFileTradeRepository. Exported ids that collide with
existing trades or with each other get a fresh id.

Usage:
    python scripts/import_trades.py trades.json
    python scripts/import_trades.py trades.json --replace   # drop existing trades first
    python scripts/import_trades.py trades.json --dry-run
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from collections.abc import Sequence

from tradejournal.database import init_models
from tradejournal.services.analytics import TradeRecord
from tradejournal.services.journal import new_trade_id
from tradejournal.services.repository import (
    JournalStorageError,
    JsonFileTradeRepository,
    SqlTradeRepository,
)


def merge_collections(
    existing: Sequence[TradeRecord], imported: Sequence[TradeRecord]
) -> tuple[list[TradeRecord], int]:
    """Imported trades go in front of existing ones, keeping their own order.

    Returns the merged collection and how many ids were reassigned.
    """
    seen = {t.id for t in existing}
    merged: list[TradeRecord] = []
    reassigned = 0
    for trade in imported:
        if trade.id in seen:
            trade = dataclasses.replace(trade, id=new_trade_id())
            reassigned += 1
        seen.add(trade.id)
        merged.append(trade)
    return merged + list(existing), reassigned


async def run_import(args: argparse.Namespace) -> None:
    source = JsonFileTradeRepository(args.path)
    target = SqlTradeRepository()

    try:
        imported = await source.load()
        await init_models()
        existing = [] if args.replace else await target.load()
    except JournalStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    merged, reassigned = merge_collections(existing, imported)
    print(
        f"Read {len(imported)} trades from {args.path}; "
        f"{len(existing)} already in the journal; {reassigned} ids reassigned."
    )

    if args.dry_run:
        print("Dry run: nothing written.")
        return

    try:
        await target.save(merged)
    except JournalStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Journal now holds {len(merged)} trades.")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Import a JSON trade export into TradeJournal")
    parser.add_argument("path", help="JSON file holding an array of trades")
    parser.add_argument(
        "--replace", action="store_true",
        help="Replace the journal instead of merging into it",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate and report without writing",
    )
    args = parser.parse_args()

    asyncio.run(run_import(args))


if __name__ == "__main__":
    main()
