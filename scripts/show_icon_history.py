#!/usr/bin/env python3
"""Show the persisted app icon and its change history."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd

from money_mood.config import ensure_data_directories
from money_mood.icon_store import IconStateStore
from money_mood.logging_config import setup_logging
from money_mood.storage import JsonFileStore


async def main(path: Path | None = None, limit: int = 30) -> None:
    icon_store = IconStateStore(JsonFileStore(path))

    current = await icon_store.get_current_variant()
    print(f"Current icon: {current.value if current else 'unset'}")
    print(await icon_store.describe_current())

    history = await icon_store.get_history()
    if not history:
        print("\nNo icon changes recorded.")
        return

    df = pd.DataFrame([entry.to_dict() for entry in history])
    print(f"\nLast {min(limit, len(df))} of {len(df)} changes:")
    print(df.tail(limit).to_string(index=False))

    stats = await icon_store.history_stats()
    print("\nBy target variant:")
    for variant, count in stats['distribution'].items():
        print(f"  {variant}: {count}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show app icon state and change history.')
    parser.add_argument('--store', type=Path, default=None, help='Path to the JSON key-value store')
    parser.add_argument('--limit', type=int, default=30, help='How many recent changes to show')
    parser.add_argument('--log-level', default=None, help='Logging level')
    args = parser.parse_args()
    setup_logging(args.log_level)
    if args.store is None:
        ensure_data_directories()
    asyncio.run(main(path=args.store, limit=args.limit))
