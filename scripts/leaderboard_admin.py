#!/usr/bin/env python3
"""
Leaderboard maintenance tool.

Usage:
    python scripts/leaderboard_admin.py top [--limit 20]
    python scripts/leaderboard_admin.py local
    python scripts/leaderboard_admin.py clear --yes
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from config.settings import get_settings
from bugdefense.leaderboard.client import LeaderboardClient
from bugdefense.leaderboard.local import LocalScoreStore
from bugdefense.leaderboard.models import ScoreRecord


def print_rows(title: str, rows: list[ScoreRecord]) -> None:
    print(title)
    if not rows:
        print("  (no scores)")
    for idx, row in enumerate(rows, start=1):
        print(f"{idx:>3}. {row.name:<20} {row.score:>7}  {row.timestamp}")


async def cmd_top(args) -> int:
    settings = get_settings()
    client = LeaderboardClient(settings.leaderboard.url, timeout=settings.leaderboard.timeout)
    try:
        rows = await client.fetch_top_scores(args.limit)
    finally:
        await client.close()
    print_rows("Global leaderboard", rows)
    return 0


async def cmd_local(args) -> int:
    settings = get_settings()
    store = LocalScoreStore(settings.storage.local_scores_path, limit=settings.storage.local_limit)
    print_rows(f"Local scores ({store.path})", store.load())
    return 0


async def cmd_clear(args) -> int:
    if not args.yes:
        print("Refusing to clear the global leaderboard without --yes")
        return 1
    settings = get_settings()
    client = LeaderboardClient(settings.leaderboard.url, timeout=settings.leaderboard.timeout)
    try:
        ok = await client.clear_all_scores()
    finally:
        await client.close()
    print("Leaderboard cleared" if ok else "Failed to clear leaderboard")
    return 0 if ok else 1


def main() -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(
        description="BUG DEFENSE leaderboard maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    p_top = subparsers.add_parser('top', help='Show the global top scores')
    p_top.add_argument('--limit', type=int, default=20, help='Rows to show (default: 20)')
    p_top.set_defaults(func=cmd_top)

    p_local = subparsers.add_parser('local', help='Show scores stored on this machine')
    p_local.set_defaults(func=cmd_local)

    p_clear = subparsers.add_parser('clear', help='Delete every global score')
    p_clear.add_argument('--yes', action='store_true', help='Confirm the wipe')
    p_clear.set_defaults(func=cmd_clear)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return 1
    return asyncio.run(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
