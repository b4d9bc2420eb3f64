#!/usr/bin/env python3
"""
Attraction sync CLI tool.

Usage:
    python scripts/sync.py merge external.db                         # Save images locally
    python scripts/sync.py merge external.db https://host/images     # POST images instead
    python scripts/sync.py initialize external.db                    # Seed lookup titles
    python scripts/sync.py --console                                 # Read commands from stdin
    python scripts/sync.py --stats                                   # Show cache statistics
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from attractions.commands import handle_command, listen_for_commands
from attractions.config import Config
from attractions.services.attraction_sync import AttractionSync
from attractions.services.cache_repository import CacheRepository


def show_stats(cache: CacheRepository):
    """Show cache statistics."""
    print("\n" + "="*60)
    print("Attraction Cache Statistics")
    print("="*60)
    print(f"\nCache: {cache.db_path}")
    print(f"  Pending attractions: {cache.count_attractions():,}")
    print(f"  Titles: {cache.count_titles():,}")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Sync cached attractions into an external store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "command",
        nargs="*",
        help="Command words, e.g. 'merge external.db [endpoint]' or 'initialize external.db'",
    )
    parser.add_argument(
        "--db",
        default=None,
        help=f"Cache database path (default: {Config.cache_db_path()})",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Read commands from stdin, one per line",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show cache statistics",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, Config.log_level(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    cache = CacheRepository(args.db or Config.cache_db_path())
    sync = AttractionSync(cache)

    try:
        if args.stats:
            show_stats(cache)
            return 0

        if args.console:
            listen_for_commands(sync)
            return 0

        if not args.command:
            parser.print_help()
            return 1

        print(handle_command(" ".join(args.command), sync))
        return 0
    finally:
        sync.writer.close()
        cache.close()


if __name__ == "__main__":
    sys.exit(main())
