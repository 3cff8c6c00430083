#!/usr/bin/env python3
"""
Topper - community-rated content feed.

Command-line entry point:
  - serve the JSON API
  - seed a demo data set
  - import items from "awesome" Markdown lists
  - print the leaderboard and catalog statistics

Usage:
    python main.py serve                      # Run the API server
    python main.py seed --items 50            # Generate demo data
    python main.py import-awesome --merge     # Import awesome lists into the store
    python main.py leaderboard --limit 5      # Top items by score
    python main.py stats                      # Catalog statistics
    python main.py --show-config              # Show configuration and exit
"""

import argparse
import random
import sys
from pathlib import Path

from src.catalog import catalog_stats, leaderboard
from src.config import (
    DATA_DIR,
    HOST,
    PORT,
    SEED_ITEMS,
    SEED_RATINGS,
    SEED_USERS,
    configure_logging,
    print_config_summary,
    validate_config,
)
from src.models.localization import localize
from src.seed import (
    DEFAULT_AWESOME_URLS,
    generate_seed_data,
    import_awesome_lists,
    write_import,
    write_seed_data,
)
from src.storage import JsonFileStorage

VERSION = "0.1.0"


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="topper",
        description="Serve, seed and inspect the Topper content store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 8080            Run the API on port 8080
  %(prog)s seed --seed 42               Reproducible demo data
  %(prog)s import-awesome URL [URL...]  Import specific lists
  %(prog)s leaderboard --lang ro        Romanian leaderboard
        """,
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=Path,
        default=None,
        metavar="DIR",
        help=f"Directory holding items.json and ratings.json (default: {DATA_DIR})",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the JSON API server")
    serve.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST})")
    serve.add_argument("--port", "-p", type=int, default=PORT, help=f"Port (default: {PORT})")
    serve.add_argument("--debug", action="store_true", help="Run Flask in debug mode")

    seed = subparsers.add_parser("seed", help="Replace the store with demo data")
    seed.add_argument("--users", type=int, default=SEED_USERS, metavar="N")
    seed.add_argument("--items", type=int, default=SEED_ITEMS, metavar="N")
    seed.add_argument("--ratings", type=int, default=SEED_RATINGS, metavar="N")
    seed.add_argument("--seed", type=int, default=None, metavar="N", help="Random seed for reproducible output")

    importer = subparsers.add_parser("import-awesome", help="Import awesome Markdown lists")
    importer.add_argument("urls", nargs="*", metavar="URL", help="Raw Markdown URLs (default: built-in list)")
    importer.add_argument("--merge", action="store_true", help="Also append new items to the store")

    board = subparsers.add_parser("leaderboard", help="Print the top items by score")
    board.add_argument("--limit", "-l", type=int, default=10, metavar="N")
    board.add_argument("--lang", default=None)
    board.add_argument("--category", default=None)

    subparsers.add_parser("stats", help="Print catalog statistics")

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Topper Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def run_serve(args, storage: JsonFileStorage) -> int:
    from web.app import app

    app.config["STORAGE"] = storage
    print("=" * 60)
    print("Topper API")
    print("=" * 60)
    print(f"Data: {storage.data_dir}")
    print(f"Listening on http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def run_seed(args, storage: JsonFileStorage) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    data = generate_seed_data(users=args.users, items=args.items, ratings=args.ratings, rng=rng)
    write_seed_data(storage, data)

    print("Seed complete:")
    print(f"  users:      {len(data.users)}")
    print(f"  categories: {len(data.categories)}")
    print(f"  items:      {len(data.items)}")
    print(f"  ratings:    {len(data.ratings)}")
    print(f"  data dir:   {storage.data_dir}")
    return 0


def run_import(args, storage: JsonFileStorage) -> int:
    result = import_awesome_lists(args.urls or DEFAULT_AWESOME_URLS)
    added = write_import(storage, result, merge=args.merge)

    print(f"Imported {len(result.items)} items from {len(result.urls)} lists")
    if args.merge:
        print(f"  added to store: {added}")
    for url in result.failed_urls:
        print(f"  ⚠️  failed: {url}")

    # Every list failed
    if result.failed_urls and len(result.failed_urls) == len(result.urls):
        return 1
    return 0


def run_leaderboard(args, storage: JsonFileStorage) -> int:
    top = leaderboard(storage.read_items(), limit=args.limit, lang=args.lang, category=args.category)
    if not top:
        print("No items.")
        return 0
    for rank, item in enumerate(top, start=1):
        view = localize(item, args.lang)
        print(f"{rank:>3}. [{view.score:+d}] {view.content_text} ({view.category or '-'})")
    return 0


def run_stats(args, storage: JsonFileStorage) -> int:
    stats = catalog_stats(storage.read_items(), storage.read_ratings())
    print(f"Total items:     {stats['totalItems']}")
    print(f"Total ratings:   {stats['totalRatings']}")
    print(f"Average score:   {stats['averageScore']:.2f}")
    print(f"Most rated type: {stats['mostRatedType'] or 'None'}")
    print(f"Diversity index: {stats['diversityIndex']:.2f}")
    for category, count in sorted(stats["categories"].items()):
        print(f"  {category}: {count}")
    return 0


COMMANDS = {
    "serve": run_serve,
    "seed": run_seed,
    "import-awesome": run_import,
    "leaderboard": run_leaderboard,
    "stats": run_stats,
}


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.show_config:
        show_config()
        return 0

    if not args.command:
        parser.print_help()
        return 1

    configure_logging("DEBUG" if args.verbose else None)
    storage = JsonFileStorage(args.data_dir)

    try:
        return COMMANDS[args.command](args, storage)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ {args.command} failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
