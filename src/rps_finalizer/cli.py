# Area: Shared
"""
rps_finalizer.cli — Command-line interface
==========================================

Provides the ``rps-finalizer`` entry point.

Usage:
    rps-finalizer finalizer                   # finalize awaiting games
    rps-finalizer bot                         # auto-play every foreign game
    rps-finalizer all                         # both in one process
    rps-finalizer create-game --wager 0       # create a game, print its id

Configuration comes from the environment (RPC_URL, ADMIN_PRIVATE_KEY,
CONTRACT_ADDRESS, ...), optionally loaded from a .env file.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ._runner_config import RunnerSettings, load_settings
from ._shared import enable_narrative_mode, log_task_error, setup_logging
from .errors import ConfigError, RPSFinalizerError
from .runner import MODES, FinalizerRunner, create_game

logger = logging.getLogger("rps_finalizer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rps-finalizer",
        description="Off-chain finalizer and auto-play agent for encrypted Rock-Paper-Scissors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rps-finalizer finalizer
  rps-finalizer --env-file .env.sepolia all
  rps-finalizer --from-block 5120000 finalizer
  rps-finalizer create-game --wager 0
        """,
    )

    parser.add_argument(
        "--env-file",
        type=str,
        help="Path to a .env file (default: .env in the working directory, if any)",
    )

    parser.add_argument(
        "--from-block",
        type=int,
        help="Replay events from this block instead of starting at the next one",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    parser.add_argument(
        "--narrative",
        action="store_true",
        help="Show one line per game step on the terminal instead of standard logs",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    for mode in MODES:
        sub.add_parser(mode, help=f"Run in {mode} mode")
    create = sub.add_parser("create-game", help="Create a game and print its id")
    create.add_argument("--wager", type=int, default=0, help="Wager passed to createGame")
    return parser


def configure_logging(settings: RunnerSettings, verbose: bool, narrative: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    setup_logging(log_file_path=settings.log_file, level=level)
    if narrative:
        enable_narrative_mode()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(env_file=args.env_file, from_block=args.from_block)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set via environment variables or --env-file.", file=sys.stderr)
        return 1

    configure_logging(settings, args.verbose, args.narrative)

    if args.command == "create-game":
        try:
            game_id = asyncio.run(create_game(settings, args.wager))
        except RPSFinalizerError as e:
            log_task_error(e, logger)
            return 1
        print(game_id)
        return 0

    runner = FinalizerRunner(settings, mode=args.command)
    try:
        runner.run()
    except RPSFinalizerError as e:
        log_task_error(e, logger)
        return 1
    return 0
