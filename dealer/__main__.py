import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from track.errors import ConfigError, DealerExit, PathError, UsageError
from track.game import GameState
from track.models import MAX_PLAYER_COUNT

from .loader import load_deck, load_path_text
from .server import run_dealer


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="race-dealer", description="Referee for a race between player processes")
    parser.add_argument("deck", help="File holding the deck on a single line")
    parser.add_argument("path", help="File holding the path on a single line")
    parser.add_argument("players", nargs="+", help="Player executables, in id order")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostics on stderr (stdout carries the board)",
    )
    return parser


def _fail(status: DealerExit) -> int:
    print(status.message, file=sys.stderr)
    return int(status)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError:
        return _fail(DealerExit.USAGE)
    if len(args.players) > MAX_PLAYER_COUNT:
        return _fail(DealerExit.USAGE)

    logging.basicConfig(level=getattr(logging, args.log_level), stream=sys.stderr)
    logger = logging.getLogger("race_dealer")

    try:
        deck = load_deck(args.deck)
    except ConfigError as exc:
        logger.warning("%s", exc)
        return _fail(DealerExit.INVALID_DECK)
    try:
        state = GameState.from_path(load_path_text(args.path), len(args.players))
    except PathError as exc:
        logger.warning("%s", exc)
        return _fail(DealerExit.INVALID_PATH)

    status = asyncio.run(run_dealer(state, deck, args.players))
    if status.message:
        print(status.message, file=sys.stderr)
    return int(status)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
