from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence, Tuple

from track.errors import PlayerExit, UsageError
from track.models import MAX_PLAYER_COUNT

from .agent import PlayerAgent
from .strategies import STRATEGIES

LOG_LEVEL_ENV = "RACE_PLAYER_LOG_LEVEL"


class PlayerArgumentError(UsageError):
    def __init__(self, status: PlayerExit, detail: str = "") -> None:
        super().__init__(detail or status.message)
        self.status = status


class _ArgumentParser(argparse.ArgumentParser):
    # argparse would exit with its own status; callers expect ours.
    def error(self, message: str) -> None:  # type: ignore[override]
        raise PlayerArgumentError(PlayerExit.USAGE, message)


def build_parser(strategy_name: str) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=f"race-player-{strategy_name.lower()}",
        description=f"Race player using strategy {strategy_name}",
        add_help=False,
    )
    parser.add_argument("pcount", help="Number of players in the game")
    parser.add_argument("id", help="This player's id, counted from 0")
    return parser


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def parse_player_args(strategy_name: str, argv: Sequence[str]) -> Tuple[int, int]:
    """Validate ``pcount id``; failures carry the exit status to report."""
    args = build_parser(strategy_name).parse_args(list(argv))

    if not _is_number(args.pcount):
        raise PlayerArgumentError(PlayerExit.INVALID_COUNT)
    if not _is_number(args.id):
        raise PlayerArgumentError(PlayerExit.INVALID_ID)
    player_count = int(args.pcount)
    player_id = int(args.id)
    if not 1 <= player_count <= MAX_PLAYER_COUNT:
        raise PlayerArgumentError(PlayerExit.INVALID_COUNT)
    if not 0 <= player_id < player_count:
        raise PlayerArgumentError(PlayerExit.INVALID_ID)
    return player_count, player_id


def run_player(strategy_name: str, argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(), logging.WARNING),
        stream=sys.stderr,
    )
    try:
        player_count, player_id = parse_player_args(
            strategy_name, sys.argv[1:] if argv is None else argv
        )
    except PlayerArgumentError as exc:
        print(exc.status.message, file=sys.stderr)
        return int(exc.status)

    agent = PlayerAgent(
        player_id=player_id,
        player_count=player_count,
        strategy=STRATEGIES[strategy_name],
        inbound=sys.stdin,
        outbound=sys.stdout,
        diagnostics=sys.stderr,
    )
    status = agent.run()
    if status.message:
        print(status.message, file=sys.stderr)
    return int(status)


def main_a() -> None:
    sys.exit(run_player("A"))


def main_b() -> None:
    sys.exit(run_player("B"))
