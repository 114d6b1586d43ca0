"""Error taxonomy shared by the dealer and the players.

Every error ends the whole game; the command-line front ends translate them
into the exit statuses below and print the status message on stderr.
"""

from __future__ import annotations

from enum import IntEnum


class RaceError(Exception):
    """Base class for all race errors."""


class ConfigError(RaceError):
    """Bad arguments, deck or path. Raised before any player is started."""


class UsageError(ConfigError):
    pass


class PathError(ConfigError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid path: {reason}")
        self.reason = reason


class DeckError(ConfigError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid deck: {reason}")
        self.reason = reason


class SpawnError(RaceError):
    """A player process could not be started or never signalled readiness."""


class ProtocolError(RaceError):
    """Malformed or unexpected message, or a stream closed early."""


class RuleViolation(ProtocolError):
    """A well-formed move that the rules do not allow."""

    def __init__(self, player_id: int, site: int, reason: str) -> None:
        super().__init__(f"Player {player_id} cannot move to site {site}: {reason}")
        self.player_id = player_id
        self.site = site
        self.reason = reason


class DealerExit(IntEnum):
    NORMAL = 0
    USAGE = 1
    INVALID_DECK = 2
    INVALID_PATH = 3
    SPAWN_FAILED = 4
    COMMUNICATION_ERROR = 5

    @property
    def message(self) -> str:
        return _DEALER_MESSAGES.get(self, "")


class PlayerExit(IntEnum):
    NORMAL = 0
    USAGE = 1
    INVALID_COUNT = 2
    INVALID_ID = 3
    INVALID_PATH = 4
    EARLY_END = 5
    COMMUNICATION_ERROR = 6

    @property
    def message(self) -> str:
        return _PLAYER_MESSAGES.get(self, "")


_DEALER_MESSAGES = {
    DealerExit.USAGE: "Usage: race-dealer deck path p1 {p2}",
    DealerExit.INVALID_DECK: "Error reading deck",
    DealerExit.INVALID_PATH: "Error reading path",
    DealerExit.SPAWN_FAILED: "Error starting process",
    DealerExit.COMMUNICATION_ERROR: "Communications error",
}

_PLAYER_MESSAGES = {
    PlayerExit.USAGE: "Usage: player pcount ID",
    PlayerExit.INVALID_COUNT: "Invalid player count",
    PlayerExit.INVALID_ID: "Invalid ID",
    PlayerExit.INVALID_PATH: "Invalid path",
    PlayerExit.EARLY_END: "Early game over",
    PlayerExit.COMMUNICATION_ERROR: "Communications error",
}
