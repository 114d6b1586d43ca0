"""Race engine primitives shared by the dealer and the player agents."""

from .cards import Deck, parse_deck
from .errors import (
    ConfigError,
    DeckError,
    PathError,
    ProtocolError,
    RaceError,
    RuleViolation,
    SpawnError,
    UsageError,
)
from .game import GameState, apply_event
from .models import Card, GameEvent, Hand, Player, RaceConfig, Site, SiteType
from .path import parse_path, path_text
from .scoring import card_score, final_score

__all__ = [
    "Deck",
    "parse_deck",
    "ConfigError",
    "DeckError",
    "PathError",
    "ProtocolError",
    "RaceError",
    "RuleViolation",
    "SpawnError",
    "UsageError",
    "GameState",
    "apply_event",
    "Card",
    "GameEvent",
    "Hand",
    "Player",
    "RaceConfig",
    "Site",
    "SiteType",
    "parse_path",
    "path_text",
    "card_score",
    "final_score",
]
