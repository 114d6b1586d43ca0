from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List

# Guard limits. They bound input sizes, not game rules.
MAX_PLAYER_COUNT = 200
MAX_SITE_COUNT_DIGITS = 10

STARTING_MONEY = 7


class SiteType(str, Enum):
    BARRIER = "::"
    V1 = "V1"
    V2 = "V2"
    MO = "Mo"
    DO = "Do"
    RI = "Ri"


class Card(IntEnum):
    NONE = 0
    A = 1
    B = 2
    C = 3
    D = 4
    E = 5


DENOMINATIONS = (Card.A, Card.B, Card.C, Card.D, Card.E)


@dataclass
class RaceConfig:
    player_count: int
    starting_money: int = STARTING_MONEY

    def __post_init__(self) -> None:
        if not 1 <= self.player_count <= MAX_PLAYER_COUNT:
            raise ValueError(f"Invalid player count: {self.player_count}")


@dataclass
class Site:
    raw_name: str
    name: str
    site_type: SiteType
    index: int
    capacity: int
    occupants: List[int] = field(default_factory=list)

    @property
    def is_barrier(self) -> bool:
        return self.site_type == SiteType.BARRIER

    def has_room(self) -> bool:
        return len(self.occupants) < self.capacity


@dataclass
class Hand:
    cards: Dict[Card, int] = field(default_factory=lambda: {card: 0 for card in DENOMINATIONS})
    total: int = 0

    def add(self, card: Card) -> None:
        if card == Card.NONE:
            return
        self.cards[card] += 1
        self.total += 1

    def held(self) -> List[Card]:
        return [card for card in DENOMINATIONS if self.cards[card] > 0]


@dataclass
class Player:
    player_id: int
    money: int = STARTING_MONEY
    points: int = 0
    hand: Hand = field(default_factory=Hand)
    v1_visits: int = 0
    v2_visits: int = 0
    site: int = 0

    def summary(self) -> str:
        counts = " ".join(f"{card.name}={self.hand.cards[card]}" for card in DENOMINATIONS)
        return (
            f"Player {self.player_id} Money={self.money} V1={self.v1_visits} "
            f"V2={self.v2_visits} Points={self.points} {counts}"
        )


@dataclass(frozen=True)
class GameEvent:
    player_id: int
    new_site: int
    point_change: int
    money_change: int
    card: Card = Card.NONE
