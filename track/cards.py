from __future__ import annotations

from dataclasses import dataclass

from .errors import DeckError
from .models import Card

CARD_LABELS = "ABCDE"


def parse_label(label: str) -> Card:
    if len(label) != 1 or label not in CARD_LABELS:
        raise ValueError(f"Invalid card label: {label}")
    return Card[label]


@dataclass
class Deck:
    # Cards are drawn in order and the deck wraps around; nothing is removed.
    cards: str
    drawn: int = 0

    def __post_init__(self) -> None:
        if not self.cards:
            raise DeckError("deck has no cards")
        for label in self.cards:
            if label not in CARD_LABELS:
                raise DeckError(f"unexpected card {label!r}")

    def peek(self, index: int) -> Card:
        return parse_label(self.cards[index % len(self.cards)])

    def draw(self) -> Card:
        card = self.peek(self.drawn)
        self.drawn += 1
        return card


def parse_deck(text: str) -> Deck:
    """Parse deck text: an optional run of leading digits, then card letters."""
    raw = text[:-1] if text.endswith("\n") else text
    if not raw:
        raise DeckError("deck is empty")
    if any(ch not in "0123456789" + CARD_LABELS for ch in raw):
        raise DeckError("deck contains characters other than digits and A-E")
    body = raw.lstrip("0123456789")
    if any(ch.isdigit() for ch in body):
        raise DeckError("digits may only appear at the start of the deck")
    return Deck(body)
