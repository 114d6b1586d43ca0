from __future__ import annotations

from typing import Dict

from .models import DENOMINATIONS, Card, Hand, Player

FULL_SET_SIZE = len(DENOMINATIONS)
FULL_SET_SCORE = 10


def set_score(distinct: int) -> int:
    if distinct == FULL_SET_SIZE:
        return FULL_SET_SCORE
    return 2 * distinct - 1


def card_score(hand: Hand) -> int:
    """Score a hand by peeling off one set of every held denomination per round.

    Each round scores the denominations currently held, then removes one card
    of each. Partial sets change what remains, so the order matters.
    """
    remaining: Dict[Card, int] = dict(hand.cards)
    score = 0
    while True:
        held = [card for card in DENOMINATIONS if remaining.get(card, 0) > 0]
        if not held:
            return score
        score += set_score(len(held))
        for card in held:
            remaining[card] -= 1


def final_score(player: Player) -> int:
    # Leftover money is worth nothing.
    return player.points + player.v1_visits + player.v2_visits + card_score(player.hand)
