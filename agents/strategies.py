from __future__ import annotations

from typing import Callable, Dict, Optional

from track.game import GameState
from track.models import SiteType

Strategy = Callable[[GameState, int], Optional[int]]

_STOPPING_SITES = (SiteType.V1, SiteType.V2, SiteType.BARRIER)


def strategy_a(state: GameState, player_id: int) -> Optional[int]:
    """Bank money whenever possible, otherwise collect or stop at the next scoring site.

    1. With money in hand, go to a Do before the next barrier.
    2. Else take the next site if it is a Mo.
    3. Else go to the nearest V1, V2 or barrier.
    """
    player = state.players[player_id]
    current = player.site

    if player.money > 0:
        target = state.find_site_before_barrier(SiteType.DO, current)
        if target is not None:
            return target

    if state.site_has_room(current + 1, SiteType.MO):
        return current + 1

    return state.next_vacant_site(current, _STOPPING_SITES)


def strategy_b(state: GameState, player_id: int) -> Optional[int]:
    """Stay with the pack, even out money, chase cards, then V2 sites."""
    player = state.players[player_id]
    current = player.site

    # Strictly last and alone: creep forward one site.
    if state.site_has_room(current + 1) and state.least_advanced_player() == player_id:
        return current + 1

    if player.money % 2 == 1:
        target = state.find_site_before_barrier(SiteType.MO, current)
        if target is not None:
            return target

    # A tie for the most cards does not count as holding the most.
    if state.has_most_cards(player_id) or not state.anyone_has_cards():
        target = state.find_site_before_barrier(SiteType.RI, current)
        if target is not None:
            return target

    target = state.find_site_before_barrier(SiteType.V2, current)
    if target is not None:
        return target

    return state.next_vacant_site(current)


STRATEGIES: Dict[str, Strategy] = {
    "A": strategy_a,
    "B": strategy_b,
}
