from __future__ import annotations

import copy
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import Deck
from .errors import ProtocolError, RuleViolation
from .models import STARTING_MONEY, Card, GameEvent, Player, RaceConfig, Site, SiteType
from .path import parse_path, path_text
from .scoring import final_score

MO_BONUS = 3

# GameState holds one race in memory: the path, who stands where, and every
# player's purse. No pipes or processes live here. The dealer keeps the
# authoritative copy; each player keeps a replica fed by broadcast events.


def site_effect(player: Player, site_type: SiteType) -> Tuple[int, int]:
    """Return the (points, money) change for arriving at a site of this type."""
    if site_type == SiteType.MO:
        return 0, MO_BONUS
    if site_type == SiteType.DO:
        return player.money // 2, -player.money
    return 0, 0


class GameState:
    def __init__(self, sites: Sequence[Site], config: RaceConfig) -> None:
        self.config = config
        self.sites: List[Site] = [replace(site, occupants=[]) for site in sites]
        self.players: List[Player] = [
            Player(player_id=idx, money=config.starting_money) for idx in range(config.player_count)
        ]
        # Highest id arrived first, so the lowest id is the latest arrival and moves first.
        self.sites[0].occupants.extend(reversed(range(config.player_count)))

    @classmethod
    def from_path(cls, text: str, player_count: int, starting_money: int = STARTING_MONEY) -> "GameState":
        config = RaceConfig(player_count=player_count, starting_money=starting_money)
        return cls(parse_path(text, player_count), config)

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def site_count(self) -> int:
        return len(self.sites)

    @property
    def final_site(self) -> int:
        return self.site_count - 1

    def copy(self) -> "GameState":
        return copy.deepcopy(self)

    def path_text(self) -> str:
        return path_text(self.sites)

    # Turn order ------------------------------------------------------

    def is_over(self) -> bool:
        return all(player.site == self.final_site for player in self.players)

    def next_actor(self) -> Optional[int]:
        if self.is_over():
            return None
        for site in self.sites:
            if site.occupants:
                return site.occupants[-1]
        return None

    def least_advanced_player(self) -> Optional[int]:
        """The sole occupant of the earliest occupied site, or None on a tie."""
        for site in self.sites:
            if len(site.occupants) == 1:
                return site.occupants[0]
            if site.occupants:
                return None
        return None

    # Path queries ----------------------------------------------------

    def next_barrier(self, from_site: int) -> Optional[int]:
        for site in self.sites[from_site + 1 :]:
            if site.is_barrier:
                return site.index
        return None

    def find_site_before_barrier(self, site_type: SiteType, from_site: int) -> Optional[int]:
        """First site of ``site_type`` with room after ``from_site``, stopping at a barrier."""
        for site in self.sites[from_site + 1 :]:
            if site.site_type == site_type and site.has_room():
                return site.index
            if site.is_barrier:
                return None
        return None

    def next_vacant_site(self, from_site: int, types: Optional[Iterable[SiteType]] = None) -> Optional[int]:
        wanted = set(types) if types is not None else None
        for site in self.sites[from_site + 1 :]:
            if wanted is not None and site.site_type not in wanted:
                continue
            if site.has_room():
                return site.index
        return None

    def site_has_room(self, index: int, site_type: Optional[SiteType] = None) -> bool:
        if not 0 <= index < self.site_count:
            return False
        site = self.sites[index]
        if site_type is not None and site.site_type != site_type:
            return False
        return site.has_room()

    # Cards -----------------------------------------------------------

    def has_most_cards(self, player_id: int) -> bool:
        """True only if nobody else holds as many cards as this player."""
        mine = self.players[player_id].hand.total
        return all(
            other.hand.total < mine for other in self.players if other.player_id != player_id
        )

    def anyone_has_cards(self) -> bool:
        return any(player.hand.total > 0 for player in self.players)

    # Moves -----------------------------------------------------------

    def validate_move(self, player_id: int, target: int) -> None:
        if not 0 <= player_id < self.player_count:
            raise ProtocolError(f"Unknown player {player_id}")
        current = self.players[player_id].site
        if not 0 <= target < self.site_count:
            raise RuleViolation(player_id, target, "site is off the path")
        if target <= current:
            raise RuleViolation(player_id, target, "moves must go forward")
        barrier = self.next_barrier(current)
        if barrier is not None and target > barrier:
            raise RuleViolation(player_id, target, "cannot pass a barrier")
        if not self.sites[target].has_room():
            raise RuleViolation(player_id, target, "site is full")

    def is_move_valid(self, player_id: int, target: int) -> bool:
        try:
            self.validate_move(player_id, target)
        except ProtocolError:
            return False
        return True

    def resolve_move(self, player_id: int, target: int, deck: Optional[Deck] = None) -> GameEvent:
        """Validate a move and describe its effects. The state itself is untouched."""
        self.validate_move(player_id, target)
        player = self.players[player_id]
        site = self.sites[target]
        point_change, money_change = site_effect(player, site.site_type)
        card = Card.NONE
        if site.site_type == SiteType.RI and deck is not None:
            card = deck.draw()
        return GameEvent(
            player_id=player_id,
            new_site=target,
            point_change=point_change,
            money_change=money_change,
            card=card,
        )

    # Reporting -------------------------------------------------------

    def scores(self) -> List[int]:
        return [final_score(player) for player in self.players]

    def scores_line(self) -> str:
        return "Scores: " + ",".join(str(score) for score in self.scores())

    def render_board(self) -> str:
        lines = ["".join(f"{site.name} " for site in self.sites)]
        depth = max(len(site.occupants) for site in self.sites)
        for row in range(depth):
            cells = []
            for site in self.sites:
                if row < len(site.occupants):
                    cells.append(f"{site.occupants[row]}  ")
                else:
                    cells.append("   ")
            lines.append("".join(cells))
        return "\n".join(lines) + "\n"


def apply_event(state: GameState, event: GameEvent) -> GameState:
    """Return a new state with one completed move applied.

    The dealer applies the events it creates and every player replays the
    broadcast copy through this same function, so all views stay identical.
    """
    if not 0 <= event.player_id < state.player_count:
        raise ProtocolError(f"Event names unknown player {event.player_id}")
    if not 0 <= event.new_site < state.site_count:
        raise ProtocolError(f"Event names unknown site {event.new_site}")

    updated = state.copy()
    player = updated.players[event.player_id]
    updated.sites[player.site].occupants.remove(event.player_id)
    site = updated.sites[event.new_site]
    site.occupants.append(event.player_id)
    player.site = event.new_site

    player.points += event.point_change
    player.money += event.money_change
    player.hand.add(event.card)
    if site.site_type == SiteType.V1:
        player.v1_visits += 1
    elif site.site_type == SiteType.V2:
        player.v2_visits += 1
    return updated
