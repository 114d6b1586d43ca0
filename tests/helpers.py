from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from track.cards import Deck, parse_deck
from track.game import GameState, apply_event
from track.models import GameEvent
from track.protocol import (
    READY,
    YOUR_TURN,
    MessageKind,
    as_line,
    classify,
    decode_event,
    encode_move,
    strip_line,
)

# Two-player-friendly path: barrier, Mo, V1, Do, Ri, V2, barrier (capacity 1 in between).
DEFAULT_PATH = "7;::-Mo1V11Do1Ri1V21::-"
SHORT_PATH = "3;::-Mo-::-"


def create_state(path: str = DEFAULT_PATH, players: int = 2) -> GameState:
    """Build a fresh race with every player on site 0."""
    return GameState.from_path(path, players)


def move(state: GameState, player_id: int, target: int, deck: Optional[Deck] = None) -> GameState:
    event = state.resolve_move(player_id, target, deck)
    return apply_event(state, event)


def play_out(
    state: GameState,
    strategies: Dict[int, Callable[[GameState, int], Optional[int]]],
    deck: Optional[Deck] = None,
    max_turns: int = 500,
) -> List[GameEvent]:
    """Run strategies in turn order until the race is over, returning the events.

    ``state`` is not modified; read the final state from the returned events
    or replay them.
    """
    deck = deck or parse_deck("ABCDE")
    events: List[GameEvent] = []
    for _ in range(max_turns):
        mover = state.next_actor()
        if mover is None:
            return events
        target = strategies[mover](state, mover)
        assert target is not None, f"Player {mover} found no move"
        event = state.resolve_move(mover, target, deck)
        state = apply_event(state, event)
        events.append(event)
    raise AssertionError("Race did not finish")


def replay(state: GameState, events: Iterable[GameEvent]) -> GameState:
    for event in events:
        state = apply_event(state, event)
    return state


# Fake pipes so dealer code runs without spawning processes.
class FakeChannel:
    def __init__(self, player_id: int, replies: Sequence[Optional[str]] = ()) -> None:
        self.player_id = player_id
        self.replies: List[Optional[str]] = list(replies)
        self.sent: List[str] = []
        self.broken = False
        self.killed = False
        self.closed = False

    async def send(self, message: str) -> None:
        if self.broken:
            raise BrokenPipeError("pipe closed")
        self.sent.append(strip_line(as_line(message)))

    async def receive(self) -> Optional[str]:
        if not self.replies:
            return None
        return self.replies.pop(0)

    def kill(self) -> None:
        self.killed = True

    async def close(self) -> None:
        self.closed = True


class StrategyChannel(FakeChannel):
    """Fake pipe backed by an in-process player that keeps its own replica."""

    def __init__(self, player_id: int, player_count: int, strategy) -> None:
        super().__init__(player_id, [as_line(READY)])
        self.player_count = player_count
        self.strategy = strategy
        self.state: Optional[GameState] = None

    async def send(self, message: str) -> None:
        await super().send(message)
        body = strip_line(as_line(message))
        if self.state is None:
            self.state = GameState.from_path(body, self.player_count)
            return
        kind = classify(body)
        if kind == MessageKind.YOUR_TURN:
            target = self.strategy(self.state, self.player_id)
            if target is not None:
                self.replies.append(encode_move(target))
        elif kind == MessageKind.MOVE_EVENT:
            event = decode_event(body, self.state.player_count, self.state.site_count)
            self.state = apply_event(self.state, event)


def sent_turns(channel: FakeChannel) -> int:
    return channel.sent.count(YOUR_TURN)
