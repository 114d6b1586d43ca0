from __future__ import annotations

import logging
from typing import Optional, TextIO

from track.errors import PathError, PlayerExit, ProtocolError
from track.game import GameState, apply_event
from track.protocol import READY, MessageKind, as_line, classify, decode_event, encode_move, strip_line

from .strategies import Strategy

LOGGER = logging.getLogger("race_player")

# PlayerAgent is the whole life of one player process. It keeps a private
# replica of the race, fed only by the dealer's broadcasts, and asks its
# strategy for a move whenever the dealer says it is our turn.


class PlayerAgent:
    def __init__(
        self,
        player_id: int,
        player_count: int,
        strategy: Strategy,
        inbound: TextIO,
        outbound: TextIO,
        diagnostics: TextIO,
    ) -> None:
        self.player_id = player_id
        self.player_count = player_count
        self.strategy = strategy
        self.inbound = inbound
        self.outbound = outbound
        self.diagnostics = diagnostics
        self.state: Optional[GameState] = None

    def handshake(self) -> GameState:
        """Announce readiness and build the replica from the path the dealer sends back."""
        self._send(READY)
        raw_path = self.inbound.readline()
        if not raw_path:
            raise PathError("no path received")
        self.state = GameState.from_path(raw_path, self.player_count)
        LOGGER.info("Player %s received path %s", self.player_id, strip_line(raw_path))
        self.diagnostics.write(self.state.render_board())
        return self.state

    def run(self) -> PlayerExit:
        try:
            self.handshake()
        except PathError as exc:
            LOGGER.warning("Rejected path: %s", exc)
            return PlayerExit.INVALID_PATH
        return self.play()

    def play(self) -> PlayerExit:
        while True:
            message = self.inbound.readline()
            if not message:
                LOGGER.warning("Dealer closed the stream")
                return PlayerExit.COMMUNICATION_ERROR

            kind = classify(message)
            if kind == MessageKind.YOUR_TURN:
                if not self._take_turn():
                    return PlayerExit.COMMUNICATION_ERROR
            elif kind == MessageKind.MOVE_EVENT:
                try:
                    self._replay(message)
                except ProtocolError as exc:
                    LOGGER.warning("Bad event %r: %s", strip_line(message), exc)
                    return PlayerExit.COMMUNICATION_ERROR
            elif kind == MessageKind.EARLY_END:
                return PlayerExit.EARLY_END
            elif kind == MessageKind.GAME_DONE:
                self.diagnostics.write(self._require_state().scores_line() + "\n")
                return PlayerExit.NORMAL
            else:
                LOGGER.warning("Unknown message %r", strip_line(message))
                return PlayerExit.COMMUNICATION_ERROR

    def _take_turn(self) -> bool:
        state = self._require_state()
        target = self.strategy(state, self.player_id)
        if target is None:
            LOGGER.error(
                "Player %s found no move from site %s",
                self.player_id,
                state.players[self.player_id].site,
            )
            return False
        LOGGER.debug("Player %s moving to site %s", self.player_id, target)
        self._send(encode_move(target))
        return True

    def _replay(self, message: str) -> None:
        state = self._require_state()
        event = decode_event(message, state.player_count, state.site_count)
        self.state = apply_event(state, event)
        self.diagnostics.write(self.state.players[event.player_id].summary() + "\n")
        self.diagnostics.write(self.state.render_board())

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("Path not received yet")
        return self.state

    def _send(self, message: str) -> None:
        self.outbound.write(as_line(message))
        self.outbound.flush()
