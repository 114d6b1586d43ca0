from __future__ import annotations

import asyncio
import logging
import signal
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, TextIO

from track.cards import Deck
from track.errors import DealerExit, ProtocolError, SpawnError
from track.game import GameState, apply_event
from track.protocol import DONE, EARLY, YOUR_TURN, as_line, decode_move, encode_event, is_ready, strip_line

LOGGER = logging.getLogger("race_dealer")

# Dealer glues the race engine to player processes over pipes.
# Every process concern lives here; GameState stays pure.


@dataclass
class PlayerChannel:
    player_id: int
    process: asyncio.subprocess.Process

    async def send(self, message: str) -> None:
        stdin = self.process.stdin
        if stdin is None:
            raise BrokenPipeError(f"Player {self.player_id} has no input pipe")
        stdin.write(as_line(message).encode("ascii"))
        await stdin.drain()

    async def receive(self) -> Optional[str]:
        """Next line from the player, or None once its output is closed."""
        stdout = self.process.stdout
        if stdout is None:
            return None
        try:
            raw = await stdout.readline()
        except (ValueError, asyncio.LimitOverrunError) as exc:
            raise ProtocolError(f"Player {self.player_id} sent an overlong line") from exc
        if not raw:
            return None
        return raw.decode("ascii", errors="replace")

    def kill(self) -> None:
        if self.process.returncode is None:
            try:
                self.process.kill()
            except ProcessLookupError:
                pass

    async def close(self) -> None:
        stdin = self.process.stdin
        if stdin is not None and not stdin.is_closing():
            stdin.close()
        await self.process.wait()


async def spawn_player(executable: str, player_id: int, player_count: int) -> PlayerChannel:
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            str(player_count),
            str(player_id),
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        raise SpawnError(f"Could not start {executable}: {exc}") from exc
    LOGGER.info("Started player %s: %s (pid=%s)", player_id, executable, process.pid)
    return PlayerChannel(player_id=player_id, process=process)


class ShutdownHandle:
    """Owns every spawned child so a hang-up can kill them all at once."""

    def __init__(self) -> None:
        self.channels: List[PlayerChannel] = []
        self.triggered = False
        self._task: Optional[asyncio.Task] = None

    def register(self, channel: PlayerChannel) -> None:
        self.channels.append(channel)

    def attach(self, task: Optional[asyncio.Task]) -> None:
        self._task = task

    def kill_all(self) -> None:
        for channel in self.channels:
            channel.kill()

    def hang_up(self) -> None:
        LOGGER.info("Hang-up received, killing %s players", len(self.channels))
        self.triggered = True
        self.kill_all()
        if self._task is not None:
            self._task.cancel()

    async def reap(self) -> None:
        for channel in self.channels:
            await channel.close()


class Dealer:
    def __init__(
        self,
        state: GameState,
        deck: Deck,
        executables: Sequence[str],
        output: Optional[TextIO] = None,
        shutdown: Optional[ShutdownHandle] = None,
    ) -> None:
        self.state = state
        self.deck = deck
        self.executables = list(executables)
        self.output = output if output is not None else sys.stdout
        self.shutdown = shutdown or ShutdownHandle()
        self.channels: List[PlayerChannel] = []

    # Setup -----------------------------------------------------------

    async def start_players(self) -> None:
        for player_id, executable in enumerate(self.executables):
            channel = await spawn_player(executable, player_id, self.state.player_count)
            self.add_channel(channel)
        await self.handshake()

    def add_channel(self, channel: PlayerChannel) -> None:
        self.channels.append(channel)
        self.shutdown.register(channel)

    async def handshake(self) -> None:
        """Wait for ``^`` from each player in id order and answer with the path."""
        path = self.state.path_text()
        for channel in self.channels:
            try:
                message = await channel.receive()
            except ProtocolError as exc:
                raise SpawnError(str(exc)) from exc
            if message is None or not is_ready(message):
                raise SpawnError(f"Player {channel.player_id} did not signal readiness")
            try:
                await channel.send(path)
            except (BrokenPipeError, ConnectionResetError) as exc:
                raise SpawnError(f"Player {channel.player_id} went away: {exc}") from exc
            LOGGER.debug("Sent path to player %s", channel.player_id)

    # Turn loop -------------------------------------------------------

    async def play(self) -> DealerExit:
        self._render_board()
        try:
            while not self.state.is_over():
                await self.play_turn()
        except ProtocolError as exc:
            LOGGER.warning("Ending game early: %s", exc)
            await self._broadcast(EARLY)
            return DealerExit.COMMUNICATION_ERROR

        await self._broadcast(DONE)
        self.output.write(self.state.scores_line() + "\n")
        self.output.flush()
        return DealerExit.NORMAL

    async def play_turn(self) -> None:
        mover = self.state.next_actor()
        if mover is None:
            return
        channel = self.channels[mover]
        try:
            await channel.send(YOUR_TURN)
        except (BrokenPipeError, ConnectionResetError) as exc:
            raise ProtocolError(f"Player {mover} is unreachable: {exc}") from exc

        reply = await channel.receive()
        if reply is None:
            raise ProtocolError(f"Player {mover} closed its output")
        target = decode_move(reply)
        event = self.state.resolve_move(mover, target, self.deck)
        self.state = apply_event(self.state, event)
        LOGGER.info("Player %s moved to site %s", mover, target)

        await self._broadcast(encode_event(event))
        self.output.write(self.state.players[mover].summary() + "\n")
        self._render_board()

    async def _broadcast(self, message: str) -> None:
        # Writes are issued in id order before any drain is awaited.
        results = await asyncio.gather(
            *(channel.send(message) for channel in self.channels), return_exceptions=True
        )
        for channel, result in zip(self.channels, results):
            if isinstance(result, Exception):
                LOGGER.warning(
                    "Could not send %r to player %s: %s", strip_line(message), channel.player_id, result
                )

    def _render_board(self) -> None:
        self.output.write(self.state.render_board())
        self.output.flush()

    # Teardown --------------------------------------------------------

    async def close(self) -> None:
        for channel in self.channels:
            await channel.close()


async def run_dealer(
    state: GameState,
    deck: Deck,
    executables: Sequence[str],
    output: Optional[TextIO] = None,
    shutdown: Optional[ShutdownHandle] = None,
) -> DealerExit:
    """Run one whole race and return the dealer's exit status."""
    shutdown = shutdown or ShutdownHandle()
    shutdown.attach(asyncio.current_task())
    dealer = Dealer(state, deck, executables, output=output, shutdown=shutdown)

    loop = asyncio.get_running_loop()
    hup_installed = False
    if hasattr(signal, "SIGHUP"):
        try:
            loop.add_signal_handler(signal.SIGHUP, shutdown.hang_up)
            hup_installed = True
        except (NotImplementedError, RuntimeError):
            LOGGER.debug("SIGHUP handling unavailable on this platform")

    try:
        try:
            await dealer.start_players()
        except SpawnError as exc:
            LOGGER.warning("Setup failed: %s", exc)
            shutdown.kill_all()
            await shutdown.reap()
            return DealerExit.SPAWN_FAILED
        status = await dealer.play()
        await dealer.close()
        return status
    except asyncio.CancelledError:
        if not shutdown.triggered:
            raise
        await shutdown.reap()
        return DealerExit.NORMAL
    finally:
        if hup_installed:
            loop.remove_signal_handler(signal.SIGHUP)
