"""Line protocol spoken between the dealer and its players.

Dealer to player: the path text, ``YT``, ``HAP<id>,<site>,<points>,<money>,<card>``,
``EARLY`` and ``DONE``. Player to dealer: ``^`` and ``DO<site>``. Every
message is one ASCII line.
"""

from __future__ import annotations

import re
from enum import Enum

from .errors import ProtocolError
from .models import Card, GameEvent

READY = "^"
YOUR_TURN = "YT"
EARLY = "EARLY"
DONE = "DONE"
EVENT_PREFIX = "HAP"
MOVE_PREFIX = "DO"

# Longer digit runs cannot name a real site or amount.
MAX_FIELD_DIGITS = 20

_NUMBER = f"([0-9]{{1,{MAX_FIELD_DIGITS}}})"
_MOVE_RE = re.compile(f"DO{_NUMBER}")
_EVENT_RE = re.compile(
    f"HAP{_NUMBER},{_NUMBER},{_NUMBER},(-?[0-9]{{1,{MAX_FIELD_DIGITS}}}),{_NUMBER}"
)


class MessageKind(str, Enum):
    YOUR_TURN = "YOUR_TURN"
    MOVE_EVENT = "MOVE_EVENT"
    EARLY_END = "EARLY_END"
    GAME_DONE = "GAME_DONE"
    UNKNOWN = "UNKNOWN"


def strip_line(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def classify(line: str) -> MessageKind:
    body = strip_line(line)
    if body == YOUR_TURN:
        return MessageKind.YOUR_TURN
    if body == EARLY:
        return MessageKind.EARLY_END
    if body == DONE:
        return MessageKind.GAME_DONE
    if body.startswith(EVENT_PREFIX):
        return MessageKind.MOVE_EVENT
    return MessageKind.UNKNOWN


def encode_move(site: int) -> str:
    return f"{MOVE_PREFIX}{site}\n"


def decode_move(line: str) -> int:
    match = _MOVE_RE.fullmatch(strip_line(line))
    if match is None:
        raise ProtocolError(f"Malformed move {strip_line(line)!r}")
    return int(match.group(1))


def encode_event(event: GameEvent) -> str:
    return (
        f"{EVENT_PREFIX}{event.player_id},{event.new_site},{event.point_change},"
        f"{event.money_change},{int(event.card)}\n"
    )


def decode_event(line: str, player_count: int, site_count: int) -> GameEvent:
    body = strip_line(line)
    match = _EVENT_RE.fullmatch(body)
    if match is None:
        raise ProtocolError(f"Malformed event {body!r}")
    player_id, new_site, point_change, money_change, card = (int(group) for group in match.groups())
    if match.group(4).startswith("-") and money_change >= 0:
        raise ProtocolError(f"Malformed money change in {body!r}")
    if not 0 <= player_id < player_count:
        raise ProtocolError(f"Event names unknown player {player_id}")
    if not 0 <= new_site < site_count:
        raise ProtocolError(f"Event names unknown site {new_site}")
    if card > Card.E:
        raise ProtocolError(f"Event names unknown card {card}")
    return GameEvent(
        player_id=player_id,
        new_site=new_site,
        point_change=point_change,
        money_change=money_change,
        card=Card(card),
    )


def as_line(message: str) -> str:
    return message if message.endswith("\n") else message + "\n"


def is_ready(line: str) -> bool:
    return line.startswith(READY)
