from __future__ import annotations

from pathlib import Path
from typing import Union

from track.cards import Deck, parse_deck
from track.errors import ConfigError, DeckError, PathError

PathLike = Union[str, Path]


def read_single_line(filename: PathLike) -> str:
    """Return the only line of a file, without its newline."""
    try:
        text = Path(filename).read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {filename}: {exc}") from exc
    if text.count("\n") > 1 or "\n" in text.rstrip("\n"):
        raise ConfigError(f"{filename} must hold a single line")
    return text.rstrip("\n")


def load_deck(filename: PathLike) -> Deck:
    try:
        return parse_deck(read_single_line(filename))
    except ConfigError as exc:
        if isinstance(exc, DeckError):
            raise
        raise DeckError(str(exc)) from exc


def load_path_text(filename: PathLike) -> str:
    try:
        return read_single_line(filename)
    except ConfigError as exc:
        raise PathError(str(exc)) from exc
