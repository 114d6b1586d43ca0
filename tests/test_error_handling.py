import pytest

from dealer.loader import load_deck, load_path_text, read_single_line
from track.errors import (
    ConfigError,
    DealerExit,
    DeckError,
    PathError,
    PlayerExit,
    ProtocolError,
    RaceError,
    RuleViolation,
    SpawnError,
    UsageError,
)
from track.game import GameState
from track.models import RaceConfig

from .helpers import SHORT_PATH


def test_error_hierarchy():
    for config_error in (UsageError, PathError, DeckError):
        assert issubclass(config_error, ConfigError)
    assert issubclass(RuleViolation, ProtocolError)
    for error in (ConfigError, SpawnError, ProtocolError):
        assert issubclass(error, RaceError)


def test_rule_violation_names_player_and_site():
    error = RuleViolation(1, 4, "site is full")
    assert (error.player_id, error.site, error.reason) == (1, 4, "site is full")
    assert str(error) == "Player 1 cannot move to site 4: site is full"


def test_exit_messages():
    assert DealerExit.NORMAL.message == ""
    assert DealerExit.COMMUNICATION_ERROR.message == "Communications error"
    assert PlayerExit.EARLY_END.message == "Early game over"
    assert int(PlayerExit.COMMUNICATION_ERROR) == 6
    assert int(DealerExit.SPAWN_FAILED) == 4


def test_race_config_bounds():
    with pytest.raises(ValueError, match="Invalid player count"):
        RaceConfig(player_count=0)
    with pytest.raises(ValueError):
        GameState.from_path(SHORT_PATH, 201)
    assert RaceConfig(player_count=200).starting_money == 7


def test_read_single_line(tmp_path):
    target = tmp_path / "one"
    target.write_text("ABC\n")
    assert read_single_line(target) == "ABC"

    target.write_text("ABC")
    assert read_single_line(target) == "ABC"

    target.write_text("ABC\n\n")
    with pytest.raises(ConfigError, match="single line"):
        read_single_line(target)


def test_loaders_raise_their_own_errors(tmp_path):
    missing = tmp_path / "missing"
    with pytest.raises(DeckError):
        load_deck(missing)
    with pytest.raises(PathError):
        load_path_text(missing)


def test_non_ascii_file_is_rejected(tmp_path):
    target = tmp_path / "deck"
    target.write_bytes("ABCé\n".encode("utf-8"))
    with pytest.raises(DeckError):
        load_deck(target)


def test_load_deck_keeps_cards_only(tmp_path):
    target = tmp_path / "deck"
    target.write_text("5ABCDE\n")
    assert load_deck(target).cards == "ABCDE"
