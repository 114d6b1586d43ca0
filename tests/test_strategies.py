from agents.strategies import STRATEGIES, strategy_a, strategy_b
from track.models import Card

from .helpers import DEFAULT_PATH, SHORT_PATH, create_state, move

# DEFAULT_PATH sites: 0 ::  1 Mo  2 V1  3 Do  4 Ri  5 V2  6 ::


def test_registry_names_both_strategies():
    assert STRATEGIES == {"A": strategy_a, "B": strategy_b}


def test_a_heads_for_do_with_money():
    assert strategy_a(create_state(), 0) == 3


def test_a_skips_full_do():
    state = move(create_state(), 1, 3)
    assert strategy_a(state, 0) == 1


def test_a_takes_next_mo_when_broke():
    state = create_state()
    state.players[0].money = 0
    assert strategy_a(state, 0) == 1


def test_a_stops_at_nearest_visit_or_barrier():
    state = move(create_state(), 0, 1)
    state.players[0].money = 0
    assert strategy_a(state, 0) == 2

    state = move(state, 0, 5)
    assert strategy_a(state, 0) == 6


def test_a_has_no_move_on_final_site():
    state = move(create_state(SHORT_PATH), 0, 2)
    assert strategy_a(state, 0) is None


def test_b_creeps_forward_when_alone_at_the_back():
    state = move(create_state(), 1, 2)
    assert state.least_advanced_player() == 0
    assert strategy_b(state, 0) == 1


def test_b_evens_out_odd_money_at_mo():
    # Both players share site 0, so nobody is uniquely last.
    assert strategy_b(create_state(), 0) == 1


def test_b_goes_for_cards_when_nobody_has_any():
    state = create_state()
    state.players[0].money = 8
    assert strategy_b(state, 0) == 4


def test_b_goes_for_cards_when_holding_the_most():
    state = create_state()
    state.players[0].money = 8
    state.players[0].hand.add(Card.A)
    assert strategy_b(state, 0) == 4


def test_b_tie_for_most_cards_falls_through_to_v2():
    state = create_state()
    state.players[0].money = 8
    state.players[0].hand.add(Card.A)
    state.players[1].hand.add(Card.B)
    assert not state.has_most_cards(0)
    assert strategy_b(state, 0) == 5


def test_b_behind_on_cards_goes_to_v2():
    state = create_state()
    state.players[0].money = 8
    state.players[1].hand.add(Card.B)
    assert strategy_b(state, 0) == 5


def test_b_falls_back_to_nearest_free_site():
    state = create_state("4;::-Mo1Do1::-", players=2)
    state.players[0].money = 8
    assert strategy_b(state, 0) == 1


def test_b_blocked_mo_with_odd_money_looks_for_cards():
    state = move(create_state(), 1, 1)
    assert strategy_b(state, 0) == 4


def test_strategies_never_pass_a_barrier():
    state = create_state("6;::-Mo1::-Do1V21::-", players=2)
    state.players[0].money = 0
    state = move(state, 1, 1)

    for strategy in (strategy_a, strategy_b):
        target = strategy(state, 0)
        assert target is not None
        assert state.is_move_valid(0, target)
