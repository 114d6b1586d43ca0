from track.models import Card, Hand, Player
from track.scoring import card_score, final_score, set_score


def make_hand(**counts: int) -> Hand:
    hand = Hand()
    for label, count in counts.items():
        for _ in range(count):
            hand.add(Card[label])
    return hand


def test_set_scores():
    assert [set_score(k) for k in range(1, 6)] == [1, 3, 5, 7, 10]


def test_full_set_scores_ten():
    assert card_score(make_hand(A=1, B=1, C=1, D=1, E=1)) == 10


def test_partial_sets_are_peeled_in_rounds():
    # {A, C, E} scores 5, then {A, E} scores 3.
    assert card_score(make_hand(A=2, C=1, E=2)) == 8


def test_repeated_single_denomination():
    assert card_score(make_hand(B=3)) == 3


def test_empty_hand_scores_nothing():
    assert card_score(Hand()) == 0


def test_scoring_does_not_consume_the_hand():
    hand = make_hand(A=2, B=1)
    card_score(hand)
    assert hand.cards[Card.A] == 2
    assert hand.total == 3


def test_hand_ignores_no_card():
    hand = Hand()
    hand.add(Card.NONE)
    assert hand.total == 0
    assert hand.held() == []


def test_final_score_adds_points_visits_and_cards():
    player = Player(player_id=0, money=12, points=4, v1_visits=2, v2_visits=1)
    player.hand = make_hand(A=1, B=1)

    assert final_score(player) == 4 + 2 + 1 + 3
