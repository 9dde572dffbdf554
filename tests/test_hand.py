import random

import pytest

from actions import ActionType
from agents import RandomAgent
from cards import parse_cards
from deck import Deck
from hand import STREETS, HeadsUpHand, PlayerState


class AlwaysCheckCall:
    def act(self, allowed, **kw):
        if ActionType.CHECK in allowed:
            return ActionType.CHECK
        return ActionType.CALL


class AlwaysBetFold:
    def act(self, allowed, **kw):
        if ActionType.BET in allowed:
            return ActionType.BET
        return ActionType.FOLD


def new_hand(evaluator, seed=5):
    rng = random.Random(seed)
    players = [PlayerState(seat=1), PlayerState(seat=2)]
    return HeadsUpHand(players, evaluator, Deck(rng)), rng


def test_deck_deals_without_replacement():
    deck = Deck(random.Random(1))
    deck.shuffle()
    dealt = [deck.deal(1)] + deck.deal(3)
    assert len(deck) == 48
    assert len(set(dealt)) == 4
    with pytest.raises(ValueError):
        deck.deal(49)
    deck.reset()
    assert len(deck) == 52


@pytest.mark.parametrize("count", [0, -1, -5])
def test_deck_rejects_non_positive_deal(count):
    deck = Deck(random.Random(1))
    with pytest.raises(ValueError):
        deck.deal(count)
    assert len(deck) == 52


def test_seeded_decks_shuffle_identically():
    a, b = Deck(random.Random(9)), Deck(random.Random(9))
    a.shuffle()
    b.shuffle()
    assert a.cards == b.cards


def test_play_hand_deals_distinct_cards_and_scores_both_players(evaluator):
    hand, rng = new_hand(evaluator)
    result = hand.play_hand({1: RandomAgent(rng), 2: RandomAgent(rng)})

    assert len(result["board"]) == 5
    in_play = list(result["board"])
    for p in result["players"]:
        assert len(p.hole_cards) == 2
        in_play.extend(p.hole_cards)
        assert 1 <= p.best_index <= 7462
        assert p.best_index == evaluator.best_index(p.hole_cards + result["board"])
    assert len(set(in_play)) == 9
    assert list(result["streets"]) == list(STREETS)


def test_lower_index_wins(evaluator):
    hand, _ = new_hand(evaluator)
    hand.board = parse_cards("Kh 6c 6d 2s 7c")
    hand.players[0].hole_cards = parse_cards("Ks Qd")
    hand.players[1].hole_cards = parse_cards("9s 7d")
    assert hand.showdown() == 1

    hand.players[0].hole_cards = parse_cards("3c 4d")
    assert hand.showdown() == 2
    assert hand.players[1].best_class.name == "Two Pair"


def test_equal_indices_tie(evaluator):
    hand, _ = new_hand(evaluator)
    hand.board = parse_cards("Ac Kd Qh Js Tc")
    hand.players[0].hole_cards = parse_cards("2c 3d")
    hand.players[1].hole_cards = parse_cards("4h 5s")
    assert hand.showdown() is None
    assert hand.players[0].best_index == hand.players[1].best_index == 1600


def test_fold_is_recorded_but_hand_reaches_showdown(evaluator):
    hand, _ = new_hand(evaluator)
    result = hand.play_hand({1: AlwaysBetFold(), 2: AlwaysBetFold()})
    first, second = result["players"]
    assert second.folded_streets == list(STREETS)
    assert first.folded_streets == []
    assert first.best_index is not None and second.best_index is not None


def test_passive_hand_checks_every_street(evaluator):
    hand, _ = new_hand(evaluator)
    result = hand.play_hand({1: AlwaysCheckCall(), 2: AlwaysCheckCall()})
    for street in STREETS:
        assert [a.type for a in result["streets"][street]] == [ActionType.CHECK, ActionType.CHECK]


def test_heads_up_only(evaluator):
    with pytest.raises(ValueError):
        HeadsUpHand([PlayerState(seat=1)], evaluator)
