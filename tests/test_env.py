"""Tests for the flat card/observation encoding."""
import random

from tripoley.actions import DealerBlindChoice, NextPhase, StartGame
from tripoley.deck import make_deck_52, parse_card
from tripoley.env import (
    NUM_CARDS,
    card_from_index,
    card_index,
    encode_card_set,
    encode_observation,
    legal_action_mask,
)
from tripoley.game import dispatch
from tripoley.state import GameState, Phase


def test_card_index_matches_deck_order():
    deck = make_deck_52()
    assert [card_index(c) for c in deck] == list(range(NUM_CARDS))
    assert all(card_from_index(card_index(c)) == c for c in deck)


def test_encode_card_set():
    vec = encode_card_set([parse_card("2h"), parse_card("As")])
    assert len(vec) == 52
    assert sum(vec) == 2
    assert vec[0] == 1 and vec[51] == 1


def test_hearts_mask_only_hearts():
    state = dispatch(GameState(), StartGame(num_players=4), rng=random.Random(2))
    state = dispatch(state, DealerBlindChoice(choice="keep"))
    betting_mask = legal_action_mask(state, state.current_player)
    assert not any(betting_mask)
    while state.phase is not Phase.HEARTS:
        state = dispatch(state, NextPhase())
    pid = state.current_player
    mask = legal_action_mask(state, pid)
    legal = [card_from_index(i) for i, ok in enumerate(mask) if ok]
    assert legal
    assert all(c.is_heart() for c in legal)
    assert set(legal) == {c for c in state.player(pid).cards if c.is_heart()}


def test_observation_shape():
    state = dispatch(GameState(), StartGame(num_players=5), rng=random.Random(3))
    obs = encode_observation(state, 1)
    assert len(obs) == 52 + 52 + len(Phase) + 2
    assert sum(obs[:52]) == len(state.player(1).cards)
    assert 0.0 <= obs[-2] <= 1.0
    assert 0.0 <= obs[-1] < 1.0
