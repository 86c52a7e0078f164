"""Tests for the phase state machine and the all-AI round drivers."""
import random
from dataclasses import replace

from hypothesis import given, settings
from hypothesis import strategies as st

from tripoley.actions import (
    ChangePlayerName,
    DealerBlindChoice,
    NextPhase,
    NextPlayer,
    PlaceBets,
    PlayCard,
    ReorderCards,
    RotateDealer,
    SetAIDifficulty,
    StartGame,
    StartNewRound,
    action_from_dict,
)
from tripoley.ai import AIPlayer
from tripoley.betting import total_chips
from tripoley.config import GameConfig
from tripoley.deck import make_deck_52, parse_card
from tripoley.game import cards_in_play, dispatch, run_match, simulate_round, was_rejected
from tripoley.state import KING, POT, Bets, GameState, Phase, new_game_state


def started(n=4, seed=5, **kwargs):
    state = dispatch(GameState(), StartGame(num_players=n, **kwargs), rng=random.Random(seed))
    assert state.phase is Phase.DEALER_BLIND_CHOICE
    return state


def in_phase(phase, n=4, seed=5):
    state = dispatch(started(n, seed), DealerBlindChoice(choice="keep"))
    while state.phase is not phase:
        state = dispatch(state, NextPhase())
    return state


def assert_full_deck(state):
    cards = cards_in_play(state)
    assert len(cards) == 52
    assert set(cards) == set(make_deck_52())


def test_start_game():
    state = started(5, human_position=2)
    assert state.num_players == 5
    assert state.round_number == 1
    for p in state.players:
        assert p.chips == 100
        assert p.position == p.id
    assert state.player(2).is_human
    assert state.player(2).ai_difficulty is None
    assert all(p.ai_difficulty == "medium" for p in state.players if not p.is_human)
    assert_full_deck(state)


def test_start_game_player_count_bounds():
    base = GameState()
    for n in (3, 10):
        after = dispatch(base, StartGame(num_players=n))
        assert after.phase is Phase.PLAYER_SELECTION
        assert after.feedback.kind == "error"


def test_start_game_uses_config():
    config = GameConfig(starting_chips=50, min_players=4, max_players=6)
    state = dispatch(new_game_state(config), StartGame(num_players=6), rng=random.Random(1))
    assert all(p.chips == 50 for p in state.players)
    assert dispatch(new_game_state(config), StartGame(num_players=7)).phase is Phase.PLAYER_SELECTION


def test_unknown_action_is_noop():
    state = started()
    assert dispatch(state, object()) is state
    assert dispatch(state, None) is state
    assert dispatch(state, action_from_dict({"type": "SHUFFLE_UP"})) is state


def test_actions_rejected_before_start():
    base = GameState()
    assert was_rejected(base, dispatch(base, NextPlayer()))
    assert was_rejected(base, dispatch(base, RotateDealer()))


def test_phase_order():
    state = in_phase(Phase.BETTING)
    seen = [state.phase]
    while state.phase is not Phase.GAME_OVER:
        state = dispatch(state, NextPhase())
        seen.append(state.phase)
    assert seen == [Phase.BETTING, Phase.MICHIGAN, Phase.HEARTS, Phase.POKER, Phase.GAME_OVER]
    assert all(p.bets == Bets() for p in state.players)
    assert was_rejected(state, dispatch(state, NextPhase()))


def test_play_card_guards():
    state = in_phase(Phase.MICHIGAN)
    pid = state.current_player
    other = (pid + 1) % 4
    card = state.player(pid).cards[0]
    assert was_rejected(state, dispatch(state, PlayCard(player_id=other, card=state.player(other).cards[0])))
    assert was_rejected(state, dispatch(state, PlayCard(player_id=pid, card=state.player(other).cards[0])))
    after = dispatch(state, PlayCard(player_id=pid, card=card))
    assert not after.player(pid).has_card(card)
    assert after.current_trick == ((pid, card),)
    assert after.current_player == other


def test_no_cards_played_while_betting():
    state = in_phase(Phase.BETTING)
    pid = state.current_player
    after = dispatch(state, PlayCard(player_id=pid, card=state.player(pid).cards[0]))
    assert was_rejected(state, after)


def test_michigan_trick_completes():
    state = in_phase(Phase.MICHIGAN)
    leader = state.current_player
    for _ in range(4):
        pid = state.current_player
        player = state.player(pid)
        legal = [c for c in player.cards if dispatch(state, PlayCard(pid, c)).feedback.kind != "error"]
        state = dispatch(state, PlayCard(player_id=pid, card=legal[0]))
    assert state.current_trick == ()
    assert state.tricks_played == 1
    assert sum(p.tricks_won for p in state.players) == 1
    assert len(state.section(POT).cards) == 4
    assert state.player(leader).category_points.get("michigan", 0) == 0
    assert_full_deck(state)


def test_next_phase_discards_partial_trick():
    state = in_phase(Phase.MICHIGAN)
    pid = state.current_player
    state = dispatch(state, PlayCard(player_id=pid, card=state.player(pid).cards[0]))
    state = dispatch(state, NextPhase())
    assert state.phase is Phase.HEARTS
    assert state.current_trick == ()
    assert len(state.section(POT).cards) == 1
    assert_full_deck(state)


def test_hearts_phase_scoring():
    state = in_phase(Phase.HEARTS)
    pid = state.current_player
    assert any(c.is_heart() for c in state.player(pid).cards)
    state = state.with_player(replace(state.player(pid), cards=(parse_card("Ah"), parse_card("5s"))))
    rejected = dispatch(state, PlayCard(player_id=pid, card=parse_card("5s")))
    assert was_rejected(state, rejected)
    assert rejected.feedback.message == "Only hearts can be played in Hearts phase"
    after = dispatch(state, PlayCard(player_id=pid, card=parse_card("Ah")))
    assert after.player(pid).score == 15
    assert after.player(pid).category_points["hearts"] == 15
    assert parse_card("Ah") in after.section(KING).cards


def test_start_new_round_rotates_dealer_home():
    for n in (4, 6, 9):
        state = in_phase(Phase.MICHIGAN, n=n)
        home = state.dealer_id
        for r in range(n):
            state = dispatch(state, StartNewRound(), rng=random.Random(r))
            assert state.phase is Phase.BETTING
            assert state.round_number == r + 2
            assert_full_deck(state)
            state = dispatch(state, NextPhase())
        assert state.dealer_id == home


def test_start_new_round_keeps_pot_chips():
    state = in_phase(Phase.BETTING)
    state = dispatch(state, PlaceBets(player_id=state.current_player, bets=Bets(michigan=4)))
    state = dispatch(state, NextPhase())
    state = dispatch(state, StartNewRound(), rng=random.Random(9))
    assert state.section(POT).chips == 4
    assert state.section(POT).cards == ()
    assert total_chips(state) == 400
    assert all(p.bets is None and p.score == 0 for p in state.players)


def test_start_new_round_rejected_while_betting():
    state = in_phase(Phase.BETTING)
    assert was_rejected(state, dispatch(state, StartNewRound()))


def test_rotate_dealer_and_next_player():
    state = started()
    after = dispatch(state, RotateDealer())
    assert after.dealer_id == (state.dealer_id + 1) % 4
    assert after.current_player == after.dealer_id
    assert dispatch(after, NextPlayer()).current_player == (after.dealer_id + 1) % 4


def test_next_player_skips_seats_without_a_legal_card():
    state = in_phase(Phase.HEARTS, n=9)
    pid = state.current_player
    heartless = (pid + 1) % 9
    player = state.player(heartless)
    state = state.with_player(replace(player, cards=tuple(c for c in player.cards if not c.is_heart())))
    after = dispatch(state, NextPlayer())
    assert after.current_player != heartless
    assert any(c.is_heart() for c in after.player(after.current_player).cards)


def test_reorder_cards():
    state = started()
    cards = tuple(reversed(state.player(1).cards))
    after = dispatch(state, ReorderCards(player_id=1, cards=cards))
    assert after.player(1).cards == cards
    assert was_rejected(state, dispatch(state, ReorderCards(player_id=1, cards=cards[1:])))


def test_rename_and_difficulty():
    state = started()
    state = dispatch(state, ChangePlayerName(name="  Morgan "))
    assert state.player(0).name == "Morgan"
    assert was_rejected(state, dispatch(state, ChangePlayerName(name="   ")))
    state = dispatch(state, SetAIDifficulty(player_id=1, difficulty="cardShark"))
    assert state.player(1).ai_difficulty == "cardShark"
    assert was_rejected(state, dispatch(state, SetAIDifficulty(player_id=1, difficulty="expert")))
    assert was_rejected(state, dispatch(state, SetAIDifficulty(player_id=0, difficulty="hard")))
    assert was_rejected(state, dispatch(state, SetAIDifficulty(player_id=12, difficulty="hard")))


def test_simulate_round_stops_for_human():
    state = started(human_position=0)
    ai = AIPlayer(rng=random.Random(2))
    after = simulate_round(state, ai)
    assert after.phase is not Phase.GAME_OVER
    assert ai.next_action(after) is None


def test_run_match():
    results = run_match(5, 3, AIPlayer(rng=random.Random(1)), rng=random.Random(2))
    assert len(results) == 3
    dealers = [s.dealer_id for s in results]
    assert dealers[1] == (dealers[0] + 1) % 5
    assert dealers[2] == (dealers[1] + 1) % 5
    for s in results:
        assert s.phase is Phase.GAME_OVER
        assert total_chips(s) == 500
        assert all(p.chips >= 0 for p in s.players)
        assert_full_deck(s)


@settings(max_examples=15, deadline=None)
@given(
    n=st.integers(min_value=4, max_value=9),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
def test_full_rounds_conserve_chips_and_cards(n, seed):
    results = run_match(n, 2, AIPlayer(rng=random.Random(seed)), rng=random.Random(seed + 1))
    for s in results:
        assert total_chips(s) == 100 * n
        assert_full_deck(s)
        assert not any(c.is_heart() for p in s.players for c in p.cards)
