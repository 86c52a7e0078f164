"""Tests for the dealer's dead-hand choice and the blind auction."""
import random
from dataclasses import replace

import pytest

from tripoley.actions import (
    BidForBlind,
    DealerBlindChoice,
    PassDeadHandBid,
    PlaceDeadHandBid,
    StartDeadHandBidding,
    StartGame,
    TakeDeadHand,
)
from tripoley.bidding import pass_bid
from tripoley.betting import total_chips
from tripoley.errors import INVALID_ACTION, INVALID_BID, GameError
from tripoley.game import cards_in_play, dispatch, was_rejected
from tripoley.state import POT, GameState, Phase


def started(n=4, seed=3):
    state = dispatch(GameState(), StartGame(num_players=n), rng=random.Random(seed))
    assert state.phase is Phase.DEALER_BLIND_CHOICE
    return state


def seats_after_dealer(state):
    n = state.num_players
    return [(state.dealer_id + k) % n for k in range(1, n)]


def test_dealer_swap():
    state = started()
    dealer = state.dealer_id
    old_hand, old_dead = state.player(dealer).cards, state.dead_hand
    after = dispatch(state, DealerBlindChoice(choice="swap"))
    assert after.phase is Phase.BETTING
    assert after.player(dealer).cards == old_dead
    assert after.dead_hand == old_hand
    assert sorted(map(str, cards_in_play(after))) == sorted(map(str, cards_in_play(state)))


def test_dealer_keep():
    state = started()
    after = dispatch(state, DealerBlindChoice(choice="keep"))
    assert after.phase is Phase.BETTING
    assert after.dead_hand == state.dead_hand
    assert after.current_player == (state.dealer_id + 1) % 4


def test_only_dealer_decides():
    state = started()
    other = (state.dealer_id + 1) % 4
    assert was_rejected(state, dispatch(state, DealerBlindChoice(choice="swap", player_id=other)))
    assert was_rejected(state, dispatch(state, TakeDeadHand(player_id=other)))
    assert was_rejected(state, dispatch(state, DealerBlindChoice(choice="fold")))


def test_take_dead_hand_is_dealer_swap():
    state = started()
    after = dispatch(state, TakeDeadHand(player_id=state.dealer_id))
    assert after.player(state.dealer_id).cards == state.dead_hand
    assert after.phase is Phase.BETTING


def test_auction_single_winner():
    state = started()
    b1, b2, b3 = seats_after_dealer(state)
    state = dispatch(state, DealerBlindChoice(choice="auction"))
    assert state.phase is Phase.BLIND_AUCTION
    assert state.current_player == b1
    old_hand, old_dead = state.player(b1).cards, state.dead_hand

    state = dispatch(state, PlaceDeadHandBid(player_id=b1, amount=5))
    assert state.current_player == b2
    state = dispatch(state, PassDeadHandBid(player_id=b2))
    assert state.current_player == b3
    state = dispatch(state, PassDeadHandBid(player_id=b3))

    assert state.phase is Phase.BETTING
    assert state.auction is None
    assert state.player(b1).cards == old_dead
    assert state.dead_hand == old_hand
    assert state.player(b1).chips == 95
    assert state.section(POT).chips == 5
    assert total_chips(state) == 400
    assert all(p.current_bid is None for p in state.players)


def test_auction_raise_and_alias():
    state = dispatch(started(), StartDeadHandBidding())
    b1, b2, b3 = seats_after_dealer(state)
    state = dispatch(state, PlaceDeadHandBid(player_id=b1, amount=2))
    state = dispatch(state, BidForBlind(player_id=b2, amount=4))
    assert state.auction.highest_bidder == b2
    # A bid must beat the highest bid.
    assert was_rejected(state, dispatch(state, PlaceDeadHandBid(player_id=b3, amount=4)))
    state = dispatch(state, PassDeadHandBid(player_id=b3))
    assert state.current_player == b1
    state = dispatch(state, PassDeadHandBid(player_id=b1))
    assert state.phase is Phase.BETTING
    assert state.player(b2).chips == 96
    assert state.section(POT).chips == 4


def test_auction_everyone_passes():
    state = dispatch(started(), DealerBlindChoice(choice="auction"))
    dead = state.dead_hand
    for seat in seats_after_dealer(state):
        state = dispatch(state, PassDeadHandBid(player_id=seat))
    assert state.phase is Phase.BETTING
    assert state.dead_hand == dead
    assert total_chips(state) == 400
    assert state.section(POT).chips == 0


def test_auction_rejections():
    state = dispatch(started(), DealerBlindChoice(choice="auction"))
    b1, b2, _ = seats_after_dealer(state)
    assert was_rejected(state, dispatch(state, PlaceDeadHandBid(player_id=state.dealer_id, amount=1)))
    assert was_rejected(state, dispatch(state, PlaceDeadHandBid(player_id=b2, amount=1)))
    assert was_rejected(state, dispatch(state, PlaceDeadHandBid(player_id=b1, amount=101)))
    assert was_rejected(state, dispatch(state, PlaceDeadHandBid(player_id=b1, amount=0)))


def test_highest_bidder_cannot_pass():
    state = dispatch(started(), DealerBlindChoice(choice="auction"))
    b1 = seats_after_dealer(state)[0]
    state = dispatch(state, PlaceDeadHandBid(player_id=b1, amount=3))
    state = replace(state, current_player=b1)
    with pytest.raises(GameError) as exc:
        pass_bid(state, b1)
    assert exc.value.code == INVALID_BID


def test_bid_without_auction_is_game_error():
    state = dispatch(started(), DealerBlindChoice(choice="keep"))
    with pytest.raises(GameError) as exc:
        pass_bid(replace(state, current_player=(state.dealer_id + 1) % 4), (state.dealer_id + 1) % 4)
    assert exc.value.code == INVALID_ACTION
