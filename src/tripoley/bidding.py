"""
Dead hand: dealer swap and the blind auction.

When the dealer declines the dead hand, the other seats bid for it in seat
order starting after the dealer. Each bidder either raises the highest bid
(up to their own chips) or passes for good. When one bidder is left holding
the highest bid, that player swaps hands with the dead hand and pays the bid
into the POT section. If everyone passes, the dead hand stays unowned.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from .betting import credit_section
from .deal import first_to_act
from .errors import INSUFFICIENT_CHIPS, INVALID_ACTION, INVALID_BID, NOT_YOUR_TURN, raise_error
from .state import POT, AuctionState, Feedback, GameState, Phase

logger = logging.getLogger(__name__)

# Auction proceeds stay in play on this section.
AUCTION_PROCEEDS_SECTION = POT


def swap_dead_hand(state: GameState, player_id: int) -> GameState:
    """Exchange ``player_id``'s hand with the dead hand in full (never merged)."""
    player = state.player(player_id)
    old_hand = player.cards
    new_state = state.with_player(replace(player, cards=state.dead_hand))
    return replace(new_state, dead_hand=old_hand)


def bidders(state: GameState) -> list[int]:
    """Non-dealer seats, in bidding order (starting after the dealer)."""
    n = state.num_players
    return [(state.dealer_id + k) % n for k in range(1, n)]


def active_bidders(state: GameState) -> list[int]:
    passed = state.auction.passed if state.auction else frozenset()
    return [p for p in bidders(state) if p not in passed]


def next_bidder(state: GameState, after: int) -> int | None:
    active = set(active_bidders(state))
    n = state.num_players
    for k in range(1, n + 1):
        seat = (after + k) % n
        if seat in active:
            return seat
    return None


def start_auction(state: GameState) -> GameState:
    players = tuple(replace(p, current_bid=None) for p in state.players)
    return replace(
        state,
        players=players,
        phase=Phase.BLIND_AUCTION,
        auction=AuctionState(),
        current_player=first_to_act(state.dealer_id, state.num_players),
    )


def _check_bidder(state: GameState, player_id: int) -> None:
    state.player(player_id)
    if player_id == state.dealer_id:
        raise_error(INVALID_BID, "The dealer cannot bid for the dead hand")
    if player_id != state.current_player:
        raise_error(NOT_YOUR_TURN, f"It is player {state.current_player}'s turn to bid")
    if state.auction is None:
        raise_error(INVALID_ACTION, "No dead-hand auction is in progress")
    if player_id in state.auction.passed:
        raise_error(INVALID_BID, "Player has already passed")


def place_bid(state: GameState, player_id: int, amount: int) -> GameState:
    _check_bidder(state, player_id)
    auction = state.auction
    player = state.player(player_id)
    if amount <= auction.highest_bid:
        raise_error(INVALID_BID, f"Bid must exceed the current highest bid of {auction.highest_bid}")
    if amount > player.chips:
        raise_error(INSUFFICIENT_CHIPS, f"Bid {amount} exceeds available chips {player.chips}")

    new_state = state.with_player(replace(player, current_bid=amount))
    new_state = replace(
        new_state,
        auction=replace(auction, highest_bid=amount, highest_bidder=player_id),
    )
    logger.debug("Player %d bids %d for the dead hand", player_id, amount)
    return _advance(new_state, player_id)


def pass_bid(state: GameState, player_id: int) -> GameState:
    _check_bidder(state, player_id)
    auction = state.auction
    if auction.highest_bidder == player_id:
        raise_error(INVALID_BID, "The highest bidder cannot pass")
    new_state = replace(state, auction=replace(auction, passed=auction.passed | {player_id}))
    logger.debug("Player %d passes on the dead hand", player_id)
    return _advance(new_state, player_id)


def _advance(state: GameState, actor: int) -> GameState:
    active = active_bidders(state)
    auction = state.auction
    if not active:
        return _close(state, winner=None)
    if len(active) == 1 and auction.highest_bidder == active[0]:
        return _close(state, winner=active[0])
    nxt = next_bidder(state, actor)
    return replace(state, current_player=nxt)


def _close(state: GameState, winner: int | None) -> GameState:
    amount = state.auction.highest_bid
    if winner is not None:
        state = swap_dead_hand(state, winner)
        player = state.player(winner)
        state = state.with_player(replace(player, chips=player.chips - amount))
        state = credit_section(state, AUCTION_PROCEEDS_SECTION, amount)
        feedback = Feedback(f"{player.name} wins the dead hand for {amount} chips", "success")
        logger.info("Player %d wins the dead hand for %d", winner, amount)
    else:
        feedback = Feedback("Everyone passed; the dead hand stays on the table", "info")
        logger.info("Dead hand auction closed with no winner")
    players = tuple(replace(p, current_bid=None) for p in state.players)
    return replace(
        state,
        players=players,
        auction=None,
        phase=Phase.BETTING,
        current_player=first_to_act(state.dealer_id, state.num_players),
        feedback=feedback,
    )
