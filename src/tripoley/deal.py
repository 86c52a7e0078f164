"""
Distribution (deal) for 4 to 9 players plus the dead hand.

The dead hand counts as one extra position. With ``total = N + 1`` positions,
every position gets ``52 // total`` cards and the ``52 % total`` remaining cards
go, one each, to the seats immediately after the dealer. The dead hand is
always a short position.

Cards are sliced off the shuffled pack in a fixed order: dead hand first, then
seats 0..N-1 in seat order (not dealer-relative order).
"""
from __future__ import annotations

import logging
import random
from typing import NamedTuple

from .deck import DECK_SIZE, Card, shuffled_deck

logger = logging.getLogger(__name__)


class Deal(NamedTuple):
    """Result of a deal. ``hands[i]`` belongs to seat ``i``."""
    dead_hand: list[Card]
    hands: list[list[Card]]
    dealer: int


def position_from_dealer(seat: int, dealer: int, num_players: int) -> int:
    """0 for the dealer, 1 for the seat after the dealer, and so on (wrapping)."""
    return (seat - dealer + num_players) % num_players


def hand_sizes(num_players: int, dealer: int) -> tuple[int, list[int]]:
    """
    Return (dead_hand_size, per-seat sizes).

    5 players: 6 positions, base 8, extra 4. The dead hand and the dealer get
    8 cards; the 4 seats after the dealer get 9.
    """
    if num_players < 1:
        raise ValueError(f"Need at least one player, got {num_players}")
    if not 0 <= dealer < num_players:
        raise ValueError(f"Dealer {dealer} out of range for {num_players} players")
    total_positions = num_players + 1
    base = DECK_SIZE // total_positions
    extra = DECK_SIZE % total_positions
    sizes = []
    for seat in range(num_players):
        pos = position_from_dealer(seat, dealer, num_players)
        sizes.append(base + 1 if 1 <= pos <= extra else base)
    return base, sizes


def deal(
    num_players: int,
    dealer: int,
    deck: list[Card] | None = None,
    rng: random.Random | None = None,
) -> Deal:
    """
    Deal a 52-card pack to ``num_players`` seats and the dead hand.

    If ``deck`` is given it is used in its current order (no shuffle);
    otherwise a fresh deck is shuffled with ``rng``.
    """
    if deck is None:
        deck = shuffled_deck(rng)
    if len(deck) != DECK_SIZE or len(set(deck)) != DECK_SIZE:
        raise ValueError("Deal requires a complete 52-card deck without duplicates")

    dead_size, sizes = hand_sizes(num_players, dealer)
    dead_hand = list(deck[:dead_size])
    idx = dead_size
    hands: list[list[Card]] = []
    for size in sizes:
        hands.append(list(deck[idx: idx + size]))
        idx += size

    logger.debug(
        "Dealt %d players (dealer %d): dead hand %d, hands %s",
        num_players, dealer, len(dead_hand), [len(h) for h in hands],
    )
    return Deal(dead_hand=dead_hand, hands=hands, dealer=dealer)


def next_dealer(dealer: int, num_players: int) -> int:
    """Dealer rotates one seat in play direction."""
    return (dealer + 1) % num_players


def first_to_act(dealer: int, num_players: int) -> int:
    """The seat after the dealer acts first in every phase."""
    return (dealer + 1) % num_players
