"""
Point values for each play phase.

Michigan: 1 point for a card that beats everything already in the trick
(lead suit only). Hearts: A=15, K=10, Q=5, J=3. Poker: payout for the best
five-card hand in the player's cards (see POKER_PAYOUTS).
"""
from __future__ import annotations

from collections import Counter
from enum import IntEnum
from itertools import combinations
from typing import NamedTuple, Sequence

from .deck import Card

HEART_POINTS: dict[str, int] = {"A": 15, "K": 10, "Q": 5, "J": 3}

MICHIGAN_TRICK_POINT = 1


def heart_points(card: Card) -> int:
    """Points for playing ``card`` in the Hearts phase. Non-hearts are worth nothing."""
    if not card.is_heart():
        return 0
    return HEART_POINTS.get(card.rank, 0)


def beats_trick(card: Card, trick: Sequence[Card]) -> bool:
    """
    True if ``card`` outranks every lead-suit card in ``trick``.
    Off-suit cards never beat the trick; an empty trick has nothing to beat.
    """
    if not trick:
        return False
    lead = trick[0].suit
    if card.suit is not lead:
        return False
    highest = max(c.value for c in trick if c.suit is lead)
    return card.value > highest


def michigan_points(card: Card, trick: Sequence[Card]) -> int:
    return MICHIGAN_TRICK_POINT if beats_trick(card, trick) else 0


# ---- Poker ----

class PokerHand(IntEnum):
    """Hand categories in ascending strength."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


POKER_PAYOUTS: dict[PokerHand, int] = {
    PokerHand.HIGH_CARD: 0,
    PokerHand.ONE_PAIR: 1,
    PokerHand.TWO_PAIR: 2,
    PokerHand.THREE_OF_A_KIND: 3,
    PokerHand.STRAIGHT: 4,
    PokerHand.FLUSH: 5,
    PokerHand.FULL_HOUSE: 7,
    PokerHand.FOUR_OF_A_KIND: 10,
    PokerHand.STRAIGHT_FLUSH: 15,
    PokerHand.ROYAL_FLUSH: 25,
}

POKER_HAND_NAMES: dict[PokerHand, str] = {
    PokerHand.HIGH_CARD: "High card",
    PokerHand.ONE_PAIR: "One pair",
    PokerHand.TWO_PAIR: "Two pair",
    PokerHand.THREE_OF_A_KIND: "Three of a kind",
    PokerHand.STRAIGHT: "Straight",
    PokerHand.FLUSH: "Flush",
    PokerHand.FULL_HOUSE: "Full house",
    PokerHand.FOUR_OF_A_KIND: "Four of a kind",
    PokerHand.STRAIGHT_FLUSH: "Straight flush",
    PokerHand.ROYAL_FLUSH: "Royal flush",
}


class PokerRank(NamedTuple):
    """Comparable hand strength: category first, then tie-break values."""
    hand: PokerHand
    tiebreak: tuple[int, ...]

    @property
    def points(self) -> int:
        return POKER_PAYOUTS[self.hand]

    @property
    def name(self) -> str:
        return POKER_HAND_NAMES[self.hand]


def _straight_high(values: list[int]) -> int | None:
    """High card of a 5-card straight, or None. A-2-3-4-5 counts with high 5."""
    distinct = sorted(set(values), reverse=True)
    if len(distinct) != 5:
        return None
    if distinct[0] - distinct[4] == 4:
        return distinct[0]
    if distinct == [14, 5, 4, 3, 2]:
        return 5
    return None


def rank_five(cards: Sequence[Card]) -> PokerRank:
    """
    Rank up to five cards. Straights and flushes need exactly five cards;
    shorter holdings can only make pairs, trips or quads.
    """
    values = [c.value for c in cards]
    counts = Counter(values)
    # Groups ordered by (count, value) descending: e.g. full house -> trips first.
    groups = sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
    by_group = tuple(v for v, _ in groups)
    shape = [n for _, n in groups]

    if len(cards) == 5:
        is_flush = len({c.suit for c in cards}) == 1
        high = _straight_high(values)
        if is_flush and high is not None:
            if high == 14:
                return PokerRank(PokerHand.ROYAL_FLUSH, (14,))
            return PokerRank(PokerHand.STRAIGHT_FLUSH, (high,))
        if shape[0] == 4:
            return PokerRank(PokerHand.FOUR_OF_A_KIND, by_group)
        if shape[:2] == [3, 2]:
            return PokerRank(PokerHand.FULL_HOUSE, by_group)
        if is_flush:
            return PokerRank(PokerHand.FLUSH, tuple(sorted(values, reverse=True)))
        if high is not None:
            return PokerRank(PokerHand.STRAIGHT, (high,))

    if not shape:
        return PokerRank(PokerHand.HIGH_CARD, ())
    if shape[0] == 4:
        return PokerRank(PokerHand.FOUR_OF_A_KIND, by_group)
    if shape[0] == 3:
        return PokerRank(PokerHand.THREE_OF_A_KIND, by_group)
    if shape[:2] == [2, 2]:
        return PokerRank(PokerHand.TWO_PAIR, by_group)
    if shape[0] == 2:
        return PokerRank(PokerHand.ONE_PAIR, by_group)
    return PokerRank(PokerHand.HIGH_CARD, by_group)


def best_poker_hand(cards: Sequence[Card]) -> tuple[PokerRank, tuple[Card, ...]]:
    """Best five-card subset of ``cards`` (all of them when five or fewer)."""
    cards = tuple(cards)
    if len(cards) <= 5:
        return rank_five(cards), cards
    return max(((rank_five(combo), combo) for combo in combinations(cards, 5)), key=lambda rc: rc[0])


def poker_points(cards: Sequence[Card]) -> int:
    rank, _ = best_poker_hand(cards)
    return rank.points
