"""
Standard 52-card deck: 4 suits × 13 ranks (2 .. 10, J, Q, K, A).
Rank order is the same in every phase: 2 lowest, Ace highest.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


class Suit(str, Enum):
    """Suit values double as the wire names used by presentation layers."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


RANKS: tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")

# 2 -> 2 .. A -> 14
RANK_VALUES: dict[str, int] = {r: i + 2 for i, r in enumerate(RANKS)}

DECK_SIZE = 52

_SUIT_CHARS = {Suit.HEARTS: "h", Suit.DIAMONDS: "d", Suit.CLUBS: "c", Suit.SPADES: "s"}
_CHAR_SUITS = {v: k for k, v in _SUIT_CHARS.items()}


@dataclass(frozen=True)
class Card:
    """A single playing card. Identity is (suit, rank) only."""

    suit: Suit
    rank: str

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            object.__setattr__(self, "suit", Suit(self.suit))
        if self.rank not in RANK_VALUES:
            raise ValueError(f"Unknown card rank: {self.rank!r}")

    @property
    def value(self) -> int:
        """Numeric rank, 2..14."""
        return RANK_VALUES[self.rank]

    def is_heart(self) -> bool:
        return self.suit is Suit.HEARTS

    def __str__(self) -> str:
        return f"{self.rank}{_SUIT_CHARS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


def parse_card(text: str) -> Card:
    """Parse the short form produced by ``str(card)``, e.g. ``"10h"`` or ``"As"``."""
    text = text.strip()
    if len(text) < 2 or text[-1].lower() not in _CHAR_SUITS:
        raise ValueError(f"Cannot parse card: {text!r}")
    return Card(suit=_CHAR_SUITS[text[-1].lower()], rank=text[:-1].upper())


def make_deck_52() -> list[Card]:
    """Build a full deck in suit-major order (hearts first)."""
    return [Card(suit=s, rank=r) for s in Suit for r in RANKS]


def shuffled_deck(rng: random.Random | None = None) -> list[Card]:
    """
    Fresh 52-card deck shuffled with Fisher–Yates.

    ``rng`` is the only source of randomness, so a seeded ``random.Random``
    gives a reproducible deal.
    """
    if rng is None:
        rng = random.Random()
    deck = make_deck_52()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def cards_of_suit(cards: list[Card] | tuple[Card, ...], suit: Suit) -> list[Card]:
    return [c for c in cards if c.suit is suit]


def has_suit(cards: list[Card] | tuple[Card, ...], suit: Suit) -> bool:
    return any(c.suit is suit for c in cards)
