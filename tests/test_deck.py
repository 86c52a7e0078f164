"""Tests for cards, deck construction and shuffling."""
import random
from collections import Counter

import pytest

from tripoley.deck import Card, Suit, make_deck_52, parse_card, shuffled_deck


def test_deck_52():
    deck = make_deck_52()
    assert len(deck) == 52
    assert len(set(deck)) == 52
    assert deck[0] == Card(Suit.HEARTS, "2")
    assert deck[-1] == Card(Suit.SPADES, "A")


def test_card_values_and_text():
    assert Card("hearts", "A").value == 14
    assert Card(Suit.CLUBS, "2").value == 2
    assert str(Card(Suit.HEARTS, "10")) == "10h"
    assert parse_card("10h") == Card(Suit.HEARTS, "10")
    assert parse_card("qs") == Card(Suit.SPADES, "Q")


def test_card_identity_is_suit_and_rank():
    assert Card("diamonds", "K") == Card(Suit.DIAMONDS, "K")
    assert len({Card("diamonds", "K"), Card(Suit.DIAMONDS, "K")}) == 1


def test_bad_cards_rejected():
    with pytest.raises(ValueError):
        Card(Suit.HEARTS, "1")
    with pytest.raises(ValueError):
        Card("stars", "A")
    with pytest.raises(ValueError):
        parse_card("Ax")


def test_shuffle_is_reproducible():
    a = shuffled_deck(random.Random(7))
    b = shuffled_deck(random.Random(7))
    c = shuffled_deck(random.Random(8))
    assert a == b
    assert a != c
    assert sorted(a, key=str) == sorted(make_deck_52(), key=str)


def test_shuffle_is_uniform_over_first_card():
    # 52 cards at position 0 over 26k shuffles: chi-square with 51 degrees of
    # freedom stays far below 100 (p < 0.0001) for a fair shuffle.
    rng = random.Random(2024)
    trials = 26_000
    counts = Counter(shuffled_deck(rng)[0] for _ in range(trials))
    assert set(counts) == set(make_deck_52())
    expected = trials / 52
    chi_square = sum((n - expected) ** 2 / expected for n in counts.values())
    assert chi_square < 100


def test_shuffle_is_uniform_over_orderings():
    # Relative order of three fixed cards: all 6 orderings equally likely.
    rng = random.Random(7)
    watched = (Card(Suit.HEARTS, "A"), Card(Suit.CLUBS, "2"), Card(Suit.SPADES, "10"))
    trials = 12_000
    counts = Counter(
        tuple(c for c in shuffled_deck(rng) if c in watched)
        for _ in range(trials)
    )
    assert len(counts) == 6
    expected = trials / 6
    chi_square = sum((n - expected) ** 2 / expected for n in counts.values())
    # 5 degrees of freedom; 25 is beyond p = 0.0002.
    assert chi_square < 25
