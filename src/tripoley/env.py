"""
Flat observation and action encoding.

Card-play actions are indexed 0..51 in ``make_deck_52()`` order, so a policy
that works on ``(obs, legal_actions_mask)`` can pick a card without knowing
anything about the rules. Observations are plain lists of floats.
"""
from __future__ import annotations

from typing import Iterable, List

from .deck import RANK_VALUES, Card, Suit
from .play import playable_cards
from .state import GameState, Phase

NUM_CARDS: int = 52
NUM_CARD_ACTIONS: int = NUM_CARDS
_PHASES: tuple[Phase, ...] = tuple(Phase)
_SUIT_INDEX = {s: i for i, s in enumerate(Suit)}


def card_index(card: Card) -> int:
    """Stable index 0..51: suit-major (hearts, diamonds, clubs, spades), then rank 2..A."""
    return _SUIT_INDEX[card.suit] * 13 + (RANK_VALUES[card.rank] - 2)


def card_from_index(index: int) -> Card:
    if not 0 <= index < NUM_CARDS:
        raise ValueError(f"Card index out of range: {index}")
    suit = list(Suit)[index // 13]
    rank = next(r for r, v in RANK_VALUES.items() if v == index % 13 + 2)
    return Card(suit=suit, rank=rank)


def encode_card_set(cards: Iterable[Card]) -> List[int]:
    """Binary 52-dim vector: 1 where the card is present."""
    vec = [0] * NUM_CARDS
    for c in cards:
        vec[card_index(c)] = 1
    return vec


def legal_action_mask(state: GameState, player_id: int) -> List[bool]:
    """True at the index of every card ``player_id`` may legally play right now."""
    mask = [False] * NUM_CARD_ACTIONS
    for c in playable_cards(state.player(player_id), state):
        mask[card_index(c)] = True
    return mask


def encode_observation(state: GameState, player_id: int) -> List[float]:
    """
    What ``player_id`` can see, flattened:
      - own hand (52)
      - cards in the current trick (52)
      - phase one-hot (8)
      - own chips / total chips at the table (1)
      - seat position relative to the dealer / player count (1)
    """
    player = state.player(player_id)
    obs: List[float] = [float(x) for x in encode_card_set(player.cards)]
    obs.extend(float(x) for x in encode_card_set(state.trick_cards))
    obs.extend(1.0 if state.phase is p else 0.0 for p in _PHASES)
    table = sum(p.chips for p in state.players) + sum(s.chips for s in state.pot)
    obs.append(player.chips / table if table else 0.0)
    n = max(state.num_players, 1)
    obs.append(((player_id - state.dealer_id) % n) / n)
    return obs


__all__ = [
    "NUM_CARDS",
    "NUM_CARD_ACTIONS",
    "card_index",
    "card_from_index",
    "encode_card_set",
    "legal_action_mask",
    "encode_observation",
]
