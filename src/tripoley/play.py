"""
Card-play legality and evaluation, dispatched by phase.

Michigan: follow the lead suit if you can, otherwise play anything.
Hearts: only hearts may be played. Poker: anything goes.
No card is ever playable outside the three play phases.
"""
from __future__ import annotations

from typing import NamedTuple, Sequence

from .deck import Card, has_suit
from .scoring import best_poker_hand, heart_points, michigan_points
from .state import GameState, Phase, Player


class Playability(NamedTuple):
    is_playable: bool
    reason: str | None = None


class PlayResult(NamedTuple):
    is_valid: bool
    points: int
    message: str | None = None


# ---- Michigan trick helpers ----

def legal_plays(hand: Sequence[Card], trick: Sequence[Card]) -> list[Card]:
    """Cards from ``hand`` that may be played to ``trick`` (lead card first)."""
    if not trick:
        return list(hand)
    lead = trick[0].suit
    if has_suit(hand, lead):
        return [c for c in hand if c.suit is lead]
    return list(hand)


def trick_winner(trick: Sequence[tuple[int, Card]]) -> int:
    """Player id holding the highest card of the lead suit."""
    lead = trick[0][1].suit
    best_player, best_card = trick[0]
    for p, c in trick[1:]:
        if c.suit is lead and c.value > best_card.value:
            best_player, best_card = p, c
    return best_player


# ---- Legality ----

def _michigan_playable(card: Card, player: Player, state: GameState) -> Playability:
    trick = state.trick_cards
    if not trick:
        return Playability(True)
    lead = trick[0].suit
    if has_suit(player.cards, lead) and card.suit is not lead:
        return Playability(False, "Must follow suit")
    return Playability(True)


def _hearts_playable(card: Card, player: Player, state: GameState) -> Playability:
    if not card.is_heart():
        return Playability(False, "Only hearts can be played in Hearts phase")
    return Playability(True)


def _poker_playable(card: Card, player: Player, state: GameState) -> Playability:
    return Playability(True)


_PLAYABLE = {
    Phase.MICHIGAN: _michigan_playable,
    Phase.HEARTS: _hearts_playable,
    Phase.POKER: _poker_playable,
}


def is_playable(card: Card, player: Player, state: GameState) -> Playability:
    """Whether ``player`` may play ``card`` in the current phase, with a reason when not."""
    if state.phase is Phase.BETTING:
        return Playability(False, "Cannot play cards during betting phase")
    check = _PLAYABLE.get(state.phase)
    if check is None:
        return Playability(False, f"Cannot play cards during {state.phase.value} phase")
    if not player.has_card(card):
        return Playability(False, f"{card} is not in your hand")
    return check(card, player, state)


def playable_cards(player: Player, state: GameState) -> list[Card]:
    return [c for c in player.cards if is_playable(c, player, state).is_playable]


# ---- Evaluation ----

def _evaluate_michigan(card: Card, player: Player, state: GameState) -> PlayResult:
    trick = state.trick_cards
    if not trick:
        return PlayResult(True, 0)
    lead = trick[0].suit
    if has_suit(player.cards, lead) and card.suit is not lead:
        return PlayResult(False, 0, "Must follow suit when possible")
    points = michigan_points(card, trick)
    return PlayResult(True, points, "Winning the trick!" if points else None)


def _evaluate_hearts(card: Card, player: Player, state: GameState) -> PlayResult:
    if not card.is_heart():
        return PlayResult(False, 0, "Only hearts can be played in Hearts phase")
    points = heart_points(card)
    return PlayResult(True, points, f"Scored {points} points!" if points else None)


def _evaluate_poker(card: Card, player: Player, state: GameState) -> PlayResult:
    cards = list(player.cards)
    if card not in cards:
        cards.append(card)
    rank, _ = best_poker_hand(cards)
    return PlayResult(True, rank.points, rank.name)


_EVALUATE = {
    Phase.MICHIGAN: _evaluate_michigan,
    Phase.HEARTS: _evaluate_hearts,
    Phase.POKER: _evaluate_poker,
}


def evaluate_play(card: Card, player: Player, state: GameState) -> PlayResult:
    """Validity and points of playing ``card`` now. Pure: nothing is removed or scored."""
    evaluate = _EVALUATE.get(state.phase)
    if evaluate is None:
        return PlayResult(False, 0, "Invalid phase for playing cards")
    return evaluate(card, player, state)
