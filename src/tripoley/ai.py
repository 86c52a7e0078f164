"""
Computer players.

Each AI seat has a difficulty tier that maps to a personality: four sliders in
[0, 1] for aggression (bet sizing), bluffing, consistency (how often it plays
its strategy rather than something random) and adaptation (how often it
repeats a move that worked recently).

``AIPlayer`` is stateless per call apart from an explicit ``AIMemory`` (last
few plays, winning moves and successful bets per player id). The engine never
drives AI seats itself; the caller asks ``AIPlayer.next_action(state)`` and
dispatches the result like any human action.
"""
from __future__ import annotations

import logging
import math
import random
from collections import deque
from dataclasses import dataclass, field
from typing import NamedTuple

from .actions import (
    DealerBlindChoice,
    PassDeadHandBid,
    PlaceBets,
    PlaceDeadHandBid,
    PlayCard,
)
from .agents import RandomAgent, play_card
from .deck import Card
from .errors import AIConfigurationError
from .play import playable_cards
from .scoring import HEART_POINTS, PokerHand, beats_trick, best_poker_hand
from .state import BET_CATEGORIES, HEARTS, MICHIGAN, POKER, Bets, GameState, Phase, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Personality:
    aggression: float
    bluffing: float
    consistency: float
    adaptation: float


PERSONALITIES: dict[str, Personality] = {
    "easy": Personality(aggression=0.2, bluffing=0.1, consistency=0.3, adaptation=0.2),
    "medium": Personality(aggression=0.5, bluffing=0.4, consistency=0.6, adaptation=0.5),
    "hard": Personality(aggression=0.8, bluffing=0.7, consistency=0.85, adaptation=0.8),
    "cardShark": Personality(aggression=0.9, bluffing=0.9, consistency=0.95, adaptation=0.95),
}

BASE_BET_AMOUNTS: dict[str, int] = {"easy": 1, "medium": 2, "hard": 3, "cardShark": 5}

# Ranks that count toward each betting category when sizing up a hand.
CATEGORY_RANKS: dict[str, tuple[str, ...]] = {
    MICHIGAN: ("10", "J", "Q"),
    HEARTS: ("K", "A"),
    POKER: ("8", "9", "10", "K", "Q"),
}
CATEGORY_MAX_CARDS: dict[str, int] = {MICHIGAN: 3, HEARTS: 2, POKER: 5}

_MAX_HEART_POINTS = sum(HEART_POINTS.values())


# ---- Memory ----

@dataclass
class PlayerMemory:
    """Most recent entry first; older entries fall off past ``maxlen``."""

    last_plays: deque = field(default_factory=deque)
    successful_bets: deque = field(default_factory=deque)  # (amount, category)
    winning_moves: deque = field(default_factory=deque)


class AIMemory:
    """Bounded per-player history, created lazily on first access."""

    def __init__(self, size: int = 10) -> None:
        self.size = size
        self._memory: dict[int, PlayerMemory] = {}

    def get(self, player_id: int) -> PlayerMemory:
        if player_id not in self._memory:
            self._memory[player_id] = PlayerMemory(
                last_plays=deque(maxlen=self.size),
                successful_bets=deque(maxlen=self.size),
                winning_moves=deque(maxlen=self.size),
            )
        return self._memory[player_id]

    def record_play(self, player_id: int, card: Card, was_successful: bool) -> None:
        memory = self.get(player_id)
        memory.last_plays.appendleft(card)
        if was_successful:
            memory.winning_moves.appendleft(card)

    def record_bet(self, player_id: int, amount: int, category: str, was_successful: bool) -> None:
        if was_successful:
            self.get(player_id).successful_bets.appendleft((amount, category))


def detect_success_pattern(memory: PlayerMemory) -> bool:
    """
    True when the last two or three winning moves form a chain: each one shares
    a suit with, or is one rank away from, the one before it.
    """
    recent = list(memory.winning_moves)[:3]
    if len(recent) < 2:
        return False
    return all(
        cur.suit is prev.suit or abs(cur.value - prev.value) == 1
        for prev, cur in zip(recent, recent[1:])
    )


# ---- Hand evaluation ----

class HandEvaluation(NamedTuple):
    strength: float
    playable_cards: list[Card]
    best_play: Card | None
    confidence: float


def category_counts(cards) -> dict[str, int]:
    return {cat: sum(1 for c in cards if c.rank in ranks) for cat, ranks in CATEGORY_RANKS.items()}


def category_strengths(cards) -> dict[str, float]:
    counts = category_counts(cards)
    return {cat: min(1.0, counts[cat] / CATEGORY_MAX_CARDS[cat]) for cat in BET_CATEGORIES}


def blind_hand_strength(cards) -> float:
    """Mean of michigan/3, hearts/2 and poker/5 card counts, each capped at 1."""
    strengths = category_strengths(cards)
    return sum(strengths.values()) / len(strengths)


def _evaluate_michigan(player: Player, state: GameState) -> HandEvaluation:
    playable = playable_cards(player, state)
    strength = sum(c.value - 2 for c in player.cards) / (12 * len(player.cards)) if player.cards else 0.0
    trick = state.trick_cards
    if not playable:
        return HandEvaluation(strength, playable, None, 0.5)
    if not trick:
        # Lead with the strongest card.
        return HandEvaluation(strength, playable, max(playable, key=lambda c: c.value), 0.6)
    winners = [c for c in playable if beats_trick(c, trick)]
    if winners:
        best = min(winners, key=lambda c: c.value)
    else:
        best = min(playable, key=lambda c: c.value)
    return HandEvaluation(strength, playable, best, 0.6 + 0.3 * len(winners) / len(playable))


def _evaluate_hearts(player: Player, state: GameState) -> HandEvaluation:
    playable = playable_cards(player, state)
    held = sum(HEART_POINTS.get(c.rank, 0) for c in player.cards if c.is_heart())
    strength = held / _MAX_HEART_POINTS
    best = max(playable, key=lambda c: (HEART_POINTS.get(c.rank, 0), c.value)) if playable else None
    return HandEvaluation(strength, playable, best, 0.5 + 0.4 * strength)


def _evaluate_poker(player: Player, state: GameState) -> HandEvaluation:
    playable = playable_cards(player, state)
    if not player.cards:
        return HandEvaluation(0.0, playable, None, 0.6)
    rank, best_five = best_poker_hand(player.cards)
    spare = [c for c in playable if c not in best_five]
    pool = spare or playable
    best = min(pool, key=lambda c: c.value) if pool else None
    return HandEvaluation(rank.hand / PokerHand.ROYAL_FLUSH, playable, best, 0.6)


def evaluate_hand(player: Player, state: GameState) -> HandEvaluation:
    """Phase-specific heuristic view of ``player``'s hand."""
    if state.phase is Phase.MICHIGAN:
        return _evaluate_michigan(player, state)
    if state.phase is Phase.HEARTS:
        return _evaluate_hearts(player, state)
    if state.phase is Phase.POKER:
        return _evaluate_poker(player, state)
    return HandEvaluation(blind_hand_strength(player.cards), [], None, 0.5)


# ---- Decisions ----

@dataclass(frozen=True)
class AIDecision:
    action: str  # "bet" | "play"
    card: Card | None = None
    bets: Bets | None = None
    reason: str = "strategic"


def _bets_on(category: str, amount: int) -> Bets:
    return Bets(**{category: amount})


class AIPlayer:
    """
    Decision policy shared by every AI seat.

    Usage:
        ai = AIPlayer(rng=random.Random(7))
        action = ai.next_action(state)
        if action is not None:
            state = dispatch(state, action)
    """

    def __init__(self, memory: AIMemory | None = None, rng: random.Random | None = None) -> None:
        self.memory = memory if memory is not None else AIMemory()
        self.rng = rng if rng is not None else random.Random()
        self._random_agent = RandomAgent(rng=self.rng)

    # -- personality --

    @staticmethod
    def personality(player: Player) -> Personality:
        if player.ai_difficulty is None:
            raise AIConfigurationError(f"AI difficulty not set for player {player.id} ({player.name})")
        return PERSONALITIES[player.ai_difficulty]

    @staticmethod
    def base_bet(player: Player) -> int:
        if player.ai_difficulty is None:
            raise AIConfigurationError(f"AI difficulty not set for player {player.id} ({player.name})")
        return BASE_BET_AMOUNTS[player.ai_difficulty]

    # -- situational reads --

    @staticmethod
    def has_good_position(player: Player, state: GameState) -> bool:
        """Later seats see more of the table before acting."""
        return player.position > state.num_players / 2

    @staticmethod
    def is_chip_leader(player: Player, state: GameState) -> bool:
        average = sum(p.chips for p in state.players) / state.num_players
        return player.chips > average

    def should_bluff(self, player: Player, state: GameState) -> bool:
        personality = self.personality(player)
        threshold = (
            personality.bluffing
            * (1.2 if player.chips < state.config.low_chip_threshold else 1.0)
            * (0.8 if self.is_chip_leader(player, state) else 1.2)
            * (1.3 if self.has_good_position(player, state) else 0.9)
        )
        return self.rng.random() < threshold

    # -- general decision --

    def decide(self, player: Player, state: GameState) -> AIDecision:
        """
        Bet or card play for ``player``:
        a random lapse, a replay of a remembered success, or a strategic choice.

        ``next_action`` uses this for card plays only; betting turns go through
        ``decide_bets``, which sizes all three categories at once. Called
        directly during betting, this returns a single-category bet.
        Outside betting, a player with no legal card gets a play decision
        with ``card=None``.
        """
        personality = self.personality(player)
        evaluation = evaluate_hand(player, state)
        if state.phase is not Phase.BETTING and not evaluation.playable_cards:
            return AIDecision("play", reason="no legal play")

        if self.rng.random() > personality.consistency:
            decision = self._random_decision(player, state)
        else:
            memory = self.memory.get(player.id)
            decision = None
            if detect_success_pattern(memory) and self.rng.random() < personality.adaptation:
                decision = self._pattern_decision(player, state, evaluation)
            if decision is None:
                decision = self._strategic_decision(player, state, evaluation, personality)
        logger.debug("AI %d (%s): %s", player.id, player.ai_difficulty, decision)
        return decision

    def _random_decision(self, player: Player, state: GameState) -> AIDecision:
        if state.phase is Phase.BETTING:
            category = self.rng.choice(BET_CATEGORIES)
            amount = self.rng.randint(0, min(self.base_bet(player), player.chips))
            return AIDecision("bet", bets=_bets_on(category, amount), reason="random")
        return AIDecision("play", card=play_card(self._random_agent, state, player.id), reason="random")

    def _pattern_decision(self, player: Player, state: GameState, evaluation: HandEvaluation) -> AIDecision | None:
        memory = self.memory.get(player.id)
        if state.phase is Phase.BETTING:
            if memory.successful_bets:
                amount, category = memory.successful_bets[0]
                if amount <= player.chips:
                    return AIDecision("bet", bets=_bets_on(category, amount), reason="pattern")
            return None
        card = memory.winning_moves[0]
        if card in evaluation.playable_cards:
            return AIDecision("play", card=card, reason="pattern")
        return None

    def _strategic_decision(
        self,
        player: Player,
        state: GameState,
        evaluation: HandEvaluation,
        personality: Personality,
    ) -> AIDecision:
        good_position = self.has_good_position(player, state)
        bluff = self.should_bluff(player, state)
        confidence = evaluation.confidence * (1.2 if good_position else 0.8) * (0.7 if bluff else 1.0)

        if state.phase is Phase.BETTING:
            amount = math.floor(self.base_bet(player) * confidence * personality.aggression)
            amount = max(0, min(amount, player.chips))
            strengths = category_strengths(player.cards)
            category = max(BET_CATEGORIES, key=lambda c: strengths[c])
            return AIDecision("bet", bets=_bets_on(category, amount))

        card = evaluation.best_play
        if card is None and evaluation.playable_cards:
            card = evaluation.playable_cards[0]
        return AIDecision("play", card=card)

    # -- betting --

    def _section_bet(self, cards_held: int, max_cards: int, base: int, max_bet: int, personality: Personality) -> int:
        card_confidence = cards_held / max_cards
        bluff_factor = personality.aggression if self.rng.random() < personality.bluffing else 0.0
        confidence = (card_confidence + bluff_factor) * personality.consistency
        amount = math.floor(base + max_bet * confidence)
        jitter = 1 + (self.rng.random() - 0.5) * (1 - personality.consistency)
        amount = math.floor(amount * jitter)
        return min(max(0, amount), max_bet)

    def decide_bets(self, player: Player, state: GameState) -> Bets:
        """Per-category bets for the betting phase. The total never exceeds the player's chips."""
        personality = self.personality(player)
        base = self.base_bet(player)
        max_bet = math.floor(player.chips * personality.aggression)
        counts = category_counts(player.cards)

        remaining = player.chips
        amounts: dict[str, int] = {}
        for category in BET_CATEGORIES:
            amount = self._section_bet(counts[category], CATEGORY_MAX_CARDS[category], base, max_bet, personality)
            amount = min(amount, remaining)
            amounts[category] = amount
            remaining -= amount
        bets = Bets(**amounts)
        logger.debug("AI %d bets %s", player.id, amounts)
        return bets

    # -- dead hand --

    def decide_blind_choice(self, player: Player, state: GameState) -> str:
        """The dealer's dead-hand decision: "swap", "auction" or "keep"."""
        personality = self.personality(player)
        strength = blind_hand_strength(player.cards)
        adjusted = strength + self.rng.random() * (1 - personality.consistency)
        if adjusted < 0.3:
            choice = "swap"
        elif adjusted < 0.6:
            choice = "keep" if self.rng.random() < personality.bluffing else "auction"
        else:
            choice = "keep"
        logger.debug("AI dealer %d: strength %.2f -> %s", player.id, adjusted, choice)
        return choice

    def decide_blind_bid(self, player: Player, state: GameState, current_bid: int) -> int:
        """Amount to bid for the dead hand, or 0 to pass."""
        personality = self.personality(player)
        ceiling = math.floor(player.chips * personality.aggression)
        if current_bid >= ceiling:
            return 0
        increment = max(1, math.floor(self.base_bet(player) * (1 + self.rng.random() * personality.aggression)))
        return min(current_bid + increment, ceiling)

    # -- driving a seat --

    def next_action(self, state: GameState):
        """
        The action the AI seat due to act should dispatch, or None when a human
        seat (or nobody) is to act, or the seat to act has no legal card.
        """
        if state.phase is Phase.DEALER_BLIND_CHOICE:
            dealer = state.dealer
            if dealer.is_human:
                return None
            return DealerBlindChoice(choice=self.decide_blind_choice(dealer, state), player_id=dealer.id)

        if state.phase not in (Phase.BLIND_AUCTION, Phase.BETTING, Phase.MICHIGAN, Phase.HEARTS, Phase.POKER):
            return None
        if state.current_player is None:
            return None
        player = state.player(state.current_player)
        if player.is_human:
            return None

        if state.phase is Phase.BLIND_AUCTION:
            current = state.auction.highest_bid if state.auction else 0
            bid = self.decide_blind_bid(player, state, current)
            if bid > current:
                return PlaceDeadHandBid(player_id=player.id, amount=bid)
            return PassDeadHandBid(player_id=player.id)

        if state.phase is Phase.BETTING:
            return PlaceBets(player_id=player.id, bets=self.decide_bets(player, state))

        decision = self.decide(player, state)
        if decision.card is None:
            return None
        return PlayCard(player_id=player.id, card=decision.card)


__all__ = [
    "AIDecision",
    "AIMemory",
    "AIPlayer",
    "HandEvaluation",
    "Personality",
    "PERSONALITIES",
    "BASE_BET_AMOUNTS",
    "PlayerMemory",
    "blind_hand_strength",
    "detect_success_pattern",
    "evaluate_hand",
]
