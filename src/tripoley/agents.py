"""
The generic card-play policy interface and a uniform random baseline.

``Policy.act(obs, legal_actions_mask) -> action_index`` works on the flat
encoding from ``tripoley.env``; the index is a card index 0..51.
``play_card`` adapts any policy to a live game state.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence

from .deck import Card
from .env import card_from_index, encode_observation, legal_action_mask
from .state import GameState


class Policy(Protocol):
    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Index of a card whose ``legal_actions_mask`` entry is true."""


def play_card(policy: Policy, state: GameState, player_id: int) -> Card:
    """Ask ``policy`` which card ``player_id`` should play now."""
    mask = legal_action_mask(state, player_id)
    return card_from_index(policy.act(encode_observation(state, player_id), mask))


@dataclass
class RandomAgent:
    """
    Picks any playable card with equal probability.

    Share the caller's ``rng`` to keep a whole simulation on one seed.
    """

    seed: int | None = None
    rng: random.Random | None = None

    def __post_init__(self) -> None:
        self._rng = self.rng if self.rng is not None else random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        playable: List[int] = [i for i, ok in enumerate(legal_actions_mask) if ok]
        if not playable:
            raise ValueError("RandomAgent has no playable card to choose from")
        return self._rng.choice(playable)


__all__ = ["Policy", "RandomAgent", "play_card"]
