"""
Display names for seats at ``START_GAME``.

The engine only needs ``human()`` and ``ai()`` returning strings; a front end
can plug in a provider backed by saved settings or a larger name list.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol

FIRST_NAMES = (
    "Ada", "Ben", "Cora", "Dale", "Edith", "Frank", "Grace", "Hank", "Iris",
    "Jack", "Kate", "Leo", "Mabel", "Ned", "Olive", "Pete", "Ruth", "Sam",
    "Tess", "Walt",
)
SURNAMES = (
    "Adams", "Baker", "Clark", "Davis", "Evans", "Foster", "Green", "Harris",
    "Irwin", "Jones", "King", "Lewis", "McKay", "Nolan", "O'Brien", "Parker",
    "Reed", "Stone", "Turner", "Walsh",
)


class NameProvider(Protocol):
    def human(self) -> str:
        """Name for the human seat."""

    def ai(self) -> str:
        """Name for an AI seat."""


@dataclass
class RandomNames:
    """Random "First Last" names for AI seats; a fixed name for the human."""

    human_name: str = "Human Player"
    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def human(self) -> str:
        return self.human_name

    def ai(self) -> str:
        return f"{self._rng.choice(FIRST_NAMES)} {self._rng.choice(SURNAMES)}"


__all__ = ["NameProvider", "RandomNames"]
