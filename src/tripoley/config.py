"""
Table configuration.

One ``GameConfig`` is fixed at ``START_GAME`` and travels on the game state for
the rest of the session.
"""
from __future__ import annotations

from dataclasses import dataclass

DIFFICULTIES = ("easy", "medium", "hard", "cardShark")


@dataclass(frozen=True)
class GameConfig:
    """Rule knobs for one table."""

    starting_chips: int = 100
    min_players: int = 4
    max_players: int = 9
    # Tricks played in the Michigan phase before moving on to Hearts.
    michigan_tricks: int = 3
    # Bounded AI memory: last K plays / bets / winning moves per player.
    memory_size: int = 10
    default_difficulty: str = "medium"
    # Below this many chips an AI player counts as short-stacked when bluffing.
    low_chip_threshold: int = 20

    def __post_init__(self) -> None:
        if self.starting_chips < 0:
            raise ValueError(f"starting_chips must be >= 0, got {self.starting_chips}")
        if not 1 <= self.min_players <= self.max_players:
            raise ValueError(
                f"Invalid player bounds: min_players={self.min_players}, max_players={self.max_players}"
            )
        # The dead hand takes one position; every seat needs at least one card.
        if self.max_players + 1 > 52:
            raise ValueError(f"max_players too large: {self.max_players}")
        if self.michigan_tricks < 0:
            raise ValueError(f"michigan_tricks must be >= 0, got {self.michigan_tricks}")
        if self.memory_size < 1:
            raise ValueError(f"memory_size must be >= 1, got {self.memory_size}")
        if self.default_difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {self.default_difficulty!r}")

    def validate_player_count(self, num_players: int) -> bool:
        return self.min_players <= num_players <= self.max_players


DEFAULT_CONFIG = GameConfig()
