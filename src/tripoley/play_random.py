"""
Tiny CLI to run all-AI Tripoley matches.

Usage (from project root, after installing in editable mode):
    python -m tripoley.play_random --players 5 --rounds 3
"""
from __future__ import annotations

import argparse
import logging
import random

from .actions import SetAIDifficulty, StartGame, StartNewRound
from .ai import AIMemory, AIPlayer
from .betting import total_chips
from .config import DEFAULT_CONFIG, DIFFICULTIES, GameConfig
from .game import dispatch, run_match, simulate_round
from .state import GameState, new_game_state


def run_ai_match(
    num_players: int,
    rounds: int,
    seed: int,
    difficulty: str | None = None,
    config: GameConfig | None = None,
) -> list[GameState]:
    rng = random.Random(seed)
    ai = AIPlayer(memory=AIMemory(size=(config or DEFAULT_CONFIG).memory_size), rng=random.Random(seed + 1))
    state = new_game_state(config)
    if difficulty is None:
        return run_match(num_players, rounds, ai, rng=rng, state=state)

    state = dispatch(state, StartGame(num_players=num_players, human_position=None), rng=rng)
    for p in state.players:
        state = dispatch(state, SetAIDifficulty(player_id=p.id, difficulty=difficulty))
    results: list[GameState] = []
    for r in range(rounds):
        if r > 0:
            state = dispatch(state, StartNewRound(), rng=rng)
        state = simulate_round(state, ai)
        results.append(state)
    return results


def print_round(state: GameState) -> None:
    pot = sum(s.chips for s in state.pot)
    print(f"Round {state.round_number} (dealer {state.dealer_id}): pot={pot}, table total={total_chips(state)}")
    for p in state.players:
        points = ", ".join(f"{k}={v}" for k, v in sorted(p.category_points.items()))
        print(f"  {p.name:<24} {p.ai_difficulty or 'human':<9} chips={p.chips:<4} {points}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all-AI Tripoley matches.")
    parser.add_argument(
        "--players",
        type=int,
        default=4,
        help="Number of seats (4-9).",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=3,
        help="Number of rounds to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--difficulty",
        choices=DIFFICULTIES,
        default=None,
        help="Difficulty for every seat (defaults to the config default).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the engine.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for state in run_ai_match(args.players, args.rounds, args.seed, difficulty=args.difficulty):
        print_round(state)


if __name__ == "__main__":
    main()
