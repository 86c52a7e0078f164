"""
Chip accounting: category bets into pot sections, and collecting sections.

Chips only ever move between players and pot sections, so
``sum(player.chips) + sum(section.chips)`` is constant once the game has
started. A bet is credited whole to its category's canonical section
(michigan -> POT, hearts -> King, poker -> 8-9-10).
"""
from __future__ import annotations

import logging
from dataclasses import replace

from .errors import INSUFFICIENT_CHIPS, INVALID_AMOUNT, raise_error
from .state import (
    BET_CATEGORIES,
    CANONICAL_SECTION,
    CATEGORY_SECTIONS,
    Bets,
    GameState,
)

logger = logging.getLogger(__name__)


def total_chips(state: GameState) -> int:
    """Chips held by players plus chips sitting in pot sections."""
    return sum(p.chips for p in state.players) + sum(s.chips for s in state.pot)


def assert_chips_conserved(before: GameState, after: GameState) -> None:
    b, a = total_chips(before), total_chips(after)
    if b != a:
        raise AssertionError(f"Chip total changed from {b} to {a}")


def validate_bets(chips: int, bets: Bets) -> None:
    """Reject negative amounts and any total above ``chips``. Never clamps."""
    for category, amount in bets.as_dict().items():
        if amount < 0:
            raise_error(INVALID_AMOUNT, f"Bet on {category} cannot be negative ({amount})")
    if bets.total > chips:
        raise_error(
            INSUFFICIENT_CHIPS,
            f"Total bet {bets.total} exceeds available chips {chips}",
        )


def credit_section(state: GameState, label: str, amount: int) -> GameState:
    section = state.section(label)
    if section is None:
        raise KeyError(label)
    return state.with_section(replace(section, chips=section.chips + amount))


def place_bets(state: GameState, player_id: int, bets: Bets) -> GameState:
    """
    Debit ``player_id`` by the bet total and credit each category's canonical
    section. Raises GameError before touching anything if the bet is invalid.
    """
    player = state.player(player_id)
    validate_bets(player.chips, bets)

    new_state = state.with_player(replace(player, chips=player.chips - bets.total, bets=bets))
    for category, amount in bets.as_dict().items():
        if amount:
            new_state = credit_section(new_state, CANONICAL_SECTION[category], amount)
    logger.debug("Player %d bets %s", player_id, bets.as_dict())
    return new_state


def collect_pot(state: GameState, player_id: int, label: str) -> GameState:
    """Move every chip in section ``label`` to the player. Unknown labels change nothing."""
    section = state.section(label)
    if section is None:
        return state
    player = state.player(player_id)
    new_state = state.with_player(replace(player, chips=player.chips + section.chips))
    logger.debug("Player %d collects %d chips from %s", player_id, section.chips, label)
    return new_state.with_section(replace(section, chips=0))


def category_winner(state: GameState, category: str) -> int | None:
    """Player with strictly the most points in ``category`` this round, if any."""
    scored = [(p.points_in(category), p.id) for p in state.players if p.points_in(category) > 0]
    if not scored:
        return None
    scored.sort(reverse=True)
    if len(scored) > 1 and scored[0][0] == scored[1][0]:
        return None
    return scored[0][1]


def round_payouts(state: GameState) -> list[tuple[int, str]]:
    """
    (player_id, section) pairs to collect at the end of a round.

    The category winner takes every section of the category. Tied or
    unscored categories stay on the table for the next round.
    """
    payouts: list[tuple[int, str]] = []
    for category in BET_CATEGORIES:
        winner = category_winner(state, category)
        if winner is None:
            continue
        for label in CATEGORY_SECTIONS[category]:
            section = state.section(label)
            if section is not None and section.chips > 0:
                payouts.append((winner, label))
    return payouts
