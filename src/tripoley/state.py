"""
Game state snapshots.

Every type here is a frozen dataclass. Transitions never mutate a snapshot;
they build the next one with ``dataclasses.replace`` so a rejected action can
always hand back the previous state untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .config import DEFAULT_CONFIG, GameConfig
from .deck import Card
from .errors import UNKNOWN_PLAYER, raise_error


class Phase(str, Enum):
    PLAYER_SELECTION = "player-selection"
    DEALER_BLIND_CHOICE = "dealerBlindChoice"
    BLIND_AUCTION = "blindAuction"
    BETTING = "betting"
    MICHIGAN = "michigan"
    HEARTS = "hearts"
    POKER = "poker"
    GAME_OVER = "gameOver"


PLAY_PHASES = (Phase.MICHIGAN, Phase.HEARTS, Phase.POKER)

# Order followed by NEXT_PHASE and by natural phase completion.
_NEXT_PHASE = {
    Phase.BETTING: Phase.MICHIGAN,
    Phase.MICHIGAN: Phase.HEARTS,
    Phase.HEARTS: Phase.POKER,
    Phase.POKER: Phase.GAME_OVER,
}


def next_phase(phase: Phase) -> Phase | None:
    return _NEXT_PHASE.get(phase)


# ---- Pot sections ----

TEN = "Ten"
JACK = "Jack"
QUEEN = "Queen"
KING = "King"
ACE = "Ace"
EIGHT_NINE_TEN = "8-9-10"
KING_QUEEN = "King-Queen"
KITTY = "Kitty"
POT = "POT"

SECTION_LABELS = (TEN, JACK, QUEEN, KING, ACE, EIGHT_NINE_TEN, KING_QUEEN, KITTY, POT)

MICHIGAN = "michigan"
HEARTS = "hearts"
POKER = "poker"
KITTY_CATEGORY = "kitty"

BET_CATEGORIES = (MICHIGAN, HEARTS, POKER)

CATEGORY_SECTIONS: dict[str, tuple[str, ...]] = {
    MICHIGAN: (TEN, JACK, QUEEN, POT),
    HEARTS: (KING, ACE),
    POKER: (EIGHT_NINE_TEN, KING_QUEEN),
    KITTY_CATEGORY: (KITTY,),
}

# A category bet is credited whole to one section, never split.
CANONICAL_SECTION: dict[str, str] = {
    MICHIGAN: POT,
    HEARTS: KING,
    POKER: EIGHT_NINE_TEN,
}

SECTION_CATEGORY: dict[str, str] = {
    label: category for category, labels in CATEGORY_SECTIONS.items() for label in labels
}


@dataclass(frozen=True)
class PotSection:
    label: str
    chips: int = 0
    cards: tuple[Card, ...] = ()

    @property
    def category(self) -> str:
        return SECTION_CATEGORY[self.label]


def initial_pot() -> tuple[PotSection, ...]:
    return tuple(PotSection(label=label) for label in SECTION_LABELS)


# ---- Players ----

@dataclass(frozen=True)
class Bets:
    """One player's wager for the round, per betting category."""

    michigan: int = 0
    hearts: int = 0
    poker: int = 0

    @property
    def total(self) -> int:
        return self.michigan + self.hearts + self.poker

    def as_dict(self) -> dict[str, int]:
        return {MICHIGAN: self.michigan, HEARTS: self.hearts, POKER: self.poker}


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    is_human: bool
    chips: int
    cards: tuple[Card, ...] = ()
    ai_difficulty: str | None = None
    score: int = 0
    tricks_won: int = 0
    position: int = 0
    current_bid: int | None = None
    bets: Bets | None = None
    category_points: dict[str, int] = field(default_factory=dict)

    def has_card(self, card: Card) -> bool:
        return card in self.cards

    def points_in(self, category: str) -> int:
        return self.category_points.get(category, 0)


# ---- Auction / feedback ----

@dataclass(frozen=True)
class AuctionState:
    """Bookkeeping for the dead-hand auction among non-dealer seats."""

    highest_bid: int = 0
    highest_bidder: int | None = None
    passed: frozenset[int] = frozenset()


@dataclass(frozen=True)
class Feedback:
    message: str
    kind: str = "info"  # "success" | "error" | "info"


# ---- Root aggregate ----

@dataclass(frozen=True)
class GameState:
    players: tuple[Player, ...] = ()
    dealer_id: int = 0
    current_player: int = 0
    phase: Phase = Phase.PLAYER_SELECTION
    dead_hand: tuple[Card, ...] = ()
    pot: tuple[PotSection, ...] = field(default_factory=initial_pot)
    deck: tuple[Card, ...] = ()
    # (player_id, card) in play order; the first entry is the lead.
    current_trick: tuple[tuple[int, Card], ...] = ()
    tricks_played: int = 0
    # Seats that already played their one card in the poker phase.
    poker_played: frozenset[int] = frozenset()
    auction: AuctionState | None = None
    feedback: Feedback | None = None
    round_number: int = 0
    config: GameConfig = DEFAULT_CONFIG

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def trick_cards(self) -> list[Card]:
        return [c for _, c in self.current_trick]

    @property
    def dealer(self) -> Player:
        return self.players[self.dealer_id]

    def player(self, player_id: int) -> Player:
        if not 0 <= player_id < len(self.players):
            raise_error(UNKNOWN_PLAYER, f"No player with id {player_id}")
        return self.players[player_id]

    def with_player(self, player: Player) -> "GameState":
        players = list(self.players)
        players[player.id] = player
        return replace(self, players=tuple(players))

    def section(self, label: str) -> PotSection | None:
        for s in self.pot:
            if s.label == label:
                return s
        return None

    def with_section(self, section: PotSection) -> "GameState":
        return replace(
            self,
            pot=tuple(section if s.label == section.label else s for s in self.pot),
        )


def new_game_state(config: GameConfig | None = None) -> GameState:
    """Empty placeholder state shown before ``START_GAME``."""
    return GameState(config=config or DEFAULT_CONFIG)
