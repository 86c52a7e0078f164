"""
Actions accepted by ``tripoley.game.dispatch``.

Each action is a frozen dataclass tagged with an ``ActionType``. Presentation
layers that work with plain dicts can use ``action_from_dict``; a dict whose
type the engine does not know yields ``None``, which dispatch treats as a
no-op.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar

from .deck import Card, parse_card
from .state import Bets


class ActionType(str, Enum):
    START_GAME = "START_GAME"
    PLACE_BETS = "PLACE_BETS"
    PLAY_CARD = "PLAY_CARD"
    NEXT_PHASE = "NEXT_PHASE"
    NEXT_PLAYER = "NEXT_PLAYER"
    COLLECT_POT = "COLLECT_POT"
    DEALER_BLIND_CHOICE = "DEALER_BLIND_CHOICE"
    BID_FOR_BLIND = "BID_FOR_BLIND"
    TAKE_DEAD_HAND = "TAKE_DEAD_HAND"
    START_DEAD_HAND_BIDDING = "START_DEAD_HAND_BIDDING"
    PLACE_DEAD_HAND_BID = "PLACE_DEAD_HAND_BID"
    PASS_DEAD_HAND_BID = "PASS_DEAD_HAND_BID"
    ROTATE_DEALER = "ROTATE_DEALER"
    START_NEW_ROUND = "START_NEW_ROUND"
    REORDER_CARDS = "REORDER_CARDS"
    CHANGE_PLAYER_NAME = "CHANGE_PLAYER_NAME"
    SET_AI_DIFFICULTY = "SET_AI_DIFFICULTY"


BLIND_CHOICES = ("swap", "auction", "keep")


@dataclass(frozen=True)
class StartGame:
    type: ClassVar[ActionType] = ActionType.START_GAME
    num_players: int
    # Seat of the human player; None seats AI players only.
    human_position: int | None = 0


@dataclass(frozen=True)
class PlaceBets:
    type: ClassVar[ActionType] = ActionType.PLACE_BETS
    player_id: int
    bets: Bets


@dataclass(frozen=True)
class PlayCard:
    type: ClassVar[ActionType] = ActionType.PLAY_CARD
    player_id: int
    card: Card


@dataclass(frozen=True)
class NextPhase:
    type: ClassVar[ActionType] = ActionType.NEXT_PHASE


@dataclass(frozen=True)
class NextPlayer:
    type: ClassVar[ActionType] = ActionType.NEXT_PLAYER


@dataclass(frozen=True)
class CollectPot:
    type: ClassVar[ActionType] = ActionType.COLLECT_POT
    player_id: int
    section: str


@dataclass(frozen=True)
class DealerBlindChoice:
    type: ClassVar[ActionType] = ActionType.DEALER_BLIND_CHOICE
    choice: str
    # Defaults to the dealer; anyone else is rejected.
    player_id: int | None = None


@dataclass(frozen=True)
class BidForBlind:
    type: ClassVar[ActionType] = ActionType.BID_FOR_BLIND
    player_id: int
    amount: int


@dataclass(frozen=True)
class TakeDeadHand:
    type: ClassVar[ActionType] = ActionType.TAKE_DEAD_HAND
    player_id: int


@dataclass(frozen=True)
class StartDeadHandBidding:
    type: ClassVar[ActionType] = ActionType.START_DEAD_HAND_BIDDING


@dataclass(frozen=True)
class PlaceDeadHandBid:
    type: ClassVar[ActionType] = ActionType.PLACE_DEAD_HAND_BID
    player_id: int
    amount: int


@dataclass(frozen=True)
class PassDeadHandBid:
    type: ClassVar[ActionType] = ActionType.PASS_DEAD_HAND_BID
    player_id: int


@dataclass(frozen=True)
class RotateDealer:
    type: ClassVar[ActionType] = ActionType.ROTATE_DEALER


@dataclass(frozen=True)
class StartNewRound:
    type: ClassVar[ActionType] = ActionType.START_NEW_ROUND


@dataclass(frozen=True)
class ReorderCards:
    type: ClassVar[ActionType] = ActionType.REORDER_CARDS
    player_id: int
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class ChangePlayerName:
    type: ClassVar[ActionType] = ActionType.CHANGE_PLAYER_NAME
    name: str
    # None renames every human seat.
    player_id: int | None = None


@dataclass(frozen=True)
class SetAIDifficulty:
    type: ClassVar[ActionType] = ActionType.SET_AI_DIFFICULTY
    player_id: int
    difficulty: str


ACTION_CLASSES: dict[ActionType, type] = {
    cls.type: cls
    for cls in (
        StartGame, PlaceBets, PlayCard, NextPhase, NextPlayer, CollectPot,
        DealerBlindChoice, BidForBlind, TakeDeadHand, StartDeadHandBidding,
        PlaceDeadHandBid, PassDeadHandBid, RotateDealer, StartNewRound,
        ReorderCards, ChangePlayerName, SetAIDifficulty,
    )
}

# camelCase keys used by JavaScript front ends.
_KEY_ALIASES = {
    "playerId": "player_id",
    "humanPosition": "human_position",
    "players": "num_players",
    "potSection": "section",
}


def _card(value: Any) -> Card:
    if isinstance(value, Card):
        return value
    if isinstance(value, str):
        return parse_card(value)
    return Card(suit=value["suit"], rank=value.get("rank", value.get("value")))


def action_from_dict(data: dict[str, Any]):
    """
    Build an action from ``{"type": ..., **payload}``. Unknown types give None.

    Cards may be given as ``"10h"`` or ``{"suit": "hearts", "rank": "10"}``.
    """
    try:
        action_type = ActionType(data.get("type"))
    except ValueError:
        return None
    cls = ACTION_CLASSES[action_type]
    names = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        key = _KEY_ALIASES.get(key, key)
        if key in names:
            kwargs[key] = value
    if "card" in kwargs:
        kwargs["card"] = _card(kwargs["card"])
    if "cards" in kwargs:
        kwargs["cards"] = tuple(_card(c) for c in kwargs["cards"])
    if "bets" in kwargs and not isinstance(kwargs["bets"], Bets):
        kwargs["bets"] = Bets(**{k: int(v) for k, v in kwargs["bets"].items() if k in ("michigan", "hearts", "poker")})
    return cls(**kwargs)
