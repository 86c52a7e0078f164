"""
Phase state machine: ``dispatch(state, action) -> state'``.

player-selection -> dealerBlindChoice -> (blindAuction) -> betting
-> michigan -> hearts -> poker -> gameOver, and START_NEW_ROUND back to
betting with the next dealer.

Every transition is all-or-nothing. Handlers raise ``GameError`` on a rule
violation; ``dispatch`` then returns the previous snapshot with only the
error feedback attached. Unknown actions return the state unchanged.
Also holds the round/match drivers used to run all-AI tables.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING, Callable

from .actions import (
    ACTION_CLASSES,
    BLIND_CHOICES,
    ActionType,
    CollectPot,
    PlayCard,
    PlaceBets,
    StartGame,
    StartNewRound,
)
from .betting import place_bets, collect_pot, round_payouts
from .bidding import pass_bid, place_bid, start_auction, swap_dead_hand
from .config import DIFFICULTIES
from .deal import deal, first_to_act, next_dealer
from .deck import Card
from .errors import (
    CARD_NOT_IN_HAND,
    ILLEGAL_CARD,
    INVALID_ACTION,
    NOT_YOUR_TURN,
    WRONG_PHASE,
    GameError,
    raise_error,
)
from .names import NameProvider, RandomNames
from .play import evaluate_play, is_playable, trick_winner
from .state import (
    EIGHT_NINE_TEN,
    KING,
    PLAY_PHASES,
    POT,
    Bets,
    Feedback,
    GameState,
    Phase,
    Player,
    initial_pot,
    next_phase,
)

if TYPE_CHECKING:  # pragma: no cover
    from .ai import AIPlayer

logger = logging.getLogger(__name__)

# Where played cards come to rest, per phase.
_DISCARD_SECTION = {Phase.MICHIGAN: POT, Phase.HEARTS: KING, Phase.POKER: EIGHT_NINE_TEN}


# ---- Guards ----

def _require_started(state: GameState) -> None:
    if not state.players or state.phase is Phase.PLAYER_SELECTION:
        raise_error(WRONG_PHASE, "The game has not started")


def _require_phase(state: GameState, *phases: Phase) -> None:
    if state.phase not in phases:
        allowed = ", ".join(p.value for p in phases)
        raise_error(WRONG_PHASE, f"Action not allowed during {state.phase.value} (needs {allowed})")


def _require_turn(state: GameState, player_id: int) -> None:
    state.player(player_id)
    if player_id != state.current_player:
        raise_error(NOT_YOUR_TURN, f"It is player {state.current_player}'s turn")


# ---- Turn order within play phases ----

def is_eligible(state: GameState, player_id: int) -> bool:
    """Whether ``player_id`` still has a move in the current phase."""
    player = state.players[player_id]
    if state.phase is Phase.BETTING:
        return player.bets is None
    if state.phase is Phase.MICHIGAN:
        return bool(player.cards) and all(p != player_id for p, _ in state.current_trick)
    if state.phase is Phase.HEARTS:
        return any(c.is_heart() for c in player.cards)
    if state.phase is Phase.POKER:
        return bool(player.cards) and player_id not in state.poker_played
    return False


def _seat_from(state: GameState, start: int) -> int | None:
    """First eligible seat at or after ``start``, wrapping."""
    n = state.num_players
    for k in range(n):
        seat = (start + k) % n
        if is_eligible(state, seat):
            return seat
    return None


def _phase_finished(state: GameState) -> bool:
    if state.phase is Phase.MICHIGAN:
        if state.current_trick:
            return False
        if state.tricks_played >= state.config.michigan_tricks:
            return True
    return _seat_from(state, 0) is None


def _enter_phase(state: GameState, phase: Phase) -> GameState:
    """Enter ``phase``, skipping straight through play phases with nothing to do."""
    while True:
        if phase is Phase.GAME_OVER:
            logger.debug("Round %d over", state.round_number)
            return replace(
                state,
                phase=Phase.GAME_OVER,
                current_trick=(),
                feedback=Feedback("Round over", "info"),
            )
        state = replace(
            state,
            phase=phase,
            current_trick=(),
            tricks_played=0 if phase is Phase.MICHIGAN else state.tricks_played,
            poker_played=frozenset(),
        )
        if not _phase_finished(state):
            break
        logger.debug("Skipping %s: nothing to play", phase.value)
        phase = next_phase(phase)

    seat = _seat_from(state, first_to_act(state.dealer_id, state.num_players))
    logger.debug("Entering %s, player %s to act", phase.value, seat)
    return replace(state, current_player=seat)


def _enter_betting(state: GameState) -> GameState:
    return replace(
        state,
        phase=Phase.BETTING,
        current_player=first_to_act(state.dealer_id, state.num_players),
    )


def _discard(state: GameState, label: str, cards: list[Card]) -> GameState:
    section = state.section(label)
    return state.with_section(replace(section, cards=section.cards + tuple(cards)))


# ---- Handlers ----

def _start_game(state: GameState, action: StartGame, rng, names) -> GameState:
    config = state.config
    n = action.num_players
    if not config.validate_player_count(n):
        raise_error(
            INVALID_ACTION,
            f"Player count must be between {config.min_players} and {config.max_players}, got {n}",
        )
    human = action.human_position
    if human is not None and not 0 <= human < n:
        raise_error(INVALID_ACTION, f"Human position {human} out of range")
    if rng is None:
        rng = random.Random()
    if names is None:
        names = RandomNames(seed=rng.randrange(2**32))

    dealer = rng.randrange(n)
    dealt = deal(n, dealer, rng=rng)
    players = tuple(
        Player(
            id=i,
            name=names.human() if i == human else names.ai(),
            is_human=i == human,
            chips=config.starting_chips,
            cards=tuple(dealt.hands[i]),
            ai_difficulty=None if i == human else config.default_difficulty,
            position=i,
        )
        for i in range(n)
    )
    logger.info("Game started: %d players, dealer %d", n, dealer)
    return GameState(
        players=players,
        dealer_id=dealer,
        current_player=first_to_act(dealer, n),
        phase=Phase.DEALER_BLIND_CHOICE,
        dead_hand=tuple(dealt.dead_hand),
        pot=initial_pot(),
        deck=(),
        round_number=1,
        config=config,
        feedback=Feedback(f"{players[dealer].name} deals", "info"),
    )


def _dealer_blind_choice(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.DEALER_BLIND_CHOICE)
    actor = state.dealer_id if action.player_id is None else action.player_id
    if actor != state.dealer_id:
        raise_error(NOT_YOUR_TURN, "Only the dealer decides what happens to the dead hand")
    if action.choice not in BLIND_CHOICES:
        raise_error(INVALID_ACTION, f"Unknown blind choice: {action.choice!r}")
    logger.debug("Dealer %d chooses %s", state.dealer_id, action.choice)
    if action.choice == "swap":
        return _enter_betting(swap_dead_hand(state, state.dealer_id))
    if action.choice == "auction":
        return start_auction(state)
    return _enter_betting(state)


def _take_dead_hand(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.DEALER_BLIND_CHOICE)
    state.player(action.player_id)
    if action.player_id != state.dealer_id:
        raise_error(NOT_YOUR_TURN, "Only the dealer may take the dead hand outright")
    return _enter_betting(swap_dead_hand(state, action.player_id))


def _start_dead_hand_bidding(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.DEALER_BLIND_CHOICE)
    return start_auction(state)


def _place_dead_hand_bid(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.BLIND_AUCTION)
    return place_bid(state, action.player_id, action.amount)


def _pass_dead_hand_bid(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.BLIND_AUCTION)
    return pass_bid(state, action.player_id)


def _place_bets(state: GameState, action: PlaceBets, rng, names) -> GameState:
    _require_phase(state, Phase.BETTING)
    _require_turn(state, action.player_id)
    if state.player(action.player_id).bets is not None:
        raise_error(INVALID_ACTION, "Bets already placed this round")
    new_state = place_bets(state, action.player_id, action.bets)
    seat = _seat_from(new_state, action.player_id + 1)
    if seat is None:
        return _enter_phase(new_state, Phase.MICHIGAN)
    return replace(new_state, current_player=seat)


def _play_card(state: GameState, action: PlayCard, rng, names) -> GameState:
    _require_phase(state, *PLAY_PHASES)
    _require_turn(state, action.player_id)
    player = state.player(action.player_id)
    card = action.card
    if not player.has_card(card):
        raise_error(CARD_NOT_IN_HAND, f"{card} is not in {player.name}'s hand")
    if not is_eligible(state, player.id):
        raise_error(INVALID_ACTION, f"{player.name} has no play left in this phase")
    playable = is_playable(card, player, state)
    if not playable.is_playable:
        raise_error(ILLEGAL_CARD, playable.reason or f"{card} cannot be played now")
    result = evaluate_play(card, player, state)
    if not result.is_valid:
        raise_error(ILLEGAL_CARD, result.message or f"{card} cannot be played now")

    phase = state.phase
    points = dict(player.category_points)
    points[phase.value] = points.get(phase.value, 0) + result.points
    player = replace(
        player,
        cards=tuple(c for c in player.cards if c != card),
        score=player.score + result.points,
        category_points=points,
    )
    state = state.with_player(player)
    feedback = Feedback(
        result.message or f"{player.name} plays {card}",
        "success" if result.points else "info",
    )
    logger.debug("Player %d plays %s in %s for %d", player.id, card, phase.value, result.points)

    if phase is Phase.MICHIGAN:
        trick = state.current_trick + ((player.id, card),)
        state = replace(state, current_trick=trick, feedback=feedback)
        if _seat_from(state, player.id + 1) is not None:
            return replace(state, current_player=_seat_from(state, player.id + 1))
        return _finish_trick(state)

    if phase is Phase.POKER:
        state = replace(state, poker_played=state.poker_played | {player.id})
    state = replace(_discard(state, _DISCARD_SECTION[phase], [card]), feedback=feedback)
    if _phase_finished(state):
        return _enter_phase(state, next_phase(phase))
    return replace(state, current_player=_seat_from(state, player.id + 1))


def _finish_trick(state: GameState) -> GameState:
    trick = state.current_trick
    winner_id = trick_winner(trick)
    winner = state.player(winner_id)
    state = state.with_player(replace(winner, tricks_won=winner.tricks_won + 1))
    state = _discard(state, _DISCARD_SECTION[Phase.MICHIGAN], [c for _, c in trick])
    state = replace(
        state,
        current_trick=(),
        tricks_played=state.tricks_played + 1,
        feedback=Feedback(f"{winner.name} takes the trick", "success"),
    )
    logger.debug("Trick %d won by player %d", state.tricks_played, winner_id)
    if _phase_finished(state):
        return _enter_phase(state, Phase.HEARTS)
    return replace(state, current_player=_seat_from(state, winner_id))


def _next_phase(state, action, rng, names) -> GameState:
    _require_phase(state, Phase.BETTING, *PLAY_PHASES)
    if state.phase is Phase.BETTING:
        players = tuple(p if p.bets is not None else replace(p, bets=Bets()) for p in state.players)
        return _enter_phase(replace(state, players=players), Phase.MICHIGAN)
    if state.current_trick:
        state = _discard(state, _DISCARD_SECTION[state.phase], [c for _, c in state.current_trick])
    return _enter_phase(state, next_phase(state.phase))


def _next_player(state, action, rng, names) -> GameState:
    _require_started(state)
    seat = (state.current_player + 1) % state.num_players
    if state.phase in PLAY_PHASES:
        # Only seats that still have a legal card can take the turn.
        eligible = _seat_from(state, seat)
        if eligible is not None:
            seat = eligible
    return replace(state, current_player=seat)


def _collect_pot(state: GameState, action: CollectPot, rng, names) -> GameState:
    _require_started(state)
    return collect_pot(state, action.player_id, action.section)


def _rotate_dealer(state, action, rng, names) -> GameState:
    _require_started(state)
    dealer = next_dealer(state.dealer_id, state.num_players)
    return replace(state, dealer_id=dealer, current_player=dealer)


def _start_new_round(state: GameState, action: StartNewRound, rng, names) -> GameState:
    _require_phase(state, *PLAY_PHASES, Phase.GAME_OVER)
    n = state.num_players
    dealer = next_dealer(state.dealer_id, n)
    dealt = deal(n, dealer, rng=rng)
    players = tuple(
        replace(
            p,
            cards=tuple(dealt.hands[p.id]),
            score=0,
            tricks_won=0,
            current_bid=None,
            bets=None,
            category_points={},
        )
        for p in state.players
    )
    logger.info("Round %d: dealer %d", state.round_number + 1, dealer)
    return replace(
        state,
        players=players,
        dealer_id=dealer,
        current_player=first_to_act(dealer, n),
        phase=Phase.BETTING,
        dead_hand=tuple(dealt.dead_hand),
        # Chips left on the table carry over to the new round.
        pot=tuple(replace(s, cards=()) for s in state.pot),
        deck=(),
        current_trick=(),
        tricks_played=0,
        poker_played=frozenset(),
        auction=None,
        round_number=state.round_number + 1,
        feedback=Feedback(f"New round: {players[dealer].name} deals", "info"),
    )


def _reorder_cards(state, action, rng, names) -> GameState:
    _require_started(state)
    player = state.player(action.player_id)
    if Counter(action.cards) != Counter(player.cards):
        raise_error(INVALID_ACTION, "Reordered cards must be exactly the cards in hand")
    return state.with_player(replace(player, cards=tuple(action.cards)))


def _change_player_name(state, action, rng, names) -> GameState:
    name = action.name.strip()
    if not name:
        raise_error(INVALID_ACTION, "Name cannot be empty")
    if action.player_id is not None:
        return state.with_player(replace(state.player(action.player_id), name=name))
    players = tuple(replace(p, name=name) if p.is_human else p for p in state.players)
    return replace(state, players=players)


def _set_ai_difficulty(state, action, rng, names) -> GameState:
    player = state.player(action.player_id)
    if player.is_human:
        raise_error(INVALID_ACTION, "Human players have no AI difficulty")
    if action.difficulty not in DIFFICULTIES:
        raise_error(INVALID_ACTION, f"Unknown difficulty: {action.difficulty!r}")
    return state.with_player(replace(player, ai_difficulty=action.difficulty))


_HANDLERS: dict[ActionType, Callable] = {
    ActionType.START_GAME: _start_game,
    ActionType.PLACE_BETS: _place_bets,
    ActionType.PLAY_CARD: _play_card,
    ActionType.NEXT_PHASE: _next_phase,
    ActionType.NEXT_PLAYER: _next_player,
    ActionType.COLLECT_POT: _collect_pot,
    ActionType.DEALER_BLIND_CHOICE: _dealer_blind_choice,
    ActionType.BID_FOR_BLIND: _place_dead_hand_bid,
    ActionType.TAKE_DEAD_HAND: _take_dead_hand,
    ActionType.START_DEAD_HAND_BIDDING: _start_dead_hand_bidding,
    ActionType.PLACE_DEAD_HAND_BID: _place_dead_hand_bid,
    ActionType.PASS_DEAD_HAND_BID: _pass_dead_hand_bid,
    ActionType.ROTATE_DEALER: _rotate_dealer,
    ActionType.START_NEW_ROUND: _start_new_round,
    ActionType.REORDER_CARDS: _reorder_cards,
    ActionType.CHANGE_PLAYER_NAME: _change_player_name,
    ActionType.SET_AI_DIFFICULTY: _set_ai_difficulty,
}


def dispatch(
    state: GameState,
    action,
    rng: random.Random | None = None,
    names: NameProvider | None = None,
) -> GameState:
    """
    Apply ``action`` to ``state`` and return the next snapshot.

    ``rng`` drives shuffling and dealer selection (START_GAME, START_NEW_ROUND);
    ``names`` labels seats at START_GAME. A rejected action returns ``state``
    with an error ``feedback``; anything that is not a known action returns
    ``state`` itself.
    """
    cls = ACTION_CLASSES.get(getattr(action, "type", None))
    if cls is None or not isinstance(action, cls):
        return state
    try:
        return _HANDLERS[cls.type](state, action, rng, names)
    except GameError as exc:
        logger.warning("Rejected %s: %s", cls.type.value, exc.message)
        return replace(state, feedback=Feedback(exc.message, "error"))


def was_rejected(before: GameState, after: GameState) -> bool:
    """True if ``after`` is ``before`` plus nothing but an error message."""
    return (
        after.feedback is not None
        and after.feedback.kind == "error"
        and replace(after, feedback=before.feedback) == before
    )


def cards_in_play(state: GameState) -> list[Card]:
    """Every card the state accounts for: hands, dead hand, deck, trick, and discards."""
    cards: list[Card] = []
    for p in state.players:
        cards.extend(p.cards)
    cards.extend(state.dead_hand)
    cards.extend(state.deck)
    cards.extend(c for _, c in state.current_trick)
    for s in state.pot:
        cards.extend(s.cards)
    return cards


# ---- Drivers for all-AI tables ----

def settle_round(state: GameState) -> GameState:
    """Pay each betting category's winner at the end of a round."""
    for player_id, label in round_payouts(state):
        state = dispatch(state, CollectPot(player_id=player_id, section=label))
    return state


def simulate_round(
    state: GameState,
    ai: "AIPlayer",
    max_steps: int = 10_000,
) -> GameState:
    """
    Let ``ai`` act for every seat until the round is over, then settle it.

    Stops early (without settling) when a human seat is to act or the AI
    has nothing legal to do. Each AI play
    and winning bet is recorded in ``ai.memory``.
    """
    for _ in range(max_steps):
        if state.phase is Phase.GAME_OVER:
            break
        action = ai.next_action(state)
        if action is None:
            return state
        new_state = dispatch(state, action)
        if was_rejected(state, new_state):
            raise RuntimeError(f"AI action {action} was rejected: {new_state.feedback.message}")
        if isinstance(action, PlayCard):
            before = state.player(action.player_id).score
            after = new_state.player(action.player_id).score
            ai.memory.record_play(action.player_id, action.card, after > before)
        state = new_state
    else:
        raise RuntimeError(f"Round did not finish within {max_steps} steps")

    won: set[tuple[int, str]] = set()
    for player_id, label in round_payouts(state):
        category = state.section(label).category
        player = state.player(player_id)
        if player.is_human or player.bets is None or (player_id, category) in won:
            continue
        won.add((player_id, category))
        amount = player.bets.as_dict().get(category, 0)
        if amount:
            ai.memory.record_bet(player_id, amount, category, True)
    return settle_round(state)


def run_match(
    num_players: int,
    rounds: int,
    ai: "AIPlayer",
    rng: random.Random | None = None,
    state: GameState | None = None,
) -> list[GameState]:
    """
    Play ``rounds`` all-AI rounds from a fresh START_GAME.
    Returns the settled end-of-round state of every round.
    """
    if rng is None:
        rng = random.Random()
    state = dispatch(state or GameState(), StartGame(num_players=num_players, human_position=None), rng=rng)
    if state.phase is not Phase.DEALER_BLIND_CHOICE:
        raise ValueError(state.feedback.message if state.feedback else "Could not start game")
    results: list[GameState] = []
    for r in range(rounds):
        if r > 0:
            state = dispatch(state, StartNewRound(), rng=rng)
        state = simulate_round(state, ai)
        results.append(state)
    return results
