"""Tripoley rules engine: pure state transitions, chip accounting and AI players."""

__version__ = "0.1.0"

from .deck import Card, Suit, make_deck_52, parse_card, shuffled_deck
from .deal import Deal, deal, first_to_act, hand_sizes, next_dealer
from .errors import AIConfigurationError, GameError
from .config import DEFAULT_CONFIG, DIFFICULTIES, GameConfig
from .state import Bets, GameState, Phase, Player, PotSection, new_game_state
from .actions import ActionType, action_from_dict
from .play import evaluate_play, is_playable, legal_plays, trick_winner
from .scoring import best_poker_hand, heart_points, poker_points
from .betting import place_bets, total_chips
from .game import dispatch, run_match, settle_round, simulate_round
from .ai import AIMemory, AIPlayer, PERSONALITIES
