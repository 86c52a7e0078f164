"""Errors raised by the rules engine."""


class GameError(Exception):
    """A rule violation. ``dispatch`` turns these into rejected actions."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class AIConfigurationError(RuntimeError):
    """An AI decision was requested for a player with no difficulty set."""


# Error codes
WRONG_PHASE = "WRONG_PHASE"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
ILLEGAL_CARD = "ILLEGAL_CARD"
INSUFFICIENT_CHIPS = "INSUFFICIENT_CHIPS"
INVALID_AMOUNT = "INVALID_AMOUNT"
INVALID_BID = "INVALID_BID"
INVALID_ACTION = "INVALID_ACTION"


def raise_error(code: str, message: str):
    raise GameError(code, message)
