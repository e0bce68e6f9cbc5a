"""
Rule Violations - Typed rejections for illegal moves.

Every rejection the engine can produce is a RuleViolation subclass
with a stable error code. The reducer turns them into failed
MoveResults; callers using the operations directly catch them.

Invariant defects are NOT RuleViolations: those propagate as
ordinary exceptions.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Stable machine-readable rejection codes."""
    INVALID_PLAYER_COUNT = "INVALID_PLAYER_COUNT"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ACTION_ALREADY_PENDING = "ACTION_ALREADY_PENDING"
    INSUFFICIENT_COINS = "INSUFFICIENT_COINS"
    MUST_COUP_AT_TEN_COINS = "MUST_COUP_AT_TEN_COINS"
    INVALID_TARGET = "INVALID_TARGET"
    NO_PENDING_ACTION = "NO_PENDING_ACTION"
    NOT_WAITING_FOR_THIS_PLAYER = "NOT_WAITING_FOR_THIS_PLAYER"
    CANNOT_CHALLENGE_IN_THIS_PHASE = "CANNOT_CHALLENGE_IN_THIS_PHASE"
    CANNOT_BLOCK_THIS_ACTION = "CANNOT_BLOCK_THIS_ACTION"
    CARD_NOT_HELD = "CARD_NOT_HELD"
    GAME_OVER = "GAME_OVER"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
    NO_CHOICE_PENDING = "NO_CHOICE_PENDING"
    INVALID_EXCHANGE_SELECTION = "INVALID_EXCHANGE_SELECTION"


class RuleViolation(Exception):
    """Base class for every rejected move."""
    code: ErrorCode

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidPlayerCount(RuleViolation):
    code = ErrorCode.INVALID_PLAYER_COUNT


class NotYourTurn(RuleViolation):
    code = ErrorCode.NOT_YOUR_TURN


class ActionAlreadyPending(RuleViolation):
    code = ErrorCode.ACTION_ALREADY_PENDING


class InsufficientCoins(RuleViolation):
    code = ErrorCode.INSUFFICIENT_COINS


class MustEliminateAtTenCoins(RuleViolation):
    code = ErrorCode.MUST_COUP_AT_TEN_COINS


class InvalidTarget(RuleViolation):
    code = ErrorCode.INVALID_TARGET


class NoPendingAction(RuleViolation):
    code = ErrorCode.NO_PENDING_ACTION


class NotWaitingForThisPlayer(RuleViolation):
    code = ErrorCode.NOT_WAITING_FOR_THIS_PLAYER


class CannotChallengeInThisPhase(RuleViolation):
    code = ErrorCode.CANNOT_CHALLENGE_IN_THIS_PHASE


class CannotBlockThisAction(RuleViolation):
    code = ErrorCode.CANNOT_BLOCK_THIS_ACTION


class CardNotHeld(RuleViolation):
    code = ErrorCode.CARD_NOT_HELD


class GameOver(RuleViolation):
    code = ErrorCode.GAME_OVER


class UnknownPlayer(RuleViolation):
    code = ErrorCode.UNKNOWN_PLAYER


class PlayerEliminated(RuleViolation):
    code = ErrorCode.PLAYER_ELIMINATED


class NoChoicePending(RuleViolation):
    code = ErrorCode.NO_CHOICE_PENDING


class InvalidExchangeSelection(RuleViolation):
    code = ErrorCode.INVALID_EXCHANGE_SELECTION
