"""
Engine Core - Deterministic Coup state transitions.

The engine is the runtime that:
1. Creates a GameState (create_game)
2. Lists legal actions and moves
3. Applies moves via the reducer
4. Runs the claim / challenge / block protocol
5. Resolves influence loss, turn order and the winner
"""

from .rules import Character, ActionKind
from .state import GameState, GamePhase, Player, PendingAction, PendingPhase, LogEntry, LogType
from .action import Action, Move, MoveType, MoveResult
from .errors import ErrorCode, RuleViolation
from .setup import create_game
from .reducer import Reducer, apply_move
from .action_generator import legal_actions, legal_targets, legal_moves, players_to_act
from .influence import lose_influence
from .turns import next_turn, check_winner

__all__ = [
    "Character",
    "ActionKind",
    "GameState",
    "GamePhase",
    "Player",
    "PendingAction",
    "PendingPhase",
    "LogEntry",
    "LogType",
    "Action",
    "Move",
    "MoveType",
    "MoveResult",
    "ErrorCode",
    "RuleViolation",
    "create_game",
    "Reducer",
    "apply_move",
    "legal_actions",
    "legal_targets",
    "legal_moves",
    "players_to_act",
    "lose_influence",
    "next_turn",
    "check_winner",
]
