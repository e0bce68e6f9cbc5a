"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a client starts a game
- Holds the current game state and a version counter
- Serializes moves and runs bot seats
- Dropped when the game ends or goes idle
"""

from .manager import SessionManager, GameSession, SessionState, VersionConflict
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "GameSession",
    "SessionState",
    "VersionConflict",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
