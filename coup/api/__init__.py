"""
API Module - HTTP and WebSocket interface.

Exposes the engine to game clients:
1. Start games with any mix of human and bot seats
2. Fetch the state as seen by one player
3. List legal moves and submit moves against a state version
4. Receive state updates over a WebSocket

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    MoveRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    LegalMovesResponse,
    GameListResponse,
    ErrorResponse,
    # Shared
    PlayerView,
    PendingView,
    MoveInfo,
)
from .service import GameService, GameNotFound
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "MoveRequest",
    # Responses
    "GameStateResponse",
    "MoveResponse",
    "LegalMovesResponse",
    "GameListResponse",
    "ErrorResponse",
    # Shared
    "PlayerView",
    "PendingView",
    "MoveInfo",
    # Service
    "GameService",
    "GameNotFound",
    "create_app",
]
