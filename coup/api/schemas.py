"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
Game states are always rendered for a viewer: other players'
influences and the contents of the deck are never sent.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or has expired
- VERSION_CONFLICT: Move was made against an out-of-date state
- VALIDATION_ERROR: Request body is malformed
- Any engine rule code (NOT_YOUR_TURN, INVALID_TARGET, ...) for a rejected move
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.action import MoveType
from ..engine_core.rules import ActionKind, Character, MIN_PLAYERS, MAX_PLAYERS


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes owned by the API layer."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerView(BaseModel):
    """A player as seen by the viewer."""
    player_id: str
    name: str
    coins: int
    influence_count: int
    influences: Optional[list[Character]] = Field(
        None, description="Only present for the viewer's own seat"
    )
    revealed: list[Character] = Field(default_factory=list)
    alive: bool = True
    is_bot: bool = False
    is_current_turn: bool = False


class PendingView(BaseModel):
    """The action in flight."""
    phase: str
    action_kind: ActionKind
    actor_id: str
    target_id: Optional[str] = None
    claimed_character: Optional[Character] = None
    waiting_for: list[str] = Field(default_factory=list)
    blocker_id: Optional[str] = None
    blocker_character: Optional[Character] = None
    losing_player_id: Optional[str] = None
    exchange_options: Optional[list[Character]] = Field(
        None, description="Only present for the exchanging player"
    )


class LogEntryInfo(BaseModel):
    """One narrated game event."""
    message: str
    type: str
    turn: int


class MoveInfo(BaseModel):
    """A move a player may submit."""
    move_type: MoveType
    player_id: str
    action_kind: Optional[ActionKind] = None
    target_id: Optional[str] = None
    character: Optional[Character] = None
    cards: list[Character] = Field(default_factory=list)
    description: str = ""


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    player_names: list[str] = Field(
        ...,
        min_length=MIN_PLAYERS,
        max_length=MAX_PLAYERS,
        description="Player names in seat order",
    )
    human_players: Optional[list[str]] = Field(
        None, description="Names played by humans; other seats get bots. Omit for all-human."
    )
    seed: Optional[int] = Field(None, description="Seed for a reproducible deal")
    personalities: Optional[list[str]] = Field(
        None, description="Bot personalities, cycled over the bot seats"
    )


class MoveRequest(BaseModel):
    """A move submitted by a participant."""
    move_type: MoveType
    player_id: str
    action_kind: Optional[ActionKind] = None
    target_id: Optional[str] = None
    character: Optional[Character] = None
    cards: list[Character] = Field(default_factory=list)
    expected_version: Optional[int] = Field(
        None, description="Version the client last saw; stale moves are rejected"
    )


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Full game state rendered for one viewer."""
    game_id: str
    version: int
    status: GameStatus
    turn_number: int
    current_player_id: Optional[str] = None
    players: list[PlayerView] = Field(default_factory=list)
    pending: Optional[PendingView] = None
    waiting_for: list[str] = Field(default_factory=list)
    deck_size: int = 0
    winner: Optional[str] = None
    log: list[LogEntryInfo] = Field(default_factory=list)


class MoveResponse(BaseModel):
    """Result of submitting a move (and any bot moves that followed)."""
    success: bool
    version: int
    events: list[str] = Field(default_factory=list)
    bot_actions: list[str] = Field(default_factory=list)
    state: GameStateResponse


class LegalMovesResponse(BaseModel):
    game_id: str
    player_id: str
    version: int
    moves: list[MoveInfo] = Field(default_factory=list)


class GameSummary(BaseModel):
    game_id: str
    status: GameStatus
    players: list[str] = Field(default_factory=list)
    turn_number: int = 1
    winner: Optional[str] = None


class GameListResponse(BaseModel):
    games: list[GameSummary] = Field(default_factory=list)
    count: int = 0


class EndGameResponse(BaseModel):
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_games: int = 0


class ErrorResponse(BaseModel):
    """Error body for every failed request."""
    error: str
    error_code: str
    details: Optional[dict[str, Any]] = None
