"""
Moves - Declared actions, submitted moves, and results.

Three layers:
1. Action: the turn action a player declares (income, steal, ...)
2. Move: anything a participant submits (start an action, challenge,
   block, pass, choose a card to lose, choose exchange cards)
3. MoveResult: what the reducer returns

All state changes flow through moves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from .rules import ActionKind, Character, claimed_character

if TYPE_CHECKING:
    from .state import GameState


@dataclass(frozen=True)
class Action:
    """
    A declared turn action.

    The claimed character is derived from the kind; a player cannot
    choose what their action claims.
    """
    kind: ActionKind
    actor_id: str
    target_id: str | None = None

    @property
    def claimed_character(self) -> Character | None:
        return claimed_character(self.kind)


class MoveType(str, Enum):
    """Types of moves a participant can submit."""
    START_ACTION = "start_action"
    CHALLENGE = "challenge"
    BLOCK = "block"
    PASS = "pass"
    LOSE_INFLUENCE = "lose_influence"
    EXCHANGE = "exchange"


@dataclass(frozen=True)
class Move:
    """
    A complete move to be applied to the game state.

    Only the fields relevant to the move type are set; the reducer
    validates the rest.
    """
    move_type: MoveType
    player_id: str
    action_kind: ActionKind | None = None
    target_id: str | None = None
    character: Character | None = None
    cards: tuple[Character, ...] = ()

    @classmethod
    def start(cls, player_id: str, kind: ActionKind, target_id: str | None = None) -> Move:
        """Factory for declaring a turn action."""
        return cls(
            move_type=MoveType.START_ACTION,
            player_id=player_id,
            action_kind=kind,
            target_id=target_id,
        )

    @classmethod
    def challenge(cls, player_id: str) -> Move:
        return cls(move_type=MoveType.CHALLENGE, player_id=player_id)

    @classmethod
    def block(cls, player_id: str, character: Character) -> Move:
        return cls(move_type=MoveType.BLOCK, player_id=player_id, character=character)

    @classmethod
    def pass_(cls, player_id: str) -> Move:
        return cls(move_type=MoveType.PASS, player_id=player_id)

    @classmethod
    def lose_influence(cls, player_id: str, card: Character) -> Move:
        """Factory for choosing which influence to reveal."""
        return cls(move_type=MoveType.LOSE_INFLUENCE, player_id=player_id, character=card)

    @classmethod
    def exchange(cls, player_id: str, keep: list[Character] | tuple[Character, ...]) -> Move:
        """Factory for choosing which cards to keep after an exchange."""
        return cls(move_type=MoveType.EXCHANGE, player_id=player_id, cards=tuple(keep))

    def to_action(self) -> Action:
        """The declared Action carried by a START_ACTION move."""
        return Action(kind=self.action_kind, actor_id=self.player_id, target_id=self.target_id)

    def describe(self) -> str:
        """Short human-readable form, for logs and bot explanations."""
        if self.move_type == MoveType.START_ACTION:
            kind = self.action_kind.value if self.action_kind else "?"
            target = f" -> {self.target_id}" if self.target_id else ""
            return f"{self.player_id}: {kind}{target}"
        if self.move_type in (MoveType.BLOCK, MoveType.LOSE_INFLUENCE):
            card = self.character.value if self.character else "?"
            return f"{self.player_id}: {self.move_type.value} ({card})"
        if self.move_type == MoveType.EXCHANGE:
            kept = ", ".join(c.value for c in self.cards)
            return f"{self.player_id}: keep [{kept}]"
        return f"{self.player_id}: {self.move_type.value}"


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move was accepted
    - New state (if accepted)
    - Error message and code (if rejected)
    - Narrated events produced by the move
    """
    success: bool
    new_state: GameState | None = None
    error: str | None = None
    error_code: str | None = None
    events: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, events: list[str] | None = None) -> MoveResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])
