"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the moves its seat may submit and
returns a decision. The same interface covers every phase: declaring
an action, responding to a claim or block, choosing a card to lose and
choosing exchange cards.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Move


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to submit
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects moves.
    Implementations can range from random play to heuristics.
    """

    @abstractmethod
    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            state: Current game state
            player_id: The seat this policy plays
            legal_moves: Moves that seat may submit right now

        Returns:
            BotDecision with the selected move
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    - Fuzzing the engine through simulation
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_moves),
            evaluated_moves=len(legal_moves),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal move.

    Legal moves list passive options first, so this bot takes income
    and passes on everything.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal_moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )
