"""
Game Loop - Drives bot seats between human moves.

The loop:
1. A human submits a move through the session
2. The loop asks every bot the game is waiting on for a move
3. It stops as soon as only humans can act, or the game ends
4. The caller shows the narrated events and waits for the next move
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action_generator import legal_moves, players_to_act

if TYPE_CHECKING:
    from .manager import GameSession

logger = logging.getLogger(__name__)

# Upper bound on bot moves per call
MAX_BOT_STEPS = 500


class LoopState(Enum):
    """State of the game loop."""
    RUNNING_BOTS = "running_bots"
    WAITING_HUMAN = "waiting_human"
    GAME_OVER = "game_over"
    STALLED = "stalled"


@dataclass
class TurnResult:
    """
    Result of running bot seats.

    Contains the moves the bots made, the narrated events they produced
    and who the game is waiting on now.
    """
    success: bool
    loop_state: LoopState

    bot_actions: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)

    # Humans the game is waiting on
    waiting_for: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)

    winner: str | None = None


class GameLoop:
    """
    The bot driver for a session.

    Usage:
        loop = GameLoop(session)

        session.submit_move(human_move, expected_version=v)
        result = loop.run_bots()

        show(result.events)
    """

    def __init__(self, session: GameSession):
        self.session = session
        self.state = LoopState.WAITING_HUMAN

    def run_bots(self, max_steps: int = MAX_BOT_STEPS) -> TurnResult:
        """
        Play bot seats until a human must act or the game ends.

        When several players are waiting, bots answer first in turn
        order; humans in the same waiting set keep their chance to
        respond until the bots are done.
        """
        self.state = LoopState.RUNNING_BOTS
        bot_actions: list[str] = []
        events: list[str] = []

        for _ in range(max_steps):
            game_state = self.session.game_state
            if game_state.is_over:
                self.state = LoopState.GAME_OVER
                return TurnResult(
                    success=True,
                    loop_state=self.state,
                    bot_actions=bot_actions,
                    events=events,
                    winner=game_state.winner,
                )

            waiting = players_to_act(game_state)
            bot_id = next((pid for pid in waiting if self.session.is_bot(pid)), None)
            if bot_id is None:
                self.state = LoopState.WAITING_HUMAN
                return TurnResult(
                    success=True,
                    loop_state=self.state,
                    bot_actions=bot_actions,
                    events=events,
                    waiting_for=list(waiting),
                )

            available = legal_moves(game_state, bot_id)
            if not available:
                return self._stalled(bot_actions, events, f"No legal moves for bot {bot_id}")

            decision = self.session.bots[bot_id].select_move(game_state, bot_id, available)
            result = self.session.submit_move(decision.move)
            if not result.success:
                # Moves come from legal_moves; a rejection is an engine defect
                logger.error(
                    "Session %s: bot move %s rejected: %s",
                    self.session.session_id, decision.move.describe(), result.error,
                )
                return self._stalled(bot_actions, events, result.error or "Bot move rejected")

            bot_actions.append(decision.move.describe())
            events.extend(result.events)

        return self._stalled(bot_actions, events, f"Bots did not finish within {max_steps} moves")

    def _stalled(self, bot_actions: list[str], events: list[str], error: str) -> TurnResult:
        self.state = LoopState.STALLED
        return TurnResult(
            success=False,
            loop_state=self.state,
            bot_actions=bot_actions,
            events=events,
            errors=[error],
        )
