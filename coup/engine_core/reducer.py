"""
Reducer - Applies moves to game state.

The reducer is the single entry point for state transitions.
All state changes must go through apply_move().

Design principles:
- Pure function: (state, move) -> new_state
- Validates before applying
- Returns MoveResult with success/failure
- Delegates the protocol itself to the resolution module
"""

from __future__ import annotations
import logging
from typing import Callable

from .action import Move, MoveType, MoveResult
from .errors import CannotBlockThisAction, InvalidTarget, NoChoicePending, RuleViolation
from .resolution import (
    block,
    challenge,
    choose_card_to_lose,
    choose_exchange_cards,
    pass_response,
    start_action,
)
from .state import GameState

logger = logging.getLogger(__name__)


class Reducer:
    """
    Reducer applies moves to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, move: Move) -> MoveResult:
        """
        Apply a move to the game state.

        Returns MoveResult with new state or error. On failure the
        caller's state is untouched.
        """
        handler = self._get_handler(move.move_type)
        if not handler:
            return MoveResult.failure(
                f"No handler for move type: {move.move_type}",
                error_code="NO_HANDLER",
            )

        try:
            new_state = handler(state, move)
        except RuleViolation as e:
            logger.debug("Rejected %s in %s: %s", move.describe(), state.game_id, e.message)
            return MoveResult.failure(e.message, error_code=e.code.value)

        events = [entry.message for entry in new_state.log[len(state.log):]]
        logger.debug("Applied %s in %s (%d event(s))", move.describe(), state.game_id, len(events))
        return MoveResult.success_with_state(new_state, events=events)

    def _get_handler(self, move_type: MoveType) -> Callable[[GameState, Move], GameState] | None:
        """Get the handler function for a move type."""
        handlers = {
            MoveType.START_ACTION: self._handle_start_action,
            MoveType.CHALLENGE: self._handle_challenge,
            MoveType.BLOCK: self._handle_block,
            MoveType.PASS: self._handle_pass,
            MoveType.LOSE_INFLUENCE: self._handle_lose_influence,
            MoveType.EXCHANGE: self._handle_exchange,
        }
        return handlers.get(move_type)

    def _handle_start_action(self, state: GameState, move: Move) -> GameState:
        if move.action_kind is None:
            raise InvalidTarget("No action kind given")
        return start_action(state, move.to_action())

    def _handle_challenge(self, state: GameState, move: Move) -> GameState:
        return challenge(state, move.player_id)

    def _handle_block(self, state: GameState, move: Move) -> GameState:
        if move.character is None:
            raise CannotBlockThisAction("A block must claim a character")
        return block(state, move.player_id, move.character)

    def _handle_pass(self, state: GameState, move: Move) -> GameState:
        return pass_response(state, move.player_id)

    def _handle_lose_influence(self, state: GameState, move: Move) -> GameState:
        if move.character is None:
            raise NoChoicePending("Choose which influence to lose")
        return choose_card_to_lose(state, move.player_id, move.character)

    def _handle_exchange(self, state: GameState, move: Move) -> GameState:
        return choose_exchange_cards(state, move.player_id, move.cards)


def apply_move(state: GameState, move: Move) -> MoveResult:
    """
    Convenience function to apply a move.

    Creates a Reducer and applies the move.
    """
    reducer = Reducer()
    return reducer.apply(state, move)
