"""
Turn and win control.

next_turn advances to the next living player; check_winner ends the
game once a single player is left. check_winner runs after every
influence loss, since eliminations can happen mid-resolution.
"""

from __future__ import annotations

from .state import GameState, GamePhase, LogType


def next_turn(state: GameState) -> GameState:
    """Advance to the next living player and clear any pending action."""
    if state.winner is not None:
        return state

    next_idx = (state.current_player_idx + 1) % state.num_players
    # Skip eliminated players
    while not state.players[next_idx].alive:
        next_idx = (next_idx + 1) % state.num_players

    return state._copy_with(
        current_player_idx=next_idx,
        pending=None,
        turn_number=state.turn_number + 1,
    )


def check_winner(state: GameState) -> GameState:
    """Finish the game if exactly one player is alive."""
    if state.winner is not None:
        return state

    alive = state.alive_players()
    if len(alive) != 1:
        return state

    survivor = alive[0]
    finished = state._copy_with(
        winner=survivor.player_id,
        phase=GamePhase.FINISHED,
        pending=None,
    )
    return finished.with_log(f"{survivor.name} wins!", LogType.SYSTEM)
