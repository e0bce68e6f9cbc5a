"""
Simulation - Play whole games between bots.

Used for balance checks and for fuzzing the engine: every move a bot
submits comes from legal_moves, so a rejected move or a stuck game is
an engine defect and is reported as an error.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Any

from .bots import BotPolicy, CoupBot, PERSONALITIES
from .engine_core.action_generator import legal_moves, players_to_act
from .engine_core.reducer import Reducer
from .engine_core.setup import create_game
from .engine_core.state import GameState

logger = logging.getLogger(__name__)

DEFAULT_NAMES = ["Alice", "Bob", "Carol", "Dave"]
DEFAULT_MAX_TURNS = 500

# Responses, choices and the declaration itself all count as steps
STEPS_PER_TURN = 50


@dataclass
class SimulationResult:
    """Outcome of one simulated game."""
    winner_id: str | None
    winner_name: str | None
    turns: int
    moves: int
    final_state: GameState
    error: str | None = None
    timed_out: bool = False


@dataclass
class SimulationReport:
    """Aggregate over many simulated games."""
    games: int = 0
    wins: dict[str, int] = field(default_factory=dict)
    total_turns: int = 0
    timeouts: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def average_turns(self) -> float:
        if self.games == 0:
            return 0.0
        return self.total_turns / self.games

    def to_dict(self) -> dict[str, Any]:
        return {
            "games": self.games,
            "wins": dict(self.wins),
            "average_turns": round(self.average_turns, 2),
            "timeouts": self.timeouts,
            "errors": list(self.errors),
        }


def default_policies(state: GameState, seed: int | None = None) -> dict[str, BotPolicy]:
    """One CoupBot per seat, cycling through the predefined personalities."""
    personalities = list(PERSONALITIES.values())
    policies: dict[str, BotPolicy] = {}
    for index, player in enumerate(state.players):
        rng = random.Random(None if seed is None else seed * 31 + index)
        policies[player.player_id] = CoupBot(
            player_id=player.player_id,
            personality=personalities[index % len(personalities)],
            rng=rng,
        )
    return policies


def simulate_game(
    names: list[str] | None = None,
    policies: dict[str, BotPolicy] | None = None,
    seed: int | None = None,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> SimulationResult:
    """
    Play a single game to completion.

    Args:
        names: Player names in seat order (default: four players)
        policies: Bot per player id (default: a CoupBot per seat)
        seed: Seed for the deck and the default bots
        max_turns: Stop and report a timeout after this many turns
    """
    state = create_game(names or DEFAULT_NAMES, seed=seed)
    if policies is None:
        policies = default_policies(state, seed)

    reducer = Reducer()
    moves = 0
    max_steps = max_turns * STEPS_PER_TURN

    while not state.is_over:
        if state.turn_number > max_turns or moves >= max_steps:
            logger.warning(
                "Game %s hit the turn limit (%d turns, %d moves)",
                state.game_id, state.turn_number, moves,
            )
            return _result(state, moves, timed_out=True)

        waiting = players_to_act(state)
        if not waiting:
            return _result(state, moves, error="No player to act")

        player_id = waiting[0]
        moves_available = legal_moves(state, player_id)
        if not moves_available:
            return _result(state, moves, error=f"No legal moves for {player_id}")

        decision = policies[player_id].select_move(state, player_id, moves_available)
        result = reducer.apply(state, decision.move)
        if not result.success:
            error = f"{decision.move.describe()} rejected: {result.error} ({result.error_code})"
            logger.warning("Game %s: %s", state.game_id, error)
            return _result(state, moves, error=error)

        state = result.new_state
        moves += 1

    return _result(state, moves)


def _result(
    state: GameState,
    moves: int,
    error: str | None = None,
    timed_out: bool = False,
) -> SimulationResult:
    winner = state.get_player(state.winner) if state.winner else None
    return SimulationResult(
        winner_id=state.winner,
        winner_name=winner.name if winner else None,
        turns=state.turn_number,
        moves=moves,
        final_state=state,
        error=error,
        timed_out=timed_out,
    )


def run_simulations(
    n: int,
    names: list[str] | None = None,
    seed: int = 0,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> SimulationReport:
    """
    Play n games with default bots and aggregate the results.

    Game i is seeded with seed + i, so a report can be reproduced.
    """
    names = names or DEFAULT_NAMES
    report = SimulationReport(wins={name: 0 for name in names})

    for i in range(n):
        result = simulate_game(names, seed=seed + i, max_turns=max_turns)
        report.games += 1
        report.total_turns += result.turns
        if result.winner_name is not None:
            report.wins[result.winner_name] = report.wins.get(result.winner_name, 0) + 1
        if result.timed_out:
            report.timeouts += 1
        if result.error:
            report.errors.append(f"game {seed + i}: {result.error}")

    return report
