"""
Whole-game properties, checked after every move of seeded random games.
"""

import pytest

from ..bots.policy import RandomPolicy
from ..engine_core.action import Move
from ..engine_core.action_generator import legal_moves, players_to_act
from ..engine_core.reducer import apply_move
from ..engine_core.rules import ActionKind
from ..engine_core.setup import create_game
from ..engine_core.state import GamePhase
from ..simulation import simulate_game
from .conftest import NAMES, total_cards, total_coins

# Total coin change a single move may cause: nothing, income/aid/tax gains,
# or the coup/assassination cost.
ALLOWED_COIN_DELTAS = {0, 1, 2, 3, -3, -7}


def check_invariants(state):
    assert total_cards(state) == 15
    for player in state.players:
        assert player.coins >= 0
        assert 0 <= player.influence_count <= 2
        assert player.alive == (player.influence_count > 0)
        assert len(player.influences) + len(player.revealed) == 2

    if state.pending is not None:
        alive = set(state.alive_ids())
        assert set(state.pending.waiting_for_players) <= alive

    if state.phase == GamePhase.FINISHED:
        assert len(state.alive_players()) == 1
        assert state.winner == state.alive_players()[0].player_id


def play_random_game(player_count, seed, max_moves=5000):
    state = create_game(NAMES[:player_count], seed=seed)
    policies = {p.player_id: RandomPolicy(seed=seed * 10 + i) for i, p in enumerate(state.players)}

    moves = 0
    while not state.is_over and moves < max_moves:
        player_id = players_to_act(state)[0]
        available = legal_moves(state, player_id)
        assert available, f"no legal moves for {player_id}"

        move = policies[player_id].select_move(state, player_id, available).move
        result = apply_move(state, move)
        assert result.success, f"{move.describe()} rejected: {result.error}"

        assert total_coins(result.new_state) - total_coins(state) in ALLOWED_COIN_DELTAS
        state = result.new_state
        check_invariants(state)
        moves += 1

    return state


class TestRandomGames:

    @pytest.mark.parametrize("player_count", [2, 3, 4, 6])
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_invariants_hold(self, player_count, seed):
        state = play_random_game(player_count, seed)
        assert state.is_over

    def test_no_moves_after_the_end(self):
        state = play_random_game(3, seed=8)
        assert state.winner is not None
        for player in state.players:
            assert legal_moves(state, player.player_id) == []
            result = apply_move(state, Move.start(player.player_id, ActionKind.INCOME))
            assert result.error_code == "GAME_OVER"


class TestBotGames:

    @pytest.mark.parametrize("seed", range(5))
    def test_bot_games_finish_cleanly(self, seed):
        result = simulate_game(seed=seed)
        assert result.error is None
        assert not result.timed_out
        assert result.winner_id is not None
        check_invariants(result.final_state)

    def test_same_seed_same_game(self):
        a = simulate_game(seed=21)
        b = simulate_game(seed=21)
        assert a.winner_id == b.winner_id
        assert a.moves == b.moves
        assert a.final_state.log == b.final_state.log
