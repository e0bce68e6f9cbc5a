"""
Tests for influence loss and turn/win control.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.errors import CardNotHeld
from ..engine_core.influence import lose_influence, require_influence_loss
from ..engine_core.rules import ActionKind
from ..engine_core.state import AfterLoss, GamePhase, LogType, PendingAction, PendingPhase
from ..engine_core.turns import check_winner, next_turn
from .conftest import AMBASSADOR, CAPTAIN, CONTESSA, DUKE, build_state


class TestLoseInfluence:
    """lose_influence(state, player_id, card=None)."""

    def test_default_loses_first_card(self, two_players):
        state = lose_influence(two_players, "player_1")
        bob = state.get_player("player_1")
        assert bob.influences == (AMBASSADOR,)
        assert bob.revealed == (CONTESSA,)
        assert bob.alive
        assert state.log[-1].type == LogType.REVEAL

    def test_chosen_card(self, two_players):
        state = lose_influence(two_players, "player_1", AMBASSADOR)
        assert state.get_player("player_1").influences == (CONTESSA,)

    def test_removes_one_of_a_pair(self):
        state = build_state([[DUKE, DUKE], [CONTESSA]])
        state = lose_influence(state, "player_0", DUKE)
        alice = state.get_player("player_0")
        assert alice.influences == (DUKE,)
        assert alice.revealed == (DUKE,)

    def test_card_not_held(self, two_players):
        with pytest.raises(CardNotHeld):
            lose_influence(two_players, "player_1", DUKE)

    def test_last_card_eliminates(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA], [AMBASSADOR]])
        state = lose_influence(state, "player_1")
        bob = state.get_player("player_1")
        assert not bob.alive
        assert bob.influence_count == 0
        assert state.log[-1].type == LogType.SYSTEM
        assert "eliminated" in state.log[-1].message
        assert state.winner is None

    def test_last_opponent_eliminated_wins(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA]])
        state = lose_influence(state, "player_1")
        assert state.winner == "player_0"
        assert state.phase == GamePhase.FINISHED
        assert state.log[-1].message == "Alice wins!"

    def test_empty_hand_is_a_no_op(self):
        state = build_state([[DUKE, CAPTAIN], [], [CONTESSA]])
        assert lose_influence(state, "player_1") is state


class TestRequireInfluenceLoss:

    @pytest.fixture
    def pending(self):
        return PendingAction(
            action=Action(ActionKind.COUP, "player_0", "player_1"),
            phase=PendingPhase.LOSE_INFLUENCE,
        )

    def test_single_card_is_decided(self, pending):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA], [AMBASSADOR]])
        new_state, decided = require_influence_loss(state, pending, "player_1", AfterLoss.END_TURN)
        assert decided
        assert not new_state.get_player("player_1").alive
        assert new_state.pending is None

    def test_two_cards_wait_for_choice(self, pending, two_players):
        new_state, decided = require_influence_loss(two_players, pending, "player_1", AfterLoss.PROCEED)
        assert not decided
        assert new_state.pending.phase == PendingPhase.LOSE_INFLUENCE
        assert new_state.pending.losing_player_id == "player_1"
        assert new_state.pending.waiting_for_players == ("player_1",)
        assert new_state.pending.after_loss == AfterLoss.PROCEED
        assert new_state.get_player("player_1").influence_count == 2


class TestNextTurn:

    def test_advances_and_clears(self, three_players):
        state = three_players.with_pending(
            PendingAction(action=Action(ActionKind.TAX, "player_0"), phase=PendingPhase.CHALLENGE_ACTION)
        )
        state = next_turn(state)
        assert state.current_player_idx == 1
        assert state.pending is None
        assert state.turn_number == 2

    def test_wraps_around(self):
        state = build_state([[DUKE], [CONTESSA], [CAPTAIN]], current=2)
        assert next_turn(state).current_player_idx == 0

    def test_skips_eliminated(self):
        state = build_state([[DUKE], [], [], [CAPTAIN]], current=0)
        assert next_turn(state).current_player_idx == 3
        state = build_state([[DUKE], [], [], [CAPTAIN]], current=3)
        assert next_turn(state).current_player_idx == 0

    def test_no_op_once_won(self):
        state = check_winner(build_state([[DUKE], []]))
        assert state.winner == "player_0"
        assert next_turn(state) is state


class TestCheckWinner:

    def test_no_winner_with_two_alive(self, two_players):
        assert check_winner(two_players) is two_players

    def test_single_survivor(self):
        state = check_winner(build_state([[], [CONTESSA], []]))
        assert state.winner == "player_1"
        assert state.phase == GamePhase.FINISHED
        assert state.pending is None
