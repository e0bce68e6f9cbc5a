"""
Tests for bot policies and personalities.
"""

import random

import pytest

from ..bots.coup_bot import CARD_VALUES, CoupBot
from ..bots.personality import (
    AGGRESSIVE,
    BALANCED,
    CAUTIOUS,
    PERSONALITIES,
    Personality,
    create_random_personality,
)
from ..bots.policy import FirstLegalPolicy, RandomPolicy
from ..engine_core.action import Move, MoveType
from ..engine_core.action_generator import legal_moves
from ..engine_core.rules import ActionKind, Character
from .conftest import AMBASSADOR, CAPTAIN, CONTESSA, DUKE, build_state, play


def honest(name="Honest", **rates):
    """A deterministic personality: no random moves, no bluffs unless asked."""
    values = dict(challenge_rate=0.0, bluff_block_rate=0.0, bluff_rate=0.0, randomness=0.0)
    values.update(rates)
    return Personality(name=name, **values)


def decide(bot, state, player_id):
    return bot.select_move(state, player_id, legal_moves(state, player_id))


class TestBaselinePolicies:

    def test_first_legal_takes_income(self, new_game):
        decision = decide(FirstLegalPolicy(), new_game, "player_0")
        assert decision.move == Move.start("player_0", ActionKind.INCOME)

    def test_first_legal_passes(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.TAX))
        assert decide(FirstLegalPolicy(), state, "player_1").move == Move.pass_("player_1")

    def test_random_picks_a_legal_move(self, new_game):
        policy = RandomPolicy(seed=3)
        moves = legal_moves(new_game, "player_0")
        for _ in range(20):
            assert policy.select_move(new_game, "player_0", moves).move in moves

    def test_random_is_reproducible(self, new_game):
        moves = legal_moves(new_game, "player_0")
        first = [RandomPolicy(seed=5).select_move(new_game, "player_0", moves).move for _ in range(3)]
        second = [RandomPolicy(seed=5).select_move(new_game, "player_0", moves).move for _ in range(3)]
        assert first == second

    @pytest.mark.parametrize("policy", [RandomPolicy(seed=1), FirstLegalPolicy(), CoupBot("player_0")])
    def test_no_legal_moves(self, new_game, policy):
        with pytest.raises(ValueError):
            policy.select_move(new_game, "player_0", [])

    def test_names(self):
        assert FirstLegalPolicy().get_name() == "FirstLegalPolicy"
        assert CoupBot("player_0").get_name() == "CoupBot"


class TestCoupBotTurn:

    def test_defaults(self):
        bot = CoupBot("player_0")
        assert bot.personality is BALANCED
        assert isinstance(bot.rng, random.Random)

    def test_prefers_honest_tax(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA, AMBASSADOR]], coins=[2, 1])
        bot = CoupBot("player_0", personality=CAUTIOUS, rng=random.Random(0))
        decision = decide(bot, state, "player_0")
        assert decision.move == Move.start("player_0", ActionKind.TAX)
        assert "scores" in decision.details

    def test_cautious_never_bluffs(self):
        state = build_state([[CONTESSA, CONTESSA], [DUKE, CAPTAIN]], coins=[2, 2])
        bot = CoupBot("player_0", personality=CAUTIOUS, rng=random.Random(0))
        for _ in range(20):
            move = decide(bot, state, "player_0").move
            assert move.action_kind in (ActionKind.INCOME, ActionKind.FOREIGN_AID)

    def test_aggressive_coups_when_affordable(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA, AMBASSADOR]], coins=[7, 2])
        bot = CoupBot("player_0", personality=honest(aggression=0.9), rng=random.Random(0))
        assert decide(bot, state, "player_0").move == Move.start("player_0", ActionKind.COUP, "player_1")

    def test_forced_coup(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA, AMBASSADOR]], coins=[10, 2])
        bot = CoupBot("player_0", personality=AGGRESSIVE, rng=random.Random(1))
        for _ in range(10):
            assert decide(bot, state, "player_0").move.action_kind == ActionKind.COUP


class TestCoupBotResponses:

    def test_blocks_steal_with_held_captain(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.STEAL, "player_1"))
        bot = CoupBot("player_1", personality=CAUTIOUS, rng=random.Random(0))
        assert decide(bot, state, "player_1").move == Move.block("player_1", CAPTAIN)

    def test_blocks_foreign_aid_with_held_duke(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.FOREIGN_AID))
        carol = CoupBot("player_2", personality=CAUTIOUS, rng=random.Random(0))
        bob = CoupBot("player_1", personality=CAUTIOUS, rng=random.Random(0))
        assert decide(carol, state, "player_2").move == Move.block("player_2", DUKE)
        assert decide(bob, state, "player_1").move == Move.pass_("player_1")

    def test_challenges_a_claim_it_doubts(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.TAX))
        bot = CoupBot("player_1", personality=honest(challenge_rate=1.0), rng=random.Random(0))
        assert decide(bot, state, "player_1").move == Move.challenge("player_1")

    def test_never_challenges_a_card_it_holds(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.TAX))
        # Carol holds a Duke
        bot = CoupBot("player_2", personality=honest(challenge_rate=1.0), rng=random.Random(0))
        assert decide(bot, state, "player_2").move == Move.pass_("player_2")

    def test_bluff_block(self, three_players):
        state = play(three_players, Move.start("player_0", ActionKind.FOREIGN_AID))
        bot = CoupBot("player_1", personality=honest(bluff_block_rate=1.0), rng=random.Random(0))
        assert decide(bot, state, "player_1").move == Move.block("player_1", DUKE)


class TestCoupBotChoices:

    def test_loses_least_valuable_card(self):
        state = build_state([[DUKE, CAPTAIN], [CONTESSA, AMBASSADOR]], coins=[7, 2])
        state = play(state, Move.start("player_0", ActionKind.COUP, "player_1"))
        bot = CoupBot("player_1", personality=CAUTIOUS, rng=random.Random(0))
        decision = decide(bot, state, "player_1")
        assert decision.move == Move.lose_influence("player_1", AMBASSADOR)

    def test_keeps_most_valuable_cards(self):
        state = build_state([[AMBASSADOR, DUKE], [CAPTAIN, CONTESSA]])
        state = play(state, Move.start("player_0", ActionKind.EXCHANGE), Move.pass_("player_1"))
        bot = CoupBot("player_0", personality=CAUTIOUS, rng=random.Random(0))
        decision = decide(bot, state, "player_0")
        assert decision.move.move_type == MoveType.EXCHANGE
        assert sorted(c.value for c in decision.move.cards) == ["Contessa", "Duke"]

    def test_card_values_cover_every_character(self):
        assert set(CARD_VALUES) == set(Character)


class TestPersonalities:

    def test_predefined(self):
        assert set(PERSONALITIES) == {"balanced", "aggressive", "cautious", "chaotic"}
        assert CAUTIOUS.bluff_rate == 0.0
        assert CAUTIOUS.bluff_block_rate == 0.0

    def test_random_personality_is_reproducible(self):
        a = create_random_personality(seed=11)
        b = create_random_personality(seed=11)
        assert a == b
        assert a.metadata["base"] == "Balanced"

    def test_random_personality_rates_are_clamped(self):
        p = create_random_personality(base=CAUTIOUS, variance=1.0, seed=2)
        for rate in (p.challenge_rate, p.bluff_block_rate, p.bluff_rate, p.aggression, p.randomness):
            assert 0.0 <= rate <= 1.0
