"""
Coup Bot - Heuristic automa for the bluffing game.

This is the MVP bot that:
- Scores turn actions with simple heuristics
- Responds to claims and blocks with personality-driven rates
- Only challenges claims it cannot rule out from its own hand
- Prefers blocking with characters it actually holds
- Keeps its most valuable cards when losing influence or exchanging

The bot does NOT:
- Track what other players have claimed over time
- Count revealed cards to estimate bluff odds
- Coordinate with other bots
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import random

from .policy import BotPolicy, BotDecision
from .personality import Personality, BALANCED
from ..engine_core.action import MoveType
from ..engine_core.rules import ActionKind, Character, ACTION_CLAIMS
from ..engine_core.state import PendingPhase

if TYPE_CHECKING:
    from ..engine_core.action import Move
    from ..engine_core.state import GameState, Player


# How much the bot wants to keep each character
CARD_VALUES: dict[Character, int] = {
    Character.DUKE: 5,
    Character.ASSASSIN: 4,
    Character.CAPTAIN: 4,
    Character.CONTESSA: 3,
    Character.AMBASSADOR: 2,
}

# Base desirability of each turn action when claimed honestly
ACTION_SCORES: dict[ActionKind, float] = {
    ActionKind.INCOME: 2.0,
    ActionKind.FOREIGN_AID: 3.0,
    ActionKind.COUP: 10.0,
    ActionKind.TAX: 7.0,
    ActionKind.ASSASSINATE: 8.0,
    ActionKind.STEAL: 5.0,
    ActionKind.EXCHANGE: 3.0,
}


@dataclass
class CoupBot(BotPolicy):
    """
    Heuristic automa for one seat.

    Usage:
        bot = CoupBot(player_id="player_1", personality=AGGRESSIVE)
        decision = bot.select_move(state, "player_1", legal_moves(state, "player_1"))
    """
    player_id: str
    personality: Personality = None  # type: ignore
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.rng is None:
            self.rng = random.Random()

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select a move for the current phase.

        Process:
        1. Check for random move (personality.randomness)
        2. Dispatch on phase: turn, response, influence loss, exchange
        3. Fall back to the first (most passive) legal move
        """
        if not legal_moves:
            raise ValueError("No legal moves available")

        if self.rng.random() < self.personality.randomness:
            return BotDecision(
                move=self.rng.choice(legal_moves),
                explanation=f"Random move (personality: {self.personality.name})",
                evaluated_moves=len(legal_moves),
            )

        me = state.get_player(player_id)
        pending = state.pending

        if pending is None:
            decision = self._choose_turn_move(state, me, legal_moves)
        elif pending.phase == PendingPhase.LOSE_INFLUENCE:
            decision = self._choose_loss(me, legal_moves)
        elif pending.phase == PendingPhase.EXCHANGE_SELECT:
            decision = self._choose_exchange(legal_moves)
        else:
            decision = self._choose_response(state, me, legal_moves)

        if decision.move not in legal_moves:
            return BotDecision(
                move=legal_moves[0],
                explanation="Fallback to first legal move",
                evaluated_moves=len(legal_moves),
            )
        return decision

    # =========================================================================
    # Own turn
    # =========================================================================

    def _choose_turn_move(self, state: GameState, me: Player, legal_moves: list[Move]) -> BotDecision:
        """Score every declarable action and take the best one."""
        # Decide once per turn which claims the bot is willing to bluff
        bluffs = {
            kind for kind, claim in ACTION_CLAIMS.items()
            if claim is not None and not me.holds(claim)
            and self.rng.random() < self.personality.bluff_rate
        }

        scored: list[tuple[Move, float]] = []
        for move in legal_moves:
            score = self._score_turn_move(state, me, move, bluffs)
            if score is not None:
                scored.append((move, score))

        if not scored:
            return BotDecision(move=legal_moves[0], explanation="No preferred action")

        scored.sort(key=lambda item: item[1], reverse=True)
        best, best_score = scored[0]
        claim = ACTION_CLAIMS[best.action_kind]
        bluffing = claim is not None and not me.holds(claim)
        return BotDecision(
            move=best,
            explanation=f"{best.action_kind.value}{' (bluff)' if bluffing else ''} scored {best_score:.1f}",
            evaluated_moves=len(legal_moves),
            details={"scores": {m.describe(): s for m, s in scored}},
        )

    def _score_turn_move(
        self,
        state: GameState,
        me: Player,
        move: Move,
        bluffs: set[ActionKind],
    ) -> float | None:
        kind = move.action_kind
        claim = ACTION_CLAIMS[kind]
        if claim is not None and not me.holds(claim) and kind not in bluffs:
            return None

        score = ACTION_SCORES[kind]
        target = state.get_player(move.target_id) if move.target_id else None

        if kind in (ActionKind.COUP, ActionKind.ASSASSINATE):
            score += self.personality.aggression * 6 + self._threat(target)
        elif kind == ActionKind.STEAL:
            score += min(2, target.coins)
        elif kind == ActionKind.EXCHANGE and me.influence_count == 1:
            score += 1

        if claim is not None and not me.holds(claim):
            # Bluffs are worth less than the real thing
            score *= 0.7
        return score

    @staticmethod
    def _threat(player: Player | None) -> float:
        if player is None:
            return 0.0
        return player.influence_count * 2 + player.coins / 3

    # =========================================================================
    # Responses
    # =========================================================================

    def _choose_response(self, state: GameState, me: Player, legal_moves: list[Move]) -> BotDecision:
        """Challenge, block or pass on the claim currently on the table."""
        pending = state.pending
        by_type: dict[MoveType, list[Move]] = {}
        for move in legal_moves:
            by_type.setdefault(move.move_type, []).append(move)

        challenges = by_type.get(MoveType.CHALLENGE, [])
        if challenges:
            if pending.phase == PendingPhase.CHALLENGE_ACTION:
                claim = pending.action.claimed_character
            else:
                claim = pending.blocker_character
            # Only challenge if we can't rule the claim out ourselves
            if not me.holds(claim) and self.rng.random() < self.personality.challenge_rate:
                return BotDecision(move=challenges[0], explanation=f"Doubts the {claim.value} claim")

        blocks = by_type.get(MoveType.BLOCK, [])
        if blocks:
            honest = [m for m in blocks if me.holds(m.character)]
            if honest:
                return BotDecision(move=honest[0], explanation=f"Blocks with {honest[0].character.value}")
            if self.rng.random() < self.personality.bluff_block_rate:
                move = self.rng.choice(blocks)
                return BotDecision(move=move, explanation=f"Bluff-blocks with {move.character.value}")

        passes = by_type.get(MoveType.PASS, [])
        if passes:
            return BotDecision(move=passes[0], explanation="Passes")
        return BotDecision(move=legal_moves[0], explanation="Nothing better to do")

    # =========================================================================
    # Choices
    # =========================================================================

    def _choose_loss(self, me: Player, legal_moves: list[Move]) -> BotDecision:
        """Give up the least valuable card."""
        move = min(legal_moves, key=lambda m: CARD_VALUES[m.character])
        return BotDecision(move=move, explanation=f"Gives up {move.character.value}")

    def _choose_exchange(self, legal_moves: list[Move]) -> BotDecision:
        """Keep the most valuable combination on offer."""
        move = max(legal_moves, key=lambda m: sum(CARD_VALUES[c] for c in m.cards))
        kept = ", ".join(c.value for c in move.cards)
        return BotDecision(move=move, explanation=f"Keeps {kept}")
