"""
Pytest fixtures for Coup tests.
"""

import pytest
from collections import Counter

from ..engine_core.action import Move
from ..engine_core.reducer import apply_move
from ..engine_core.rules import Character, COPIES_PER_CHARACTER
from ..engine_core.setup import create_game
from ..engine_core.state import GameState, GamePhase, PendingPhase, Player

DUKE = Character.DUKE
ASSASSIN = Character.ASSASSIN
CAPTAIN = Character.CAPTAIN
AMBASSADOR = Character.AMBASSADOR
CONTESSA = Character.CONTESSA

NAMES = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank"]


def build_state(
    hands: list[list[Character]],
    coins: list[int] | None = None,
    current: int = 0,
    seed: int = 7,
) -> GameState:
    """
    Build a playing state with chosen hands and purses.

    The deck holds every card not dealt, so card conservation holds.
    Player i is player_i, named after NAMES[i].
    """
    coins = coins or [2] * len(hands)
    remaining = Counter({c: COPIES_PER_CHARACTER for c in Character})
    for hand in hands:
        remaining.subtract(hand)
    deck = tuple(c for c in Character for _ in range(remaining[c]))

    players = tuple(
        Player(
            player_id=f"player_{i}",
            name=NAMES[i],
            coins=coins[i],
            influences=tuple(hand),
            alive=bool(hand),
        )
        for i, hand in enumerate(hands)
    )
    return GameState(
        game_id="test_game",
        players=players,
        deck=deck,
        current_player_idx=current,
        phase=GamePhase.PLAYING,
        seed=seed,
        shuffle_count=1,
    )


def play(state: GameState, *moves: Move) -> GameState:
    """Apply moves in order, failing the test on any rejection."""
    for move in moves:
        result = apply_move(state, move)
        assert result.success, f"{move.describe()} rejected: {result.error}"
        state = result.new_state
    return state


def total_cards(state: GameState) -> int:
    """Deck, hands and revealed cards, plus the cards drawn for a pending exchange."""
    total = len(state.deck) + sum(len(p.influences) + len(p.revealed) for p in state.players)
    pending = state.pending
    if pending is not None and pending.phase == PendingPhase.EXCHANGE_SELECT:
        actor = state.require_player(pending.action.actor_id)
        total += len(pending.exchange_options) - len(actor.influences)
    return total


def total_coins(state: GameState) -> int:
    return sum(p.coins for p in state.players)


@pytest.fixture
def new_game() -> GameState:
    """A freshly dealt, seeded 3-player game."""
    return create_game(["Alice", "Bob", "Carol"], seed=42)


@pytest.fixture
def two_players() -> GameState:
    """Alice (Duke, Captain) vs Bob (Contessa, Ambassador), 2 coins each."""
    return build_state([[DUKE, CAPTAIN], [CONTESSA, AMBASSADOR]])


@pytest.fixture
def three_players() -> GameState:
    """Alice (Duke, Assassin), Bob (Captain, Contessa), Carol (Ambassador, Duke)."""
    return build_state(
        [[DUKE, ASSASSIN], [CAPTAIN, CONTESSA], [AMBASSADOR, DUKE]],
        coins=[3, 2, 2],
    )
