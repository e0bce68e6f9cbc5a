"""
Game Setup - Creates initial game state.

This module handles:
- Validating the player count
- Building and shuffling the court deck
- Dealing two influences to each player

Setup is seeded so that a game can be replayed exactly.
"""

from __future__ import annotations
import random
import uuid

from .deck import create_deck, draw
from .errors import InvalidPlayerCount
from .rules import MIN_PLAYERS, MAX_PLAYERS, STARTING_COINS, STARTING_INFLUENCE
from .state import GameState, GamePhase, LogType, Player


def create_game(
    names: list[str],
    seed: int | None = None,
    game_id: str | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        names: Display names, in turn order (2-6)
        seed: Seed for deterministic shuffling (random if omitted)
        game_id: Identifier for the game (generated if omitted)

    Returns:
        Initial GameState, already in the playing phase
    """
    if len(names) < MIN_PLAYERS or len(names) > MAX_PLAYERS:
        raise InvalidPlayerCount(
            f"Coup requires {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(names)}"
        )

    if seed is None:
        seed = random.SystemRandom().randrange(2**31)

    deck = create_deck(random.Random(seed))

    players = []
    for index, name in enumerate(names):
        hand, deck = draw(deck, STARTING_INFLUENCE)
        players.append(
            Player(
                player_id=f"player_{index}",
                name=name,
                coins=STARTING_COINS,
                influences=hand,
            )
        )

    state = GameState(
        game_id=game_id or f"game_{uuid.uuid4().hex[:12]}",
        players=tuple(players),
        deck=deck,
        current_player_idx=0,
        phase=GamePhase.PLAYING,
        seed=seed,
        shuffle_count=1,
    )
    return state.with_log("Game started!", LogType.SYSTEM)
