"""
Game State - Immutable snapshot of a game at a point in time.

Design principles:
- Immutable: frozen dataclasses and tuples, every change returns a new state
- Serializable: to_dict() gives plain data for collaborators
- Deterministic: shuffles are seeded from (seed, shuffle_count)

A rejected move can never partially mutate a state, because nothing
can mutate a state.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from .action import Action
from .deck import draw, return_and_shuffle
from .errors import UnknownPlayer
from .rules import Character


class GamePhase(str, Enum):
    """Coarse game lifecycle."""
    LOBBY = "lobby"
    PLAYING = "playing"
    FINISHED = "finished"


class PendingPhase(str, Enum):
    """Phase of the action currently in flight."""
    CHALLENGE_ACTION = "challenge_action"
    BLOCK = "block"
    CHALLENGE_BLOCK = "challenge_block"
    LOSE_INFLUENCE = "lose_influence"
    EXCHANGE_SELECT = "exchange_select"


class AfterLoss(str, Enum):
    """What the machine does once a pending influence loss is chosen."""
    RESOLVE_ACTION = "resolve_action"  # blocked action goes through / action lands
    PROCEED = "proceed"  # claim upheld: action moves on to its block phase
    END_TURN = "end_turn"  # action cancelled, or block stands


class LogType(str, Enum):
    ACTION = "action"
    CHALLENGE = "challenge"
    BLOCK = "block"
    REVEAL = "reveal"
    SYSTEM = "system"


@dataclass(frozen=True)
class LogEntry:
    """One narrated game event."""
    message: str
    type: LogType
    turn: int = 0


@dataclass(frozen=True)
class Player:
    """
    A participant.

    influences are the hidden cards; revealed are the cards lost
    face-up. alive is kept equal to bool(influences).
    """
    player_id: str
    name: str
    coins: int = 0
    influences: tuple[Character, ...] = ()
    revealed: tuple[Character, ...] = ()
    alive: bool = True

    def holds(self, character: Character) -> bool:
        return character in self.influences

    @property
    def influence_count(self) -> int:
        return len(self.influences)


@dataclass(frozen=True)
class PendingAction:
    """
    An action in flight and the responses it is waiting on.

    waiting_for_players is the explicit set of participants that must
    still respond before the phase can advance.
    """
    action: Action
    phase: PendingPhase
    waiting_for_players: tuple[str, ...] = ()
    blocker_id: str | None = None
    blocker_character: Character | None = None

    # lose_influence sub-state
    losing_player_id: str | None = None
    after_loss: AfterLoss | None = None

    # exchange_select sub-state: held + drawn cards on offer
    exchange_options: tuple[Character, ...] = ()

    def is_waiting_for(self, player_id: str) -> bool:
        return player_id in self.waiting_for_players

    def without_responder(self, player_id: str) -> PendingAction:
        """Return pending action with player removed from the waiting set."""
        return replace(
            self,
            waiting_for_players=tuple(p for p in self.waiting_for_players if p != player_id),
        )


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str
    players: tuple[Player, ...] = ()
    deck: tuple[Character, ...] = ()
    current_player_idx: int = 0
    pending: PendingAction | None = None
    winner: str | None = None
    log: tuple[LogEntry, ...] = ()
    phase: GamePhase = GamePhase.LOBBY
    turn_number: int = 1

    # Random seed for determinism
    seed: int = 0
    shuffle_count: int = 0

    @property
    def current_player(self) -> Player:
        """Get the current player."""
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def require_player(self, player_id: str) -> Player:
        """Get player by ID, rejecting unknown ids."""
        player = self.get_player(player_id)
        if player is None:
            raise UnknownPlayer(f"Unknown player: {player_id}")
        return player

    def player_index(self, player_id: str) -> int:
        for idx, p in enumerate(self.players):
            if p.player_id == player_id:
                return idx
        raise UnknownPlayer(f"Unknown player: {player_id}")

    def alive_players(self) -> list[Player]:
        return [p for p in self.players if p.alive]

    def alive_ids(self, exclude: tuple[str | None, ...] = ()) -> tuple[str, ...]:
        """Ids of living players in turn order, minus the excluded ones."""
        return tuple(p.player_id for p in self.players if p.alive and p.player_id not in exclude)

    def with_player(self, player: Player) -> GameState:
        """Return new state with updated player."""
        new_players = tuple(
            player if p.player_id == player.player_id else p
            for p in self.players
        )
        return self._copy_with(players=new_players)

    def with_pending(self, pending: PendingAction | None) -> GameState:
        return self._copy_with(pending=pending)

    def with_log(self, message: str, log_type: LogType) -> GameState:
        """Return new state with a narrated event appended."""
        entry = LogEntry(message=message, type=log_type, turn=self.turn_number)
        return self._copy_with(log=(*self.log, entry))

    def shuffle_rng(self) -> random.Random:
        """RNG for the next shuffle; pair with a shuffle_count bump."""
        return random.Random(self.seed * 1_000_003 + self.shuffle_count)

    def with_returned_cards(self, cards: tuple[Character, ...] | list[Character]) -> GameState:
        """Return new state with cards put back into the deck and the deck reshuffled."""
        new_deck = return_and_shuffle(self.deck, cards, self.shuffle_rng())
        return self._copy_with(deck=new_deck, shuffle_count=self.shuffle_count + 1)

    def with_drawn_cards(self, count: int) -> tuple[tuple[Character, ...], GameState]:
        """Return (drawn cards, new state) after drawing from the deck."""
        drawn, remaining = draw(self.deck, count)
        return drawn, self._copy_with(deck=remaining)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form (enums as values) for persistence and transport."""
        return _plain(self)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value
