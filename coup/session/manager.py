"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client creates a session: players are seated, bots fill the
   non-human seats, the engine deals a new game
2. During the game:
   - Clients submit moves against the version they last saw
   - The session applies them through the reducer, one at a time
   - Bots answer whenever the game waits on a bot seat
   - A timed-out participant is forced to pass
3. Game ends or the client quits -> session is dropped

PERSISTENCE RULES:
- Sessions are in-memory only
- Game state is reconstructible from (seed, moves) but is not stored
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import threading
import time
import uuid

from ..bots import BotPolicy, CoupBot, PERSONALITIES
from ..engine_core.action import Move, MoveResult
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_game
from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 3600


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Somebody won
    ABANDONED = "abandoned"  # Ended before a winner


class VersionConflict(Exception):
    """A move was submitted against a state the client no longer sees."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"State version is {actual}, move was made against {expected}")


@dataclass
class GameSession:
    """
    One game in progress.

    Moves are serialized by a per-session lock; every accepted move bumps
    the version so concurrent clients can detect stale submissions.
    """
    session_id: str
    game_state: GameState
    created_at: float

    state: SessionState = SessionState.ACTIVE
    version: int = 0
    last_activity: float = 0.0

    # player_id -> bot; seats without a bot are played by humans
    bots: dict[str, BotPolicy] = field(default_factory=dict)

    metadata: dict[str, Any] = field(default_factory=dict)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)
    _reducer: Reducer = field(default_factory=Reducer, init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.last_activity:
            self.last_activity = self.created_at

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def is_bot(self, player_id: str) -> bool:
        return player_id in self.bots

    @property
    def human_player_ids(self) -> list[str]:
        return [
            p.player_id for p in self.game_state.players
            if p.player_id not in self.bots
        ]

    def submit_move(self, move: Move, expected_version: int | None = None) -> MoveResult:
        """
        Apply a move to this session's game.

        Raises VersionConflict when expected_version is given and the
        state has moved on. A rejected move leaves state and version as
        they were.
        """
        with self._lock:
            if expected_version is not None and expected_version != self.version:
                logger.warning(
                    "Session %s: stale move from %s (expected v%d, at v%d)",
                    self.session_id, move.player_id, expected_version, self.version,
                )
                raise VersionConflict(expected_version, self.version)

            result = self._reducer.apply(self.game_state, move)
            if not result.success:
                return result

            self.game_state = result.new_state
            self.version += 1
            self.last_activity = time.time()

            if self.game_state.is_over:
                self.state = SessionState.GAME_OVER
                logger.info("Session %s finished, winner %s", self.session_id, self.game_state.winner)
            return result

    def force_pass(self, player_id: str) -> MoveResult:
        """
        Pass on behalf of a participant who ran out of time.

        In a choice phase this loses the first held card, or keeps the
        current hand for an exchange.
        """
        logger.info("Session %s: forcing a pass for %s", self.session_id, player_id)
        return self.submit_move(Move.pass_(player_id))


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions and seat bots
    - Track active sessions
    - Clean up idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL):
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        player_names: list[str],
        human_players: list[str] | None = None,
        seed: int | None = None,
        personalities: list[str] | None = None,
    ) -> GameSession:
        """
        Create a new game session.

        Args:
            player_names: Names in seat order (2-6)
            human_players: Names played by humans; every other seat gets a bot.
                None means all seats are human.
            seed: Seed for the deck and the bots
            personalities: Personality names cycled over the bot seats
                (default: all predefined personalities)

        Returns:
            New GameSession with the game already dealt
        """
        personality_names = personalities or list(PERSONALITIES.keys())
        unknown = [name for name in personality_names if name not in PERSONALITIES]
        if unknown:
            raise ValueError(f"Unknown personality: {', '.join(unknown)}")

        session_id = str(uuid.uuid4())
        game_state = create_game(player_names, seed=seed, game_id=session_id)

        humans = set(player_names if human_players is None else human_players)

        bots: dict[str, BotPolicy] = {}
        bot_index = 0
        for player in game_state.players:
            if player.name in humans:
                continue
            personality = PERSONALITIES[personality_names[bot_index % len(personality_names)]]
            bots[player.player_id] = CoupBot(
                player_id=player.player_id,
                personality=personality,
                rng=random.Random(None if seed is None else seed + bot_index + 1),
            )
            bot_index += 1

        now = time.time()
        session = GameSession(
            session_id=session_id,
            game_state=game_state,
            created_at=now,
            bots=bots,
            metadata={"seed": game_state.seed},
        )

        with self._lock:
            self._sessions[session_id] = session
        logger.info(
            "Created session %s with %d players (%d bots)",
            session_id, len(player_names), len(bots),
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if the session did not exist.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if session.game_state.is_over:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[GameSession]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        End sessions with no activity for longer than max_age_seconds
        (default: the manager's TTL).

        Returns the number of sessions removed.
        """
        max_age = self.ttl_seconds if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in list(self._sessions.items())
            if current_time - session.last_activity > max_age
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
