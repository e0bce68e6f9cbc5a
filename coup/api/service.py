"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine moves
2. Manages sessions and runs bot seats after every human move
3. Renders game states for a viewer (hiding what they may not see)

This layer is framework-agnostic: it raises GameNotFound and
VersionConflict and lets the web layer map them to responses.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CreateGameRequest,
    MoveRequest,
    GameStateResponse,
    MoveResponse,
    LegalMovesResponse,
    GameListResponse,
    GameSummary,
    PlayerView,
    PendingView,
    LogEntryInfo,
    MoveInfo,
    GameStatus,
)
from ..engine_core.action import Move, MoveResult
from ..engine_core.action_generator import legal_moves, players_to_act
from ..engine_core.state import PendingPhase
from ..session import SessionManager, GameSession, GameLoop

logger = logging.getLogger(__name__)


class GameNotFound(LookupError):
    """No session with this id."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService()

        state = service.create_game(CreateGameRequest(player_names=["Ann", "Bob"]))
        result, response = service.submit_move(state.game_id, move_request)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """Deal a new game and let bots play until a human must act."""
        self.cleanup_stale()

        session = self.session_manager.create_session(
            player_names=request.player_names,
            human_players=request.human_players,
            seed=request.seed,
            personalities=request.personalities,
        )
        loop = GameLoop(session)
        self._game_loops[session.session_id] = loop
        loop.run_bots()

        return self.render_state(session)

    def get_session(self, game_id: str) -> GameSession:
        session = self.session_manager.get_session(game_id)
        if session is None:
            raise GameNotFound(game_id)
        return session

    def get_game(self, game_id: str, viewer: str | None = None) -> GameStateResponse:
        return self.render_state(self.get_session(game_id), viewer)

    def list_games(self) -> GameListResponse:
        games = [
            GameSummary(
                game_id=session.session_id,
                status=GameStatus(session.state.value),
                players=[p.name for p in session.game_state.players],
                turn_number=session.game_state.turn_number,
                winner=session.game_state.winner,
            )
            for session in self.session_manager.list_sessions()
        ]
        return GameListResponse(games=games, count=len(games))

    def end_game(self, game_id: str, reason: str = "user_ended") -> bool:
        self._game_loops.pop(game_id, None)
        return self.session_manager.end_session(game_id, reason)

    def submit_move(self, game_id: str, request: MoveRequest) -> tuple[MoveResult, MoveResponse]:
        """
        Apply a participant's move, then run any bot seats.

        Returns the engine result (for error details) and the response
        rendered for the submitting player. Raises GameNotFound and
        VersionConflict.
        """
        session = self.get_session(game_id)
        move = Move(
            move_type=request.move_type,
            player_id=request.player_id,
            action_kind=request.action_kind,
            target_id=request.target_id,
            character=request.character,
            cards=tuple(request.cards),
        )

        result = session.submit_move(move, expected_version=request.expected_version)
        events = list(result.events)
        bot_actions: list[str] = []

        if result.success:
            loop = self._game_loops.setdefault(game_id, GameLoop(session))
            turn = loop.run_bots()
            events.extend(turn.events)
            bot_actions = turn.bot_actions

        response = MoveResponse(
            success=result.success,
            version=session.version,
            events=events,
            bot_actions=bot_actions,
            state=self.render_state(session, request.player_id),
        )
        return result, response

    def force_pass(self, game_id: str, player_id: str) -> MoveResult:
        """Time a participant out, then run any bot seats."""
        session = self.get_session(game_id)
        result = session.force_pass(player_id)
        if result.success:
            self._game_loops.setdefault(game_id, GameLoop(session)).run_bots()
        return result

    def legal_moves(self, game_id: str, player_id: str) -> LegalMovesResponse:
        session = self.get_session(game_id)
        moves = [
            MoveInfo(
                move_type=m.move_type,
                player_id=m.player_id,
                action_kind=m.action_kind,
                target_id=m.target_id,
                character=m.character,
                cards=list(m.cards),
                description=m.describe(),
            )
            for m in legal_moves(session.game_state, player_id)
        ]
        return LegalMovesResponse(
            game_id=game_id,
            player_id=player_id,
            version=session.version,
            moves=moves,
        )

    def render_state(self, session: GameSession, viewer: str | None = None) -> GameStateResponse:
        """
        Render the session's game for a viewer.

        Hidden influences are shown only for the viewer's own seat, and
        exchange options only to the exchanging player. viewer=None is
        the spectator view.
        """
        state = session.game_state
        current_id = state.current_player.player_id if not state.is_over else None

        players = [
            PlayerView(
                player_id=p.player_id,
                name=p.name,
                coins=p.coins,
                influence_count=p.influence_count,
                influences=list(p.influences) if p.player_id == viewer else None,
                revealed=list(p.revealed),
                alive=p.alive,
                is_bot=session.is_bot(p.player_id),
                is_current_turn=p.player_id == current_id,
            )
            for p in state.players
        ]

        pending_view = None
        pending = state.pending
        if pending is not None:
            action = pending.action
            show_options = (
                pending.phase == PendingPhase.EXCHANGE_SELECT and action.actor_id == viewer
            )
            pending_view = PendingView(
                phase=pending.phase.value,
                action_kind=action.kind,
                actor_id=action.actor_id,
                target_id=action.target_id,
                claimed_character=action.claimed_character,
                waiting_for=list(pending.waiting_for_players),
                blocker_id=pending.blocker_id,
                blocker_character=pending.blocker_character,
                losing_player_id=pending.losing_player_id,
                exchange_options=list(pending.exchange_options) if show_options else None,
            )

        return GameStateResponse(
            game_id=session.session_id,
            version=session.version,
            status=GameStatus(session.state.value),
            turn_number=state.turn_number,
            current_player_id=current_id,
            players=players,
            pending=pending_view,
            waiting_for=list(players_to_act(state)),
            deck_size=len(state.deck),
            winner=state.winner,
            log=[
                LogEntryInfo(message=e.message, type=e.type.value, turn=e.turn)
                for e in state.log
            ],
        )

    def cleanup_stale(self) -> int:
        removed = self.session_manager.cleanup_stale_sessions()
        for game_id in list(self._game_loops):
            if self.session_manager.get_session(game_id) is None:
                del self._game_loops[game_id]
        if removed:
            logger.info("Removed %d stale game(s)", removed)
        return removed
