"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/games                     Start a new game
    GET    /api/v1/games                     List games
    GET    /api/v1/games/{id}?viewer=        Get game state as seen by a player
    DELETE /api/v1/games/{id}                End a game
    POST   /api/v1/games/{id}/moves          Submit a move
    GET    /api/v1/games/{id}/legal-moves    Moves a player may submit now
    WS     /api/v1/games/{id}/ws?viewer=     WebSocket for real-time updates

Move Flow:
    1. Client fetches the state (and its version) and the legal moves
    2. Client POSTs a move with expected_version
    3. The move is applied, then every bot seat the game waits on plays
    4. Response carries the new state; WebSocket clients get a state_update

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union

from .. import __version__
from ..config import Settings, get_settings


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import GameService, GameNotFound
    from .schemas import (
        # Request models
        CreateGameRequest,
        MoveRequest,
        # Response models
        GameStateResponse,
        MoveResponse,
        LegalMovesResponse,
        GameListResponse,
        EndGameResponse,
        HealthResponse,
        ErrorResponse,
        # Enums
        ErrorCode,
    )
    from ..engine_core.errors import RuleViolation
    from ..session import SessionManager, VersionConflict

    settings = settings or get_settings()

    app = FastAPI(
        title="Coup Engine API",
        description="""
Rules engine for Coup, with bot opponents.

## Hidden information

Game states are rendered for the `viewer` player: only the viewer's own
influences (and, during an exchange, the offered cards) are included.
The deck is reported by size only.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist or has expired |
| `VERSION_CONFLICT` | Move was made against an out-of-date state |
| `VALIDATION_ERROR` | Request could not be used to start a game |
| rule codes | The engine rejected the move (`NOT_YOUR_TURN`, `INVALID_TARGET`, ...) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or GameService(
        session_manager=SessionManager(ttl_seconds=settings.session_ttl_seconds)
    )

    # WebSocket connections: game_id -> [(socket, viewer)]
    ws_connections: dict[str, list[tuple[WebSocket, Optional[str]]]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: str,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def not_found(game_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.GAME_NOT_FOUND.value,
            f"Game {game_id} not found",
            status_code=404,
        )

    async def broadcast_state(game_id: str):
        """Send every WebSocket client its own view of the game."""
        connections = ws_connections.get(game_id)
        if not connections:
            return
        dead_connections = []
        for ws, viewer in connections:
            try:
                state = api_service.get_game(game_id, viewer)
                await ws.send_json({"type": "state_update", "payload": state.model_dump(mode="json")})
            except GameNotFound:
                await ws.send_json({"type": "game_ended", "payload": {"game_id": game_id}})
            except (WebSocketDisconnect, RuntimeError):
                dead_connections.append((ws, viewer))
        for conn in dead_connections:
            connections.remove(conn)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid players or personalities"}},
        tags=["Games"],
        summary="Start a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameStateResponse, JSONResponse]:
        """
        Deal a new game.

        Seats not listed in `human_players` are played by bots, which
        move immediately if the game starts on them.
        """
        try:
            return api_service.create_game(request)
        except RuleViolation as e:
            return make_error_response(e.code.value, e.message)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR.value, str(e))

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List games",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(
        game_id: str,
        viewer: Optional[str] = Query(None, description="Player id whose hidden cards to include"),
    ) -> Union[GameStateResponse, JSONResponse]:
        try:
            return api_service.get_game(game_id, viewer)
        except GameNotFound:
            return not_found(game_id)

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(
        game_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> Union[EndGameResponse, JSONResponse]:
        """End a game and release its session."""
        if not api_service.end_game(game_id, reason):
            return not_found(game_id)
        await broadcast_state(game_id)
        ws_connections.pop(game_id, None)
        return EndGameResponse(success=True, game_id=game_id)

    # =========================================================================
    # Move Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Move rejected by the rules"},
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "State changed since expected_version"},
        },
        tags=["Moves"],
        summary="Submit a move",
    )
    async def submit_move(game_id: str, request: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Submit a move for a player.

        Pass `expected_version` to have the move rejected if anything
        happened since the client last looked.
        """
        try:
            result, response = api_service.submit_move(game_id, request)
        except GameNotFound:
            return not_found(game_id)
        except VersionConflict as e:
            return make_error_response(
                ErrorCode.VERSION_CONFLICT.value,
                str(e),
                status_code=409,
                details={"expected_version": e.expected, "current_version": e.actual},
            )

        if not result.success:
            return make_error_response(
                result.error_code or ErrorCode.VALIDATION_ERROR.value,
                result.error or "Move rejected",
                details={"version": response.version},
            )

        await broadcast_state(game_id)
        return response

    @app.get(
        "/api/v1/games/{game_id}/legal-moves",
        response_model=LegalMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Moves"],
        summary="List the moves a player may submit",
    )
    async def get_legal_moves(
        game_id: str,
        player_id: str = Query(..., description="Player to list moves for"),
    ) -> Union[LegalMovesResponse, JSONResponse]:
        try:
            return api_service.legal_moves(game_id, player_id)
        except GameNotFound:
            return not_found(game_id)

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/games/{game_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, game_id: str, viewer: Optional[str] = None):
        """
        WebSocket for real-time updates.

        Messages to client:
        - state_update: Game state changed (payload: state for the viewer)
        - game_ended: Game was ended
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        try:
            state = api_service.get_game(game_id, viewer)
        except GameNotFound:
            await websocket.send_json({
                "type": "error",
                "payload": {"error_code": ErrorCode.GAME_NOT_FOUND.value, "message": f"Game {game_id} not found"},
            })
            await websocket.close()
            return

        connection = (websocket, viewer)
        ws_connections.setdefault(game_id, []).append(connection)

        try:
            await websocket.send_json({"type": "state_update", "payload": state.model_dump(mode="json")})

            while True:
                message = await websocket.receive_json()
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
                else:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Unsupported message; submit moves over HTTP"},
                    })
        except WebSocketDisconnect:
            pass
        finally:
            if connection in ws_connections.get(game_id, []):
                ws_connections[game_id].remove(connection)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            active_games=len(api_service.session_manager.list_active_sessions()),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Coup Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn coup.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
