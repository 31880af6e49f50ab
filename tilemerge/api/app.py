"""
FastAPI Application - REST API for the browser client.

Endpoints:
    POST   /api/v1/sessions                 Create game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session status and grid
    DELETE /api/v1/sessions/{id}            End session
    POST   /api/v1/sessions/{id}/moves      Apply a move
    POST   /api/v1/sessions/{id}/restart    Start a new game in the session
    GET    /api/v1/players/{name}/stats     Best score for a player
    GET    /api/v1/leaderboard              Top players by best score
    GET    /api/v1/games/recent             Last finished games
    GET    /api/v1/stats                    Totals across all players
    WS     /api/v1/sessions/{id}/ws         WebSocket for one session
    WS     /api/v1/ws                       WebSocket for leaderboard viewers

Move Flow:
    1. POST /moves with {"direction": "left"}
    2. Engine slides, merges and spawns one tile if anything moved
    3. Response carries the points delta, running score and new grid
    4. Viewers connected to the session /ws receive a state_update
    5. When the grid becomes terminal, game_over=true and a game_over
       event is pushed with the final score
    6. Leaderboard viewers get new_high_score / game_finished events,
       each followed by a leaderboard_update snapshot

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import json
import logging
import os
import time

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core import GRID_SIZE, UnsupportedGridSizeError
from ..session import SessionManager
from ..session.scores import LEADERBOARD_SIZE, RECENT_GAMES_LIMIT
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    MoveRequest,
    # Response models
    SessionResponse,
    MoveResponse,
    PlayerStatsResponse,
    LeaderboardResponse,
    RecentGamesResponse,
    GlobalStatsResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

# Environment configuration
TILEMERGE_ENV = os.getenv("TILEMERGE_ENV", "development")
TILEMERGE_GRID_SIZE = int(os.getenv("TILEMERGE_GRID_SIZE", str(GRID_SIZE)))
TILEMERGE_SESSION_MAX_AGE = int(os.getenv("TILEMERGE_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.GAME_OVER: 409,
    ErrorCode.INVALID_MOVE: 400,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service: APIService | None = None, grid_size: int | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        grid_size: Board size for new sessions (defaults to TILEMERGE_GRID_SIZE)

    Returns:
        FastAPI application instance

    Raises UnsupportedGridSizeError if the configured grid size is unusable.
    """
    if service is None:
        size = TILEMERGE_GRID_SIZE if grid_size is None else grid_size
        if size < 2:
            raise UnsupportedGridSizeError(size)
        service = APIService(session_manager=SessionManager(grid_size=size))
    api_service = service

    app = FastAPI(
        title="tilemerge API",
        description="""
Tile-merging puzzle engine - sessions, moves and live updates.

## Move Flow

1. `POST /moves` with a direction
2. If any tile moved, one new tile (2 or 4) is spawned
3. A move that changes nothing returns `moved=false` and zero points
4. Once the grid is terminal, `game_over=true` and `final_score` is set

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `GAME_OVER` | Move sent to a finished game |
| `INVALID_MOVE` | Move could not be applied |
| `VALIDATION_ERROR` | Malformed request or message |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # WebSocket connections, per session and for leaderboard viewers
    ws_connections: dict[str, list[WebSocket]] = {}
    viewer_connections: list[WebSocket] = []
    app.state.ws_connections = ws_connections
    app.state.viewer_connections = viewer_connections

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Wrap an ErrorResponse with the status code for its error code."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Push helpers
    # =========================================================================

    async def send_all(connections: list[WebSocket], message: dict) -> list[WebSocket]:
        """Send a message to every connection. Returns the ones that failed."""
        dead_connections = []
        for ws in list(connections):
            try:
                await ws.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.info("Dropping websocket: %s", e)
                dead_connections.append(ws)
        return dead_connections

    def forget_connection(session_id: str, websocket: WebSocket):
        connections = ws_connections.get(session_id)
        if connections is None:
            return
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            del ws_connections[session_id]

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        for ws in await send_all(ws_connections.get(session_id, []), message):
            forget_connection(session_id, ws)

    async def broadcast_to_viewers(message: dict):
        """Broadcast a message to every leaderboard viewer."""
        for ws in await send_all(viewer_connections, message):
            if ws in viewer_connections:
                viewer_connections.remove(ws)

    def leaderboard_message() -> dict:
        return {
            "type": "leaderboard_update",
            "payload": api_service.get_leaderboard().model_dump(mode="json"),
        }

    async def receive_pings(websocket: WebSocket):
        """Answer client messages until the socket disconnects."""
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({
                    "type": "error",
                    "payload": {
                        "error_code": ErrorCode.VALIDATION_ERROR.value,
                        "message": "Invalid JSON",
                    },
                })
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        The grid starts with two tiles. Pass `seed` for reproducible spawns.
        """
        for stale_id in api_service.cleanup(TILEMERGE_SESSION_MAX_AGE):
            ws_connections.pop(stale_id, None)
        return api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all session IDs with a game in progress."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current grid and score of a game session."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        if success:
            await broadcast_to_session(session_id, {
                "type": "session_ended",
                "payload": {"session_id": session_id, "reason": reason},
            })
            ws_connections.pop(session_id, None)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid move"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Game is over"},
        },
        tags=["Game"],
        summary="Apply a move",
    )
    async def make_move(session_id: str, body: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Slide the tiles toward `direction`.

        **Request Body:**
        ```json
        {"direction": "left"}
        ```
        """
        response = api_service.make_move(session_id, body.direction)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)

        if response.moved:
            await broadcast_to_session(session_id, {
                "type": "state_update",
                "payload": response.model_dump(mode="json"),
            })
        if response.game_over:
            await broadcast_to_session(session_id, {
                "type": "game_over",
                "payload": {
                    "session_id": session_id,
                    "final_score": response.final_score,
                    "best_score": response.best_score,
                },
            })

        if response.new_best:
            await broadcast_to_viewers({
                "type": "new_high_score",
                "payload": {
                    "player_name": response.player_name,
                    "score": response.best_score,
                    "timestamp": time.time(),
                },
            })
        if response.game_over:
            await broadcast_to_viewers({
                "type": "game_finished",
                "payload": {
                    "player_name": response.player_name,
                    "score": response.final_score,
                    "timestamp": time.time(),
                },
            })
        if response.new_best or response.game_over:
            await broadcast_to_viewers(leaderboard_message())
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start a new game in the same session",
    )
    async def restart(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Reset the grid and score. The best score is kept."""
        response = api_service.restart(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        await broadcast_to_session(session_id, {
            "type": "state_update",
            "payload": response.model_dump(mode="json"),
        })
        return response

    @app.get(
        "/api/v1/players/{player_name}/stats",
        response_model=PlayerStatsResponse,
        tags=["Scores"],
        summary="Best score for a player",
    )
    async def player_stats(player_name: str) -> PlayerStatsResponse:
        """Best score and finished games recorded for a player name."""
        return api_service.get_player_stats(player_name)

    @app.get(
        "/api/v1/leaderboard",
        response_model=LeaderboardResponse,
        tags=["Scores"],
        summary="Top players by best score",
    )
    async def leaderboard(
        count: Annotated[int, Query(ge=1, le=100, description="Number of players")] = LEADERBOARD_SIZE,
    ) -> LeaderboardResponse:
        """Players ranked by best score, with games played and average score."""
        return api_service.get_leaderboard(count)

    @app.get(
        "/api/v1/games/recent",
        response_model=RecentGamesResponse,
        tags=["Scores"],
        summary="Last finished games",
    )
    async def recent_games(
        count: Annotated[int, Query(ge=1, le=RECENT_GAMES_LIMIT)] = RECENT_GAMES_LIMIT,
    ) -> RecentGamesResponse:
        return api_service.get_recent_games(count)

    @app.get(
        "/api/v1/stats",
        response_model=GlobalStatsResponse,
        tags=["Scores"],
        summary="Totals across all players",
    )
    async def global_stats() -> GlobalStatsResponse:
        return api_service.get_global_stats()

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Grid changed
        - game_over: Grid became terminal
        - session_ended: Session was closed
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            await websocket.send_json({
                "type": "error",
                "payload": response.model_dump(mode="json"),
            })
            await websocket.close()
            return

        ws_connections.setdefault(session_id, []).append(websocket)
        try:
            await websocket.send_json({
                "type": "state_update",
                "payload": response.model_dump(mode="json"),
            })
            await receive_pings(websocket)
        except WebSocketDisconnect:
            logger.info("Websocket disconnected from session %s", session_id)
        finally:
            forget_connection(session_id, websocket)

    @app.websocket("/api/v1/ws")
    async def viewer_websocket(websocket: WebSocket):
        """
        WebSocket for leaderboard viewers.

        Messages from server:
        - leaderboard_update: Current top players (also sent on connect)
        - new_high_score: A player beat their best score
        - game_finished: A game reached a terminal grid

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        viewer_connections.append(websocket)
        try:
            await websocket.send_json(leaderboard_message())
            await receive_pings(websocket)
        except WebSocketDisconnect:
            logger.info("Leaderboard viewer disconnected")
        finally:
            if websocket in viewer_connections:
                viewer_connections.remove(websocket)

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
            service="tilemerge",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "tilemerge API",
            "version": __version__,
            "environment": TILEMERGE_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn tilemerge.api.app:app
app = create_app()
