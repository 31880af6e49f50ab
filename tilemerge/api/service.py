"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/engine calls
2. Manages sessions and their game loops
3. Formats responses for the browser client

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    SessionResponse,
    MoveResponse,
    PlayerStatsResponse,
    LeaderboardResponse,
    RecentGame,
    RecentGamesResponse,
    GlobalStatsResponse,
    ErrorResponse,
    # Shared
    GridInfo,
    SpawnInfo,
    # Enums
    SessionStatus,
    ErrorCode,
)
from ..engine_core import Direction, empty_cells, max_tile
from ..session import SessionManager, Session, GameLoop, PlayerStats
from ..session.scores import LEADERBOARD_SIZE, RECENT_GAMES_LIMIT


@dataclass
class APIService:
    """
    Main API service for the browser client.

    Usage:
        service = APIService()

        # Create session
        session_response = service.create_session(request)

        # Play
        move_response = service.make_move(session_id, "left")
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Create a new game session with a fresh grid."""
        session = self.session_manager.create_session(
            player_name=request.player_name,
            seed=request.seed,
        )
        self._game_loops[session.session_id] = GameLoop(
            session, self.session_manager.score_book
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def make_move(self, session_id: str, direction: Direction | str) -> MoveResponse | ErrorResponse:
        """
        Apply one move to a session's grid.

        A move that changes nothing is still a successful request,
        reported with moved=false and zero points.
        """
        loop = self._game_loops.get(session_id)
        if not loop:
            return self._not_found(session_id)

        try:
            direction = Direction(direction)
        except ValueError:
            return ErrorResponse(
                error=f"Unknown direction: {direction}",
                error_code=ErrorCode.INVALID_MOVE,
                details={"allowed": [d.value for d in Direction]},
            )

        result = loop.play(direction)
        if not result.success:
            return ErrorResponse(
                error=result.errors[0] if result.errors else "Move rejected",
                error_code=ErrorCode.GAME_OVER if result.game_over else ErrorCode.INVALID_MOVE,
                details={"final_score": result.final_score},
            )

        session = loop.session
        move = session.last_result
        return MoveResponse(
            session_id=session_id,
            player_name=session.player_name,
            success=True,
            direction=direction,
            moved=result.moved,
            points=result.points,
            score=result.score,
            best_score=result.best_score,
            new_best=result.new_best,
            spawned=(
                SpawnInfo(index=move.spawned[0], value=move.spawned[1])
                if move and move.spawned else None
            ),
            game_over=result.game_over,
            final_score=result.final_score,
            grid=self._grid_info(session),
        )

    def restart(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Start a new game in an existing session."""
        loop = self._game_loops.get(session_id)
        if not loop:
            return self._not_found(session_id)
        loop.restart()
        return self._session_to_response(loop.session)

    def get_player_stats(self, player_name: str) -> PlayerStatsResponse:
        """Best score and finished-game totals for a player."""
        return self._stats_to_response(self.session_manager.score_book.stats(player_name))

    def get_leaderboard(self, count: int = LEADERBOARD_SIZE) -> LeaderboardResponse:
        """Top players by best score."""
        entries = [
            self._stats_to_response(stats)
            for stats in self.session_manager.score_book.top(count)
        ]
        return LeaderboardResponse(entries=entries, count=len(entries))

    def get_recent_games(self, count: int = RECENT_GAMES_LIMIT) -> RecentGamesResponse:
        """Last finished games, newest first."""
        games = [
            RecentGame(player_name=g.player_name, score=g.score, finished_at=g.finished_at)
            for g in self.session_manager.score_book.recent_games(count)
        ]
        return RecentGamesResponse(games=games, count=len(games))

    def get_global_stats(self) -> GlobalStatsResponse:
        book = self.session_manager.score_book
        return GlobalStatsResponse(
            total_games=book.total_games,
            players=len(book.players()),
            active_sessions=len(self.session_manager.list_active_sessions()),
        )

    def cleanup(self, max_age_seconds: int) -> list[str]:
        """Drop idle sessions and their loops."""
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        for session_id in removed:
            self._game_loops.pop(session_id, None)
        return removed

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )

    def _grid_info(self, session: Session) -> GridInfo:
        engine = session.engine
        return GridInfo(
            size=engine.size,
            cells=list(session.grid),
            phase=engine.phase(session.grid),
            max_tile=max_tile(session.grid),
            empty_count=len(empty_cells(session.grid)),
            legal_moves=engine.legal_moves(session.grid),
        )

    def _stats_to_response(self, stats: PlayerStats) -> PlayerStatsResponse:
        return PlayerStatsResponse(
            player_name=stats.player_name,
            best_score=stats.best_score,
            games_played=stats.games_played,
            total_score=stats.total_score,
            average_score=stats.average_score,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            player_name=session.player_name,
            grid=self._grid_info(session),
            score=session.score,
            best_score=session.best_score,
            move_count=session.move_count,
            games_started=session.games_started,
            seed=session.metadata.get("seed"),
            created_at=session.created_at,
        )
