"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the browser client and
the engine. All responses include explicit types for OpenAPI schema
generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- GAME_OVER: Move sent to a finished game
- INVALID_MOVE: Move could not be applied to the grid
- VALIDATION_ERROR: Request body or message is malformed
- INTERNAL_ERROR: Unexpected server failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core import Direction, GamePhase


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    GAME_OVER = "GAME_OVER"
    INVALID_MOVE = "INVALID_MOVE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class GridInfo(BaseModel):
    """The board, row-major, plus a few derived values for rendering."""
    size: int = Field(..., ge=2)
    cells: list[int] = Field(..., description="Row-major cell values, 0 is empty")
    phase: GamePhase = GamePhase.ACTIVE
    max_tile: int = 0
    empty_count: int = 0
    legal_moves: list[Direction] = Field(default_factory=list)

    @property
    def rows(self) -> list[list[int]]:
        return [self.cells[i * self.size:(i + 1) * self.size] for i in range(self.size)]


class SpawnInfo(BaseModel):
    """The tile placed after a move."""
    index: int
    value: int


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    player_name: str = Field("Player", min_length=1, max_length=64, description="Display name")
    seed: Optional[int] = Field(None, description="Seed for reproducible tile spawns")


class MoveRequest(BaseModel):
    """Request to apply one move."""
    direction: Direction = Field(..., description="up, down, left or right")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    player_name: str
    grid: GridInfo
    score: int = 0
    best_score: int = 0
    move_count: int = 0
    games_started: int = 1
    seed: Optional[int] = Field(None, description="Seed the spawner was created with")
    created_at: float = 0.0
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """Response after applying a move."""
    session_id: str
    player_name: str = ""
    success: bool
    direction: Direction
    moved: bool = False
    points: int = 0
    score: int = 0
    best_score: int = 0
    new_best: bool = False
    spawned: Optional[SpawnInfo] = None
    game_over: bool = False
    final_score: Optional[int] = Field(None, description="Set once the grid is terminal")
    grid: GridInfo
    api_version: str = "v1"


class PlayerStatsResponse(BaseModel):
    """Best score and finished-game totals for a player."""
    player_name: str
    best_score: int = 0
    games_played: int = 0
    total_score: int = 0
    average_score: int = 0


class LeaderboardResponse(BaseModel):
    """Top players by best score."""
    entries: list[PlayerStatsResponse]
    count: int


class RecentGame(BaseModel):
    """A finished game."""
    player_name: str
    score: int
    finished_at: float = Field(..., description="Unix timestamp of the final move")


class RecentGamesResponse(BaseModel):
    """Last finished games, newest first."""
    games: list[RecentGame]
    count: int


class GlobalStatsResponse(BaseModel):
    """Totals across all players."""
    total_games: int = 0
    players: int = 0
    active_sessions: int = 0


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
