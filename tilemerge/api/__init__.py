"""
API Module - Browser client interface.

Exposes the engine via REST API and WebSocket.
The client:
1. Creates a game session
2. Sends moves
3. Receives the grid, points and score after each move
4. Restarts or ends the session

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
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
    ErrorCode,
    SessionStatus,
)
from .service import APIService

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "SessionResponse",
    "MoveResponse",
    "PlayerStatsResponse",
    "LeaderboardResponse",
    "RecentGame",
    "RecentGamesResponse",
    "GlobalStatsResponse",
    "ErrorResponse",
    # Shared
    "GridInfo",
    "SpawnInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
]
