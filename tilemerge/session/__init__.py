"""
Session Module - Manages in-memory game sessions.

A session represents one player's seat at the puzzle:
- Created when the player starts a game
- Holds the current grid and running score
- Can restart for a new game, keeping the best score
- Forgotten when ended or idle for too long

The engine owns no score; sessions are the caller that does.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult
from .scores import ScoreBook, PlayerStats, GameRecord

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "ScoreBook",
    "PlayerStats",
    "GameRecord",
]
