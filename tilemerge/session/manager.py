"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Player starts a session -> fresh grid with two tiles
2. During the game:
   - Player sends a direction
   - Engine slides, merges and spawns
   - Session adds the points to its running score
   - Best score is raised in the ScoreBook
3. Terminal grid -> game over, final score recorded
4. Player can restart in the same session or end it

PERSISTENCE RULES:
- Sessions are in-memory only
- Best scores live in the manager's ScoreBook, not on disk
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import time
import uuid

from ..engine_core import GRID_SIZE, Grid, GridEngine, MoveResult, TileSpawner
from .scores import ScoreBook

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Grid reached a terminal state
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class Session:
    """
    An in-memory game session.

    Contains:
    - The engine (with its own seeded spawner)
    - The current grid
    - Running score and best score for the player
    - Session metadata
    """
    session_id: str
    player_name: str
    engine: GridEngine
    grid: Grid
    created_at: float

    state: SessionState = SessionState.ACTIVE
    score: int = 0
    best_score: int = 0
    move_count: int = 0
    games_started: int = 1
    last_active: float = 0.0
    last_result: MoveResult | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def grid_size(self) -> int:
        return self.engine.size

    def is_active(self) -> bool:
        """Check if the game is still in progress."""
        return self.state == SessionState.ACTIVE

    def touch(self):
        self.last_active = time.time()

    def new_game(self):
        """Reset to a fresh grid. Best score is kept."""
        self.grid = self.engine.initialize()
        self.score = 0
        self.move_count = 0
        self.games_started += 1
        self.last_result = None
        self.state = SessionState.ACTIVE
        self.touch()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own engine
    - Track active sessions
    - Own the ScoreBook shared by all sessions
    - Clean up idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, grid_size: int = GRID_SIZE, score_book: ScoreBook | None = None):
        self.grid_size = grid_size
        self.score_book = score_book or ScoreBook()
        self._sessions: dict[str, Session] = {}

    def create_session(self, player_name: str = "Player", seed: int | None = None) -> Session:
        """
        Create a new game session.

        Args:
            player_name: Display name, also the ScoreBook key
            seed: Optional seed for the tile spawner

        Returns:
            New Session with a freshly initialized grid

        Raises UnsupportedGridSizeError if the manager's grid size is unusable.
        """
        engine = GridEngine(size=self.grid_size, spawner=TileSpawner(random.Random(seed)))
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            player_name=player_name,
            engine=engine,
            grid=engine.initialize(),
            created_at=now,
            last_active=now,
            best_score=self.score_book.best(player_name),
        )
        session.metadata["seed"] = seed

        self._sessions[session.session_id] = session
        logger.info("Created session %s for %s", session.session_id, player_name)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and forget it.

        A game still in progress is marked abandoned; its score is
        not recorded as a finished game.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        if session.is_active():
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions with a game in progress."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        """List IDs of every known session."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Remove sessions idle for longer than max_age_seconds.

        Called periodically to free memory. Returns removed IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
