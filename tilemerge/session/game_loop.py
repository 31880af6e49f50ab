"""
Game Loop - Drives one session move by move.

The loop:
1. Player sends a direction
2. Engine applies the move (slide, merge, spawn)
3. Points are added to the session score
4. Best score is raised when beaten
5. Terminal grid -> game over, final score recorded
6. Repeat, or restart for a new game
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core import Direction

if TYPE_CHECKING:
    from .manager import Session
    from .scores import ScoreBook
    from ..bots import MovePolicy


class LoopState(Enum):
    """State of the game loop."""
    WAITING_MOVE = "waiting_move"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a move.

    Contains the points delta and the running totals
    after the move.
    """
    success: bool
    loop_state: LoopState

    direction: Direction | None = None
    points: int = 0
    moved: bool = False
    score: int = 0
    best_score: int = 0
    new_best: bool = False

    # Game over info
    game_over: bool = False
    final_score: int | None = None

    errors: list[str] = field(default_factory=list)


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session, manager.score_book)

        result = loop.play("left")
        if result.game_over:
            submit(result.final_score)

        loop.restart()
    """

    def __init__(self, session: Session, score_book: ScoreBook | None = None):
        self.session = session
        self.score_book = score_book
        self.state = LoopState.WAITING_MOVE if session.is_active() else LoopState.GAME_OVER

    def play(self, direction: Direction | str) -> TurnResult:
        """
        Apply one move to the session's grid.

        Moves after game over are rejected without touching the grid.
        """
        from .manager import SessionState

        session = self.session
        if not session.is_active():
            return TurnResult(
                success=False,
                loop_state=self.state,
                score=session.score,
                best_score=session.best_score,
                game_over=session.state == SessionState.GAME_OVER,
                final_score=session.score if session.state == SessionState.GAME_OVER else None,
                errors=["Game is over - start a new game to keep playing"],
            )

        result = session.engine.apply_move(session.grid, direction)
        session.touch()
        session.last_result = result

        new_best = False
        if result.moved:
            session.grid = result.grid
            session.score += result.points
            session.move_count += 1
            if session.score > session.best_score:
                session.best_score = session.score
                new_best = True
            if self.score_book is not None:
                self.score_book.update_best(session.player_name, session.score)

        if result.terminal:
            session.state = SessionState.GAME_OVER
            self.state = LoopState.GAME_OVER
            if self.score_book is not None:
                self.score_book.record_game(session.player_name, session.score)

        return TurnResult(
            success=True,
            loop_state=self.state,
            direction=result.direction,
            points=result.points,
            moved=result.moved,
            score=session.score,
            best_score=session.best_score,
            new_best=new_best,
            game_over=result.terminal,
            final_score=session.score if result.terminal else None,
        )

    def play_policy(self, policy: MovePolicy, max_moves: int | None = None) -> TurnResult | None:
        """
        Let a policy play until game over or max_moves.

        Returns the last TurnResult, or None if no move was played.
        """
        last = None
        played = 0
        while self.session.is_active() and (max_moves is None or played < max_moves):
            legal = self.session.engine.legal_moves(self.session.grid)
            decision = policy.select_move(self.session.grid, legal)
            last = self.play(decision.direction)
            played += 1
        return last

    def restart(self) -> TurnResult:
        """Start a new game in the same session."""
        self.session.new_game()
        self.state = LoopState.WAITING_MOVE
        return TurnResult(
            success=True,
            loop_state=self.state,
            score=0,
            best_score=self.session.best_score,
        )
