"""
Move Results - What the engine hands back after a move.

All state changes flow through GridEngine.apply_move(), which
returns a MoveResult. Callers own the score: they add `points`
to their running total and gate further moves on `terminal`.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Direction, GamePhase, Grid


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - The grid after the move (unchanged when nothing moved)
    - Points earned by merges in this move
    - Whether any cell changed
    - Whether the resulting grid is terminal
    - The spawned tile as (index, value), if any
    """
    grid: Grid
    direction: Direction
    points: int = 0
    moved: bool = False
    terminal: bool = False
    spawned: tuple[int, int] | None = None

    @property
    def phase(self) -> GamePhase:
        return GamePhase.TERMINAL if self.terminal else GamePhase.ACTIVE

    @classmethod
    def no_op(cls, grid: Grid, direction: Direction, terminal: bool) -> MoveResult:
        """Create a result for a move that changed nothing."""
        return cls(grid=grid, direction=direction, terminal=terminal)
