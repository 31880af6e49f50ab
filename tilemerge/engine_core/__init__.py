"""
Engine Core - Deterministic grid rules for the tile-merging puzzle.

The engine is the runtime that:
1. Creates a fresh grid with two tiles
2. Slides and merges lines for a move
3. Spawns one tile after every move that changed the grid
4. Detects terminal grids
"""

from .state import (
    GRID_SIZE,
    Direction,
    GamePhase,
    Grid,
    GridError,
    InvalidGridError,
    UnsupportedGridSizeError,
    empty_cells,
    format_grid,
    max_tile,
)
from .action import MoveResult
from .spawn import TileSpawner
from .engine import GridEngine, apply_move, initialize, is_terminal, merge_line

__all__ = [
    "GRID_SIZE",
    "Direction",
    "GamePhase",
    "Grid",
    "GridError",
    "InvalidGridError",
    "UnsupportedGridSizeError",
    "empty_cells",
    "format_grid",
    "max_tile",
    "MoveResult",
    "TileSpawner",
    "GridEngine",
    "apply_move",
    "initialize",
    "is_terminal",
    "merge_line",
]
