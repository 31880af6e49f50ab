"""
Grid State - The board representation and the rules-level vocabulary.

A grid is a plain row-major list of N*N integers:
- 0 is an empty cell
- any other value is a power of two >= 2

Design principles:
- Plain data: a grid is a list[int], nothing more
- Immutable-friendly: the engine never mutates a caller's grid
- Loud failures: malformed grids raise instead of corrupting state
"""

from __future__ import annotations
from enum import Enum


GRID_SIZE = 4

Grid = list[int]


class Direction(str, Enum):
    """Directions a move can push the tiles toward."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class GamePhase(str, Enum):
    """Game-level state of a grid. TERMINAL is absorbing."""
    ACTIVE = "active"
    TERMINAL = "terminal"


class GridError(ValueError):
    """Base class for grid engine errors."""


class UnsupportedGridSizeError(GridError):
    """Raised when a grid cannot hold the two starting tiles."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"Unsupported grid size: {size} (need at least 2)")


class InvalidGridError(GridError):
    """Raised when a caller passes a grid the engine could not have produced."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid grid: " + "; ".join(errors))


def is_tile_value(value: int) -> bool:
    """True for 2, 4, 8, ..."""
    return value >= 2 and value & (value - 1) == 0


def validate_grid(grid: Grid, size: int) -> None:
    """
    Check the length and value invariants.

    Raises InvalidGridError listing every problem found.
    """
    errors: list[str] = []
    if len(grid) != size * size:
        errors.append(f"expected {size * size} cells, got {len(grid)}")
    for index, value in enumerate(grid):
        if value != 0 and not is_tile_value(value):
            errors.append(f"cell {index} holds {value}")
    if errors:
        raise InvalidGridError(errors)


def empty_cells(grid: Grid) -> list[int]:
    """Indexes of empty cells, in row-major order."""
    return [i for i, value in enumerate(grid) if value == 0]


def max_tile(grid: Grid) -> int:
    return max(grid, default=0)


def line_indexes(direction: Direction, size: int) -> list[list[int]]:
    """
    Cell indexes of every line a move in `direction` processes.

    Each line is ordered so its head is the edge the tiles move toward:
    rows for left/right, columns for up/down, reversed for right/down.
    """
    lines = []
    for k in range(size):
        if direction in (Direction.LEFT, Direction.RIGHT):
            line = [k * size + j for j in range(size)]
        else:
            line = [i * size + k for i in range(size)]
        if direction in (Direction.RIGHT, Direction.DOWN):
            line.reverse()
        lines.append(line)
    return lines


def format_grid(grid: Grid, size: int) -> str:
    """Render the grid as fixed-width text, one row per line."""
    width = max(4, len(str(max_tile(grid))))
    rows = []
    for i in range(size):
        cells = grid[i * size:(i + 1) * size]
        rows.append(" ".join(f"{value if value else '.':>{width}}" for value in cells))
    return "\n".join(rows)
