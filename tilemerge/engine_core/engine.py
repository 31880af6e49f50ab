"""
Grid Engine - Applies moves to grids.

The engine is the single point of grid mutation.
All grid changes must go through apply_move().

Design principles:
- Pure function: (grid, direction) -> MoveResult
- Validates before applying
- Never mutates the caller's grid
- Randomness comes only from the injected TileSpawner
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import (
    GRID_SIZE, Direction, GamePhase, Grid, UnsupportedGridSizeError,
    line_indexes, validate_grid,
)
from .action import MoveResult
from .spawn import TileSpawner


def merge_line(line: list[int]) -> tuple[list[int], int]:
    """
    Slide and merge one line toward its head.

    Returns (merged line, points). A tile produced by a merge
    never merges again in the same pass.
    """
    tiles = [value for value in line if value != 0]
    merged: list[int] = []
    points = 0
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged.append(tiles[i] * 2)
            points += tiles[i] * 2
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    merged.extend([0] * (len(line) - len(merged)))
    return merged, points


@dataclass
class GridEngine:
    """
    Grid engine for an N x N board.

    Stateless between calls - the grid is always passed in.
    The spawner is the only thing the engine holds on to.
    """
    size: int = GRID_SIZE
    spawner: TileSpawner = field(default_factory=TileSpawner)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def initialize(self) -> Grid:
        """
        Create a fresh grid with two spawned tiles.

        Raises UnsupportedGridSizeError if the board has fewer than 2 cells.
        """
        if self.size < 2:
            raise UnsupportedGridSizeError(self.size)
        grid = [0] * self.cell_count
        self.spawner.spawn(grid)
        self.spawner.spawn(grid)
        return grid

    def apply_move(self, grid: Grid, direction: Direction | str) -> MoveResult:
        """
        Apply a move to the grid.

        Returns a MoveResult. When nothing changes (including any move
        on a terminal grid) the input grid comes back untouched, with
        zero points and no spawn.
        """
        direction = Direction(direction)
        grid = list(grid)
        validate_grid(grid, self.size)

        if self.is_terminal(grid):
            return MoveResult.no_op(grid, direction, terminal=True)

        new_grid, points = self._slide(grid, direction)
        if new_grid == grid:
            return MoveResult.no_op(grid, direction, terminal=False)

        spawned = self.spawner.spawn(new_grid)
        return MoveResult(
            grid=new_grid,
            direction=direction,
            points=points,
            moved=True,
            terminal=self.is_terminal(new_grid),
            spawned=spawned,
        )

    def is_terminal(self, grid: Grid) -> bool:
        """
        True iff the grid has no empty cell and no two horizontally
        or vertically adjacent cells hold the same value.
        """
        validate_grid(grid, self.size)
        if 0 in grid:
            return False
        n = self.size
        for i in range(n):
            for j in range(n):
                value = grid[i * n + j]
                if j < n - 1 and value == grid[i * n + j + 1]:
                    return False
                if i < n - 1 and value == grid[(i + 1) * n + j]:
                    return False
        return True

    def phase(self, grid: Grid) -> GamePhase:
        return GamePhase.TERMINAL if self.is_terminal(grid) else GamePhase.ACTIVE

    def legal_moves(self, grid: Grid) -> list[Direction]:
        """Directions that would change the grid. Consumes no randomness."""
        grid = list(grid)
        validate_grid(grid, self.size)
        return [
            direction for direction in Direction
            if self._slide(grid, direction)[0] != grid
        ]

    def _slide(self, grid: Grid, direction: Direction) -> tuple[Grid, int]:
        """Slide and merge every line. Returns (new grid, points) without spawning."""
        new_grid = list(grid)
        points = 0
        for line in line_indexes(direction, self.size):
            merged, line_points = merge_line([grid[i] for i in line])
            points += line_points
            for index, value in zip(line, merged):
                new_grid[index] = value
        return new_grid, points


def initialize(size: int = GRID_SIZE, spawner: TileSpawner | None = None) -> Grid:
    """Convenience function to create a fresh grid."""
    return GridEngine(size=size, spawner=spawner or TileSpawner()).initialize()


def apply_move(
    grid: Grid,
    direction: Direction | str,
    size: int = GRID_SIZE,
    spawner: TileSpawner | None = None,
) -> MoveResult:
    """Convenience function to apply a move."""
    engine = GridEngine(size=size, spawner=spawner or TileSpawner())
    return engine.apply_move(grid, direction)


def is_terminal(grid: Grid, size: int = GRID_SIZE) -> bool:
    """Convenience function for terminal-state detection."""
    return GridEngine(size=size).is_terminal(grid)
