"""
Pytest fixtures for tilemerge tests.
"""

import random

import pytest

from ..engine_core import GridEngine, MoveResult, TileSpawner
from ..session import SessionManager, GameLoop


class FixedValueSpawner(TileSpawner):
    """Spawner that always places the same value (placement still seeded)."""

    def __init__(self, value: int = 2, seed: int = 0):
        super().__init__(random.Random(seed))
        self.value = value

    def choose_value(self) -> int:
        return self.value


def without_spawn(result: MoveResult) -> list[int]:
    """The grid as it was after slide/merge, before the spawn."""
    grid = list(result.grid)
    if result.spawned:
        grid[result.spawned[0]] = 0
    return grid


def grid_with_rows(*rows: list[int], size: int = 4) -> list[int]:
    """Build a row-major grid from leading rows, padding with empty rows."""
    grid = [value for row in rows for value in row]
    return grid + [0] * (size * size - len(grid))


# Full board, checkerboard of 2/4: no horizontal or vertical equal pair
TERMINAL_GRID = [
    2, 4, 2, 4,
    4, 2, 4, 2,
    2, 4, 2, 4,
    4, 2, 4, 2,
]

# One move (left) from terminal if the spawned tile is a 2
NEARLY_TERMINAL_GRID = [
    2, 4, 2, 4,
    4, 2, 4, 2,
    2, 4, 2, 4,
    0, 8, 16, 32,
]


@pytest.fixture
def spawner() -> TileSpawner:
    """Seeded spawner for reproducible tests."""
    return TileSpawner(random.Random(1234))


@pytest.fixture
def engine(spawner: TileSpawner) -> GridEngine:
    """4x4 engine with a seeded spawner."""
    return GridEngine(size=4, spawner=spawner)


@pytest.fixture
def manager() -> SessionManager:
    """Fresh session manager."""
    return SessionManager()


@pytest.fixture
def nearly_over_loop(manager: SessionManager) -> GameLoop:
    """Game loop whose next left move ends the game."""
    session = manager.create_session(player_name="alice", seed=5)
    session.engine.spawner = FixedValueSpawner(2)
    session.grid = list(NEARLY_TERMINAL_GRID)
    return GameLoop(session, manager.score_book)
