"""
Tile Spawner - The engine's only source of randomness.

The spawner is injected into the engine so tests can fix
tile placement and value with a seeded generator.
"""

from __future__ import annotations
import random

from .state import Grid, empty_cells


SPAWN_VALUES = (2, 4)
SPAWN_WEIGHTS = (0.9, 0.1)


class TileSpawner:
    """
    Places one new tile into a uniformly chosen empty cell.

    Usage:
        spawner = TileSpawner(random.Random(42))
        spawned = spawner.spawn(grid)  # (index, value) or None
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    @classmethod
    def seeded(cls, seed: int | None) -> TileSpawner:
        return cls(random.Random(seed))

    def choose_value(self) -> int:
        return SPAWN_VALUES[0] if self.rng.random() < SPAWN_WEIGHTS[0] else SPAWN_VALUES[1]

    def spawn(self, grid: Grid) -> tuple[int, int] | None:
        """
        Spawn a tile into `grid` in place.

        Returns (index, value), or None when the grid has no empty cell.
        """
        empties = empty_cells(grid)
        if not empties:
            return None
        index = self.rng.choice(empties)
        value = self.choose_value()
        grid[index] = value
        return index, value
