"""
Move Policy - Interface for automatic move selection.

A MovePolicy takes a grid and its legal moves and returns a decision.
Policies drive simulations and demo play; they never touch the
engine's randomness.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random

from ..engine_core.state import Direction, Grid


@dataclass
class MoveDecision:
    """
    A decision made by a policy.

    Contains:
    - The direction to play
    - Explanation (for UI/debugging)
    - How many moves were considered
    """
    direction: Direction
    explanation: str = ""
    evaluated_moves: int = 0


class MovePolicy(ABC):
    """
    Abstract base class for move policies.

    Implementations can range from random play
    to search over future grids.
    """

    @abstractmethod
    def select_move(self, grid: Grid, legal_moves: list[Direction]) -> MoveDecision:
        """
        Select a move from the legal moves.

        Args:
            grid: Current grid
            legal_moves: Directions that would change the grid

        Returns:
            MoveDecision with the selected direction
        """
        pass

    @classmethod
    def create(cls, seed: int | None = None) -> MovePolicy:
        """Build the policy from CLI options. Deterministic policies ignore the seed."""
        return cls()

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(MovePolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Simulations
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    @classmethod
    def create(cls, seed: int | None = None) -> RandomPolicy:
        return cls(seed=seed)

    def select_move(self, grid: Grid, legal_moves: list[Direction]) -> MoveDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return MoveDecision(
            direction=self.rng.choice(legal_moves),
            explanation="Selected randomly",
            evaluated_moves=len(legal_moves),
        )


class FirstLegalPolicy(MovePolicy):
    """
    First-legal policy - plays the first legal move in a preference order.

    The default order keeps tiles packed toward the top-left corner.
    Used for deterministic testing.
    """

    DEFAULT_ORDER = (Direction.UP, Direction.LEFT, Direction.RIGHT, Direction.DOWN)

    def __init__(self, order: tuple[Direction, ...] | None = None):
        self.order = tuple(order) if order else self.DEFAULT_ORDER

    def select_move(self, grid: Grid, legal_moves: list[Direction]) -> MoveDecision:
        for evaluated, direction in enumerate(self.order, start=1):
            if direction in legal_moves:
                return MoveDecision(
                    direction=direction,
                    explanation=f"First legal move in order {[d.value for d in self.order]}",
                    evaluated_moves=evaluated,
                )
        raise ValueError("No legal moves available")


POLICIES: dict[str, type[MovePolicy]] = {
    "random": RandomPolicy,
    "first": FirstLegalPolicy,
}
