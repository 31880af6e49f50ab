"""
Tests for move policies.
"""

import pytest

from ..bots import MovePolicy, RandomPolicy, FirstLegalPolicy, POLICIES
from ..engine_core import Direction, GridEngine, TileSpawner
from .conftest import TERMINAL_GRID, grid_with_rows


class TestRandomPolicy:
    """Tests for RandomPolicy."""

    def test_selects_legal_move(self):
        policy = RandomPolicy(seed=42)
        legal = [Direction.DOWN, Direction.RIGHT]
        for _ in range(20):
            decision = policy.select_move(grid_with_rows([2, 0, 0, 0]), legal)
            assert decision.direction in legal
            assert decision.evaluated_moves == 2

    def test_same_seed_same_choices(self):
        legal = list(Direction)
        first, second = RandomPolicy(seed=7), RandomPolicy(seed=7)
        a = [first.select_move([], legal).direction for _ in range(10)]
        b = [second.select_move([], legal).direction for _ in range(10)]
        assert a == b

    def test_no_legal_moves_raises(self):
        with pytest.raises(ValueError):
            RandomPolicy(seed=1).select_move(TERMINAL_GRID, [])


class TestFirstLegalPolicy:
    """Tests for FirstLegalPolicy."""

    def test_default_order(self):
        policy = FirstLegalPolicy()
        decision = policy.select_move([], [Direction.RIGHT, Direction.LEFT])
        assert decision.direction == Direction.LEFT
        assert decision.evaluated_moves == 2

    def test_custom_order(self):
        policy = FirstLegalPolicy(order=(Direction.DOWN, Direction.RIGHT))
        decision = policy.select_move([], [Direction.RIGHT, Direction.DOWN])
        assert decision.direction == Direction.DOWN

    def test_no_legal_moves_raises(self):
        with pytest.raises(ValueError):
            FirstLegalPolicy().select_move(TERMINAL_GRID, [])

    def test_plays_a_game_to_the_end(self):
        engine = GridEngine(spawner=TileSpawner.seeded(11))
        policy = FirstLegalPolicy()
        grid = engine.initialize()
        moves = 0
        while not engine.is_terminal(grid):
            decision = policy.select_move(grid, engine.legal_moves(grid))
            grid = engine.apply_move(grid, decision.direction).grid
            moves += 1
        assert moves > 0
        assert engine.legal_moves(grid) == []


class TestPolicyRegistry:
    """Tests for the policy registry."""

    def test_registry_names(self):
        assert set(POLICIES) == {"random", "first"}
        for policy_cls in POLICIES.values():
            assert issubclass(policy_cls, MovePolicy)

    def test_create_from_registry(self):
        a = POLICIES["random"].create(seed=7)
        b = POLICIES["random"].create(seed=7)
        legal = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]

        assert isinstance(a, RandomPolicy)
        assert [a.select_move([], legal).direction for _ in range(10)] == \
            [b.select_move([], legal).direction for _ in range(10)]
        assert isinstance(POLICIES["first"].create(seed=7), FirstLegalPolicy)

    def test_get_name(self):
        assert RandomPolicy().get_name() == "RandomPolicy"
