"""
Integration tests - Sessions, game loop and scores.

Tests the complete flow:
1. Create session
2. Play moves through the game loop
3. Reach game over
4. Restart and keep the best score
"""

import time

from ..bots import FirstLegalPolicy, RandomPolicy
from ..engine_core import Direction, GridEngine, TileSpawner
from ..session import (
    GameLoop, LoopState, ScoreBook, SessionManager, SessionState,
)
from .conftest import grid_with_rows


class TestSessionManager:
    """Tests for session lifecycle."""

    def test_create_session(self, manager):
        session = manager.create_session(player_name="alice", seed=1)

        assert session.session_id
        assert session.player_name == "alice"
        assert session.state == SessionState.ACTIVE
        assert session.score == 0
        assert len(session.grid) == 16
        assert sum(1 for v in session.grid if v) == 2

    def test_seed_makes_grid_reproducible(self, manager):
        a = manager.create_session(seed=99)
        b = manager.create_session(seed=99)
        assert a.grid == b.grid
        assert a.session_id != b.session_id

    def test_session_lifecycle(self, manager):
        session = manager.create_session()
        session_id = session.session_id

        assert session_id in manager.list_active_sessions()
        assert manager.end_session(session_id)
        assert session_id not in manager.list_active_sessions()
        assert manager.get_session(session_id) is None
        assert session.state == SessionState.ABANDONED

    def test_end_unknown_session(self, manager):
        assert not manager.end_session("nope")

    def test_cleanup_stale_sessions(self, manager):
        stale = manager.create_session()
        fresh = manager.create_session()
        stale.last_active = time.time() - 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == [stale.session_id]
        assert manager.get_session(fresh.session_id) is not None

    def test_best_score_carried_into_new_session(self, manager):
        manager.score_book.update_best("alice", 512)
        session = manager.create_session(player_name="alice")
        assert session.best_score == 512


class TestGameLoop:
    """Tests for playing moves through the loop."""

    def test_move_adds_points_to_score(self, manager):
        session = manager.create_session(player_name="bob", seed=3)
        session.grid = grid_with_rows([2, 2, 0, 0], [0, 0, 4, 4])
        loop = GameLoop(session, manager.score_book)

        result = loop.play(Direction.LEFT)

        assert result.success
        assert result.moved
        assert result.points == 12
        assert result.score == 12
        assert result.best_score == 12
        assert result.new_best
        assert session.move_count == 1
        assert manager.score_book.best("bob") == 12

    def test_noop_move_keeps_grid(self, manager):
        session = manager.create_session(seed=3)
        session.grid = grid_with_rows([2, 4, 8, 16])
        grid_before = list(session.grid)
        loop = GameLoop(session)

        result = loop.play("left")

        assert result.success
        assert not result.moved
        assert result.points == 0
        assert session.grid == grid_before
        assert session.move_count == 0

    def test_game_over(self, nearly_over_loop, manager):
        session = nearly_over_loop.session
        session.score = 300

        result = nearly_over_loop.play(Direction.LEFT)

        assert result.success
        assert result.game_over
        assert result.final_score == 300
        assert result.loop_state == LoopState.GAME_OVER
        assert session.state == SessionState.GAME_OVER
        stats = manager.score_book.stats("alice")
        assert stats.games_played == 1
        assert stats.best_score == 300

    def test_moves_rejected_after_game_over(self, nearly_over_loop):
        nearly_over_loop.play(Direction.LEFT)
        grid = list(nearly_over_loop.session.grid)

        result = nearly_over_loop.play(Direction.RIGHT)

        assert not result.success
        assert result.game_over
        assert result.errors
        assert nearly_over_loop.session.grid == grid

    def test_restart_keeps_best_score(self, nearly_over_loop):
        nearly_over_loop.session.score = 64
        nearly_over_loop.session.best_score = 64
        nearly_over_loop.play(Direction.LEFT)

        result = nearly_over_loop.restart()
        session = nearly_over_loop.session

        assert result.success
        assert result.loop_state == LoopState.WAITING_MOVE
        assert session.state == SessionState.ACTIVE
        assert session.score == 0
        assert session.best_score == 64
        assert session.games_started == 2
        assert sum(1 for v in session.grid if v) == 2

    def test_policy_plays_to_game_over(self, manager):
        session = manager.create_session(player_name="bot", seed=8)
        loop = GameLoop(session, manager.score_book)

        last = loop.play_policy(RandomPolicy(seed=8))

        assert last.game_over
        assert session.state == SessionState.GAME_OVER
        assert manager.score_book.stats("bot").games_played == 1
        assert manager.score_book.best("bot") == session.score

    def test_policy_respects_max_moves(self, manager):
        session = manager.create_session(seed=8)
        loop = GameLoop(session)

        loop.play_policy(FirstLegalPolicy(), max_moves=3)

        assert session.move_count == 3

    def test_score_matches_sum_of_points(self):
        engine = GridEngine(spawner=TileSpawner.seeded(21))
        manager = SessionManager()
        session = manager.create_session(seed=21)
        session.engine = engine
        loop = GameLoop(session)
        policy = RandomPolicy(seed=21)

        total = 0
        while session.is_active():
            decision = policy.select_move(session.grid, engine.legal_moves(session.grid))
            total += loop.play(decision.direction).points

        assert session.score == total


class TestScoreBook:
    """Tests for in-memory best scores."""

    def test_unknown_player(self):
        book = ScoreBook()
        assert book.best("nobody") == 0
        assert book.stats("nobody").games_played == 0

    def test_update_best_only_raises(self):
        book = ScoreBook()
        assert book.update_best("alice", 100)
        assert not book.update_best("alice", 50)
        assert book.best("alice") == 100

    def test_record_game(self):
        book = ScoreBook()
        book.record_game("alice", 100)
        book.record_game("alice", 300)

        stats = book.stats("alice")
        assert stats.games_played == 2
        assert stats.total_score == 400
        assert stats.average_score == 200
        assert stats.best_score == 300
        assert book.players() == ["alice"]

    def test_top_orders_by_best_score(self):
        book = ScoreBook()
        book.update_best("alice", 100)
        book.update_best("bob", 300)
        book.update_best("carol", 100)
        book.update_best("dave", 200)

        assert [s.player_name for s in book.top(10)] == ["bob", "dave", "alice", "carol"]
        assert [s.player_name for s in book.top(2)] == ["bob", "dave"]
        assert book.top(0) == []

    def test_recent_games_newest_first(self):
        book = ScoreBook()
        for score in range(12):
            book.record_game("alice", score)

        recent = book.recent_games()
        assert len(recent) == 10
        assert [g.score for g in recent[:3]] == [11, 10, 9]
        assert recent[-1].score == 2
        assert book.recent_games(2)[1].score == 10
        assert book.total_games == 12

    def test_game_over_lands_in_recent_games(self, nearly_over_loop, manager):
        nearly_over_loop.play(Direction.LEFT)

        recent = manager.score_book.recent_games()
        assert [(g.player_name, g.score) for g in recent] == [("alice", 0)]
        assert recent[0].finished_at > 0
        assert manager.score_book.total_games == 1
