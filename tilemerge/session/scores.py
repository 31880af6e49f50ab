"""
Score Book - In-memory best scores per player.

The engine never keeps score. Sessions add up the points the
engine reports and publish them here. The book lives as long
as the SessionManager that owns it; nothing is written to disk.

Besides per-player stats the book answers the leaderboard reads:
the top players by best score, the last few finished games and
the total number of games finished.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
import time

LEADERBOARD_SIZE = 20
RECENT_GAMES_LIMIT = 10


@dataclass
class PlayerStats:
    """Best score and finished-game totals for one player."""
    player_name: str
    best_score: int = 0
    games_played: int = 0
    total_score: int = 0

    @property
    def average_score(self) -> int:
        if self.games_played == 0:
            return 0
        return round(self.total_score / self.games_played)


@dataclass
class GameRecord:
    """A finished game."""
    player_name: str
    score: int
    finished_at: float


@dataclass
class ScoreBook:
    """
    Per-player best scores.

    Usage:
        book = ScoreBook()
        book.update_best("alice", 128)   # True, new best
        book.record_game("alice", 128)   # game finished
        book.stats("alice").games_played # 1
        book.top(5)                      # [PlayerStats(alice, 128, ...)]
    """
    _players: dict[str, PlayerStats] = field(default_factory=dict)
    _recent: deque[GameRecord] = field(default_factory=lambda: deque(maxlen=RECENT_GAMES_LIMIT))
    total_games: int = 0

    def stats(self, player_name: str) -> PlayerStats:
        """Get stats for a player, empty if never seen."""
        return self._players.get(player_name) or PlayerStats(player_name=player_name)

    def best(self, player_name: str) -> int:
        return self.stats(player_name).best_score

    def update_best(self, player_name: str, score: int) -> bool:
        """Raise the player's best score. Returns True if it changed."""
        stats = self._players.setdefault(player_name, PlayerStats(player_name=player_name))
        if score > stats.best_score:
            stats.best_score = score
            return True
        return False

    def record_game(self, player_name: str, score: int) -> GameRecord:
        """Record a finished game's final score."""
        self.update_best(player_name, score)
        stats = self._players[player_name]
        stats.games_played += 1
        stats.total_score += score
        self.total_games += 1

        record = GameRecord(player_name=player_name, score=score, finished_at=time.time())
        self._recent.append(record)
        return record

    def top(self, k: int = LEADERBOARD_SIZE) -> list[PlayerStats]:
        """
        Up to k players, highest best score first.

        Equal scores keep the order in which the players were first seen.
        """
        if k <= 0:
            return []
        ranked = sorted(self._players.values(), key=lambda s: s.best_score, reverse=True)
        return ranked[:k]

    def recent_games(self, count: int = RECENT_GAMES_LIMIT) -> list[GameRecord]:
        """The last finished games, newest first."""
        if count <= 0:
            return []
        return list(reversed(self._recent))[:count]

    def players(self) -> list[str]:
        return list(self._players)
