"""
tilemerge - Tile-Merging Puzzle Engine

A deterministic, rules-driven engine for the 2048-style sliding puzzle.
The package provides:
- The grid engine (move, merge, spawn, terminal detection)
- Move policies for automatic play
- In-memory game sessions with score and best-score tracking
- A REST/WebSocket API and a command-line interface
"""

__version__ = "0.1.0"
