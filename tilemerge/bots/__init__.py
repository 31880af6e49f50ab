"""
Bots module - Automatic move selection.

Provides:
- MovePolicy: Interface for move selection
- RandomPolicy: Uniform choice among legal moves
- FirstLegalPolicy: Deterministic preference order
"""

from .policy import MovePolicy, MoveDecision, RandomPolicy, FirstLegalPolicy, POLICIES

__all__ = [
    "MovePolicy",
    "MoveDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "POLICIES",
]
