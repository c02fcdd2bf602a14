"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through:
- Created when the player starts a game
- Holds the current game state
- Ends on time-out or when the pool runs out
- Produces one SessionResult for the ResultStore
"""

from .manager import SessionManager, GameSession
from .results import SessionResult, ScoreRecord, SessionNotEndedError, aggregate_result
from .store import ResultStore, InMemoryResultStore

__all__ = [
    "SessionManager",
    "GameSession",
    "SessionResult",
    "ScoreRecord",
    "SessionNotEndedError",
    "aggregate_result",
    "ResultStore",
    "InMemoryResultStore",
]
