"""
Session Results - End-of-session summary and the record handed to storage.

The aggregator reduces an ended GameState into a SessionResult exactly once.
It performs no I/O; storing the result is the ResultStore's job.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..engine_core.state import GameState, GamePhase


class SessionNotEndedError(ValueError):
    """Raised when a result is requested for a session still in progress."""


@dataclass(frozen=True)
class SessionResult:
    """Summary of a finished session."""
    score: int
    problems_solved: int
    issues_found: int
    total_issues: int
    accuracy: float  # issues_found / total_issues, 0.0 with no issues

    def to_record(
        self,
        ui_language: str,
        code_language: str,
        player_name: str | None = None,
    ) -> ScoreRecord:
        """Attach caller tags and an id, ready for a ResultStore."""
        return ScoreRecord(
            score=self.score,
            problems_solved=self.problems_solved,
            issues_found=self.issues_found,
            total_issues=self.total_issues,
            accuracy=self.accuracy,
            ui_language=ui_language,
            code_language=code_language,
            player_name=player_name,
        )


@dataclass(frozen=True)
class ScoreRecord:
    """A stored session result."""
    score: int
    problems_solved: int
    issues_found: int
    total_issues: int
    accuracy: float
    ui_language: str
    code_language: str
    player_name: str | None = None
    record_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def aggregate_result(state: GameState) -> SessionResult:
    """
    Summarize an ended session.

    Total issues counts every problem that was ever current, including
    the last one even if it was left unsolved.
    """
    if state.phase != GamePhase.ENDED:
        raise SessionNotEndedError(f"Session is {state.phase.value}, not ended")

    total_issues = sum(problem.issue_count for problem in state.visited_problems)
    issues_found = state.issues_found
    accuracy = issues_found / total_issues if total_issues > 0 else 0.0

    return SessionResult(
        score=state.score,
        problems_solved=state.problems_completed,
        issues_found=issues_found,
        total_issues=total_issues,
        accuracy=accuracy,
    )
