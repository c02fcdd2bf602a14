"""
Game State - Snapshot of one session at a point in time.

Design principles:
- Immutable: transitions return a new state via _copy_with
- Replayable: the action history rebuilds any state from the start
- Self-contained: the remaining pool travels with the state
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..problems.model import Problem


class GamePhase(Enum):
    """Session lifecycle."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


@dataclass(frozen=True)
class GameState:
    """
    Complete session state.

    This is the canonical state that the reducer operates on.
    All state changes go through the reducer.
    """
    phase: GamePhase = GamePhase.NOT_STARTED

    # Current problem (None before the first problem and after the pool runs out)
    current_problem: Problem | None = None
    current_level: int = 1

    score: int = 0
    combo: int = 0
    remaining_time: int = 0  # Seconds

    # Per-problem progress, cleared when the problem changes
    tapped_lines: frozenset[int] = frozenset()
    solved_issue_ids: frozenset[str] = frozenset()

    # Session-wide progress; issue ids are only unique per problem,
    # so solved issues are kept as (problem_id, issue_id)
    all_solved_issues: frozenset[tuple[str, str]] = frozenset()
    problems_completed: int = 0

    # Pool, consumed from the front
    remaining_pool: tuple[Problem, ...] = ()

    # Every problem made current, in order (for result aggregation)
    visited_problems: tuple[Problem, ...] = ()

    # History (for replay)
    action_history: tuple[Any, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.phase == GamePhase.IN_PROGRESS

    @property
    def is_ended(self) -> bool:
        return self.phase == GamePhase.ENDED

    @property
    def issues_found(self) -> int:
        return len(self.all_solved_issues)

    @property
    def current_problem_complete(self) -> bool:
        """True if the current problem has issues and all of them are found."""
        problem = self.current_problem
        if problem is None or not problem.issues:
            return False
        return problem.issue_ids <= self.solved_issue_ids

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            phase=kwargs.get("phase", self.phase),
            current_problem=kwargs.get("current_problem", self.current_problem),
            current_level=kwargs.get("current_level", self.current_level),
            score=kwargs.get("score", self.score),
            combo=kwargs.get("combo", self.combo),
            remaining_time=kwargs.get("remaining_time", self.remaining_time),
            tapped_lines=kwargs.get("tapped_lines", self.tapped_lines),
            solved_issue_ids=kwargs.get("solved_issue_ids", self.solved_issue_ids),
            all_solved_issues=kwargs.get("all_solved_issues", self.all_solved_issues),
            problems_completed=kwargs.get("problems_completed", self.problems_completed),
            remaining_pool=kwargs.get("remaining_pool", self.remaining_pool),
            visited_problems=kwargs.get("visited_problems", self.visited_problems),
            action_history=kwargs.get("action_history", self.action_history),
        )
