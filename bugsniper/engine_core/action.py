"""
Action System - Session events and their results.

Actions are the only way a session changes:
1. TAP_LINE - the player taps a line number
2. SKIP - the player leaves the current problem
3. TICK - one second of the countdown elapses

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..problems.model import Issue


class ActionType(Enum):
    """Types of session events."""
    TAP_LINE = "tap_line"
    SKIP = "skip"
    TICK = "tick"


class TapOutcome(Enum):
    """What a tap did."""
    HIT = "hit"
    MISS = "miss"
    ALREADY_TAPPED = "already_tapped"


@dataclass(frozen=True)
class Action:
    """
    A single event to apply to the session state.

    Actions are:
    - Logged for replay
    - Applied atomically by the reducer
    """
    action_type: ActionType
    line_number: int | None = None  # TAP_LINE only

    @classmethod
    def tap(cls, line_number: int) -> Action:
        """Factory for a line tap."""
        return cls(action_type=ActionType.TAP_LINE, line_number=line_number)

    @classmethod
    def skip(cls) -> Action:
        """Factory for skipping to the next problem."""
        return cls(action_type=ActionType.SKIP)

    @classmethod
    def tick(cls) -> Action:
        """Factory for one second of countdown."""
        return cls(action_type=ActionType.TICK)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was applied
    - The resulting state (unchanged state if rejected)
    - Score feedback for the UI
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    # Feedback
    outcome: TapOutcome | None = None
    points: int = 0  # Score delta actually applied
    issue: Issue | None = None  # Issue found by a hit
    bonus: int = 0  # Completion bonus awarded by a skip

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes

    @classmethod
    def failure(
        cls, error: str, error_code: str | None = None, state: Any | None = None
    ) -> ActionResult:
        """Create a failure result. The state, if given, is returned unchanged."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        **feedback,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            **feedback,
        )
