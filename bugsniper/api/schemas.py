"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the game client and the engine.
Session views never include where unsolved issues are.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- SESSION_ACTIVE: Result requested before the session ended
- RESULT_NOT_FOUND: No stored result with that id
- INVALID_LANGUAGE: Unknown code or UI language
- GAME_OVER: Event sent after the session ended
- VALIDATION_ERROR: Request body or query failed validation
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_ACTIVE = "SESSION_ACTIVE"
    RESULT_NOT_FOUND = "RESULT_NOT_FOUND"
    INVALID_LANGUAGE = "INVALID_LANGUAGE"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class IssueInfo(BaseModel):
    """A found issue, for feedback and review."""
    issue_id: str
    lines: list[int]
    type: str = Field(description="bug, security, performance, design")
    severity: str = Field(description="minor, normal, critical")
    score: int
    description: str = Field("", description="Text in the session's UI language")

    model_config = {"from_attributes": True}


class ProblemView(BaseModel):
    """The problem on screen, without its answers."""
    problem_id: str
    code_language: str
    level: int
    code: list[str]
    issue_count: int


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a game session."""
    code_language: str = Field("all", description="Code language filter or 'all'")
    ui_language: str = Field("en", description="ja or en")
    seed: Optional[int] = Field(None, description="Seed for a reproducible pool")


class TapRequest(BaseModel):
    """Tap on a 1-based line number. Lines without an issue count as a miss."""
    line: int = Field(..., description="1-based line number")


class TickRequest(BaseModel):
    """Seconds elapsed on the client's countdown timer."""
    ticks: int = Field(1, ge=1, le=3600, description="Number of one-second ticks")


class SaveResultRequest(BaseModel):
    """Request to store the result of an ended session."""
    player_name: Optional[str] = Field(None, max_length=32)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Current view of a session."""
    session_id: str
    status: SessionStatus
    code_language: str
    ui_language: str
    score: int
    combo: int
    remaining_time: int
    current_level: int
    problems_completed: int
    issues_found: int
    problem: Optional[ProblemView] = None
    tapped_lines: list[int] = Field(default_factory=list)
    found_issues: list[IssueInfo] = Field(
        default_factory=list, description="Issues found in the current problem"
    )
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response after a tap, skip or tick."""
    session_id: str
    success: bool
    outcome: Optional[str] = Field(None, description="hit, miss, already_tapped")
    points: int = Field(0, description="Score change applied")
    bonus: int = Field(0, description="Completion bonus from a skip")
    issue: Optional[IssueInfo] = None
    messages: list[str] = Field(default_factory=list)
    error_code: Optional[ErrorCode] = None
    session: SessionResponse
    api_version: str = "v1"


class ResultResponse(BaseModel):
    """A stored session result."""
    result_id: str
    score: int
    problems_solved: int
    issues_found: int
    total_issues: int
    accuracy: float = Field(..., ge=0.0, le=1.0)
    ui_language: str
    code_language: str
    player_name: Optional[str] = None
    created_at: datetime
    api_version: str = "v1"


class RankingResponse(BaseModel):
    """Best scores of the last week."""
    code_language: str
    entries: list[ResultResponse]
    count: int


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    problem_count: int
