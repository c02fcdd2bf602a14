"""
API Module - Game client interface.

Exposes the engine via REST API. The client:
1. Starts a session for a code language
2. Sends taps, skips and timer ticks
3. Stores the result once the session ends
4. Reads results and the weekly ranking

All game state is session-scoped.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    TapRequest,
    TickRequest,
    SaveResultRequest,
    # Responses
    SessionResponse,
    ActionResponse,
    ResultResponse,
    RankingResponse,
    ErrorResponse,
    # Shared
    IssueInfo,
    ProblemView,
    # Enums
    SessionStatus,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "TapRequest",
    "TickRequest",
    "SaveResultRequest",
    # Responses
    "SessionResponse",
    "ActionResponse",
    "ResultResponse",
    "RankingResponse",
    "ErrorResponse",
    # Shared
    "IssueInfo",
    "ProblemView",
    # Enums
    "SessionStatus",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
