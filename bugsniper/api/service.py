"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Hands finished results to the result store
4. Formats responses for the client

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
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
from ..config import GameConfig
from ..problems.model import Issue, UI_LANGUAGES, ALL_LANGUAGES, is_valid_language_filter
from ..problems.repository import ProblemRepository, default_repository
from ..engine_core.action import ActionResult
from ..session import GameSession, SessionManager, ScoreRecord, ResultStore, InMemoryResultStore
from ..session.store import RANKING_LIMIT


@dataclass
class APIService:
    """
    Main API service for the game client.

    Usage:
        service = APIService(repository=default_repository())

        session = service.create_session(CreateSessionRequest(code_language="python"))
        service.tap(session.session_id, 3)
        service.tick(session.session_id)
        ...
        result = service.save_result(session.session_id)
    """
    repository: ProblemRepository = field(default_factory=default_repository)
    config: GameConfig = field(default_factory=GameConfig)
    result_store: ResultStore = field(default_factory=InMemoryResultStore)
    session_manager: SessionManager | None = None

    # Result id per session, so a result is stored only once
    _saved_results: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(self.repository, self.config)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Start a new session with a fresh pool."""
        if not is_valid_language_filter(request.code_language):
            return ErrorResponse(
                error=f"Unknown code language: {request.code_language}",
                error_code=ErrorCode.INVALID_LANGUAGE,
            )
        if request.ui_language not in UI_LANGUAGES:
            return ErrorResponse(
                error=f"Unknown UI language: {request.ui_language}",
                error_code=ErrorCode.INVALID_LANGUAGE,
            )

        session = self.session_manager.create_session(
            code_language=request.code_language,
            ui_language=request.ui_language,
            seed=request.seed,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        """Discard a session (finished or abandoned)."""
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        """List active sessions."""
        return self.session_manager.list_active_sessions()

    def tap(self, session_id: str, line_number: int) -> ActionResponse | ErrorResponse:
        """Tap a line in the current problem."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._action_to_response(session, session.tap(line_number))

    def skip(self, session_id: str) -> ActionResponse | ErrorResponse:
        """Move on to the next problem."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._action_to_response(session, session.skip())

    def tick(self, session_id: str, ticks: int = 1) -> ActionResponse | ErrorResponse:
        """
        Advance the countdown.

        Stops early once the session ends; the response reflects the last tick.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        result = session.tick()
        for _ in range(ticks - 1):
            if not session.is_active():
                break
            result = session.tick()
        return self._action_to_response(session, result)

    def save_result(
        self, session_id: str, player_name: str | None = None
    ) -> ResultResponse | ErrorResponse:
        """
        Store the result of an ended session.

        Saving twice returns the record stored the first time.
        """
        if session_id in self._saved_results:
            record = self.result_store.get(self._saved_results[session_id])
            if record:
                return self._record_to_response(record)

        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        if session.is_active():
            return ErrorResponse(
                error="Session is still in progress",
                error_code=ErrorCode.SESSION_ACTIVE,
                details={"remaining_time": session.state.remaining_time},
            )

        record = session.result.to_record(
            ui_language=session.ui_language,
            code_language=session.code_language,
            player_name=player_name,
        )
        self._saved_results[session_id] = self.result_store.save(record)
        return self._record_to_response(record)

    def get_result(self, result_id: str) -> ResultResponse | ErrorResponse:
        """Get a stored result."""
        record = self.result_store.get(result_id)
        if not record:
            return ErrorResponse(
                error=f"Result {result_id} not found",
                error_code=ErrorCode.RESULT_NOT_FOUND,
            )
        return self._record_to_response(record)

    def ranking(
        self, code_language: str = ALL_LANGUAGES, limit: int = RANKING_LIMIT
    ) -> RankingResponse | ErrorResponse:
        """Best scores of the last week."""
        if not is_valid_language_filter(code_language):
            return ErrorResponse(
                error=f"Unknown code language: {code_language}",
                error_code=ErrorCode.INVALID_LANGUAGE,
            )
        records = self.result_store.top_scores(code_language=code_language, limit=limit)
        entries = [self._record_to_response(r) for r in records]
        return RankingResponse(code_language=code_language, entries=entries, count=len(entries))

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: GameSession) -> SessionResponse:
        state = session.state
        problem = state.current_problem

        problem_view = None
        found_issues = []
        if problem:
            problem_view = ProblemView(
                problem_id=problem.problem_id,
                code_language=problem.code_language,
                level=problem.level,
                code=list(problem.code),
                issue_count=problem.issue_count,
            )
            found_issues = [
                _issue_info(issue, session.ui_language)
                for issue in problem.issues
                if issue.issue_id in state.solved_issue_ids
            ]

        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus.IN_PROGRESS if state.is_active else SessionStatus.ENDED,
            code_language=session.code_language,
            ui_language=session.ui_language,
            score=state.score,
            combo=state.combo,
            remaining_time=state.remaining_time,
            current_level=state.current_level,
            problems_completed=state.problems_completed,
            issues_found=state.issues_found,
            problem=problem_view,
            tapped_lines=sorted(state.tapped_lines),
            found_issues=found_issues,
        )

    def _action_to_response(self, session: GameSession, result: ActionResult) -> ActionResponse:
        error_code = None
        messages = list(result.state_changes)
        if not result.success:
            error_code = ErrorCode.GAME_OVER
            messages.append(result.error)

        return ActionResponse(
            session_id=session.session_id,
            success=result.success,
            outcome=result.outcome.value if result.outcome else None,
            points=result.points,
            bonus=result.bonus,
            issue=_issue_info(result.issue, session.ui_language) if result.issue else None,
            messages=messages,
            error_code=error_code,
            session=self._session_to_response(session),
        )

    def _record_to_response(self, record: ScoreRecord) -> ResultResponse:
        return ResultResponse(
            result_id=record.record_id,
            score=record.score,
            problems_solved=record.problems_solved,
            issues_found=record.issues_found,
            total_issues=record.total_issues,
            accuracy=record.accuracy,
            ui_language=record.ui_language,
            code_language=record.code_language,
            player_name=record.player_name,
            created_at=record.created_at,
        )


def _issue_info(issue: Issue, ui_language: str) -> IssueInfo:
    return IssueInfo(
        issue_id=issue.issue_id,
        lines=sorted(issue.lines),
        type=issue.category.value,
        severity=issue.severity.value,
        score=issue.score,
        description=issue.describe(ui_language),
    )
