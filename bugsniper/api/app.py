"""
FastAPI Application - REST API for the game client.

Endpoints:
    GET    /api/v1/health                   Health check
    POST   /api/v1/sessions                 Start a game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session view
    DELETE /api/v1/sessions/{id}            Discard session
    POST   /api/v1/sessions/{id}/tap        Tap a line
    POST   /api/v1/sessions/{id}/skip       Skip to the next problem
    POST   /api/v1/sessions/{id}/tick       Advance the countdown
    POST   /api/v1/sessions/{id}/result     Store the result of an ended session
    GET    /api/v1/results/{id}             Get a stored result
    GET    /api/v1/ranking                  Best scores of the last week

The client owns the one-second timer and reports it through /tick.
All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import logging
import os

from .. import __version__

logger = logging.getLogger(__name__)

# Environment configuration
BUGSNIPER_ENV = os.getenv("BUGSNIPER_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..config import load_config
    from ..problems.model import ALL_LANGUAGES
    from ..session.store import RANKING_LIMIT
    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        TapRequest,
        TickRequest,
        SaveResultRequest,
        # Response models
        SessionResponse,
        ActionResponse,
        ResultResponse,
        RankingResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Bug Sniper API",
        description="""
Timed code-review game - find the bugs before the countdown ends.

## Game Flow

1. `POST /sessions` starts a game and returns the first problem
2. `POST /tap` for each suspicious line (misses cost a point and break the combo)
3. `POST /skip` moves on; finding every issue first earns a bonus
4. `POST /tick` once per second from the client timer
5. When the session has ended, `POST /result` stores the score

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `SESSION_ACTIVE` | Result requested before the session ended |
| `RESULT_NOT_FOUND` | Stored result does not exist |
| `INVALID_LANGUAGE` | Unknown code or UI language |
| `VALIDATION_ERROR` | Malformed request (422) |
        """,
        version=__version__,
        docs_url=None if BUGSNIPER_ENV == "production" else "/api/docs",
        redoc_url=None if BUGSNIPER_ENV == "production" else "/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService(config=load_config())

    error_status = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.RESULT_NOT_FOUND: 404,
        ErrorCode.SESSION_ACTIVE: 409,
    }

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Turn a service ErrorResponse into a JSON response with a status code."""
        return JSONResponse(
            status_code=error_status.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ErrorResponse(
            error="Invalid request",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": [
                {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
                for err in exc.errors()
            ]},
        )
        return JSONResponse(status_code=422, content=error.model_dump(mode="json"))

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        """Health check."""
        return HealthResponse(
            status="ok",
            service="bugsniper",
            version=__version__,
            problem_count=len(api_service.repository.all_problems()),
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown language"}},
        tags=["Sessions"],
        summary="Start a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Start a new game session.

        The pool is drawn once here; pass `seed` for a reproducible pool.
        """
        response = api_service.create_session(body)
        if isinstance(response, SessionResponse):
            logger.info("Session %s started via API", response.session_id)
        return respond(response)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session view",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current view of a game session."""
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="Discard a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """Discard a game session and release resources."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/tap",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Tap a line of the current problem",
    )
    async def tap(session_id: str, body: TapRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Tap a 1-based line number.

        Tapping the same line twice does nothing. Events sent after the
        session ended come back with `success=false` and `GAME_OVER`.
        """
        return respond(api_service.tap(session_id, body.line))

    @app.post(
        "/api/v1/sessions/{session_id}/skip",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Skip to the next problem",
    )
    async def skip(session_id: str) -> Union[ActionResponse, JSONResponse]:
        """Leave the current problem, earning the bonus if every issue was found."""
        return respond(api_service.skip(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/tick",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Advance the countdown",
    )
    async def tick(session_id: str, body: TickRequest) -> Union[ActionResponse, JSONResponse]:
        """Apply one-second ticks from the client timer."""
        return respond(api_service.tick(session_id, body.ticks))

    # =========================================================================
    # Result Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/result",
        response_model=ResultResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Session still in progress"},
        },
        tags=["Results"],
        summary="Store the result of an ended session",
    )
    async def save_result(
        session_id: str, body: SaveResultRequest
    ) -> Union[ResultResponse, JSONResponse]:
        """Store the session's result once; repeated calls return the same record."""
        return respond(api_service.save_result(session_id, body.player_name))

    @app.get(
        "/api/v1/results/{result_id}",
        response_model=ResultResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Results"],
        summary="Get a stored result",
    )
    async def get_result(result_id: str) -> Union[ResultResponse, JSONResponse]:
        return respond(api_service.get_result(result_id))

    @app.get(
        "/api/v1/ranking",
        response_model=RankingResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Results"],
        summary="Best scores of the last week",
    )
    async def ranking(
        code_language: Annotated[str, Query(description="Code language or 'all'")] = ALL_LANGUAGES,
        limit: Annotated[int, Query(ge=1, le=100)] = RANKING_LIMIT,
    ) -> Union[RankingResponse, JSONResponse]:
        return respond(api_service.ranking(code_language, limit))

    return app


# For running directly: uvicorn bugsniper.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
