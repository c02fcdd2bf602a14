"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Player picks a code language -> session created with its own pool
2. During the game:
   - The host's one-second timer sends ticks
   - The player taps lines and skips problems
   - The reducer updates the canonical state
3. Session ends (time up or pool exhausted)
   - The result is derived exactly once
   - The host hands it to a ResultStore
4. Session removed from memory

Each session gets its own random source, so sessions never share state.
"""

from __future__ import annotations
import logging
import random
import time
import uuid
from dataclasses import dataclass, field

from ..config import GameConfig
from ..problems.model import DEFAULT_UI_LANGUAGE, ALL_LANGUAGES
from ..problems.repository import ProblemRepository
from ..engine_core.state import GameState
from ..engine_core.action import Action, ActionResult
from ..engine_core.pool import ProblemPoolBuilder
from ..engine_core.reducer import Reducer, start_game
from .results import SessionResult, aggregate_result

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """
    One play-through, from first problem to time-out or pool exhaustion.

    Wraps the reducer so callers can send events without threading
    state through by hand. Events after the end are ignored.
    """
    session_id: str
    state: GameState
    reducer: Reducer
    code_language: str = ALL_LANGUAGES
    ui_language: str = DEFAULT_UI_LANGUAGE
    created_at: float = field(default_factory=time.time)
    seed: int | None = None

    _result: SessionResult | None = None

    def is_active(self) -> bool:
        """Check if session is still in progress."""
        return self.state.is_active

    def apply(self, action: Action) -> ActionResult:
        """Apply an action and keep the resulting state."""
        was_active = self.state.is_active
        result = self.reducer.apply(self.state, action)
        self.state = result.new_state
        if was_active and self.state.is_ended:
            logger.info(
                "Session %s ended: score=%d problems=%d",
                self.session_id, self.state.score, self.state.problems_completed,
            )
        return result

    def tap(self, line_number: int) -> ActionResult:
        return self.apply(Action.tap(line_number))

    def skip(self) -> ActionResult:
        return self.apply(Action.skip())

    def tick(self) -> ActionResult:
        return self.apply(Action.tick())

    @property
    def result(self) -> SessionResult:
        """
        Summary of the ended session, computed once.

        Raises SessionNotEndedError while the session is in progress.
        """
        if self._result is None:
            self._result = aggregate_result(self.state)
        return self._result


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Build a pool and initial state for new sessions
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, repository: ProblemRepository, config: GameConfig | None = None):
        self.repository = repository
        self.config = config or GameConfig()
        self._sessions: dict[str, GameSession] = {}

    def create_session(
        self,
        code_language: str = ALL_LANGUAGES,
        ui_language: str = DEFAULT_UI_LANGUAGE,
        seed: int | None = None,
    ) -> GameSession:
        """
        Create a new game session.

        Args:
            code_language: Language filter for the pool ("all" or a language)
            ui_language: Language for issue descriptions
            seed: Seed for a reproducible pool

        Returns:
            New GameSession, already in progress unless the pool is empty
        """
        builder = ProblemPoolBuilder(
            repository=self.repository,
            problems_per_level=self.config.problems_per_level,
            rng=random.Random(seed),
        )
        pool = builder.build(code_language)

        session = GameSession(
            session_id=str(uuid.uuid4()),
            state=start_game(pool, self.config),
            reducer=Reducer(config=self.config),
            code_language=code_language,
            ui_language=ui_language,
            seed=seed,
        )
        self._sessions[session.session_id] = session

        logger.info(
            "Created session %s (code_language=%s, pool=%d)",
            session.session_id, code_language, len(pool),
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """
        Remove a session from memory.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info("Removed session %s", session_id)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still in progress."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions older than max_age.

        Called periodically to free memory. Returns the number removed.
        """
        current_time = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
