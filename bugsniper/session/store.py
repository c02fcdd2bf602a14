"""
Result Store - Where finished session results go.

The store:
- Receives ScoreRecords from finished sessions
- Looks records up by id (for the result page)
- Answers ranking queries (best scores of the last week)

Only an in-memory implementation lives here; database-backed stores
implement the same interface.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from ..problems.model import ALL_LANGUAGES
from .results import ScoreRecord

logger = logging.getLogger(__name__)

RANKING_WINDOW = timedelta(days=7)
RANKING_LIMIT = 50


class ResultStore(ABC):
    """Abstract persistence for session results."""

    @abstractmethod
    def save(self, record: ScoreRecord) -> str:
        """Store a record and return its id."""
        pass

    @abstractmethod
    def get(self, record_id: str) -> ScoreRecord | None:
        """Get a record by id."""
        pass

    @abstractmethod
    def top_scores(
        self,
        code_language: str = ALL_LANGUAGES,
        limit: int = RANKING_LIMIT,
        within: timedelta = RANKING_WINDOW,
        now: datetime | None = None,
    ) -> list[ScoreRecord]:
        """Best scores created within the window, highest first."""
        pass


class InMemoryResultStore(ResultStore):
    """ResultStore kept in a dict. Lost when the process exits."""

    def __init__(self):
        self._records: dict[str, ScoreRecord] = {}

    def save(self, record: ScoreRecord) -> str:
        self._records[record.record_id] = record
        logger.info(
            "Saved result %s (score=%d, code_language=%s)",
            record.record_id, record.score, record.code_language,
        )
        return record.record_id

    def get(self, record_id: str) -> ScoreRecord | None:
        return self._records.get(record_id)

    def top_scores(
        self,
        code_language: str = ALL_LANGUAGES,
        limit: int = RANKING_LIMIT,
        within: timedelta = RANKING_WINDOW,
        now: datetime | None = None,
    ) -> list[ScoreRecord]:
        now = now or datetime.now(timezone.utc)
        since = now - within

        records = [
            r for r in self._records.values()
            if r.created_at >= since
            and (code_language == ALL_LANGUAGES or r.code_language == code_language)
        ]
        records.sort(key=lambda r: r.score, reverse=True)
        return records[:limit]

    def __len__(self) -> int:
        return len(self._records)
