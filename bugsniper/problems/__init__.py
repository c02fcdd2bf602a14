"""
Problems - Code snippets with embedded issues.

A problem is an immutable code snippet plus the set of issues hidden in it.
Problems are loaded by a ProblemRepository, which is always an explicitly
constructed instance (no process-wide cache).
"""

from .model import (
    Issue,
    Problem,
    IssueType,
    Severity,
    CODE_LANGUAGES,
    UI_LANGUAGES,
    ALL_LANGUAGES,
    DEFAULT_UI_LANGUAGE,
    is_valid_language_filter,
)
from .repository import (
    ProblemRepository,
    InMemoryProblemRepository,
    FileProblemRepository,
    ProblemLoadError,
    default_repository,
)

__all__ = [
    "Issue",
    "Problem",
    "IssueType",
    "Severity",
    "CODE_LANGUAGES",
    "UI_LANGUAGES",
    "ALL_LANGUAGES",
    "DEFAULT_UI_LANGUAGE",
    "is_valid_language_filter",
    "ProblemRepository",
    "InMemoryProblemRepository",
    "FileProblemRepository",
    "ProblemLoadError",
    "default_repository",
]
