"""
Problem Model - Issues and problems as loaded from the problem files.

Design principles:
- Immutable: problems never change once loaded
- Line numbers are 1-based, matching what the player taps
- Issue ids are unique within their problem only
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


CODE_LANGUAGES = ("javascript", "python", "php", "ruby", "java", "dart")
UI_LANGUAGES = ("ja", "en")
ALL_LANGUAGES = "all"  # Language filter matching every problem
DEFAULT_UI_LANGUAGE = "en"

MIN_LEVEL = 1
MAX_LEVEL = 3


class IssueType(Enum):
    """Kinds of defects hidden in a problem."""
    BUG = "bug"
    SECURITY = "security"
    PERFORMANCE = "performance"
    DESIGN = "design"


class Severity(Enum):
    """How bad an issue is."""
    MINOR = "minor"
    NORMAL = "normal"
    CRITICAL = "critical"


def is_valid_language_filter(language: str) -> bool:
    """Check a code-language filter value ("all" or a known language)."""
    return language == ALL_LANGUAGES or language in CODE_LANGUAGES


@dataclass(frozen=True)
class Issue:
    """
    A single reviewable defect in a problem.

    Covers one or more source lines; tapping any of them finds the issue.
    """
    issue_id: str
    lines: frozenset[int]
    category: IssueType
    severity: Severity
    score: int  # Base score before the combo multiplier
    # UI language -> text; read-only, left out of the hash
    description: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    def __post_init__(self):
        object.__setattr__(self, "description", MappingProxyType(dict(self.description)))

    def covers(self, line_number: int) -> bool:
        return line_number in self.lines

    def describe(self, language: str = DEFAULT_UI_LANGUAGE) -> str:
        """Description in the given UI language, falling back to English."""
        if language in self.description:
            return self.description[language]
        if DEFAULT_UI_LANGUAGE in self.description:
            return self.description[DEFAULT_UI_LANGUAGE]
        return next(iter(self.description.values()), "")


@dataclass(frozen=True)
class Problem:
    """
    A code snippet with embedded issues.

    `code` holds one string per source line; line 1 is code[0].
    """
    problem_id: str
    code_language: str
    level: int
    code: tuple[str, ...]
    issues: tuple[Issue, ...] = ()

    @property
    def line_count(self) -> int:
        return len(self.code)

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    @property
    def issue_ids(self) -> frozenset[str]:
        return frozenset(issue.issue_id for issue in self.issues)

    def matches(self, language_filter: str) -> bool:
        """Check if the problem passes a code-language filter."""
        return language_filter == ALL_LANGUAGES or self.code_language == language_filter

    def get_issue(self, issue_id: str) -> Issue | None:
        for issue in self.issues:
            if issue.issue_id == issue_id:
                return issue
        return None

    def find_unsolved_issue(
        self, line_number: int, solved_ids: frozenset[str]
    ) -> Issue | None:
        """
        Find the first issue covering a line that is not solved yet.

        Returns None for lines outside the snippet, since no issue covers them.
        """
        for issue in self.issues:
            if issue.covers(line_number) and issue.issue_id not in solved_ids:
                return issue
        return None
