"""
Pytest fixtures for Bug Sniper tests.
"""

import pytest

from ..config import GameConfig
from ..problems.model import Issue, Problem, IssueType, Severity
from ..problems.repository import InMemoryProblemRepository
from ..engine_core.reducer import Reducer, start_game


def make_issue(issue_id, lines, score=3, category=IssueType.BUG, severity=Severity.NORMAL):
    return Issue(
        issue_id=issue_id,
        lines=frozenset(lines),
        category=category,
        severity=severity,
        score=score,
        description={"en": f"{issue_id} (en)", "ja": f"{issue_id} (ja)"},
    )


def make_problem(problem_id, level=1, code_language="javascript", issues=(), line_count=5):
    return Problem(
        problem_id=problem_id,
        code_language=code_language,
        level=level,
        code=tuple(f"line {n}" for n in range(1, line_count + 1)),
        issues=tuple(issues),
    )


@pytest.fixture
def config() -> GameConfig:
    """Default rules: 60 seconds, bonus 3."""
    return GameConfig(problems_per_level={1: 20, 2: 20, 3: 20}, total_game_time=60)


@pytest.fixture
def reducer(config) -> Reducer:
    return Reducer(config=config)


@pytest.fixture
def two_issue_problem() -> Problem:
    """Level 1 problem: I1 on line 2 (base 4), I2 on line 3 (base 3)."""
    return make_problem(
        "P1",
        issues=[make_issue("I1", [2], score=4), make_issue("I2", [3], score=3)],
    )


@pytest.fixture
def multi_line_problem() -> Problem:
    """Level 2 problem whose single issue spans lines 1-3."""
    return make_problem(
        "P2",
        level=2,
        issues=[make_issue("SPAN", [1, 2, 3], score=5)],
    )


@pytest.fixture
def no_issue_problem() -> Problem:
    return make_problem("P0", level=3, issues=[])


@pytest.fixture
def single_problem_state(two_issue_problem, config):
    """Session whose pool holds only P1."""
    return start_game([two_issue_problem], config)


@pytest.fixture
def two_problem_state(two_issue_problem, multi_line_problem, config):
    """Session with P1 current and P2 waiting in the pool."""
    return start_game([two_issue_problem, multi_line_problem], config)


@pytest.fixture
def problems():
    """A small catalogue over several languages and levels."""
    return [
        make_problem("js-1", level=1, issues=[make_issue("a", [1])]),
        make_problem("js-2", level=1, issues=[make_issue("a", [2])]),
        make_problem("js-3", level=1, issues=[make_issue("a", [3])]),
        make_problem("js-4", level=2, issues=[make_issue("a", [1]), make_issue("b", [4])]),
        make_problem("js-5", level=3, issues=[make_issue("a", [5], score=5)]),
        make_problem("py-1", level=1, code_language="python", issues=[make_issue("a", [1])]),
        make_problem("py-2", level=2, code_language="python", issues=[make_issue("a", [2])]),
        make_problem("rb-1", level=3, code_language="ruby", issues=[make_issue("a", [1])]),
    ]


@pytest.fixture
def repository(problems) -> InMemoryProblemRepository:
    return InMemoryProblemRepository(problems)
