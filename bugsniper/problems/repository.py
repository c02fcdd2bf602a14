"""
Problem Repository - Source of problems for pool building.

The repository:
- Returns problems filtered by code language and level
- Is an explicitly constructed, explicitly owned instance
- Caches parsed files on the instance, never at module level

Implementations:
- InMemoryProblemRepository: problems passed in directly (tests, embedding)
- FileProblemRepository: YAML/JSON problem files under a directory
"""

from __future__ import annotations
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from .model import Problem
from .schema import ProblemDocument

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
PROBLEM_FILE_SUFFIXES = {".yaml", ".yml", ".json"}


class ProblemLoadError(Exception):
    """Raised when problem files are missing or invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Problem loading failed with {len(errors)} error(s)")


class ProblemRepository(ABC):
    """
    Abstract problem source.

    fetch_problems is called once per level while a pool is built.
    """

    @abstractmethod
    def all_problems(self) -> list[Problem]:
        """Every problem known to the repository."""
        pass

    def fetch_problems(self, language_filter: str, level: int) -> list[Problem]:
        """Problems of one level passing the code-language filter."""
        return [
            problem for problem in self.all_problems()
            if problem.level == level and problem.matches(language_filter)
        ]

    def get_problem(self, problem_id: str) -> Problem | None:
        for problem in self.all_problems():
            if problem.problem_id == problem_id:
                return problem
        return None


class InMemoryProblemRepository(ProblemRepository):
    """Repository over a fixed list of problems."""

    def __init__(self, problems: Iterable[Problem] = ()):
        self._problems = list(problems)
        duplicates = _duplicate_ids(self._problems)
        if duplicates:
            raise ProblemLoadError([f"Duplicate problem id '{pid}'" for pid in duplicates])

    def all_problems(self) -> list[Problem]:
        return list(self._problems)


class FileProblemRepository(ProblemRepository):
    """
    Repository over problem files in a directory tree.

    Usage:
        repository = FileProblemRepository("problems/")
        problems = repository.fetch_problems("javascript", 1)

    Each file holds one problem document or a list of them. Files are
    parsed on first use and kept until reload() is called.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self._problems: list[Problem] | None = None

    def all_problems(self) -> list[Problem]:
        if self._problems is None:
            self._problems = self._load()
        return list(self._problems)

    def reload(self):
        """Drop parsed problems so the next access re-reads the files."""
        self._problems = None

    def _load(self) -> list[Problem]:
        if not self.root.is_dir():
            raise ProblemLoadError([f"Problem directory not found: {self.root}"])

        problems: list[Problem] = []
        errors: list[str] = []

        for path in sorted(self.root.rglob("*")):
            if path.suffix not in PROBLEM_FILE_SUFFIXES or not path.is_file():
                continue
            try:
                raw = _read_file(path)
            except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
                errors.append(f"{path.name}: unreadable ({e})")
                continue

            entries = raw if isinstance(raw, list) else [raw]
            for index, entry in enumerate(entries):
                if not isinstance(entry, dict):
                    errors.append(f"{path.name}[{index}]: expected a mapping")
                    continue
                try:
                    problems.append(ProblemDocument.model_validate(entry).to_problem())
                except ValidationError as e:
                    for err in e.errors():
                        location = ".".join(str(part) for part in err["loc"])
                        errors.append(f"{path.name}[{index}] {location}: {err['msg']}")

        errors.extend(f"Duplicate problem id '{pid}'" for pid in _duplicate_ids(problems))
        if errors:
            raise ProblemLoadError(errors)

        logger.info("Loaded %d problems from %s", len(problems), self.root)
        return problems


def default_repository() -> FileProblemRepository:
    """
    Repository over the bundled problems.

    BUGSNIPER_PROBLEMS_DIR points it at another directory.
    """
    root = os.getenv("BUGSNIPER_PROBLEMS_DIR") or DATA_DIR
    return FileProblemRepository(root)


def _read_file(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def _duplicate_ids(problems: list[Problem]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for problem in problems:
        if problem.problem_id in seen and problem.problem_id not in duplicates:
            duplicates.append(problem.problem_id)
        seen.add(problem.problem_id)
    return duplicates
