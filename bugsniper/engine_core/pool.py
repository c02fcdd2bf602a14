"""
Problem Pool - Draws the problems for one session.

For each level, up to the configured count of problems is sampled without
replacement; the per-level picks are concatenated and shuffled once more.

The random source is injected, so a seeded random.Random reproduces
the same pool.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Mapping

from ..problems.model import Problem
from ..problems.repository import ProblemRepository

logger = logging.getLogger(__name__)


@dataclass
class ProblemPoolBuilder:
    """
    Builds session pools from a repository.

    Usage:
        builder = ProblemPoolBuilder(repository, {1: 20, 2: 20, 3: 20}, random.Random(42))
        pool = builder.build("javascript")
    """
    repository: ProblemRepository
    problems_per_level: Mapping[int, int]
    rng: random.Random = field(default_factory=random.Random)

    def build(self, language_filter: str) -> tuple[Problem, ...]:
        """
        Build a pool for a code-language filter ("all" or a language).

        Levels with fewer problems than requested contribute all they have.
        """
        pool: list[Problem] = []
        seen: set[str] = set()

        for level in sorted(self.problems_per_level):
            count = self.problems_per_level[level]
            if count <= 0:
                continue

            candidates = []
            for problem in self.repository.fetch_problems(language_filter, level):
                if problem.problem_id in seen:
                    logger.warning("Skipping duplicate problem %s", problem.problem_id)
                    continue
                seen.add(problem.problem_id)
                candidates.append(problem)

            selected = self.rng.sample(candidates, min(count, len(candidates)))
            pool.extend(selected)

        self.rng.shuffle(pool)

        logger.info(
            "Built pool of %d problems for language=%s", len(pool), language_filter
        )
        return tuple(pool)


def build_problem_pool(
    repository: ProblemRepository,
    language_filter: str,
    problems_per_level: Mapping[int, int],
    rng: random.Random | None = None,
) -> tuple[Problem, ...]:
    """
    Convenience function to build a pool.

    Creates a ProblemPoolBuilder and builds once.
    """
    builder = ProblemPoolBuilder(
        repository=repository,
        problems_per_level=problems_per_level,
        rng=rng if rng is not None else random.Random(),
    )
    return builder.build(language_filter)
