"""
Game Configuration
==================

Typed access to the game rules that can be tuned without code changes.

Environment variables:
    BUGSNIPER_PROBLEMS_PER_LEVEL      "1:20,2:20,3:20"
    BUGSNIPER_TOTAL_GAME_TIME         seconds, e.g. "60"
    BUGSNIPER_ALL_ISSUES_FOUND_BONUS  points, e.g. "3"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from bugsniper.problems.model import MIN_LEVEL, MAX_LEVEL


DEFAULT_PROBLEMS_PER_LEVEL = {1: 20, 2: 20, 3: 20}
DEFAULT_TOTAL_GAME_TIME = 60
DEFAULT_ALL_ISSUES_FOUND_BONUS = 3


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class GameConfig:
    """Rules for one game session."""
    problems_per_level: Mapping[int, int] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_PROBLEMS_PER_LEVEL))
    )
    total_game_time: int = DEFAULT_TOTAL_GAME_TIME  # Seconds
    all_issues_found_bonus: int = DEFAULT_ALL_ISSUES_FOUND_BONUS

    def validate(self) -> GameConfig:
        """Check values, raising ConfigError. Returns self for chaining."""
        errors = []
        for level, count in self.problems_per_level.items():
            if not MIN_LEVEL <= level <= MAX_LEVEL:
                errors.append(f"level {level} outside {MIN_LEVEL}-{MAX_LEVEL}")
            if count < 0:
                errors.append(f"problem count for level {level} must be >= 0")
        if self.total_game_time <= 0:
            errors.append("total_game_time must be positive")
        if self.all_issues_found_bonus < 0:
            errors.append("all_issues_found_bonus must be >= 0")
        if errors:
            raise ConfigError(errors)
        return self


def parse_problems_per_level(value: str) -> dict[int, int]:
    """Parse "1:20,2:20,3:20" into {1: 20, 2: 20, 3: 20}."""
    result: dict[int, int] = {}
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        level, sep, count = part.partition(":")
        if not sep:
            raise ConfigError([f"expected level:count, got '{part}'"])
        try:
            result[int(level)] = int(count)
        except ValueError:
            raise ConfigError([f"expected integers in '{part}'"])
    return result


def load_config(environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    """
    Build a GameConfig from environment variables.

    Args:
        environ: Mapping to read from. Uses os.environ if None.

    Returns:
        Validated GameConfig. Unset variables keep their defaults.
    """
    if environ is None:
        environ = os.environ

    kwargs = {}
    per_level = environ.get("BUGSNIPER_PROBLEMS_PER_LEVEL")
    if per_level:
        kwargs["problems_per_level"] = MappingProxyType(parse_problems_per_level(per_level))

    for key, name in (
        ("BUGSNIPER_TOTAL_GAME_TIME", "total_game_time"),
        ("BUGSNIPER_ALL_ISSUES_FOUND_BONUS", "all_issues_found_bonus"),
    ):
        raw = environ.get(key)
        if raw:
            try:
                kwargs[name] = int(raw)
            except ValueError:
                raise ConfigError([f"{key} must be an integer, got '{raw}'"])

    return GameConfig(**kwargs).validate()
