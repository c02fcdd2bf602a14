"""
Scoring Policy - Points for hits, misses and completed problems.

Combo multipliers (combo counted after the current hit):
- 1 hit:   1.0x
- 2 hits:  1.2x
- 3 hits:  1.5x
- 4+ hits: 2.0x

Multipliers are kept in tenths so awards are exact integer floors.
"""

from __future__ import annotations


# combo -> multiplier in tenths
COMBO_MULTIPLIER_TENTHS = {1: 10, 2: 12, 3: 15}
MAX_MULTIPLIER_TENTHS = 20
MAX_MULTIPLIER_COMBO = 4

MISS_PENALTY = 1


def combo_multiplier(combo: int) -> float:
    """Multiplier for a combo streak, as a float for display."""
    return _multiplier_tenths(combo) / 10


def award_for(base_score: int, combo: int) -> int:
    """
    Points for a hit.

    Args:
        base_score: The issue's base score
        combo: Streak count including this hit

    Returns:
        floor(base_score * multiplier)
    """
    return base_score * _multiplier_tenths(combo) // 10


def apply_miss(score: int) -> int:
    """Score after a miss. Never drops below zero."""
    return max(0, score - MISS_PENALTY)


def completion_bonus(issue_count: int, solved_count: int, bonus: int) -> int:
    """Bonus for leaving a problem with every issue found (problems with issues only)."""
    if issue_count > 0 and solved_count >= issue_count:
        return bonus
    return 0


def _multiplier_tenths(combo: int) -> int:
    if combo >= MAX_MULTIPLIER_COMBO:
        return MAX_MULTIPLIER_TENTHS
    return COMBO_MULTIPLIER_TENTHS.get(combo, 10)
