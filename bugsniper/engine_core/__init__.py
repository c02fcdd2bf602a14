"""
Engine Core - Deterministic session state management and scoring.

The engine is the runtime that:
1. Builds a problem pool for the session
2. Manages GameState
3. Applies tap/skip/tick actions via the reducer
4. Scores hits, misses and completed problems
"""

from .state import GameState, GamePhase
from .action import Action, ActionType, ActionResult, TapOutcome
from .scoring import award_for, apply_miss, combo_multiplier, MISS_PENALTY
from .pool import ProblemPoolBuilder, build_problem_pool
from .reducer import Reducer, apply_action, start_game

__all__ = [
    "GameState",
    "GamePhase",
    "Action",
    "ActionType",
    "ActionResult",
    "TapOutcome",
    "award_for",
    "apply_miss",
    "combo_multiplier",
    "MISS_PENALTY",
    "ProblemPoolBuilder",
    "build_problem_pool",
    "Reducer",
    "apply_action",
    "start_game",
]
