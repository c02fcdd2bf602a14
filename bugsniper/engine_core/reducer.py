"""
Reducer - Applies session events to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Never raises for game input: bad taps are misses, late events are rejected
- Returns ActionResult with feedback for the UI
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from ..config import GameConfig
from ..problems.model import Problem
from .state import GameState, GamePhase
from .action import Action, ActionType, ActionResult, TapOutcome
from .scoring import award_for, apply_miss, completion_bonus


def start_game(pool: Iterable[Problem], config: GameConfig | None = None) -> GameState:
    """
    Create the initial state for a pool.

    The first problem becomes current. An empty pool (or no game time)
    gives a state that is already ended.
    """
    config = config or GameConfig()
    problems = tuple(pool)

    if not problems or config.total_game_time <= 0:
        return GameState(
            phase=GamePhase.ENDED,
            remaining_time=max(0, config.total_game_time),
            remaining_pool=problems,
        )

    first = problems[0]
    return GameState(
        phase=GamePhase.IN_PROGRESS,
        current_problem=first,
        current_level=first.level,
        remaining_time=config.total_game_time,
        remaining_pool=problems[1:],
        visited_problems=(first,),
    )


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Config provides the completion bonus.
    """
    config: GameConfig = field(default_factory=GameConfig)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state, or the unchanged state
        if the session is not in progress.
        """
        if state.phase == GamePhase.ENDED:
            return ActionResult.failure(
                "Game is over - no actions allowed", error_code="GAME_OVER", state=state
            )
        if state.phase == GamePhase.NOT_STARTED:
            return ActionResult.failure(
                "Game not started", error_code="NOT_STARTED", state=state
            )

        handler = self._get_handler(action.action_type)
        result = handler(state, action)
        result.new_state = result.new_state._copy_with(
            action_history=state.action_history + (action,)
        )
        return result

    def replay(self, state: GameState, actions: Iterable[Action]) -> GameState:
        """Apply a sequence of actions and return the final state."""
        for action in actions:
            state = self.apply(state, action).new_state
        return state

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.TAP_LINE: self._handle_tap,
            ActionType.SKIP: self._handle_skip,
            ActionType.TICK: self._handle_tick,
        }
        return handlers[action_type]

    def _handle_tick(self, state: GameState, action: Action) -> ActionResult:
        """Count down one second; the session ends at zero."""
        remaining = max(0, state.remaining_time - 1)
        if remaining == 0:
            new_state = state._copy_with(remaining_time=0, phase=GamePhase.ENDED)
            return ActionResult.success_with_state(new_state, changes=["Time is up"])

        new_state = state._copy_with(remaining_time=remaining)
        return ActionResult.success_with_state(new_state)

    def _handle_tap(self, state: GameState, action: Action) -> ActionResult:
        """Score a tapped line as a hit or a miss."""
        line = action.line_number
        problem = state.current_problem

        # Repeated taps on a line never re-score
        if line in state.tapped_lines:
            return ActionResult.success_with_state(
                state,
                changes=[f"Line {line} already tapped"],
                outcome=TapOutcome.ALREADY_TAPPED,
            )

        tapped = state.tapped_lines | {line}
        issue = problem.find_unsolved_issue(line, state.solved_issue_ids)

        if issue is None:
            new_score = apply_miss(state.score)
            new_state = state._copy_with(tapped_lines=tapped, score=new_score, combo=0)
            return ActionResult.success_with_state(
                new_state,
                changes=[f"Line {line} missed"],
                outcome=TapOutcome.MISS,
                points=new_score - state.score,
            )

        combo = state.combo + 1
        points = award_for(issue.score, combo)
        new_state = state._copy_with(
            tapped_lines=tapped,
            score=state.score + points,
            combo=combo,
            solved_issue_ids=state.solved_issue_ids | {issue.issue_id},
            all_solved_issues=state.all_solved_issues | {(problem.problem_id, issue.issue_id)},
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Found {issue.issue_id} on line {line}: +{points} (combo {combo})"],
            outcome=TapOutcome.HIT,
            points=points,
            issue=issue,
        )

    def _handle_skip(self, state: GameState, action: Action) -> ActionResult:
        """Leave the current problem, paying the completion bonus if earned."""
        problem = state.current_problem
        solved = len(problem.issue_ids & state.solved_issue_ids)
        bonus = completion_bonus(
            problem.issue_count, solved, self.config.all_issues_found_bonus
        )

        changes = []
        if bonus:
            changes.append(f"All issues found in {problem.problem_id}: +{bonus}")

        common = dict(
            score=state.score + bonus,
            tapped_lines=frozenset(),
            solved_issue_ids=frozenset(),
            problems_completed=state.problems_completed + 1,
        )

        if not state.remaining_pool:
            new_state = state._copy_with(
                phase=GamePhase.ENDED, current_problem=None, **common
            )
            changes.append("No problems left")
            return ActionResult.success_with_state(
                new_state, changes=changes, points=bonus, bonus=bonus
            )

        next_problem = state.remaining_pool[0]
        new_state = state._copy_with(
            current_problem=next_problem,
            current_level=next_problem.level,
            remaining_pool=state.remaining_pool[1:],
            visited_problems=state.visited_problems + (next_problem,),
            **common,
        )
        changes.append(f"Next problem: {next_problem.problem_id} (level {next_problem.level})")
        return ActionResult.success_with_state(
            new_state, changes=changes, points=bonus, bonus=bonus
        )


def apply_action(config: GameConfig, state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(config=config)
    return reducer.apply(state, action)
