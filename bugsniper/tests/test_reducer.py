"""
Tests for the reducer (state transitions).

Tests:
- Session start
- Tap scoring (hits, misses, repeated taps)
- Skip and the completion bonus
- Countdown
- Events after the end
"""

import pytest

from ..config import GameConfig
from ..engine_core.state import GameState, GamePhase
from ..engine_core.action import Action, ActionType, TapOutcome
from ..engine_core.reducer import Reducer, apply_action, start_game
from .conftest import make_issue, make_problem


class TestStartGame:
    """Tests for initial state."""

    def test_first_problem_is_current(self, two_problem_state, two_issue_problem, multi_line_problem):
        state = two_problem_state
        assert state.phase == GamePhase.IN_PROGRESS
        assert state.current_problem == two_issue_problem
        assert state.remaining_pool == (multi_line_problem,)
        assert state.visited_problems == (two_issue_problem,)

    def test_initial_counters(self, single_problem_state, config):
        state = single_problem_state
        assert state.score == 0
        assert state.combo == 0
        assert state.remaining_time == config.total_game_time
        assert state.problems_completed == 0
        assert state.current_level == 1

    def test_empty_pool_is_already_ended(self, config):
        state = start_game([], config)
        assert state.phase == GamePhase.ENDED
        assert state.current_problem is None

    def test_level_follows_first_problem(self, multi_line_problem, config):
        state = start_game([multi_line_problem], config)
        assert state.current_level == 2


class TestTapAction:
    """Tests for line taps."""

    def test_hit_scores_and_builds_combo(self, reducer, single_problem_state):
        result = reducer.apply(single_problem_state, Action.tap(2))

        assert result.success
        assert result.outcome == TapOutcome.HIT
        assert result.points == 4
        assert result.issue.issue_id == "I1"
        state = result.new_state
        assert state.score == 4
        assert state.combo == 1
        assert state.solved_issue_ids == frozenset({"I1"})
        assert ("P1", "I1") in state.all_solved_issues
        assert 2 in state.tapped_lines

    def test_second_hit_uses_combo_multiplier(self, reducer, single_problem_state):
        state = reducer.replay(single_problem_state, [Action.tap(2), Action.tap(3)])
        # 4 + floor(3 * 1.2)
        assert state.score == 7
        assert state.combo == 2

    def test_miss_costs_point_and_resets_combo(self, reducer, single_problem_state):
        state = reducer.replay(single_problem_state, [Action.tap(2)])
        result = reducer.apply(state, Action.tap(5))

        assert result.outcome == TapOutcome.MISS
        assert result.points == -1
        assert result.new_state.score == 3
        assert result.new_state.combo == 0
        assert 5 in result.new_state.tapped_lines

    def test_misses_clamp_at_zero(self, reducer, single_problem_state):
        """Two misses from zero leave the score at zero."""
        first = reducer.apply(single_problem_state, Action.tap(1))
        second = reducer.apply(first.new_state, Action.tap(4))

        assert second.new_state.score == 0
        assert second.points == 0
        assert second.outcome == TapOutcome.MISS

    def test_repeated_tap_is_noop(self, reducer, single_problem_state):
        """Tapping the same line twice never re-scores."""
        after_hit = reducer.apply(single_problem_state, Action.tap(2)).new_state
        result = reducer.apply(after_hit, Action.tap(2))

        assert result.success
        assert result.outcome == TapOutcome.ALREADY_TAPPED
        assert result.points == 0
        assert result.new_state.score == after_hit.score
        assert result.new_state.combo == after_hit.combo
        assert result.new_state.solved_issue_ids == after_hit.solved_issue_ids

    def test_repeated_missed_line_does_not_penalize_again(self, reducer, single_problem_state):
        state = reducer.replay(single_problem_state, [Action.tap(2), Action.tap(5)])
        result = reducer.apply(state, Action.tap(5))
        assert result.new_state.score == state.score
        assert result.new_state.combo == 0

    def test_out_of_range_line_is_a_miss(self, reducer, single_problem_state):
        state = reducer.replay(single_problem_state, [Action.tap(2)])
        for line in (0, -3, 999):
            result = reducer.apply(state, Action.tap(line))
            assert result.success
            assert result.outcome == TapOutcome.MISS
        assert reducer.apply(state, Action.tap(999)).new_state.combo == 0

    def test_multi_line_issue_scored_once(self, reducer, multi_line_problem, config):
        """An issue spanning several lines is found by the first tap only."""
        state = start_game([multi_line_problem], config)
        hit = reducer.apply(state, Action.tap(2))
        assert hit.outcome == TapOutcome.HIT

        other_line = reducer.apply(hit.new_state, Action.tap(3))
        assert other_line.outcome == TapOutcome.MISS
        assert other_line.new_state.score == hit.new_state.score - 1
        assert other_line.new_state.issues_found == 1

    def test_overlapping_issues_found_one_at_a_time(self, reducer, config):
        problem = make_problem(
            "OVERLAP",
            issues=[make_issue("A", [2], score=2), make_issue("B", [2, 3], score=5)],
        )
        state = start_game([problem], config)

        first = reducer.apply(state, Action.tap(2))
        assert first.issue.issue_id == "A"

        second = reducer.apply(first.new_state, Action.tap(3))
        assert second.issue.issue_id == "B"
        assert second.points == 6  # floor(5 * 1.2)

    def test_input_state_not_mutated(self, reducer, single_problem_state):
        before = single_problem_state
        reducer.apply(before, Action.tap(2))
        assert before.score == 0
        assert before.tapped_lines == frozenset()


class TestSkipAction:
    """Tests for skipping problems."""

    def test_skip_moves_to_next_problem(self, reducer, two_problem_state, multi_line_problem):
        result = reducer.apply(two_problem_state, Action.skip())
        state = result.new_state

        assert state.current_problem == multi_line_problem
        assert state.current_level == 2
        assert state.problems_completed == 1
        assert state.remaining_pool == ()
        assert state.tapped_lines == frozenset()
        assert state.solved_issue_ids == frozenset()
        assert result.bonus == 0

    def test_skip_keeps_combo(self, reducer, two_problem_state):
        state = reducer.replay(two_problem_state, [Action.tap(2), Action.skip()])
        assert state.combo == 1

    def test_full_example_session(self, reducer, single_problem_state):
        """Hit, hit, skip: 4 + 3 + bonus 3 = 10, then the pool is empty."""
        state = single_problem_state
        state = reducer.apply(state, Action.tap(2)).new_state
        assert state.score == 4
        state = reducer.apply(state, Action.tap(3)).new_state
        assert state.score == 7

        result = reducer.apply(state, Action.skip())
        assert result.bonus == 3
        assert result.new_state.score == 10
        assert result.new_state.phase == GamePhase.ENDED
        assert result.new_state.current_problem is None
        assert result.new_state.problems_completed == 1

    def test_current_problem_complete(self, reducer, single_problem_state, no_issue_problem, config):
        state = reducer.apply(single_problem_state, Action.tap(2)).new_state
        assert not state.current_problem_complete
        state = reducer.apply(state, Action.tap(3)).new_state
        assert state.current_problem_complete
        assert not start_game([no_issue_problem], config).current_problem_complete

    def test_no_bonus_when_issue_missing(self, reducer, single_problem_state):
        state = reducer.replay(single_problem_state, [Action.tap(2), Action.skip()])
        assert state.score == 4

    def test_bonus_paid_once_per_problem(self, reducer, two_problem_state):
        state = reducer.replay(
            two_problem_state, [Action.tap(2), Action.tap(3), Action.skip()]
        )
        assert state.score == 10
        # Fresh problem, nothing found: skipping again pays nothing
        result = reducer.apply(state, Action.skip())
        assert result.bonus == 0
        assert result.new_state.score == 10

    def test_no_bonus_for_problem_without_issues(self, reducer, no_issue_problem, config):
        state = start_game([no_issue_problem], config)
        result = reducer.apply(state, Action.skip())
        assert result.bonus == 0
        assert result.new_state.score == 0

    def test_custom_bonus(self, single_problem_state):
        reducer = Reducer(config=GameConfig(all_issues_found_bonus=7))
        state = reducer.replay(
            single_problem_state, [Action.tap(2), Action.tap(3), Action.skip()]
        )
        assert state.score == 7 + 7

    def test_miss_then_hit_then_skip_single_problem(self, reducer, single_problem_state):
        state = reducer.replay(
            single_problem_state, [Action.tap(1), Action.tap(2), Action.skip()]
        )
        assert state.problems_completed == 1
        assert state.phase == GamePhase.ENDED

    def test_visited_problems_tracked(self, reducer, two_problem_state, two_issue_problem, multi_line_problem):
        state = reducer.apply(two_problem_state, Action.skip()).new_state
        assert state.visited_problems == (two_issue_problem, multi_line_problem)


class TestTickAction:
    """Tests for the countdown."""

    def test_tick_decrements_time(self, reducer, single_problem_state):
        result = reducer.apply(single_problem_state, Action.tick())
        assert result.new_state.remaining_time == 59
        assert result.new_state.phase == GamePhase.IN_PROGRESS

    def test_session_ends_at_zero(self, two_issue_problem):
        config = GameConfig(total_game_time=2)
        reducer = Reducer(config=config)
        state = start_game([two_issue_problem], config)

        state = reducer.apply(state, Action.tick()).new_state
        assert state.is_active
        state = reducer.apply(state, Action.tick()).new_state
        assert state.remaining_time == 0
        assert state.phase == GamePhase.ENDED

    def test_time_never_increases(self, reducer, two_problem_state):
        state = two_problem_state
        previous = state.remaining_time
        for action in [Action.tap(2), Action.tick(), Action.skip(), Action.tap(9), Action.tick()]:
            state = reducer.apply(state, action).new_state
            assert state.remaining_time <= previous
            previous = state.remaining_time


class TestGamePhaseValidation:
    """Tests for events outside an active session."""

    @pytest.mark.parametrize("action", [Action.tap(2), Action.skip(), Action.tick()])
    def test_ended_session_ignores_events(self, reducer, single_problem_state, action):
        ended = reducer.replay(single_problem_state, [Action.skip()])
        assert ended.phase == GamePhase.ENDED

        result = reducer.apply(ended, action)

        assert not result.success
        assert result.error_code == "GAME_OVER"
        assert "over" in result.error.lower()
        assert result.new_state is ended

    def test_not_started_rejects_events(self, reducer):
        state = GameState()
        result = reducer.apply(state, Action.tap(1))
        assert not result.success
        assert result.error_code == "NOT_STARTED"
        assert result.new_state is state


class TestActionHistory:
    """Tests for action history tracking."""

    def test_applied_actions_logged(self, reducer, single_problem_state):
        action = Action.tap(2)
        result = reducer.apply(single_problem_state, action)
        assert result.new_state.action_history == (action,)

    def test_rejected_actions_not_logged(self, reducer, single_problem_state):
        ended = reducer.replay(single_problem_state, [Action.skip()])
        result = reducer.apply(ended, Action.tick())
        assert result.new_state.action_history == (Action.skip(),)

    def test_replay_reproduces_state(self, reducer, two_problem_state):
        actions = [Action.tap(2), Action.tick(), Action.tap(4), Action.skip(), Action.tap(1)]
        final = reducer.replay(two_problem_state, actions)
        again = reducer.replay(two_problem_state, final.action_history)
        assert again == final

    def test_apply_action_helper(self, config, single_problem_state):
        result = apply_action(config, single_problem_state, Action.tap(3))
        assert result.success
        assert result.new_state.score == 3

    @pytest.mark.parametrize("action_type", list(ActionType))
    def test_every_action_type_has_handler(self, reducer, action_type):
        assert callable(reducer._get_handler(action_type))

    def test_states_are_hashable(self, reducer, two_problem_state):
        state = reducer.replay(two_problem_state, [Action.tap(2), Action.skip()])
        assert hash(state) == hash(reducer.replay(two_problem_state, state.action_history))

    def test_action_factories(self):
        assert Action.tap(4).action_type == ActionType.TAP_LINE
        assert Action.tap(4).line_number == 4
        assert Action.skip().action_type == ActionType.SKIP
        assert Action.tick().action_type == ActionType.TICK
