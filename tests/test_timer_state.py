"""Unit tests for the TimerState phase machine (no timers or I/O)."""

import pytest
from tests.helpers import make_config

from models import Completed, Configuring, Paused, Ready, Resting, SetLog, Working


class TestConfigure:
    def test_initial_state(self, state):
        assert state.phase == Configuring()
        assert state.current_config is None
        assert state.session is None

    def test_configure_sets_ready(self, state):
        config = make_config()
        state.configure_workout(config)
        assert state.phase == Ready(config)
        assert state.exercise_log.name == "Squats"
        assert state.session is not None

    def test_configure_none_is_noop(self, state):
        state.configure_workout(None)
        assert state.phase == Configuring()

    def test_config_frozen_at_configure(self, state):
        config = make_config()
        state.configure_workout(config)
        config.total_sets = 10
        state.start_workout()
        assert state.phase == Working(1, 3)

    def test_reconfigure_discards_previous_session(self, configured_state):
        configured_state.add_set_log(SetLog(1, reps=10))
        old_session = configured_state.session
        configured_state.configure_workout(make_config("Lunges"))
        assert configured_state.session is not old_session
        assert configured_state.exercise_log.name == "Lunges"
        assert configured_state.exercise_log.sets == ()


class TestStart:
    @pytest.mark.parametrize("sets", [1, 3, 20])
    def test_start_workout_first_set(self, state, sets):
        state.configure_workout(make_config(total_sets=sets))
        state.start_workout()
        assert state.phase == Working(1, sets)

    def test_start_without_config_is_noop(self, state):
        state.start_workout()
        state.start_set(2)
        assert state.phase == Configuring()

    def test_start_set_from_resting(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        configured_state.start_set(2)
        assert configured_state.phase == Working(2, 3)

    def test_start_set_ignored_while_working(self, configured_state):
        configured_state.start_workout()
        configured_state.start_set(3)
        assert configured_state.phase == Working(1, 3)


class TestEndSet:
    def test_end_set_rests(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        assert configured_state.phase == Resting(60.0, 2, 3)

    def test_end_last_set_completes(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        configured_state.start_set(2)
        configured_state.end_set()
        configured_state.start_set(3)
        configured_state.end_set()
        assert configured_state.phase == Completed()

    def test_single_set_never_rests(self, state):
        state.configure_workout(make_config(total_sets=1))
        state.start_workout()
        assert state.phase == Working(1, 1)
        state.end_set()
        assert state.phase == Completed()

    def test_end_set_outside_working_is_noop(self, configured_state):
        configured_state.end_set()
        assert isinstance(configured_state.phase, Ready)


class TestPauseResume:
    def test_pause_from_resting(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        configured_state.pause()
        assert configured_state.phase == Paused(2, 3)

    def test_resume_restarts_full_rest(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        configured_state.update_rest(17.3)
        assert configured_state.phase == Resting(17.3, 2, 3)
        configured_state.pause()
        configured_state.resume()
        assert configured_state.phase == Resting(60.0, 2, 3)

    def test_pause_while_working_is_noop(self, configured_state):
        configured_state.start_workout()
        configured_state.pause()
        assert configured_state.phase == Working(1, 3)

    def test_resume_when_not_paused_is_noop(self, configured_state):
        configured_state.resume()
        assert isinstance(configured_state.phase, Ready)

    def test_update_rest_clamps_negative(self, configured_state):
        configured_state.start_workout()
        configured_state.end_set()
        configured_state.update_rest(-0.4)
        assert configured_state.phase == Resting(0.0, 2, 3)

    def test_update_rest_ignored_outside_resting(self, configured_state):
        configured_state.update_rest(5)
        assert isinstance(configured_state.phase, Ready)


class TestReset:
    @pytest.mark.parametrize("steps", [0, 1, 2, 3])
    def test_reset_from_any_phase(self, configured_state, steps):
        actions = [
            configured_state.start_workout,
            configured_state.end_set,
            configured_state.pause,
        ]
        for action in actions[:steps]:
            action()
        configured_state.reset()
        assert configured_state.phase == Configuring()
        assert configured_state.current_config is None
        assert configured_state.session is None
        assert configured_state.exercise_log is None


class TestSetLogAndComplete:
    def test_add_set_log_without_session_is_noop(self, state):
        state.add_set_log(SetLog(1))
        assert state.exercise_log is None

    def test_complete_returns_session_and_resets(self, configured_state):
        configured_state.add_set_log(SetLog(1, reps=10, weight_resistance="60kg"))
        configured_state.add_set_log(SetLog(2, reps=8, weight_resistance="60kg"))
        session = configured_state.complete_workout()
        assert session is not None
        assert session.exercises[0].name == "Squats"
        assert [s.reps for s in session.exercises[0].sets] == [10, 8]
        assert configured_state.phase == Configuring()
        assert configured_state.session is None

    def test_complete_without_session_returns_none(self, state):
        assert state.complete_workout() is None

    def test_to_dict(self, configured_state):
        configured_state.start_workout()
        d = configured_state.to_dict()
        assert d["phase"] == "working"
        assert d["current_set"] == 1
        assert d["exercise_name"] == "Squats"
        assert d["logged_sets"] == 0
