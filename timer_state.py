"""
TimerState: pure workout phase state machine.

Owns the current phase, the bound config, and the in-progress session and
exercise log. No I/O, no timers: every method is synchronous and invalid
transitions are silently ignored.
"""

import logging

from models import (
    Completed,
    Configuring,
    ExerciseLog,
    Paused,
    Ready,
    Resting,
    Working,
    WorkoutSession,
    phase_to_dict,
)

log = logging.getLogger("timer")


class TimerState:
    """Phase transitions and set logging for a single exercise workout."""

    def __init__(self):
        self.phase = Configuring()
        self.current_config = None
        self.session = None
        self.exercise_log = None
        self.is_screen_locked = False

    def configure_workout(self, config):
        """Bind a config and open a fresh session. Drops any unsaved session."""
        if config is None:
            return
        if self.exercise_log and self.exercise_log.sets:
            log.warning(f"Discarding unsaved session with {len(self.exercise_log.sets)} logged sets")
        self.current_config = config.copy()
        self.session = WorkoutSession()
        self.exercise_log = ExerciseLog(self.current_config.exercise_name)
        self.phase = Ready(self.current_config)

    def start_workout(self):
        self.start_set(1)

    def start_set(self, set_number):
        if not self.current_config or not isinstance(self.phase, (Ready, Resting)):
            return
        self.phase = Working(set_number, self.current_config.total_sets)

    def end_set(self):
        if not self.current_config or not isinstance(self.phase, Working):
            return
        current, total = self.phase.current_set, self.phase.total_sets
        if current >= total:
            self.phase = Completed()
        else:
            self.phase = Resting(float(self.current_config.rest_duration), current + 1, total)

    def update_rest(self, time_remaining):
        """Mirror a countdown tick into the resting phase."""
        if not isinstance(self.phase, Resting):
            return
        self.phase = Resting(max(0.0, time_remaining), self.phase.next_set, self.phase.total_sets)

    def pause(self):
        if not isinstance(self.phase, Resting):
            return
        self.phase = Paused(self.phase.next_set, self.phase.total_sets)

    def resume(self):
        # Resuming restarts the full rest period; paused time is not kept.
        if not self.current_config or not isinstance(self.phase, Paused):
            return
        self.phase = Resting(float(self.current_config.rest_duration), self.phase.next_set, self.phase.total_sets)

    def reset(self):
        self.phase = Configuring()
        self.current_config = None
        self.session = None
        self.exercise_log = None

    def add_set_log(self, set_log):
        if self.exercise_log is None:
            return
        self.exercise_log.add_set(set_log)

    def complete_workout(self):
        """Finalize and hand off the session, then reset. None if no session."""
        if self.session is None:
            return None
        session = self.session
        session.end_session()
        if self.exercise_log is not None:
            session.add_exercise(self.exercise_log)
        self.reset()
        log.info(f"Workout completed: {len(session.exercises)} exercise(s), {session.duration:.0f}s")
        return session

    def to_dict(self):
        d = phase_to_dict(self.phase)
        d["exercise_name"] = self.current_config.exercise_name if self.current_config else None
        d["logged_sets"] = len(self.exercise_log.sets) if self.exercise_log else 0
        return d
