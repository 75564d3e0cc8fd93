"""Shared test helpers for rest timer tests."""

from models import WorkoutConfig


def make_config(exercise_name="Squats", total_sets=3, rest_duration=60):
    """Factory for creating test workout configs."""
    return WorkoutConfig(exercise_name, total_sets, rest_duration)


class FakeClock:
    """Fake monotonic clock for testing countdown timing.

    Install on a Countdown with ``countdown._clock = clock``.
    Advance by calling ``clock.advance(seconds)`` (typically from mock_sleep).
    """

    def __init__(self, start=0.0):
        self._now = start

    def __call__(self):
        return self._now

    def advance(self, seconds):
        self._now += seconds
