"""Shared test fixtures for rest timer tests."""

import os
import sys

# Add project root to path so tests can import timer_engine, server, etc.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import AsyncMock

import pytest

from scheduler import Countdown
from tests.helpers import FakeClock, make_config
from timer_engine import TimerEngine
from timer_state import TimerState


@pytest.fixture
def state():
    """Fresh TimerState instance."""
    return TimerState()


@pytest.fixture
def configured_state(state):
    """TimerState with a 3-set, 60s-rest Squats workout configured."""
    state.configure_workout(make_config())
    return state


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    """Notifier stand-in; notify_rest_complete is an AsyncMock."""
    return AsyncMock()


@pytest.fixture
def engine(clock, notifier):
    """TimerEngine on a fake clock with a mock notifier and no store."""
    countdown = Countdown()
    countdown._clock = clock
    return TimerEngine(countdown=countdown, notifier=notifier)
