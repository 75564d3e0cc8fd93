"""
Workout data model: config, phases, and the set/exercise/session records.

Phases are small frozen dataclasses so callers can match on type and compare
by value, e.g. ``state.phase == Resting(60, 2, 3)``.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime

# UI limits for configuration input
MIN_SETS = 1
MAX_SETS = 20
MIN_REST = 15
MAX_REST = 300
REST_STEP = 15

DEFAULT_SETS = 3
DEFAULT_REST = 60.0


def _finite_or(value, default):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


class WorkoutConfig:
    """Exercise name, set count and rest duration for one workout."""

    def __init__(self, exercise_name="", total_sets=DEFAULT_SETS, rest_duration=DEFAULT_REST):
        self.exercise_name = exercise_name
        self.total_sets = total_sets
        self.rest_duration = rest_duration

    @classmethod
    def from_input(cls, exercise_name, total_sets, rest_duration):
        """Build a config from raw UI values, clamping numbers to the UI ranges.

        Non-numeric or non-finite values fall back to the defaults rather than
        propagating. Rest snaps to the slider's 15s step.
        """
        sets = int(_finite_or(total_sets, DEFAULT_SETS))
        sets = max(MIN_SETS, min(MAX_SETS, sets))
        rest = _finite_or(rest_duration, DEFAULT_REST)
        rest = round(rest / REST_STEP) * REST_STEP
        rest = float(max(MIN_REST, min(MAX_REST, rest)))
        name = exercise_name.strip() if isinstance(exercise_name, str) else ""
        return cls(name, sets, rest)

    @property
    def is_valid(self):
        if not isinstance(self.exercise_name, str) or not self.exercise_name.strip():
            return False
        if not isinstance(self.total_sets, int) or isinstance(self.total_sets, bool):
            return False
        if self.total_sets <= 0:
            return False
        try:
            rest = float(self.rest_duration)
        except (TypeError, ValueError):
            return False
        return math.isfinite(rest) and rest > 0

    def copy(self):
        return WorkoutConfig(self.exercise_name, self.total_sets, self.rest_duration)

    def to_dict(self):
        return {
            "exercise_name": self.exercise_name,
            "total_sets": self.total_sets,
            "rest_duration": self.rest_duration,
        }

    def __eq__(self, other):
        if not isinstance(other, WorkoutConfig):
            return NotImplemented
        return (
            self.exercise_name == other.exercise_name
            and self.total_sets == other.total_sets
            and self.rest_duration == other.rest_duration
        )

    def __repr__(self):
        return f"WorkoutConfig({self.exercise_name!r}, {self.total_sets}, {self.rest_duration})"


# --- Phases ---


@dataclass(frozen=True)
class Configuring:
    name = "configuring"


@dataclass(frozen=True)
class Ready:
    config: WorkoutConfig
    name = "ready"


@dataclass(frozen=True)
class Working:
    current_set: int
    total_sets: int
    name = "working"


@dataclass(frozen=True)
class Resting:
    time_remaining: float
    next_set: int
    total_sets: int
    name = "resting"


@dataclass(frozen=True)
class Paused:
    next_set: int
    total_sets: int
    name = "paused"


@dataclass(frozen=True)
class Completed:
    name = "completed"


def phase_to_dict(phase):
    """JSON-safe view of a phase for WebSocket broadcast."""
    d = {"phase": phase.name}
    if isinstance(phase, Ready):
        d["config"] = phase.config.to_dict()
    elif isinstance(phase, Working):
        d["current_set"] = phase.current_set
        d["total_sets"] = phase.total_sets
    elif isinstance(phase, Resting):
        d["time_remaining"] = phase.time_remaining
        d["next_set"] = phase.next_set
        d["total_sets"] = phase.total_sets
    elif isinstance(phase, Paused):
        d["next_set"] = phase.next_set
        d["total_sets"] = phase.total_sets
    return d


# --- Records ---


@dataclass(frozen=True)
class SetLog:
    set_number: int
    reps: int | None = None
    weight_resistance: str = ""
    notes: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "set_number": self.set_number,
            "reps": self.reps,
            "weight_resistance": self.weight_resistance,
            "notes": self.notes,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            set_number=int(d["set_number"]),
            reps=d.get("reps"),
            weight_resistance=d.get("weight_resistance", ""),
            notes=d.get("notes", ""),
            timestamp=datetime.fromisoformat(d["timestamp"]) if d.get("timestamp") else datetime.now(),
        )


class ExerciseLog:
    """One exercise and its sets, in the order they were logged."""

    def __init__(self, name, sets=None):
        self.name = name
        self._sets = list(sets or [])

    @property
    def sets(self):
        return tuple(self._sets)

    def add_set(self, set_log):
        self._sets.append(set_log)

    def to_dict(self):
        return {"name": self.name, "sets": [s.to_dict() for s in self._sets]}

    @classmethod
    def from_dict(cls, d):
        return cls(d["name"], [SetLog.from_dict(s) for s in d.get("sets", [])])


class WorkoutSession:
    """A recorded workout. Created at configure time, finalized by end_session()."""

    def __init__(self, date=None, session_id=None):
        self.id = session_id or uuid.uuid4().hex
        self.date = date or datetime.now()
        self.duration = 0.0
        self.exercises = []

    def add_exercise(self, exercise):
        self.exercises.append(exercise)

    def end_session(self, now=None):
        now = now or datetime.now()
        self.duration = max(0.0, (now - self.date).total_seconds())

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, d):
        sess = cls(date=datetime.fromisoformat(d["date"]), session_id=d.get("id"))
        sess.duration = float(d.get("duration", 0.0))
        sess.exercises = [ExerciseLog.from_dict(e) for e in d.get("exercises", [])]
        return sess
