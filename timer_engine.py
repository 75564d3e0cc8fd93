"""
TimerEngine: wires the countdown to the phase state machine.

Public control API for clients (server.py, tests). Owns stop-ordering of the
countdown, applies the rest-expiry policy, fires the notifier, and publishes
a state snapshot to subscribers after every observable change.

Collaborators (state, countdown, notifier, store) are injected; nothing here
is a process-wide singleton.
"""

import logging
import os

from models import Completed, Paused, Ready, Resting, SetLog, Working
from scheduler import Countdown
from timer_state import TimerState

log = logging.getLogger("timer")


def read_auto_advance():
    """TIMER_AUTO_ADVANCE=0 leaves expired rests waiting at 0:00 for a manual start."""
    value = os.environ.get("TIMER_AUTO_ADVANCE")
    if value is None:
        return True
    return value.strip().lower() not in ("0", "false", "no", "off")


class TimerEngine:
    """Orchestrates TimerState, Countdown and the notifier."""

    def __init__(self, state=None, countdown=None, notifier=None, store=None, auto_advance_on_rest_expiry=True):
        self.state = state or TimerState()
        self.countdown = countdown or Countdown()
        self.countdown.on_update = self._on_tick
        self.countdown.on_expired = self._on_expired
        self.notifier = notifier
        self.store = store
        self.auto_advance = auto_advance_on_rest_expiry
        self._subscribers = []

    @property
    def phase(self):
        return self.state.phase

    @property
    def keep_awake(self):
        return self.state.is_screen_locked

    def subscribe(self, callback):
        """Register an async callback(snapshot_dict) for state changes."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def to_dict(self):
        d = {"type": "timer", **self.state.to_dict()}
        d["keep_awake"] = self.keep_awake
        d["auto_advance"] = self.auto_advance
        return d

    # --- Control API ---

    async def configure_workout(self, config):
        if config is None or not config.is_valid:
            log.info(f"Rejected invalid config: {config!r}")
            return False
        # Overwrites any workout in progress; no rest tick may land on the new Ready
        self.countdown.stop()
        self.state.configure_workout(config)
        log.info(f"Configured {config.exercise_name}: {config.total_sets} sets, {config.rest_duration:.0f}s rest")
        await self._broadcast()
        return True

    async def start_current_set(self):
        phase = self.phase
        if isinstance(phase, Ready):
            self.state.start_workout()
        elif isinstance(phase, Resting):
            # Manual skip: kill the countdown first so no stale tick lands
            self.countdown.stop()
            self.state.start_set(phase.next_set)
        self._set_keep_awake(True)
        await self._broadcast()

    async def end_current_set(self):
        if not isinstance(self.phase, Working):
            return
        self.state.end_set()
        phase = self.phase
        if isinstance(phase, Resting):
            await self.countdown.start(phase.time_remaining)
        elif isinstance(phase, Completed):
            self._set_keep_awake(False)
        await self._broadcast()

    async def pause_timer(self):
        self.state.pause()
        self.countdown.stop()
        await self._broadcast()

    async def resume_timer(self):
        if not isinstance(self.phase, Paused):
            return
        self.state.resume()
        if isinstance(self.phase, Resting):
            await self.countdown.start(self.phase.time_remaining)
        await self._broadcast()

    async def reset_timer(self):
        self.countdown.stop()
        self.state.reset()
        self._set_keep_awake(False)
        await self._broadcast()

    async def log_set(self, reps=None, weight_resistance="", notes=""):
        """Record reps/weight for the set being worked or just finished."""
        set_number = self._logged_set_number()
        if set_number is None or self.state.exercise_log is None:
            return None
        entry = SetLog(set_number, reps, weight_resistance or "", notes or "")
        self.state.add_set_log(entry)
        await self._broadcast()
        return entry

    async def complete_workout(self):
        """Finalize the session and hand it to the store. Returns the session."""
        self.countdown.stop()
        session = self.state.complete_workout()
        if session is not None and self.store is not None:
            try:
                self.store.add(session)
            except OSError as e:
                log.error(f"Failed to save session {session.id}: {e}")
        self._set_keep_awake(False)
        await self._broadcast()
        return session

    # --- Countdown callbacks ---

    async def _on_tick(self, remaining):
        if not isinstance(self.phase, Resting):
            return
        self.state.update_rest(remaining)
        await self._broadcast()

    async def _on_expired(self):
        self.countdown.stop()
        phase = self.phase
        if not isinstance(phase, Resting):
            return
        if self.auto_advance:
            if phase.next_set > phase.total_sets:
                log.warning(f"Rest expired with next set {phase.next_set} > {phase.total_sets}, completing")
                self.state.phase = Completed()
                self._set_keep_awake(False)
            else:
                self.state.start_set(phase.next_set)
        else:
            self.state.update_rest(0.0)
        log.info(f"Rest expired, now {self.phase.name}")
        await self._broadcast()
        await self._notify()

    # --- Internals ---

    def _logged_set_number(self):
        phase = self.phase
        if isinstance(phase, Working):
            return phase.current_set
        if isinstance(phase, (Resting, Paused)):
            return phase.next_set - 1
        if isinstance(phase, Completed) and self.state.current_config:
            return self.state.current_config.total_sets
        return None

    def _set_keep_awake(self, enabled):
        self.state.is_screen_locked = enabled

    async def _notify(self):
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_rest_complete()
        except Exception as e:
            log.warning(f"Notifier failed: {e}")

    async def _broadcast(self):
        snapshot = self.to_dict()
        for callback in list(self._subscribers):
            try:
                await callback(snapshot)
            except Exception as e:
                log.warning(f"Subscriber {callback!r} failed: {e}")

