"""
Countdown: cancellable repeating asyncio countdown.

Ticks every ``interval`` seconds, reporting the time left until an absolute
target on the monotonic clock, then fires a single expiry callback. Tick
delivery can drift without desynchronizing the countdown, since every tick
recomputes ``target - now``.

Only one countdown runs per instance; start() supersedes any previous one.
"""

import asyncio
import logging
import math
import time

log = logging.getLogger("scheduler")

TICK_INTERVAL = 0.1


class Countdown:
    """Single cooperative countdown driving on_update/on_expired callbacks."""

    def __init__(self, on_update=None, on_expired=None, interval=TICK_INTERVAL):
        self.on_update = on_update  # async callback(remaining_seconds)
        self.on_expired = on_expired  # async callback()
        self.interval = interval
        self.target = None
        self._clock = time.monotonic
        self._task = None
        self._generation = 0

    @property
    def running(self):
        return self._task is not None

    @property
    def remaining(self):
        if self.target is None:
            return None
        return max(0.0, self.target - self._clock())

    async def start(self, duration):
        """Begin counting down ``duration`` seconds. Stops any previous countdown."""
        self.stop()
        try:
            duration = float(duration)
        except (TypeError, ValueError):
            duration = math.nan
        if not math.isfinite(duration) or duration < 0:
            log.warning(f"Countdown started with bad duration {duration!r}, expiring immediately")
        self.target = self._clock() + duration
        self._task = asyncio.create_task(self._tick_loop(self.target, self._generation))

    def stop(self):
        """Cancel the in-flight countdown. Safe to call repeatedly or from a callback."""
        self._generation += 1
        self.target = None
        if self._task:
            self._task.cancel()
            self._task = None

    def _detach(self):
        # Drop the task reference without cancelling, so the expiry callback
        # can call stop()/start() without killing itself.
        self._generation += 1
        self._task = None
        self.target = None

    async def _tick_loop(self, target, generation):
        try:
            while generation == self._generation:
                remaining = target - self._clock()
                if not math.isfinite(remaining) or remaining <= 0:
                    self._detach()
                    if self.on_expired:
                        await self.on_expired()
                    return
                if self.on_update:
                    await self.on_update(remaining)
                if generation != self._generation:
                    return
                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            pass
