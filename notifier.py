"""
Rest-complete notifier: completion sound plus haptic pulse.

Sounds come from the freedesktop sound theme (override the directory with
TIMER_SOUNDS_DIR) and are played by an external player command (``paplay``
by default, override with TIMER_SOUND_CMD) in a worker thread. Haptics go
through an optional driver object exposing ``pulse(intensity, sharpness)``.

A failed sound degrades to the terminal bell. Nothing raises out of
notify_rest_complete().
"""

import asyncio
import logging
import os
import shlex
import subprocess
import sys

from settings import CompletionSound

log = logging.getLogger("notifier")

DEFAULT_SOUNDS_DIR = "/usr/share/sounds/freedesktop/stereo"
DEFAULT_SOUND_CMD = "paplay"
PLAYER_TIMEOUT = 5


def read_sound_cmd():
    cmd = os.environ.get("TIMER_SOUND_CMD")
    if cmd:
        return shlex.split(cmd)
    return [DEFAULT_SOUND_CMD]


def read_sounds_dir():
    return os.environ.get("TIMER_SOUNDS_DIR") or DEFAULT_SOUNDS_DIR


def terminal_bell():
    try:
        sys.stdout.write("\a")
        sys.stdout.flush()
    except (OSError, ValueError):
        pass


class Notifier:
    def __init__(self, settings=None, player_cmd=None, haptics=None, sounds_dir=None):
        self.settings = settings
        self.player_cmd = player_cmd or read_sound_cmd()
        self.sounds_dir = sounds_dir or read_sounds_dir()
        self.haptics = haptics  # object with pulse(intensity, sharpness), or None

    @property
    def sound(self):
        if self.settings is None:
            return CompletionSound.TINK
        return self.settings.selected_sound

    def sound_path(self, sound):
        return os.path.join(self.sounds_dir, CompletionSound(sound).filename)

    async def notify_rest_complete(self):
        log.info(f"Rest complete: playing {self.sound.value}")
        await self.play_sound(self.sound)
        self.trigger_haptic()

    async def preview_sound(self, sound):
        await self.play_sound(CompletionSound(sound))

    async def play_sound(self, sound):
        path = self.sound_path(sound)
        if not os.path.isfile(path):
            log.warning(f"Sound file {path} missing, using fallback")
            terminal_bell()
            return
        ok = await asyncio.to_thread(self._run_player, path)
        if not ok:
            terminal_bell()

    def _run_player(self, path):
        try:
            result = subprocess.run(
                [*self.player_cmd, path],
                capture_output=True,
                timeout=PLAYER_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.warning(f"Sound player unavailable ({e}), using fallback")
            return False
        if result.returncode != 0:
            log.warning(f"Sound player exited {result.returncode}, using fallback")
            return False
        return True

    def trigger_haptic(self):
        if self.haptics is None:
            log.debug("No haptic driver, skipping pulse")
            return
        try:
            self.haptics.pulse(intensity=1.0, sharpness=1.0)
        except Exception as e:
            log.warning(f"Haptic pulse failed: {e}")
