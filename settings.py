"""
Persistent user settings: completion sound and color scheme.

Stored as a flat JSON key-value file. Read once at construction, written on
every change. Unknown or corrupt values fall back to defaults.
"""

import enum
import json
import logging

log = logging.getLogger("settings")

SETTINGS_FILE = "timer_settings.json"

SOUND_KEY = "CompletionSound"
SCHEME_KEY = "ColorScheme"


class CompletionSound(enum.Enum):
    TINK = "Tink"
    BELL = "Bell"
    CHIME = "Chime"
    POP = "Pop"
    PING = "Ping"

    @property
    def description(self):
        if self is CompletionSound.TINK:
            return "Tink (Default)"
        return self.value

    @property
    def filename(self):
        """File in the freedesktop sound theme that plays for this choice."""
        return f"{THEME_SOUNDS[self]}.oga"


# Names from the freedesktop "stereo" sound theme (sound-theme-freedesktop)
THEME_SOUNDS = {
    CompletionSound.TINK: "message",
    CompletionSound.BELL: "bell",
    CompletionSound.CHIME: "complete",
    CompletionSound.POP: "audio-volume-change",
    CompletionSound.PING: "dialog-information",
}


class ColorScheme(enum.Enum):
    SYSTEM = "System"
    LIGHT = "Light"
    DARK = "Dark"


class Settings:
    def __init__(self, path=SETTINGS_FILE):
        self.path = path
        data = self._load()
        self._sound = _parse(CompletionSound, data.get(SOUND_KEY), CompletionSound.TINK)
        self._scheme = _parse(ColorScheme, data.get(SCHEME_KEY), ColorScheme.SYSTEM)

    @property
    def selected_sound(self):
        return self._sound

    @selected_sound.setter
    def selected_sound(self, sound):
        self._sound = CompletionSound(sound)
        self._save()

    @property
    def color_scheme(self):
        return self._scheme

    @color_scheme.setter
    def color_scheme(self, scheme):
        self._scheme = ColorScheme(scheme)
        self._save()

    def to_dict(self):
        return {
            "type": "settings",
            "sound": self._sound.value,
            "color_scheme": self._scheme.value,
            "sounds": [{"value": s.value, "description": s.description} for s in CompletionSound],
            "color_schemes": [c.value for c in ColorScheme],
        }

    def _load(self):
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self):
        try:
            with open(self.path, "w") as f:
                json.dump({SOUND_KEY: self._sound.value, SCHEME_KEY: self._scheme.value}, f, indent=2)
        except OSError as e:
            log.warning(f"Could not save settings to {self.path}: {e}")


def _parse(enum_cls, raw, default):
    try:
        return enum_cls(raw)
    except ValueError:
        return default
