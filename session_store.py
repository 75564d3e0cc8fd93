"""
SessionStore: JSON file repository of completed workout sessions.

Sessions are appended on completion, deleted by id, and listed newest first.
A missing or corrupt file reads as empty.
"""

import json
import logging

from models import WorkoutSession

log = logging.getLogger("store")

HISTORY_FILE = "workout_history.json"


class SessionStore:
    def __init__(self, path=HISTORY_FILE):
        self.path = path

    def add(self, session):
        history = self._load()
        history = [h for h in history if h.get("id") != session.id]
        history.append(session.to_dict())
        self._save(history)
        log.info(f"Saved session {session.id}")

    def delete(self, session_id):
        history = self._load()
        kept = [h for h in history if h.get("id") != session_id]
        if len(kept) == len(history):
            return False
        self._save(kept)
        log.info(f"Deleted session {session_id}")
        return True

    def list(self):
        """All sessions, newest first."""
        sessions = []
        for entry in self._load():
            try:
                sessions.append(WorkoutSession.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                log.warning(f"Skipping malformed session entry: {e}")
        sessions.sort(key=lambda s: s.date, reverse=True)
        return sessions

    def recent_exercise_names(self, limit=5):
        names = []
        for sess in self.list():
            for ex in sess.exercises:
                if ex.name and ex.name not in names:
                    names.append(ex.name)
                    if len(names) >= limit:
                        return names
        return names

    def _load(self):
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return []
        return data if isinstance(data, list) else []

    def _save(self, history):
        with open(self.path, "w") as f:
            json.dump(history, f, indent=2)
