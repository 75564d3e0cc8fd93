#!/usr/bin/env python3
"""
Rest Timer Server: FastAPI + WebSocket control surface for TimerEngine.

Maps REST calls onto the engine's control API and pushes every timer state
change to connected WebSocket clients.

Usage:
    python3 server.py
    # Open http://<host>:8000 or connect a client to ws://<host>:8000/ws

Environment:
    TIMER_DATA_DIR      where settings and workout history JSON live (default: .)
    TIMER_AUTO_ADVANCE  0 to leave expired rests at 0:00 instead of starting the next set
    TIMER_SOUND_CMD     audio player command for completion sounds (default: paplay)
    TIMER_SOUNDS_DIR    sound theme directory (default: /usr/share/sounds/freedesktop/stereo)
"""

import json
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator

from models import WorkoutConfig
from notifier import Notifier
from session_store import HISTORY_FILE, SessionStore
from settings import SETTINGS_FILE, ColorScheme, CompletionSound, Settings
from timer_engine import TimerEngine, read_auto_advance

logging.basicConfig(level=logging.INFO)
log = logging.getLogger("server")

MAX_RECENT = 20


def data_path(name):
    return os.path.join(os.environ.get("TIMER_DATA_DIR", "."), name)


# --- WebSocket manager ---


class ConnectionManager:
    def __init__(self):
        self.connections: list[WebSocket] = []

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.append(ws)

    def disconnect(self, ws: WebSocket):
        if ws in self.connections:
            self.connections.remove(ws)

    async def broadcast(self, msg: dict):
        data = json.dumps(msg)
        dead = []
        for ws in self.connections:
            try:
                await ws.send_text(data)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)


manager = ConnectionManager()

settings: Settings = None
store: SessionStore = None
engine: TimerEngine = None


def build_engine():
    global settings, store, engine
    settings = Settings(data_path(SETTINGS_FILE))
    store = SessionStore(data_path(HISTORY_FILE))
    engine = TimerEngine(
        notifier=Notifier(settings),
        store=store,
        auto_advance_on_rest_expiry=read_auto_advance(),
    )
    engine.subscribe(manager.broadcast)
    return engine


@asynccontextmanager
async def lifespan(application):
    build_engine()
    log.info("Server started, open http://<host>:8000 in browser")

    yield

    engine.countdown.stop()
    log.info("Server stopped")


app = FastAPI(title="Rest Timer", lifespan=lifespan)

# CORS for Vite dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Pydantic models ---


class ConfigureRequest(BaseModel):
    exercise_name: str
    total_sets: float = 3
    rest_duration: float = 60

    @field_validator("exercise_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class LogSetRequest(BaseModel):
    reps: int | None = None
    weight_resistance: str = ""
    notes: str = ""

    @field_validator("reps")
    @classmethod
    def non_negative_reps(cls, v):
        if v is not None and v < 0:
            raise ValueError("reps must be >= 0")
        return v


class SettingsRequest(BaseModel):
    sound: CompletionSound | None = None
    color_scheme: ColorScheme | None = None


class PreviewRequest(BaseModel):
    sound: CompletionSound


# --- Timer endpoints ---


@app.get("/api/timer")
async def get_timer():
    return engine.to_dict()


@app.post("/api/timer/configure")
async def api_configure(req: ConfigureRequest):
    config = WorkoutConfig.from_input(req.exercise_name, req.total_sets, req.rest_duration)
    if not config.is_valid:
        return {"ok": False, "error": "Exercise name is required"}
    await engine.configure_workout(config)
    return {"ok": True, **engine.to_dict()}


@app.post("/api/timer/start")
async def api_start_set():
    await engine.start_current_set()
    return engine.to_dict()


@app.post("/api/timer/end-set")
async def api_end_set():
    await engine.end_current_set()
    return engine.to_dict()


@app.post("/api/timer/pause")
async def api_pause():
    await engine.pause_timer()
    return engine.to_dict()


@app.post("/api/timer/resume")
async def api_resume():
    await engine.resume_timer()
    return engine.to_dict()


@app.post("/api/timer/reset")
async def api_reset():
    await engine.reset_timer()
    return {"ok": True, **engine.to_dict()}


@app.post("/api/timer/log-set")
async def api_log_set(req: LogSetRequest):
    entry = await engine.log_set(req.reps, req.weight_resistance, req.notes)
    if entry is None:
        return {"ok": False, "error": "No workout in progress"}
    return {"ok": True, "set": entry.to_dict()}


@app.post("/api/timer/complete")
async def api_complete():
    session = await engine.complete_workout()
    if session is None:
        return {"ok": False, "error": "No workout in progress"}
    return {"ok": True, "session": session.to_dict()}


# --- History endpoints ---


@app.get("/api/sessions")
async def api_list_sessions():
    return [s.to_dict() for s in store.list()]


@app.delete("/api/sessions/{session_id}")
async def api_delete_session(session_id: str):
    if not store.delete(session_id):
        return {"ok": False, "error": "Not found"}
    return {"ok": True}


@app.get("/api/exercises/recent")
async def api_recent_exercises(limit: int = 5):
    return {"names": store.recent_exercise_names(max(1, min(limit, MAX_RECENT)))}


# --- Settings endpoints ---


@app.get("/api/settings")
async def api_get_settings():
    return settings.to_dict()


@app.post("/api/settings")
async def api_update_settings(req: SettingsRequest):
    if req.sound is not None:
        settings.selected_sound = req.sound
    if req.color_scheme is not None:
        settings.color_scheme = req.color_scheme
    data = settings.to_dict()
    await manager.broadcast(data)
    return data


@app.post("/api/settings/preview-sound")
async def api_preview_sound(req: PreviewRequest):
    await engine.notifier.preview_sound(req.sound)
    return {"ok": True}


# --- WebSocket endpoint ---


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    try:
        await ws.send_text(json.dumps(engine.to_dict()))
        await ws.send_text(json.dumps(settings.to_dict()))
    except Exception:
        pass
    try:
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(ws)
    except Exception:
        manager.disconnect(ws)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
