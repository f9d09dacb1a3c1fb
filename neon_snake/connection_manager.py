"""WebSocket connection management and state serialization."""

import json
import logging

from fastapi import WebSocket

from .events import EventListener
from .models import Cell, GameSnapshot, PowerUpKind

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.connections: set[WebSocket] = set()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def broadcast(self, message: str):
        disconnected = []
        # Snapshot: clients may join or leave while a send is awaited.
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"Dropping connection after send failure: {e}")
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def build_state_msg(snapshot: GameSnapshot) -> str:
    return json.dumps({"type": "state", **snapshot.to_dict()})


def build_event_msg(name: str, **payload) -> str:
    return json.dumps({"type": "event", "name": name, **payload})


class EventRecorder(EventListener):
    """Queues session events as wire messages until the next broadcast."""

    def __init__(self):
        self.pending: list[str] = []

    def drain(self) -> list[str]:
        messages, self.pending = self.pending, []
        return messages

    def on_start(self):
        self.pending.append(build_event_msg("start"))

    def on_eat(self, cell: Cell):
        self.pending.append(build_event_msg("eat", cell=list(cell)))

    def on_level_up(self, level: int):
        self.pending.append(build_event_msg("level_up", level=level))

    def on_game_over(self, score: int, high_score: int):
        self.pending.append(build_event_msg("game_over", score=score, high_score=high_score))

    def on_pause(self):
        self.pending.append(build_event_msg("pause"))

    def on_resume(self):
        self.pending.append(build_event_msg("resume"))

    def on_power_up_activate(self, kind: PowerUpKind):
        self.pending.append(build_event_msg("power_up_activate", kind=kind.value))

    def on_power_up_expire(self, kind: PowerUpKind):
        self.pending.append(build_event_msg("power_up_expire", kind=kind.value))
