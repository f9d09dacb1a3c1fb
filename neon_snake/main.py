"""FastAPI application: HTTP routes, WebSocket endpoint, game loop."""

import asyncio
import json
import logging
import os

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from .config import GameConfig
from .connection_manager import ConnectionManager, EventRecorder, build_state_msg
from .persistence import JsonFileHighScoreStore
from .session import GameSessionController

logger = logging.getLogger(__name__)

config = GameConfig.from_env()
session = GameSessionController(config, JsonFileHighScoreStore(config.highscore_path))
recorder = EventRecorder()
session.add_listener(recorder)
manager = ConnectionManager()

COMMANDS = {
    "start": session.start,
    "pause": session.pause,
    "resume": session.resume,
    "restart": session.restart,
    "toggle_pause": session.toggle_pause,
}


async def flush():
    for message in recorder.drain():
        await manager.broadcast(message)
    await manager.broadcast(build_state_msg(session.snapshot()))


async def game_tick(interval: int):
    session.step(interval)
    await flush()


session.clock.on_tick = game_tick


def log_loop_exit(task: asyncio.Task):
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Game loop stopped", exc_info=exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    session.clock.closed = False
    task = asyncio.create_task(session.clock.run())
    task.add_done_callback(log_loop_exit)
    yield
    session.clock.close()
    task.cancel()


app = FastAPI(lifespan=lifespan)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/state")
async def get_state():
    return session.snapshot().to_dict()


@app.get("/api/highscore")
async def get_highscore():
    return {"highScore": session.high_score}


def handle_message(msg: dict) -> bool:
    """Apply one client message to the session; True if it changed anything."""
    kind = msg.get("type")
    if not isinstance(kind, str):
        logger.warning(f"Ignoring message with non-string type: {kind!r}")
        return False
    if kind in COMMANDS:
        return COMMANDS[kind]()
    if kind == "input":
        direction = msg.get("direction", "")
        if not isinstance(direction, str):
            logger.warning(f"Ignoring non-string direction: {direction!r}")
            return False
        return session.post_direction(direction)
    if kind == "difficulty":
        try:
            return session.set_difficulty(str(msg.get("difficulty", "")))
        except ValueError as e:
            logger.warning(f"Rejected difficulty change: {e}")
            return False
    logger.warning(f"Unknown message type: {kind!r}")
    return False


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    await manager.send_personal(ws, build_state_msg(session.snapshot()))
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed message: {raw[:80]!r}")
                continue
            if not isinstance(msg, dict):
                logger.warning(f"Ignoring non-object message: {raw[:80]!r}")
                continue
            # Direction input is picked up by the next tick's broadcast.
            if handle_message(msg) and msg.get("type") != "input":
                await flush()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


def run():
    import uvicorn
    logging.basicConfig(
        level=os.getenv("NEON_SNAKE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Snake server starting on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
