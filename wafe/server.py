"""FastAPI app exposing one local session to a browser renderer."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from . import config
from .errors import InvalidPlayerName, RenderSurfaceUnavailable, SessionNotStarted, WafeError
from .runner import SimulationRunner
from .scores import HighScoreBoard, JsonFileStore
from .session import GameSession


class StartRequest(BaseModel):
    name: str


class TargetRequest(BaseModel):
    x: float
    y: float


def default_runner() -> SimulationRunner:
    world = config.WorldConfig.from_env()
    scores = HighScoreBoard(JsonFileStore(config.SCORES_PATH)) if config.SCORES_PATH else HighScoreBoard()
    seed = config.SEED if config.SEED >= 0 else None
    session = GameSession(world, seed=seed, scores=scores)
    return SimulationRunner(session)


def create_app(
    runner: SimulationRunner | None = None,
    *,
    static_dir: str | Path | None = config.STATIC_DIR,
    autostart: bool = True,
) -> FastAPI:
    state = runner or default_runner()

    static_path: Path | None = None
    if static_dir is not None:
        static_path = Path(static_dir)
        if not static_path.is_dir():
            raise RenderSurfaceUnavailable(f"Renderer directory {static_path} does not exist")

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if autostart:
            await state.start()
        try:
            yield
        finally:
            await state.stop()

    app = FastAPI(title="WAFE Arena", lifespan=lifespan)
    app.state.runner = state

    if static_path is not None:
        app.mount("/static", StaticFiles(directory=static_path), name="static")

        @app.get("/")
        async def serve_index() -> FileResponse:
            return FileResponse(static_path / "index.html")

    @app.exception_handler(InvalidPlayerName)
    async def invalid_name_handler(_: Request, exc: InvalidPlayerName) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(SessionNotStarted)
    async def not_started_handler(_: Request, exc: SessionNotStarted) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.get("/api/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "running": state.running,
            "paused": state.paused,
            "session": state.session.status.value,
        }

    @app.get("/api/config")
    async def world_config() -> dict:
        world = state.session.world
        return {
            "world": {"w": world.width, "h": world.height},
            "tickRate": state.tick_rate,
            "botCount": world.bot_count,
            "invulnerabilityMs": world.invulnerability_ms,
        }

    @app.post("/api/session")
    async def start_session(body: StartRequest) -> dict:
        snapshot = await state.start_session(body.name)
        return snapshot.to_payload()

    @app.post("/api/session/restart")
    async def restart_session() -> dict:
        snapshot = await state.restart()
        return snapshot.to_payload()

    @app.post("/api/session/target")
    async def set_target(body: TargetRequest) -> dict:
        await state.set_target(body.x, body.y)
        return {"accepted": True}

    @app.get("/api/session/snapshot")
    async def snapshot() -> dict:
        return state.last_snapshot.to_payload()

    @app.get("/api/session/summary")
    async def summary() -> dict:
        async with state.lock:
            match = state.session.summary()
            ranking = state.session.ranking()
        return {
            **match.to_payload(),
            "ranking": [
                {
                    "rank": row.rank,
                    "name": row.name,
                    "element": row.element,
                    "score": row.score,
                    "you": row.is_player,
                }
                for row in ranking
            ],
        }

    @app.post("/api/session/pause")
    async def pause() -> dict:
        state.pause()
        return {"paused": True}

    @app.post("/api/session/resume")
    async def resume() -> dict:
        state.resume()
        return {"paused": False}

    @app.get("/api/highscores")
    async def high_scores() -> dict:
        return {"scores": [entry.to_record() for entry in state.session.high_scores()]}

    @app.websocket("/ws")
    async def websocket_handler(websocket: WebSocket) -> None:
        await websocket.accept()
        subscriber_id = state.subscribe(websocket.send_json)

        try:
            await websocket.send_json({"type": "welcome", **(await world_config())})
            while True:
                msg = await websocket.receive_json()
                if not isinstance(msg, dict):
                    await websocket.send_json({"type": "error", "error": "Messages must be JSON objects"})
                    continue
                kind = msg.get("type")
                if kind == "ping":
                    await websocket.send_json({"type": "pong", "ts": msg.get("ts")})
                    continue
                try:
                    if kind == "start":
                        await state.start_session(str(msg.get("name") or ""))
                    elif kind == "restart":
                        await state.restart()
                    elif kind == "target":
                        await state.set_target(msg.get("x"), msg.get("y"))
                except WafeError as exc:
                    await websocket.send_json({"type": "error", "error": str(exc)})

        except WebSocketDisconnect:
            pass
        finally:
            state.unsubscribe(subscriber_id)

    return app
