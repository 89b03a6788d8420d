"""Fixed-rate scheduler that drives one session and fans snapshots out."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from itertools import count

from .session import GameSession
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

Sender = Callable[[dict], Awaitable[None]]


class SimulationRunner:
    def __init__(self, session: GameSession, *, tick_rate: int | None = None) -> None:
        self.session = session
        self.tick_rate = tick_rate or session.world.tick_rate
        self.lock = asyncio.Lock()
        self.subscribers: dict[str, Sender] = {}
        self._subscriber_ids = count(1)
        self._tick_task: asyncio.Task[None] | None = None
        self._paused = False
        self.last_snapshot: Snapshot = session.snapshot()

    @property
    def running(self) -> bool:
        return self._tick_task is not None and not self._tick_task.done()

    @property
    def paused(self) -> bool:
        return self._paused

    async def start(self) -> None:
        if self._tick_task is None:
            self._tick_task = asyncio.create_task(self._tick_loop())
            logger.info("Simulation runner started at %d Hz", self.tick_rate)

    async def stop(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._tick_task
            self._tick_task = None
            logger.info("Simulation runner stopped after tick %d", self.session.ticks)

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    async def step(self) -> Snapshot:
        async with self.lock:
            self.last_snapshot = self.session.tick()
            return self.last_snapshot

    async def start_session(self, player_name: str) -> Snapshot:
        async with self.lock:
            self.session.start(player_name)
            self.last_snapshot = self.session.snapshot()
            return self.last_snapshot

    async def restart(self) -> Snapshot:
        async with self.lock:
            self.session.restart()
            self.last_snapshot = self.session.snapshot()
            return self.last_snapshot

    async def set_target(self, x: float, y: float) -> None:
        async with self.lock:
            self.session.set_player_target(x, y)

    def subscribe(self, sender: Sender) -> str:
        subscriber_id = f"s{next(self._subscriber_ids)}"
        self.subscribers[subscriber_id] = sender
        return subscriber_id

    def unsubscribe(self, subscriber_id: str) -> None:
        self.subscribers.pop(subscriber_id, None)

    async def _tick_loop(self) -> None:
        interval = 1.0 / self.tick_rate

        while True:
            tick_start = time.perf_counter()

            payload: dict | None = None
            if not self._paused:
                async with self.lock:
                    self.last_snapshot = self.session.tick()
                    payload = self.last_snapshot.to_payload()

            if payload is not None and self.subscribers:
                await self._broadcast(payload)

            elapsed = time.perf_counter() - tick_start
            await asyncio.sleep(max(0.0, interval - elapsed))

    async def _broadcast(self, payload: dict) -> None:
        targets = list(self.subscribers.items())
        results = await asyncio.gather(
            *(self._safe_send(sender, payload) for _, sender in targets),
            return_exceptions=True,
        )
        for (subscriber_id, _), result in zip(targets, results):
            if result is False or isinstance(result, Exception):
                self.unsubscribe(subscriber_id)

    async def _safe_send(self, sender: Sender, payload: dict) -> bool:
        try:
            await sender(payload)
            return True
        except Exception:
            logger.debug("Dropping subscriber after failed send", exc_info=True)
            return False
