"""Exception hierarchy shared by the simulation and its outer surfaces."""

from __future__ import annotations


class WafeError(Exception):
    pass


class WorldConfigError(WafeError, ValueError):
    pass


class InvalidPlayerName(WafeError, ValueError):
    def __init__(self, raw: object) -> None:
        super().__init__(f"Player name cannot be empty (got {raw!r})")
        self.raw = raw


class SessionNotStarted(WafeError, RuntimeError):
    pass


class RenderSurfaceUnavailable(WafeError, RuntimeError):
    pass
