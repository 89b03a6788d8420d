"""Elemental arena simulation core."""

from .config import WorldConfig
from .errors import InvalidPlayerName, SessionNotStarted, WafeError, WorldConfigError
from .models import Bot, Element, Player
from .scores import HighScore, HighScoreBoard, JsonFileStore, MemoryStore
from .session import GameSession, start_session
from .snapshot import Outcome, SessionStatus, Snapshot

__all__ = [
    "Bot",
    "Element",
    "GameSession",
    "HighScore",
    "HighScoreBoard",
    "InvalidPlayerName",
    "JsonFileStore",
    "MemoryStore",
    "Outcome",
    "Player",
    "SessionNotStarted",
    "SessionStatus",
    "Snapshot",
    "WafeError",
    "WorldConfig",
    "WorldConfigError",
    "start_session",
]
