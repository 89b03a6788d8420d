"""Top-N high score list kept in a small key-value store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol

from . import config
from .models import Element

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        """Return the stored string or ``None`` when absent."""

    def set(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``."""


class MemoryStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Key-value store backed by one JSON object on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except ValueError:
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


@dataclass(slots=True, frozen=True)
class HighScore:
    name: str
    element: Element
    score: int
    size: float
    timestamp: int

    @classmethod
    def from_record(cls, record: dict) -> HighScore:
        return cls(
            name=str(record["name"]),
            element=Element(record["element"]),
            score=int(record["score"]),
            size=float(record["size"]),
            timestamp=int(record["timestamp"]),
        )

    def to_record(self) -> dict:
        record = asdict(self)
        record["element"] = self.element.value
        return record


def now_ms() -> int:
    return int(time.time() * 1000)


class HighScoreBoard:
    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        key: str = config.HIGH_SCORE_KEY,
        limit: int = config.HIGH_SCORE_LIMIT,
    ) -> None:
        self.store = store if store is not None else MemoryStore()
        self.key = key
        self.limit = limit

    def top(self) -> list[HighScore]:
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError):
            logger.warning("Could not read high scores from %r; treating as empty", self.key, exc_info=True)
            return []
        if not raw:
            return []

        try:
            records = json.loads(raw)
        except ValueError:
            logger.warning("High score entry %r is not valid JSON; treating as empty", self.key)
            return []
        if not isinstance(records, list):
            return []

        scores: list[HighScore] = []
        for record in records:
            try:
                scores.append(HighScore.from_record(record))
            except (KeyError, TypeError, ValueError, OverflowError):
                logger.warning("Skipping malformed high score record: %r", record)
        scores.sort(key=lambda entry: entry.score, reverse=True)
        return scores[: self.limit]

    def record(self, entry: HighScore) -> list[HighScore]:
        scores = self.top()
        scores.append(entry)
        scores.sort(key=lambda item: item.score, reverse=True)
        scores = scores[: self.limit]

        payload = json.dumps([item.to_record() for item in scores])
        try:
            self.store.set(self.key, payload)
        except (OSError, ValueError):
            logger.warning("Could not save high scores under %r; list left unchanged", self.key, exc_info=True)
        return scores
