"""Runtime tunables for the elemental arena."""

from __future__ import annotations

import os
from dataclasses import dataclass
from math import ceil

from .errors import WorldConfigError

WORLD_WIDTH = 3000.0
WORLD_HEIGHT = 3000.0

TICK_RATE = 60
BOT_COUNT = 5

RADIUS_BASE = 20.0
RADIUS_PER_SIZE = 5.0
SCORE_PER_SIZE = 500

PLAYER_START_SIZE = 1.0
PLAYER_SPEED = 2.0
PLAYER_DEADZONE = 5.0
PLAYER_ACCEL = 0.2
PLAYER_ACCEL_RAMP = 200.0
PLAYER_BRAKE_RANGE = 50.0
PLAYER_FRICTION = 0.8
PLAYER_STOP_VELOCITY = 0.1
PLAYER_MIN_SPEED_FACTOR = 0.6
INVULNERABILITY_MS = 3000

BOT_MIN_SIZE = 0.8
BOT_MAX_SIZE = 2.3
BOT_MIN_SPEED = 1.0
BOT_MAX_SPEED = 2.5
BOT_WAYPOINT_INTERVAL_MS = 3000
BOT_WAYPOINT_RANGE = 1000.0
BOT_INITIAL_WAYPOINT_RANGE = 200.0
BOT_WAYPOINT_REACHED = 10.0

ELEMENT_ABSORB_RATIO = 0.2
SIZE_ABSORB_RATIO = 0.1
SIZE_ADVANTAGE = 1.5

WIN_AREA_FRACTION = 0.01

SPAWN_MAX_ATTEMPTS = 20
SPAWN_MIN_PLAYER_DISTANCE = 500.0

DEATH_RING_MAX_RADIUS = 600.0
DEAD_PLAYER_ECHO_TICKS = 5000

HIGH_SCORE_KEY = "wafeHighScores"
HIGH_SCORE_LIMIT = 10

MAX_PLAYER_NAME_LENGTH = 18

ELEMENT_COLORS = {
    "fire": "#FF5733",
    "water": "#3498DB",
    "earth": "#8B4513",
    "air": "#F0F0F0",
}

BOT_NAMES = [
    "Aqua",
    "Blaze",
    "Storm",
    "Terra",
    "Spark",
    "Frost",
    "Gust",
    "Ember",
    "Quake",
    "Dew",
]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str | None) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


SCORES_PATH = _env_str("WAFE_SCORES_PATH", "wafe_scores.json")
STATIC_DIR = _env_str("WAFE_STATIC_DIR", None)
LOG_LEVEL = _env_str("WAFE_LOG_LEVEL", "INFO")
SEED = _env_int("WAFE_SEED", -1)


@dataclass(frozen=True, slots=True)
class WorldConfig:
    width: float = WORLD_WIDTH
    height: float = WORLD_HEIGHT
    bot_count: int = BOT_COUNT
    tick_rate: int = TICK_RATE
    invulnerability_ms: int = INVULNERABILITY_MS
    bot_waypoint_interval_ms: int = BOT_WAYPOINT_INTERVAL_MS
    win_area_fraction: float = WIN_AREA_FRACTION

    @classmethod
    def from_env(cls) -> WorldConfig:
        defaults = cls()
        return cls(
            width=_env_float("WAFE_WORLD_WIDTH", defaults.width),
            height=_env_float("WAFE_WORLD_HEIGHT", defaults.height),
            bot_count=max(0, _env_int("WAFE_BOT_COUNT", defaults.bot_count)),
            tick_rate=max(1, _env_int("WAFE_TICK_RATE", defaults.tick_rate)),
            invulnerability_ms=max(0, _env_int("WAFE_INVULNERABILITY_MS", defaults.invulnerability_ms)),
            bot_waypoint_interval_ms=max(
                1,
                _env_int("WAFE_BOT_WAYPOINT_INTERVAL_MS", defaults.bot_waypoint_interval_ms),
            ),
            win_area_fraction=_env_float("WAFE_WIN_AREA_FRACTION", defaults.win_area_fraction),
        )

    def validate(self) -> WorldConfig:
        if self.width <= 0 or self.height <= 0:
            raise WorldConfigError(f"World dimensions must be positive, got {self.width}x{self.height}")
        if self.bot_count < 0:
            raise WorldConfigError(f"Bot count cannot be negative, got {self.bot_count}")
        if self.tick_rate <= 0:
            raise WorldConfigError(f"Tick rate must be positive, got {self.tick_rate}")
        if not 0.0 < self.win_area_fraction <= 1.0:
            raise WorldConfigError(f"Win area fraction must be in (0, 1], got {self.win_area_fraction}")
        return self

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)

    @property
    def tick_ms(self) -> float:
        return 1000.0 / self.tick_rate

    def ms_to_ticks(self, ms: float) -> int:
        return max(0, ceil(ms * self.tick_rate / 1000.0))
