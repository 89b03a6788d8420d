"""Immutable read-only views handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import Bot, Entity, Player


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    OVER = "over"


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"


@dataclass(slots=True, frozen=True)
class EntityView:
    id: str
    name: str
    element: str
    color: str
    x: float
    y: float
    size: float
    radius: float
    score: int
    is_player: bool
    target_x: float
    target_y: float

    @classmethod
    def of(cls, entity: Entity) -> EntityView:
        target_x = entity.target_x if isinstance(entity, (Player, Bot)) else entity.x
        target_y = entity.target_y if isinstance(entity, (Player, Bot)) else entity.y
        return cls(
            id=entity.id,
            name=entity.name,
            element=entity.element.value,
            color=entity.color,
            x=entity.x,
            y=entity.y,
            size=entity.size,
            radius=entity.radius,
            score=entity.score,
            is_player=entity.is_player,
            target_x=target_x,
            target_y=target_y,
        )

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "element": self.element,
            "color": self.color,
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "size": round(self.size, 3),
            "radius": round(self.radius, 2),
            "score": self.score,
        }


@dataclass(slots=True, frozen=True)
class Snapshot:
    tick: int
    status: SessionStatus
    outcome: Outcome | None
    elapsed_ms: float
    score: int
    invulnerable: bool
    world_width: float
    world_height: float
    player: EntityView | None
    bots: tuple[EntityView, ...]
    effects: tuple[dict, ...]

    @property
    def game_over(self) -> bool:
        return self.status is SessionStatus.OVER

    def to_payload(self) -> dict:
        return {
            "type": "state",
            "tick": self.tick,
            "status": self.status.value,
            "outcome": self.outcome.value if self.outcome is not None else None,
            "elapsedMs": round(self.elapsed_ms),
            "score": self.score,
            "invulnerable": self.invulnerable,
            "world": {"w": self.world_width, "h": self.world_height},
            "player": self.player.to_payload() if self.player is not None else None,
            "bots": [bot.to_payload() for bot in self.bots],
            "effects": list(self.effects),
        }


@dataclass(slots=True, frozen=True)
class RankingRow:
    rank: int
    id: str
    name: str
    element: str
    score: int
    is_player: bool


@dataclass(slots=True, frozen=True)
class MatchSummary:
    name: str
    element: str
    status: SessionStatus
    outcome: Outcome | None
    score: int
    size: float
    bots_defeated: int
    time_survived_s: int
    rank: int
    total_entities: int
    defeated: dict[str, int]
    defeated_by: dict[str, int]

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "element": self.element,
            "status": self.status.value,
            "outcome": self.outcome.value if self.outcome is not None else None,
            "score": self.score,
            "size": round(self.size, 3),
            "botsDefeated": self.bots_defeated,
            "timeSurvived": self.time_survived_s,
            "rank": self.rank,
            "totalEntities": self.total_entities,
            "defeated": dict(self.defeated),
            "defeatedBy": dict(self.defeated_by),
        }
