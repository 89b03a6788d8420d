"""Core dataclasses representing arena entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from math import floor

from . import config


class Element(str, Enum):
    FIRE = "fire"
    WATER = "water"
    EARTH = "earth"
    AIR = "air"

    @property
    def strong_against(self) -> Element:
        return STRONG_AGAINST[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return config.ELEMENT_COLORS[self.value]


# Each element beats the next one around the cycle.
STRONG_AGAINST: dict[Element, Element] = {
    Element.FIRE: Element.AIR,
    Element.WATER: Element.FIRE,
    Element.EARTH: Element.WATER,
    Element.AIR: Element.EARTH,
}


def collision_radius(size: float) -> float:
    return config.RADIUS_BASE + size * config.RADIUS_PER_SIZE


def score_for(size: float) -> int:
    return floor(size * config.SCORE_PER_SIZE)


def _element_counter() -> dict[Element, int]:
    return {element: 0 for element in Element}


@dataclass(slots=True)
class Entity:
    id: str
    name: str
    element: Element
    size: float
    x: float
    y: float
    speed: float
    defeated: bool = False

    @property
    def radius(self) -> float:
        return collision_radius(self.size)

    @property
    def score(self) -> int:
        return score_for(self.size)

    @property
    def color(self) -> str:
        return self.element.color

    @property
    def is_player(self) -> bool:
        return False

    def absorb(self, amount: float) -> None:
        if amount > 0.0:
            self.size += amount


@dataclass(slots=True)
class Player(Entity):
    target_x: float = 0.0
    target_y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    invulnerable_until: int = 0
    bots_defeated: int = 0
    defeated_elements: dict[Element, int] = field(default_factory=_element_counter)
    defeated_by: dict[Element, int] = field(default_factory=_element_counter)

    @property
    def is_player(self) -> bool:
        return True

    @property
    def moving(self) -> bool:
        return self.vx != 0.0 or self.vy != 0.0

    def is_invulnerable(self, tick: int) -> bool:
        return tick <= self.invulnerable_until


@dataclass(slots=True)
class Bot(Entity):
    target_x: float = 0.0
    target_y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    waypoint_tick: int = 0
