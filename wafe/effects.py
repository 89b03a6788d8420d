"""Transient visual effects advanced by the simulation tick.

Effects carry no gameplay meaning; they exist so a renderer can draw
explosions, floating text and rings from the snapshot alone. Every effect
counts ``elapsed`` up by one per tick and disappears the tick it reaches
``duration``. Delayed effects (the staggered waves of the player death) sit in
a queue keyed by tick and are released inside :meth:`EffectSystem.advance`.
"""

from __future__ import annotations

import heapq
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from math import cos, pi, sin
from typing import ClassVar

from . import config
from .models import Entity, collision_radius

WHITE = "#FFFFFF"
RED = "#FF0000"


@dataclass(slots=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    size: float
    color: str
    alpha: float = 1.0


@dataclass(slots=True, kw_only=True)
class Effect:
    kind: ClassVar[str] = "effect"

    x: float
    y: float
    color: str
    duration: int
    elapsed: int = 0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    @property
    def alpha(self) -> float:
        return 1.0 - self.progress

    @property
    def finished(self) -> bool:
        return self.elapsed >= self.duration

    def step(self) -> None:
        pass

    def payload(self) -> dict:
        return {
            "type": self.kind,
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "color": self.color,
            "elapsed": self.elapsed,
            "duration": self.duration,
            "alpha": round(self.alpha, 3),
        }


@dataclass(slots=True, kw_only=True)
class Explosion(Effect):
    kind: ClassVar[str] = "explosion"

    radius: float
    max_radius: float
    particles: list[Particle] = field(default_factory=list)

    @property
    def current_radius(self) -> float:
        return self.radius + (self.max_radius - self.radius) * self.progress

    def step(self) -> None:
        alpha = self.alpha
        for particle in self.particles:
            particle.x += particle.vx
            particle.y += particle.vy
            particle.alpha = alpha

    def payload(self) -> dict:
        data = super(Explosion, self).payload()
        data["radius"] = round(self.current_radius, 2)
        data["particles"] = [
            {
                "x": round(p.x, 2),
                "y": round(p.y, 2),
                "size": round(p.size, 2),
                "color": p.color,
                "alpha": round(p.alpha, 3),
            }
            for p in self.particles
        ]
        return data


@dataclass(slots=True, kw_only=True)
class TextEffect(Effect):
    kind: ClassVar[str] = "text"

    text: str
    font_size: int = 16
    bold: bool = False

    def payload(self) -> dict:
        data = super(TextEffect, self).payload()
        data.update(text=self.text, fontSize=self.font_size, bold=self.bold)
        return data


@dataclass(slots=True, kw_only=True)
class Growth(Effect):
    kind: ClassVar[str] = "growth"

    radius: float

    def payload(self) -> dict:
        data = super(Growth, self).payload()
        data["radius"] = round(self.radius, 2)
        return data


@dataclass(slots=True, kw_only=True)
class Flash(Effect):
    kind: ClassVar[str] = "flash"

    radius: float

    def payload(self) -> dict:
        data = super(Flash, self).payload()
        data["radius"] = round(self.radius, 2)
        return data


@dataclass(slots=True, kw_only=True)
class Ring(Effect):
    kind: ClassVar[str] = "ring"

    radius: float
    max_radius: float
    line_width: float = 2.0

    @property
    def current_radius(self) -> float:
        return self.radius + (self.max_radius - self.radius) * self.progress

    def payload(self) -> dict:
        data = super(Ring, self).payload()
        data.update(radius=round(self.current_radius, 2), lineWidth=self.line_width)
        return data


@dataclass(slots=True, kw_only=True)
class DeadPlayerEcho(Effect):
    """Keeps the defeated player drawable while the scoreboard is up."""

    kind: ClassVar[str] = "dead_player"

    size: float
    element: str
    name: str = ""

    def payload(self) -> dict:
        data = super(DeadPlayerEcho, self).payload()
        data.update(size=round(self.size, 3), element=self.element, name=self.name)
        return data


class EffectSystem:
    def __init__(self, seed: int | None = None) -> None:
        # Separate RNG so particle jitter never shifts gameplay randomness.
        self.rng = random.Random(seed)
        self._effects: list[Effect] = []
        self._scheduled: list[tuple[int, int, Effect]] = []
        self._sequence = count()
        self._tick = 0

    def __len__(self) -> int:
        return len(self._effects)

    def active(self) -> tuple[Effect, ...]:
        return tuple(self._effects)

    def pending(self) -> int:
        return len(self._scheduled)

    def clear(self) -> None:
        self._effects.clear()
        self._scheduled.clear()

    def add(self, effect: Effect) -> Effect:
        self._effects.append(effect)
        return effect

    def schedule(self, effect: Effect, delay_ticks: int) -> None:
        if delay_ticks <= 0:
            self.add(effect)
            return
        heapq.heappush(self._scheduled, (self._tick + delay_ticks, next(self._sequence), effect))

    def advance(self) -> None:
        self._tick += 1
        while self._scheduled and self._scheduled[0][0] <= self._tick:
            _, _, effect = heapq.heappop(self._scheduled)
            self._effects.append(effect)

        survivors: list[Effect] = []
        for effect in self._effects:
            effect.elapsed += 1
            if effect.finished:
                continue
            effect.step()
            survivors.append(effect)
        self._effects = survivors

    def _burst(
        self,
        x: float,
        y: float,
        color: str,
        amount: int,
        speed: tuple[float, float],
        size: tuple[float, float],
    ) -> list[Particle]:
        particles: list[Particle] = []
        for _ in range(amount):
            angle = self.rng.random() * pi * 2.0
            velocity = self.rng.uniform(*speed)
            particles.append(
                Particle(
                    x=x,
                    y=y,
                    vx=cos(angle) * velocity,
                    vy=sin(angle) * velocity,
                    size=self.rng.uniform(*size),
                    color=color,
                )
            )
        return particles

    def defeat(self, x: float, y: float, size: float, color: str, label: str) -> Explosion:
        radius = collision_radius(size)
        explosion = Explosion(
            x=x,
            y=y,
            color=color,
            duration=30,
            radius=radius,
            max_radius=radius * 2.0,
            particles=self._burst(x, y, color, 20, speed=(1.0, 4.0), size=(2.0, 7.0)),
        )
        self.add(explosion)
        self.add(TextEffect(x=x, y=y - 50.0, color=color, duration=60, text=f"{label} defeated!"))
        return explosion

    def growth(self, entity: Entity) -> Growth:
        return self.add(Growth(x=entity.x, y=entity.y, color=entity.color, duration=20, radius=entity.radius))

    def player_death(
        self,
        entity: Entity,
        *,
        ms_to_ticks: Callable[[float], int],
        ring_max_radius: float = config.DEATH_RING_MAX_RADIUS,
    ) -> None:
        x, y = entity.x, entity.y
        base_color = entity.color
        radius = entity.radius

        self.add(Flash(x=x, y=y, color=WHITE, duration=15, radius=radius * 5.0))
        self.add(
            Explosion(
                x=x,
                y=y,
                color=base_color,
                duration=90,
                radius=radius * 1.5,
                max_radius=radius * 6.0,
                particles=self._burst(x, y, base_color, 50, speed=(3.0, 9.0), size=(4.0, 12.0)),
            )
        )

        for wave in range(4):
            color = base_color if wave % 2 == 0 else WHITE
            self.schedule(
                Explosion(
                    x=x,
                    y=y,
                    color=color,
                    duration=80,
                    radius=radius * (wave + 1) * 0.8,
                    max_radius=radius * (wave + 1) * 2.0,
                    particles=self._burst(x, y, color, 40, speed=(2.0, 7.0), size=(3.0, 10.0)),
                ),
                ms_to_ticks(wave * 200),
            )

        for ring in range(3):
            self.schedule(
                Ring(
                    x=x,
                    y=y,
                    color=base_color if ring % 2 == 0 else WHITE,
                    duration=90,
                    radius=10.0,
                    max_radius=ring_max_radius,
                    line_width=8.0 - ring * 2.0,
                ),
                ms_to_ticks(ring * 300),
            )

        text_delay = ms_to_ticks(500)
        self.schedule(
            TextEffect(x=x, y=y - 80.0, color=RED, duration=180, text="YOU DIED", font_size=48, bold=True),
            text_delay,
        )
        self.schedule(
            TextEffect(
                x=x,
                y=y + 50.0,
                color=base_color,
                duration=180,
                text=f"{entity.element.label} has been extinguished!",
                font_size=24,
            ),
            text_delay,
        )

        self.add(
            DeadPlayerEcho(
                x=x,
                y=y,
                color=base_color,
                duration=config.DEAD_PLAYER_ECHO_TICKS,
                size=entity.size,
                element=entity.element.value,
                name=entity.name,
            )
        )
