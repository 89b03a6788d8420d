"""Placement of new bots away from the player and from each other.

Both strategies share a single acceptance rule and a single attempt limit;
they only differ in how candidate points are generated:

* ``scatter`` samples uniformly across the world (minus an edge margin).
* ``corners`` walks the four world corners, farthest from the player first,
  with a little jitter on every round.

If the attempts run out the last candidate is returned anyway so that spawning
never stalls the game.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from . import config
from .config import WorldConfig
from .geometry import clamp, distance
from .models import Entity


def _scatter_candidates(
    policy: SpawnPolicy,
    world: WorldConfig,
    radius: float,
    player_position: tuple[float, float],
    rng: random.Random,
) -> Iterator[tuple[float, float]]:
    margin = min(radius + policy.edge_padding, world.width / 2.0, world.height / 2.0)
    while True:
        x = margin + rng.random() * (world.width - 2.0 * margin)
        y = margin + rng.random() * (world.height - 2.0 * margin)
        yield (x, y)


def _corner_candidates(
    policy: SpawnPolicy,
    world: WorldConfig,
    radius: float,
    player_position: tuple[float, float],
    rng: random.Random,
) -> Iterator[tuple[float, float]]:
    margin = min(radius + policy.edge_padding, world.width / 2.0, world.height / 2.0)
    corners = (
        (margin, margin),
        (world.width - margin, margin),
        (margin, world.height - margin),
        (world.width - margin, world.height - margin),
    )
    px, py = player_position
    while True:
        jittered = [
            (
                cx + rng.uniform(-policy.jitter, policy.jitter),
                cy + rng.uniform(-policy.jitter, policy.jitter),
            )
            for cx, cy in corners
        ]
        jittered.sort(key=lambda pos: distance(pos[0], pos[1], px, py), reverse=True)
        for x, y in jittered:
            yield (
                clamp(x, margin, world.width - margin),
                clamp(y, margin, world.height - margin),
            )


@dataclass(frozen=True, slots=True)
class SpawnPolicy:
    name: str
    candidates: Callable[..., Iterator[tuple[float, float]]]
    min_player_distance: float = config.SPAWN_MIN_PLAYER_DISTANCE
    spacing_factor: float = 4.0
    edge_padding: float = 50.0
    jitter: float = 0.0
    max_attempts: int = config.SPAWN_MAX_ATTEMPTS

    def accepts(
        self,
        x: float,
        y: float,
        radius: float,
        player_position: tuple[float, float] | None,
        existing: Iterable[Entity],
    ) -> bool:
        if player_position is not None:
            if distance(x, y, player_position[0], player_position[1]) < self.min_player_distance:
                return False
        min_spacing = radius * self.spacing_factor
        for other in existing:
            if distance(x, y, other.x, other.y) < min_spacing:
                return False
        return True


SCATTER = SpawnPolicy(name="scatter", candidates=_scatter_candidates)
CORNERS = SpawnPolicy(
    name="corners",
    candidates=_corner_candidates,
    spacing_factor=3.0,
    edge_padding=20.0,
    jitter=50.0,
)

POLICIES = {policy.name: policy for policy in (SCATTER, CORNERS)}


@dataclass(frozen=True, slots=True)
class SpawnResult:
    x: float
    y: float
    attempts: int
    satisfied: bool

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


def plan_spawn(
    world: WorldConfig,
    existing: Iterable[Entity],
    player_position: tuple[float, float] | None,
    *,
    radius: float,
    rng: random.Random,
    policy: SpawnPolicy = SCATTER,
) -> SpawnResult:
    others = tuple(existing)
    # With no player yet, aim the corner walk away from the centre.
    anchor = player_position if player_position is not None else world.center
    candidates = policy.candidates(policy, world, radius, anchor, rng)

    x, y = world.center
    attempts = 0
    for x, y in candidates:
        attempts += 1
        if policy.accepts(x, y, radius, player_position, others):
            return SpawnResult(x=x, y=y, attempts=attempts, satisfied=True)
        if attempts >= policy.max_attempts:
            break
    return SpawnResult(x=x, y=y, attempts=attempts, satisfied=False)
