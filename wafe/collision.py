"""Circle overlap tests and the elemental outcome rule."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from . import config
from .geometry import distance_sq
from .models import Entity, Player


class Rule(str, Enum):
    ELEMENT = "element"
    SIZE = "size"


@dataclass(slots=True, frozen=True)
class Interaction:
    winner: Entity
    loser: Entity
    absorbed: float
    rule: Rule
    # Loser position and size at the moment of defeat, for effects and records.
    x: float
    y: float
    loser_size: float


def check_collision(a: Entity, b: Entity) -> bool:
    reach = a.radius + b.radius
    return distance_sq(a.x, a.y, b.x, b.y) < reach * reach


def _absorb(winner: Entity, loser: Entity, ratio: float, rule: Rule) -> Interaction:
    amount = loser.size * ratio
    winner.absorb(amount)
    loser.defeated = True
    return Interaction(
        winner=winner,
        loser=loser,
        absorbed=amount,
        rule=rule,
        x=loser.x,
        y=loser.y,
        loser_size=loser.size,
    )


def resolve(a: Entity, b: Entity) -> Interaction | None:
    """Apply the outcome of ``a`` touching ``b``.

    Same elements never interact. Otherwise the element cycle decides; only
    when neither element beats the other does a clear size advantage win,
    with a smaller absorption bonus. Returns ``None`` for a bounce.
    """
    if a.element is b.element:
        return None

    if a.element.strong_against is b.element:
        return _absorb(a, b, config.ELEMENT_ABSORB_RATIO, Rule.ELEMENT)
    if b.element.strong_against is a.element:
        return _absorb(b, a, config.ELEMENT_ABSORB_RATIO, Rule.ELEMENT)

    if a.size > b.size * config.SIZE_ADVANTAGE:
        return _absorb(a, b, config.SIZE_ABSORB_RATIO, Rule.SIZE)
    if b.size > a.size * config.SIZE_ADVANTAGE:
        return _absorb(b, a, config.SIZE_ABSORB_RATIO, Rule.SIZE)
    return None


def resolve_collisions(
    player: Player | None,
    bots: Sequence[Entity],
    *,
    player_vulnerable: bool,
) -> list[Interaction]:
    """Scan every unique pair once and resolve the overlapping ones.

    An entity that lost earlier in the same scan takes no further part.
    """
    entities: list[Entity] = list(bots)
    if player is not None and player_vulnerable and not player.defeated:
        entities.insert(0, player)

    interactions: list[Interaction] = []
    for i in range(len(entities)):
        a = entities[i]
        if a.defeated:
            continue
        for j in range(i + 1, len(entities)):
            b = entities[j]
            if b.defeated:
                continue
            if not check_collision(a, b):
                continue
            outcome = resolve(a, b)
            if outcome is None:
                continue
            interactions.append(outcome)
            if a.defeated:
                break
    return interactions
