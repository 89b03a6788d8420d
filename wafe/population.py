"""Bot population upkeep and the win condition."""

from __future__ import annotations

import logging
import random
from itertools import count
from math import pi

from . import config
from .config import WorldConfig
from .geometry import clamp
from .models import Bot, Element, Player, collision_radius
from .spawn import SCATTER, SpawnPolicy, plan_spawn

logger = logging.getLogger(__name__)


def has_won(player: Player, world: WorldConfig) -> bool:
    radius = player.radius
    return pi * radius * radius > world.area * world.win_area_fraction


class PopulationManager:
    def __init__(
        self,
        world: WorldConfig,
        rng: random.Random,
        *,
        policy: SpawnPolicy = SCATTER,
    ) -> None:
        self.world = world
        self.rng = rng
        self.policy = policy
        self._bot_ids = count(1)

    def _next_bot_id(self) -> str:
        return f"b{next(self._bot_ids)}"

    def create_bot(
        self,
        existing: dict[str, Bot],
        player_position: tuple[float, float] | None,
        tick: int,
        *,
        policy: SpawnPolicy | None = None,
    ) -> Bot:
        size = self.rng.uniform(config.BOT_MIN_SIZE, config.BOT_MAX_SIZE)
        element = self.rng.choice(list(Element))
        name = self.rng.choice(config.BOT_NAMES)

        spawn = plan_spawn(
            self.world,
            existing.values(),
            player_position,
            radius=collision_radius(size),
            rng=self.rng,
            policy=policy or self.policy,
        )
        if not spawn.satisfied:
            logger.debug(
                "No %s spawn slot satisfied all constraints after %d attempts; using (%.1f, %.1f)",
                (policy or self.policy).name,
                spawn.attempts,
                spawn.x,
                spawn.y,
            )

        x, y = spawn.position
        spread = config.BOT_INITIAL_WAYPOINT_RANGE
        return Bot(
            id=self._next_bot_id(),
            name=name,
            element=element,
            size=size,
            x=x,
            y=y,
            speed=self.rng.uniform(config.BOT_MIN_SPEED, config.BOT_MAX_SPEED),
            target_x=clamp(x + self.rng.uniform(-spread, spread), 0.0, self.world.width),
            target_y=clamp(y + self.rng.uniform(-spread, spread), 0.0, self.world.height),
            waypoint_tick=tick,
        )

    def remove_defeated(self, bots: dict[str, Bot]) -> list[Bot]:
        removed = [bot for bot in bots.values() if bot.defeated]
        for bot in removed:
            del bots[bot.id]
        return removed

    def replenish(
        self,
        bots: dict[str, Bot],
        player_position: tuple[float, float] | None,
        tick: int,
    ) -> list[Bot]:
        spawned: list[Bot] = []
        while len(bots) < self.world.bot_count:
            bot = self.create_bot(bots, player_position, tick)
            bots[bot.id] = bot
            spawned.append(bot)
        return spawned

    def populate(
        self,
        player_position: tuple[float, float] | None,
        tick: int,
    ) -> dict[str, Bot]:
        bots: dict[str, Bot] = {}
        self.replenish(bots, player_position, tick)
        logger.debug("Populated arena with %d bots", len(bots))
        return bots
