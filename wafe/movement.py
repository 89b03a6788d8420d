"""Per-tick position updates for the player and the wandering bots."""

from __future__ import annotations

import random
from math import atan2, cos, hypot, sin

from . import config
from .config import WorldConfig
from .geometry import clamp, unit_vec
from .models import Bot, Entity, Player


def player_base_speed(player: Player) -> float:
    # Bigger players are slower, but never fully stuck.
    factor = max(config.PLAYER_MIN_SPEED_FACTOR, 1.3 / (0.8 + player.size * 0.2))
    return player.speed * factor


def clamp_into_world(entity: Entity, world: WorldConfig) -> None:
    radius = entity.radius
    entity.x = clamp(entity.x, radius, world.width - radius)
    entity.y = clamp(entity.y, radius, world.height - radius)


def reflect_into_world(bot: Bot, world: WorldConfig) -> None:
    """Clamp a bot inside the world and bounce its heading off the wall.

    The waypoint is mirrored around the bot as well, otherwise the next
    bearing would point straight back into the wall.
    """
    radius = bot.radius
    if bot.x < radius or bot.x > world.width - radius:
        bot.x = clamp(bot.x, radius, world.width - radius)
        bot.vx = -bot.vx
        bot.target_x = 2.0 * bot.x - bot.target_x
    if bot.y < radius or bot.y > world.height - radius:
        bot.y = clamp(bot.y, radius, world.height - radius)
        bot.vy = -bot.vy
        bot.target_y = 2.0 * bot.y - bot.target_y


def move_player(player: Player, world: WorldConfig) -> None:
    dx = player.target_x - player.x
    dy = player.target_y - player.y
    dist = hypot(dx, dy)

    if dist > config.PLAYER_DEADZONE:
        ux, uy = unit_vec(dx, dy)
        base_speed = player_base_speed(player)
        accel = config.PLAYER_ACCEL * min(1.0, dist / config.PLAYER_ACCEL_RAMP)
        player.vx += (ux * base_speed - player.vx) * accel
        player.vy += (uy * base_speed - player.vy) * accel

        if dist < config.PLAYER_BRAKE_RANGE:
            brake = 1.0 - (config.PLAYER_BRAKE_RANGE - dist) / config.PLAYER_BRAKE_RANGE * 0.5
            player.vx *= brake
            player.vy *= brake
    else:
        player.vx *= config.PLAYER_FRICTION
        player.vy *= config.PLAYER_FRICTION
        if abs(player.vx) < config.PLAYER_STOP_VELOCITY and abs(player.vy) < config.PLAYER_STOP_VELOCITY:
            player.vx = 0.0
            player.vy = 0.0
            return

    player.x += player.vx
    player.y += player.vy
    clamp_into_world(player, world)


def pick_waypoint(
    bot: Bot,
    world: WorldConfig,
    tick: int,
    rng: random.Random,
    *,
    spread: float = config.BOT_WAYPOINT_RANGE,
) -> None:
    bot.target_x = clamp(bot.x + rng.uniform(-spread, spread), 0.0, world.width)
    bot.target_y = clamp(bot.y + rng.uniform(-spread, spread), 0.0, world.height)
    bot.waypoint_tick = tick


def move_bot(
    bot: Bot,
    world: WorldConfig,
    tick: int,
    rng: random.Random,
    *,
    waypoint_interval: int,
) -> None:
    dx = bot.target_x - bot.x
    dy = bot.target_y - bot.y
    if tick - bot.waypoint_tick >= waypoint_interval or hypot(dx, dy) < config.BOT_WAYPOINT_REACHED:
        pick_waypoint(bot, world, tick, rng)
        dx = bot.target_x - bot.x
        dy = bot.target_y - bot.y

    heading = atan2(dy, dx)
    bot.vx = cos(heading) * bot.speed
    bot.vy = sin(heading) * bot.speed
    bot.x += bot.vx
    bot.y += bot.vy
    reflect_into_world(bot, world)
