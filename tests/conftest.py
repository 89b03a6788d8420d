"""Pytest configuration and fixtures for arena tests."""

import random

import pytest

from wafe.config import WorldConfig
from wafe.models import Bot, Element
from wafe.scores import HighScoreBoard, MemoryStore
from wafe.session import GameSession


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def world():
    """Default-sized world ticking at 1000 Hz, so one tick is one millisecond."""
    return WorldConfig(tick_rate=1000)


@pytest.fixture
def board():
    return HighScoreBoard(MemoryStore())


@pytest.fixture
def make_session(board):
    """Build seeded sessions sharing the in-memory score board."""

    def _make(bot_count=1, seed=7, **overrides):
        world = WorldConfig(bot_count=bot_count, tick_rate=1000, **overrides)
        return GameSession(world, seed=seed, scores=board)

    return _make


def parked_bot(bot_id, element, x, y, size=1.0):
    """A bot that never moves, useful for staging collisions."""
    return Bot(
        id=bot_id,
        name=bot_id,
        element=element,
        size=size,
        x=x,
        y=y,
        speed=0.0,
        target_x=x,
        target_y=y,
    )


@pytest.fixture
def stage_bot():
    """Replace a session's bots with a single parked bot on top of the player."""

    def _stage(session, element=Element.WATER, size=1.0):
        player = session.player
        bot = parked_bot("b-staged", element, player.x, player.y, size=size)
        session.bots = {bot.id: bot}
        return bot

    return _stage
