"""Tests for entity derivations and the element cycle."""

import pytest

from wafe.models import Bot, Element, Player, collision_radius, score_for


def test_radius_grows_with_size():
    assert collision_radius(1.0) == 25.0
    assert collision_radius(0.0) == 20.0

    bot = Bot(id="b1", name="Aqua", element=Element.WATER, size=2.0, x=0.0, y=0.0, speed=1.0)
    assert bot.radius == 30.0


def test_score_is_floored_size_times_500():
    assert score_for(1.0) == 500
    assert score_for(1.2) == 600
    assert score_for(1.2345) == 617
    assert score_for(0.0019) == 0


def test_each_element_beats_exactly_the_next_in_cycle():
    assert Element.FIRE.strong_against is Element.AIR
    assert Element.AIR.strong_against is Element.EARTH
    assert Element.EARTH.strong_against is Element.WATER
    assert Element.WATER.strong_against is Element.FIRE

    seen = []
    current = Element.FIRE
    for _ in range(4):
        seen.append(current)
        current = current.strong_against
    assert current is Element.FIRE
    assert set(seen) == set(Element)


def test_element_label_and_color():
    assert Element.EARTH.label == "Earth"
    assert Element.FIRE.color == "#FF5733"
    assert Element("water") is Element.WATER


def test_player_invulnerability_is_inclusive():
    player = Player(
        id="player",
        name="Ash",
        element=Element.FIRE,
        size=1.0,
        x=0.0,
        y=0.0,
        speed=2.0,
        invulnerable_until=180,
    )
    assert player.is_player
    assert player.is_invulnerable(180)
    assert not player.is_invulnerable(181)
    assert player.defeated_elements == {element: 0 for element in Element}


def test_absorb_ignores_non_positive_amounts():
    bot = Bot(id="b1", name="Gust", element=Element.AIR, size=1.5, x=0.0, y=0.0, speed=1.0)
    bot.absorb(-1.0)
    bot.absorb(0.0)
    assert bot.size == 1.5
    bot.absorb(0.25)
    assert bot.size == pytest.approx(1.75)
    assert not bot.is_player
