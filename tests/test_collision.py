"""Tests for pair resolution and the all-pairs scan."""

import pytest

from wafe.collision import Rule, check_collision, resolve, resolve_collisions
from wafe.models import Bot, Element, Player


def _bot(bot_id, element, size=1.0, x=100.0, y=100.0):
    return Bot(id=bot_id, name=bot_id, element=element, size=size, x=x, y=y, speed=0.0)


def _player(element, size=1.0, x=100.0, y=100.0):
    return Player(id="player", name="Ash", element=element, size=size, x=x, y=y, speed=2.0)


def test_overlap_is_strict():
    a = _bot("a", Element.FIRE, x=0.0, y=0.0)
    b = _bot("b", Element.FIRE, x=49.0, y=0.0)
    assert check_collision(a, b)

    b.x = 50.0
    assert not check_collision(a, b)


def test_elemental_winner_absorbs_twenty_percent():
    player = _player(Element.FIRE)
    bot = _bot("b1", Element.AIR)

    outcome = resolve(player, bot)

    assert outcome is not None
    assert outcome.winner is player
    assert outcome.loser is bot
    assert outcome.rule is Rule.ELEMENT
    assert outcome.absorbed == pytest.approx(0.2)
    assert player.size == pytest.approx(1.2)
    assert player.score == 600
    assert bot.defeated
    assert not player.defeated


def test_elemental_rule_ignores_argument_order():
    player = _player(Element.FIRE)
    bot = _bot("b1", Element.WATER)

    outcome = resolve(player, bot)

    assert outcome.winner is bot
    assert player.defeated
    assert bot.size == pytest.approx(1.2)


def test_elemental_rule_beats_size():
    big = _bot("big", Element.AIR, size=5.0)
    small = _bot("small", Element.FIRE, size=1.0)

    outcome = resolve(big, small)

    assert outcome.winner is small
    assert small.size == pytest.approx(2.0)


def test_same_element_never_interacts():
    a = _bot("a", Element.EARTH, size=3.0)
    b = _bot("b", Element.EARTH, size=1.0)

    assert resolve(a, b) is None
    assert (a.size, b.size) == (3.0, 1.0)
    assert not a.defeated and not b.defeated


def test_size_rule_for_unrelated_elements():
    large = _bot("large", Element.FIRE, size=2.0)
    small = _bot("small", Element.EARTH, size=1.0)

    outcome = resolve(small, large)

    assert outcome.rule is Rule.SIZE
    assert outcome.winner is large
    assert large.size == pytest.approx(2.1)
    assert small.defeated


def test_unrelated_elements_of_similar_size_bounce():
    a = _bot("a", Element.WATER, size=1.4)
    b = _bot("b", Element.AIR, size=1.0)

    assert resolve(a, b) is None
    assert not a.defeated and not b.defeated


def test_invulnerable_player_is_left_out_of_the_scan():
    player = _player(Element.FIRE)
    bots = [_bot("b1", Element.WATER), _bot("b2", Element.AIR, x=1000.0, y=1000.0)]

    assert resolve_collisions(player, bots, player_vulnerable=False) == []
    assert not player.defeated

    interactions = resolve_collisions(player, bots, player_vulnerable=True)
    assert len(interactions) == 1
    assert interactions[0].loser is player


def test_defeated_entities_take_no_further_part():
    fire = _bot("fire", Element.FIRE)
    air = _bot("air", Element.AIR)
    earth = _bot("earth", Element.EARTH)

    interactions = resolve_collisions(None, [fire, air, earth], player_vulnerable=False)

    # Air would beat earth, but it already lost to fire.
    assert [(i.winner.id, i.loser.id) for i in interactions] == [("fire", "air")]
    assert not earth.defeated
    assert earth.size == 1.0


def test_interaction_records_loser_position_and_size():
    winner = _bot("w", Element.EARTH, x=10.0, y=20.0)
    loser = _bot("l", Element.WATER, size=1.5, x=12.0, y=21.0)

    outcome = resolve(winner, loser)

    assert (outcome.x, outcome.y) == (12.0, 21.0)
    assert outcome.loser_size == 1.5
