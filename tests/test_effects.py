"""Tests for the transient effect system."""

import pytest

from wafe.effects import EffectSystem, Explosion, TextEffect
from wafe.models import Element, Player


def _text(duration=3):
    return TextEffect(x=0.0, y=0.0, color="#FFFFFF", duration=duration, text="hi")


def test_effect_is_purged_when_elapsed_reaches_duration():
    effects = EffectSystem(seed=1)
    text = effects.add(_text(duration=3))

    effects.advance()
    effects.advance()
    assert effects.active() == (text,)
    assert text.elapsed == 2

    effects.advance()
    assert len(effects) == 0


def test_progress_alpha_and_radius_interpolation():
    explosion = Explosion(x=0.0, y=0.0, color="#FF5733", duration=4, radius=10.0, max_radius=30.0)
    explosion.elapsed = 1

    assert explosion.progress == pytest.approx(0.25)
    assert explosion.alpha == pytest.approx(0.75)
    assert explosion.current_radius == pytest.approx(15.0)


def test_scheduled_effect_is_released_on_its_tick():
    effects = EffectSystem(seed=1)
    effects.schedule(_text(duration=10), 3)

    assert effects.pending() == 1
    assert len(effects) == 0

    effects.advance()
    effects.advance()
    assert len(effects) == 0

    effects.advance()
    assert effects.pending() == 0
    (released,) = effects.active()
    assert released.elapsed == 1


def test_defeat_particles_integrate_each_tick():
    effects = EffectSystem(seed=5)
    explosion = effects.defeat(100.0, 200.0, 1.0, "#3498DB", "Water")

    kinds = [effect.kind for effect in effects.active()]
    assert kinds == ["explosion", "text"]
    assert len(explosion.particles) == 20
    assert explosion.radius == 25.0
    assert explosion.max_radius == 50.0

    before = [(p.x, p.y, p.vx, p.vy) for p in explosion.particles]
    effects.advance()

    for particle, (x, y, vx, vy) in zip(explosion.particles, before):
        assert particle.x == pytest.approx(x + vx)
        assert particle.y == pytest.approx(y + vy)
        assert particle.alpha == pytest.approx(1.0 - 1.0 / 30.0)

    label = effects.active()[1]
    assert label.text == "Water defeated!"


def test_player_death_sequence_is_staggered():
    effects = EffectSystem(seed=2)
    player = Player(id="player", name="Ash", element=Element.FIRE, size=1.0, x=10.0, y=20.0, speed=2.0)

    effects.player_death(player, ms_to_ticks=lambda ms: int(ms))

    kinds = sorted(effect.kind for effect in effects.active())
    assert kinds == ["dead_player", "explosion", "explosion", "flash", "ring"]
    assert effects.pending() == 7

    for _ in range(600):
        effects.advance()
    texts = [effect.text for effect in effects.active() if effect.kind == "text"]
    assert texts == ["YOU DIED", "Fire has been extinguished!"]
    assert effects.pending() == 0


def test_payload_is_json_ready():
    effects = EffectSystem(seed=1)
    player = Player(id="player", name="Ash", element=Element.AIR, size=2.0, x=1.234, y=5.678, speed=2.0)
    growth = effects.growth(player)

    payload = growth.payload()

    assert payload["type"] == "growth"
    assert payload["x"] == 1.23
    assert payload["radius"] == 30.0
    assert payload["color"] == Element.AIR.color


def test_clear_drops_active_and_scheduled():
    effects = EffectSystem(seed=1)
    effects.add(_text())
    effects.schedule(_text(), 5)

    effects.clear()

    assert len(effects) == 0
    assert effects.pending() == 0


def test_same_seed_same_particles():
    first = EffectSystem(seed=11).defeat(0.0, 0.0, 1.0, "#FFFFFF", "Air")
    second = EffectSystem(seed=11).defeat(0.0, 0.0, 1.0, "#FFFFFF", "Air")
    assert first.particles == second.particles
