"""
Tests for vectors, celestial orbits and the celestial registry.
"""

import math

import pytest
from numpy.testing import assert_allclose

from celestial_command.bodies import (
    GRAVITY_PER_RADIUS,
    Celestial,
    CelestialRegistry,
    Orbit,
    PlayerId,
    Ship,
)
from celestial_command.vector import Vector2


# =============================================================================
# VECTOR2
# =============================================================================

class TestVector2:

    @pytest.mark.parametrize("v1,v2,expected", [
        (Vector2(1, 2), Vector2(3, 4), Vector2(4, 6)),
        (Vector2(-1, 0), Vector2(1, 0), Vector2(0, 0)),
        (Vector2(0.5, -0.5), Vector2(0, 0), Vector2(0.5, -0.5)),
    ])
    def test_add(self, v1, v2, expected):
        assert v1 + v2 == expected

    def test_cross_sign(self):
        assert Vector2(1, 0).cross(Vector2(0, 1)) == 1
        assert Vector2(1, 0).cross(Vector2(0, -1)) == -1

    def test_normalized_zero(self):
        assert Vector2(0, 0).normalized() == Vector2(0, 0)

    def test_rotated(self):
        assert_allclose(Vector2(1, 0).rotated(math.pi / 2).to_tuple(), (0, 1), atol=1e-12)

    def test_divide_by_zero(self):
        with pytest.raises(ValueError):
            Vector2(1, 1) / 0

    def test_from_polar_angle_roundtrip(self):
        assert Vector2.from_polar(3, 0.75).angle() == pytest.approx(0.75)


# =============================================================================
# CELESTIALS
# =============================================================================

@pytest.fixture
def system():
    """Planet at the origin with a counter-clockwise moon."""
    registry = CelestialRegistry()
    planet = registry.add(Celestial(radius=500, player=PlayerId.NEUTRAL, position=Vector2(0, 0)))
    moon = registry.add(Celestial(
        radius=50, player=PlayerId.ENEMY,
        orbit=Orbit(center=planet, radius=1000, angle=0.0),
    ))
    return registry, planet, moon


class TestCelestialRegistry:

    def test_fixed_body_does_not_move(self, system):
        registry, planet, _ = system
        registry.update(10.0)
        assert registry[planet].position == Vector2(0, 0)
        assert registry[planet].velocity == Vector2(0, 0)
        assert registry[planet].is_fixed

    def test_orbit_position_on_add(self, system):
        registry, _, moon = system
        assert_allclose(registry[moon].position.to_tuple(), (0, 1000))

    def test_orbit_advances(self, system):
        registry, _, moon = system
        omega = GRAVITY_PER_RADIUS * 500 / 1000
        registry.update(2.0)
        assert registry[moon].orbit.angle == pytest.approx(2.0 * omega)
        assert registry[moon].position.length == pytest.approx(1000)

    def test_clockwise_orbit_reverses(self):
        registry = CelestialRegistry()
        planet = registry.add(Celestial(radius=500))
        moon = registry.add(Celestial(radius=50, orbit=Orbit(center=planet, radius=1000, angle=0.0,
                                                             clockwise=True)))
        registry.update(1.0)
        assert registry[moon].orbit.angle < 0
        assert registry[moon].position.x < 0

    def test_velocity_matches_motion(self, system):
        registry, _, moon = system
        before = registry[moon].position
        velocity = registry[moon].velocity
        registry.update(0.01)
        moved = (registry[moon].position - before) / 0.01
        assert_allclose(moved.to_tuple(), velocity.to_tuple(), rtol=1e-3, atol=0.01)

    def test_nested_orbit_follows_center(self, system):
        registry, _, moon = system
        submoon = registry.add(Celestial(radius=5, orbit=Orbit(center=moon, radius=100, angle=0.0)))
        registry.update(3.0)
        assert registry[submoon].position.distance_to(registry[moon].position) == pytest.approx(100)

    def test_unregistered_center(self):
        registry = CelestialRegistry()
        with pytest.raises(ValueError):
            registry.add(Celestial(radius=10, orbit=Orbit(center=0, radius=100, angle=0.0)))

    def test_owned_by(self, system):
        registry, _, moon = system
        assert registry.owned_by(PlayerId.ENEMY) == [moon]
        assert registry.owned_by(PlayerId.PLAYER) == []

    def test_handles_are_stable(self, system):
        registry, planet, moon = system
        registry.add(Celestial(radius=10, position=Vector2(5000, 0)))
        assert registry[planet].radius == 500
        assert registry[moon].radius == 50
        assert len(registry) == 3


class TestShip:

    def test_heading(self):
        ship = Ship(rotation=math.pi / 2)
        assert_allclose(ship.heading.to_tuple(), (0, 1), atol=1e-12)

    def test_identity_hash(self):
        a, b = Ship(), Ship()
        assert len({a, b}) == 2
