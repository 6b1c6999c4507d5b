"""Shared fixtures: a stand-in physics integrator and small celestial systems."""

import pytest

from celestial_command.bodies import Celestial, CelestialRegistry, PlayerId, Ship
from celestial_command.steering import SteeringOutput
from celestial_command.vector import Vector2


def euler_step(ship: Ship, output: SteeringOutput, dt: float) -> None:
    """Apply one tick of thrust and rotation (the game's physics engine does this)."""
    ship.velocity = ship.velocity + ship.heading * (output.thrust * dt)
    ship.position = ship.position + ship.velocity * dt
    ship.rotation += output.rotation_rate * dt


@pytest.fixture
def integrate():
    """Euler integrator for a ship and its steering output."""
    return euler_step


@pytest.fixture
def empty_registry():
    return CelestialRegistry()


@pytest.fixture
def planet_registry():
    """A single fixed planet of radius 50 at the origin."""
    registry = CelestialRegistry()
    registry.add(Celestial(radius=50, player=PlayerId.NEUTRAL, position=Vector2(0, 0)))
    return registry
