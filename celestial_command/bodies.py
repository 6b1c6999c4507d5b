"""
Bodies in the simulated system: celestials and ships.

Celestials are massive circular bodies, either fixed in place or on a
circular orbit around another celestial. Their position and velocity are
derived from the orbit every tick rather than integrated. Ships are owned by
the external physics integrator, which advances position, velocity and
rotation from the thrust and rotation rate computed by their controller.

Celestials are referenced everywhere by an integer handle into a
CelestialRegistry, so commands and plans never hold the objects themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

from .vector import Vector2

if TYPE_CHECKING:
    from .steering import SteeringController


# =============================================================================
# CONSTANTS
# =============================================================================

# Orbital angular speed is GravityPerRadius * center.radius / orbit.radius
GRAVITY_PER_RADIUS = 0.05  # (au/s)/au

SHIP_RADIUS = 8.0  # au


class PlayerId(Enum):
    """Owner tag carried by every body."""
    PLAYER = "player"
    ENEMY = "enemy"
    NEUTRAL = "neutral"
    NONE = "none"


# =============================================================================
# CELESTIALS
# =============================================================================

@dataclass
class Orbit:
    """
    Circular orbit parameters.

    Attributes:
        center: Handle of the celestial being orbited
        radius: Orbital radius (au)
        angle: Current phase (radians); position is center + radius*(sin, cos)
        clockwise: Direction of travel
    """
    center: int
    radius: float
    angle: float
    clockwise: bool = False


@dataclass
class Celestial:
    """
    A massive circular body.

    Attributes:
        radius: Body radius (au)
        player: Owning player
        position: Current position (au), derived from orbit when present
        velocity: Current velocity (au/s), derived from orbit when present
        orbit: Orbital parameters, or None for a fixed body
    """
    radius: float
    player: PlayerId = PlayerId.NEUTRAL
    position: Vector2 = field(default_factory=Vector2.zero)
    velocity: Vector2 = field(default_factory=Vector2.zero)
    orbit: Optional[Orbit] = None

    @property
    def is_fixed(self) -> bool:
        return self.orbit is None


def angular_speed(orbit: Orbit, center: Celestial) -> float:
    """Signed angular speed of an orbit (rad/s); negative when clockwise."""
    speed = GRAVITY_PER_RADIUS * center.radius / orbit.radius
    return -speed if orbit.clockwise else speed


def orbit_offset(radius: float, angle: float) -> Vector2:
    """Offset from the orbit center at a given phase."""
    return Vector2(radius * math.sin(angle), radius * math.cos(angle))


def orbit_velocity(radius: float, angle: float, omega: float) -> Vector2:
    """Time derivative of orbit_offset for angular speed omega."""
    return Vector2(radius * omega * math.cos(angle), -radius * omega * math.sin(angle))


class CelestialRegistry:
    """
    Ordered registry of celestials addressed by stable integer handles.

    An orbit's center must be registered before its satellite, so updating
    in registration order always moves centers before the bodies around them.
    """

    def __init__(self) -> None:
        self._celestials: list[Celestial] = []

    def add(self, celestial: Celestial) -> int:
        """
        Register a celestial and return its handle.

        Raises:
            ValueError: If the orbit center is not already registered.
        """
        if celestial.orbit is not None:
            if not 0 <= celestial.orbit.center < len(self._celestials):
                raise ValueError(
                    f"Orbit center {celestial.orbit.center} is not a registered celestial"
                )
            if celestial.orbit.radius <= 0:
                raise ValueError("Orbit radius must be positive")
        handle = len(self._celestials)
        self._celestials.append(celestial)
        self._place(celestial)
        return handle

    def __getitem__(self, handle: int) -> Celestial:
        return self._celestials[handle]

    def __iter__(self) -> Iterator[Celestial]:
        return iter(self._celestials)

    def __len__(self) -> int:
        return len(self._celestials)

    def owned_by(self, player: PlayerId) -> list[int]:
        """Handles of every celestial owned by player."""
        return [h for h, c in enumerate(self._celestials) if c.player == player]

    def update(self, dt: float) -> None:
        """Advance every orbit by dt seconds."""
        for celestial in self._celestials:
            if celestial.orbit is not None:
                center = self._celestials[celestial.orbit.center]
                celestial.orbit.angle += dt * angular_speed(celestial.orbit, center)
                self._place(celestial)

    def _place(self, celestial: Celestial) -> None:
        orbit = celestial.orbit
        if orbit is None:
            celestial.velocity = Vector2.zero()
            return
        center = self._celestials[orbit.center]
        omega = angular_speed(orbit, center)
        celestial.position = center.position + orbit_offset(orbit.radius, orbit.angle)
        celestial.velocity = center.velocity + orbit_velocity(orbit.radius, orbit.angle, omega)


# =============================================================================
# SHIPS
# =============================================================================

@dataclass(eq=False)
class Ship:
    """
    Kinematic state of a ship.

    Attributes:
        position: Position (au)
        velocity: Velocity (au/s)
        rotation: Heading (radians, counter-clockwise from +x)
        player: Owning player
        radius: Body radius (au)
        controller: Steering controller issuing this ship's thrust
    """
    position: Vector2 = field(default_factory=Vector2.zero)
    velocity: Vector2 = field(default_factory=Vector2.zero)
    rotation: float = 0.0
    player: PlayerId = PlayerId.NONE
    radius: float = SHIP_RADIUS
    controller: Optional[SteeringController] = None

    @property
    def heading(self) -> Vector2:
        return Vector2.from_polar(1.0, self.rotation)
