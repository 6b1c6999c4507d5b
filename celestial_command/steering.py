"""
Ship steering: turns a symbolic command into thrust and rotation rate.

Two layers:
- Steering primitives: pure functions computing a target velocity profile,
  rate-limited acceleration, rotation rate, forward thrust and analytic
  collision avoidance against circular bodies (grazing deflection plus a
  closing-speed limit that leaves room to turn around and brake).
- SteeringController: per-ship state machine executing a PatrolCommand or an
  OrbitCommand every tick.

Ships only have a forward engine. To accelerate in any other direction they
must first rotate, so the controller outputs a rotation rate towards the
desired acceleration and the forward projection of that acceleration as
thrust.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .bodies import Celestial, CelestialRegistry, Ship
from .vector import Vector2


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_TARGET_VELOCITY = 120.0  # au/s
ACCELERATION = 40.0  # au/s^2
DECELERATION_SAFETY_FACTOR = 1.2
ROTATION_RATE = 2.0  # rad/s
TURN_AROUND_TIME = math.pi / ROTATION_RATE  # s (worst-case half turn before braking)

PATROL_ARRIVAL_THRESHOLD = 5.0  # au
PATROL_RADIUS = 50.0  # au

COLLISION_THRESHOLD = 15.0  # au (clearance kept from a body's surface)

ORBIT_RADIUS_FACTOR = 1.2
ORBIT_RADIUS_OFFSET = 30.0  # au
ORBIT_THRESHOLD_OFFSET = 40.0  # au (distance beyond the orbit where orbiting starts)
ORBIT_VELOCITY = 30.0  # au/s
ORBIT_PHASE_SPREAD = math.pi / 4  # rad (random phase offset from the ship's bearing)

ACCELERATION_THRESHOLD = 0.5  # au/s^2 (below this, coast)


# =============================================================================
# STEERING PRIMITIVES
# =============================================================================

def random_radial_point(center: Vector2, radius: float, rng: random.Random) -> Vector2:
    """Uniformly distributed point within radius of center."""
    r = radius * math.sqrt(rng.random())
    a = 2 * math.pi * rng.random()
    return center + Vector2.from_polar(r, a)


def target_velocity(delta: Vector2) -> Vector2:
    """
    Velocity to aim for, given the offset to the destination.

    The speed is the highest from which the ship can still stop at the
    destination under ACCELERATION (v = sqrt(2 a s)), reduced by the safety
    factor and capped at MAX_TARGET_VELOCITY.
    """
    length = delta.length
    if length == 0:
        return Vector2.zero()
    speed = min(
        math.sqrt(2 * ACCELERATION * length) / DECELERATION_SAFETY_FACTOR,
        MAX_TARGET_VELOCITY,
    )
    return delta * (speed / length)


def target_acceleration(dt: float, velocity: Vector2, target: Vector2) -> Vector2:
    """Acceleration that reaches target velocity, limited to ACCELERATION."""
    delta = target - velocity
    length = delta.length
    if length == 0 or dt <= 0:
        return Vector2.zero()
    return delta * (min(length / dt, ACCELERATION) / length)


def rotation_rate(dt: float, rotation: float, acceleration: Vector2) -> float:
    """
    Signed rotation rate turning the ship towards acceleration.

    The angle difference is wrapped to (-pi, pi], limited to ROTATION_RATE and
    to the rate that would exactly align the ship within dt.
    """
    if dt <= 0 or acceleration.is_zero():
        return 0.0
    wrap = acceleration.angle() - rotation
    difference = wrap - 2 * math.pi * math.ceil((wrap - math.pi) / (2 * math.pi))
    if difference == 0:
        return 0.0
    return math.copysign(min(ROTATION_RATE, abs(difference) / dt), difference)


def thrust(rotation: float, acceleration: Vector2) -> float:
    """Forward component of acceleration; the engine cannot push backwards."""
    return max(0.0, math.cos(rotation) * acceleration.x + math.sin(rotation) * acceleration.y)


def stopping_distance(speed: float) -> float:
    """Distance needed to stop from speed, including the safety factor."""
    return speed * speed / (2 * ACCELERATION) * DECELERATION_SAFETY_FACTOR


def safe_closing_speed(gap: float) -> float:
    """
    Highest speed at which a ship may close a gap and still stop short of it.

    Covers the worst case of a forward-only ship facing the wrong way: a full
    half turn at ROTATION_RATE while coasting, then braking within
    stopping_distance. Solves v * TURN_AROUND_TIME + stopping_distance(v) = gap.

    Args:
        gap: Distance left before the collision threshold (au)

    Returns:
        Closing speed limit (au/s), zero when the gap is closed
    """
    if gap <= 0:
        return 0.0
    a = DECELERATION_SAFETY_FACTOR / (2 * ACCELERATION)
    b = TURN_AROUND_TIME
    return (math.sqrt(b * b + 4 * a * gap) - b) / (2 * a)


def deflect_velocity(
    position: Vector2,
    desired_velocity: Vector2,
    bodies: Iterable[Celestial],
) -> Vector2:
    """
    Deflect desired_velocity around the most imminent body on the path.

    Each body is treated as a circle of radius + COLLISION_THRESHOLD. The
    collision time along the desired relative velocity is solved from
    |p + v t| = R; a collision closer than the stopping distance is dangerous,
    and the relative velocity of the soonest one is turned just enough to
    graze the circle, keeping its speed and turn direction.

    Args:
        position: Ship position
        desired_velocity: Velocity the ship wants to fly at
        bodies: Massive bodies to avoid

    Returns:
        Velocity to fly at (desired_velocity when nothing is in the way)
    """
    danger: Optional[Celestial] = None
    danger_time = math.inf
    for body in bodies:
        offset = position - body.position
        threshold = body.radius + COLLISION_THRESHOLD
        c = offset.length_squared - threshold * threshold
        relative = desired_velocity - body.velocity
        a = relative.length_squared
        if c < 0 or a == 0:
            continue
        b = 2 * offset.dot(relative)
        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            continue
        t = (-b - math.sqrt(discriminant)) / (2 * a)
        if t <= 0:
            continue
        if math.sqrt(a) * t < stopping_distance(math.sqrt(a)) and t < danger_time:
            danger = body
            danger_time = t

    if danger is None:
        return desired_velocity

    to_body = danger.position - position
    relative = desired_velocity - danger.velocity
    threshold = danger.radius + COLLISION_THRESHOLD
    tangent_angle = math.asin(min(1.0, threshold / to_body.length))
    side = 1.0 if to_body.cross(relative) >= 0 else -1.0
    deflected = to_body.normalized().rotated(side * tangent_angle) * relative.length
    return deflected + danger.velocity


def avoid_collisions(
    position: Vector2,
    velocity: Vector2,
    desired_velocity: Vector2,
    bodies: Iterable[Celestial],
) -> Vector2:
    """
    Filter desired_velocity so the ship keeps clear of every body.

    In order:
    - Inside a body's radius + COLLISION_THRESHOLD, escape straight outwards
      at MAX_TARGET_VELOCITY.
    - If the ship already closes on a body faster than safe_closing_speed
      allows, brake: keep only the tangential part of its velocity relative
      to that body.
    - Otherwise deflect the desired velocity around the most imminent body
      (deflect_velocity) and cap its closing speed towards each body at
      safe_closing_speed, keeping the tangential part.

    Args:
        position: Ship position
        velocity: Ship velocity
        desired_velocity: Velocity the ship wants to fly at
        bodies: Massive bodies to avoid

    Returns:
        Velocity to fly at (desired_velocity when nothing is in the way)
    """
    bodies = list(bodies)
    for body in bodies:
        offset = position - body.position
        threshold = body.radius + COLLISION_THRESHOLD
        if offset.length_squared < threshold * threshold:
            if offset.is_zero():
                return Vector2(MAX_TARGET_VELOCITY, 0.0)
            return offset.scaled_to(MAX_TARGET_VELOCITY)

    for body in bodies:
        offset = position - body.position
        normal = offset.normalized()
        relative = velocity - body.velocity
        closing = -relative.dot(normal)
        if closing > safe_closing_speed(offset.length - body.radius - COLLISION_THRESHOLD):
            return body.velocity + relative + normal * closing

    result = deflect_velocity(position, desired_velocity, bodies)
    for body in bodies:
        offset = position - body.position
        normal = offset.normalized()
        relative = result - body.velocity
        closing = -relative.dot(normal)
        limit = safe_closing_speed(offset.length - body.radius - COLLISION_THRESHOLD)
        if closing > limit:
            result = result + normal * (closing - limit)
    return result


def orbital_radius(celestial: Celestial) -> float:
    """Radius at which ships orbit celestial."""
    return celestial.radius * ORBIT_RADIUS_FACTOR + ORBIT_RADIUS_OFFSET


# =============================================================================
# COMMANDS
# =============================================================================

@dataclass
class PatrolCommand:
    """
    Loiter around an objective.

    Attributes:
        objective: Long-term goal point
        destination: Current waypoint near the objective, resampled on arrival
    """
    objective: Vector2
    destination: Vector2


@dataclass
class OrbitCommand:
    """
    Orbit a celestial.

    Attributes:
        celestial: Handle of the celestial to orbit
        orbital_angle: Phase on the orbit, None until the orbit is established
    """
    celestial: int
    orbital_angle: Optional[float] = None


Command = Union[PatrolCommand, OrbitCommand]


@dataclass
class SteeringOutput:
    """Instantaneous control output consumed by the physics integrator."""
    thrust: float = 0.0  # au/s^2, always >= 0
    rotation_rate: float = 0.0  # rad/s


# =============================================================================
# STEERING CONTROLLER
# =============================================================================

class SteeringController:
    """
    Executes one ship's command.

    Usage:
        controller = SteeringController(ship, registry, rng=random.Random(1))
        controller.orbit(home)
        output = controller.step(dt)

    Attributes:
        ship: The ship being steered
        celestials: Registry of celestials (orbit targets and obstacles)
        command: The active command, mutated in place while executing
        rng: Random source for patrol waypoints and orbit phases
    """

    def __init__(
        self,
        ship: Ship,
        celestials: CelestialRegistry,
        rng: Optional[random.Random] = None,
        command: Optional[Command] = None,
    ) -> None:
        self.ship = ship
        self.celestials = celestials
        self.rng = rng if rng is not None else random.Random()
        if command is None:
            command = PatrolCommand(objective=ship.position, destination=ship.position)
        self.command: Command = command
        ship.controller = self

    # -------------------------------------------------------------------------
    # Command interface
    # -------------------------------------------------------------------------

    def patrol(self, objective: Vector2) -> None:
        """
        Patrol around objective.

        Re-issuing a patrol whose objective is within PATROL_RADIUS of the
        current one keeps the current waypoint.
        """
        command = self.command
        if (isinstance(command, PatrolCommand)
                and command.objective.distance_to(objective) <= PATROL_RADIUS):
            return
        self.command = PatrolCommand(objective=objective, destination=objective)

    def orbit(self, celestial: int) -> None:
        """Orbit a celestial; re-issuing for the same celestial keeps the phase."""
        command = self.command
        if isinstance(command, OrbitCommand) and command.celestial == celestial:
            return
        self.command = OrbitCommand(celestial=celestial)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def step(self, dt: float) -> SteeringOutput:
        """
        Compute this tick's thrust and rotation rate.

        Args:
            dt: Time step in seconds

        Returns:
            SteeringOutput for the physics integrator
        """
        command = self.command
        if isinstance(command, PatrolCommand):
            delta, feed_forward = self._patrol(command)
        else:
            delta, feed_forward = self._orbit(dt, command)

        desired = target_velocity(delta) + feed_forward
        desired = avoid_collisions(
            self.ship.position, self.ship.velocity, desired, self.celestials,
        )
        acceleration = target_acceleration(dt, self.ship.velocity, desired)
        if acceleration.length < ACCELERATION_THRESHOLD:
            return SteeringOutput()
        return SteeringOutput(
            thrust=thrust(self.ship.rotation, acceleration),
            rotation_rate=rotation_rate(dt, self.ship.rotation, acceleration),
        )

    def _patrol(self, command: PatrolCommand) -> tuple[Vector2, Vector2]:
        delta = command.destination - self.ship.position
        if delta.length < PATROL_ARRIVAL_THRESHOLD:
            command.destination = random_radial_point(command.objective, PATROL_RADIUS, self.rng)
            delta = command.destination - self.ship.position
        return delta, Vector2.zero()

    def _orbit(self, dt: float, command: OrbitCommand) -> tuple[Vector2, Vector2]:
        celestial = self.celestials[command.celestial]
        radius = orbital_radius(celestial)
        delta = celestial.position - self.ship.position
        distance = delta.length

        if distance >= radius + ORBIT_THRESHOLD_OFFSET:
            # Left the orbit zone: pick a fresh phase on the way back in
            command.orbital_angle = None
            # Aim for the near side of the orbit, not through the body
            return delta * ((distance - radius) / distance), Vector2.zero()

        if command.orbital_angle is None:
            # Random phase near the ship's bearing, so ships arriving together
            # spread out without aiming across the body
            bearing = (-delta).angle()
            command.orbital_angle = bearing + self.rng.uniform(-ORBIT_PHASE_SPREAD, ORBIT_PHASE_SPREAD)
        command.orbital_angle += dt * ORBIT_VELOCITY / radius
        offset = Vector2.from_polar(radius, command.orbital_angle)
        delta = celestial.position + offset - self.ship.position
        feed_forward = celestial.velocity + offset.perpendicular().scaled_to(ORBIT_VELOCITY)
        return delta, feed_forward
