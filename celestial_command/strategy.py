"""
Strategic AI for computer-controlled players.

Two nested state machines drive the AI:

- Plan (macro): WAIT at home while building up, then INVADE the opponent's
  home for a fixed duration. Invasions are timed for when the two homes are
  closest on their orbits.
- Action (micro): a tactical ladder evaluated in strict priority order
  against the leader, the friendly ship with the most friendlies nearby:

      FLEE > DEFEND > RETREAT > ATTACK > GROUP > MOVE

The AI also sets its account's spending according to difficulty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .bodies import CelestialRegistry, PlayerId, Ship, angular_speed
from .economy import SHIP_COST, Account, break_even_time, capital_to_income
from .steering import SteeringController
from .vector import Vector2

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

LAZER_RANGE = 150.0  # au
VISION_RANGE = 300.0  # au (radius for counting nearby ships around the leader)
LEADER_RADIUS = 200.0  # au
DEFENCE_RADIUS = 400.0  # au (enemies this close to home trigger a defence)
HOME_RADIUS = 200.0  # au (the force counts as home within this distance)

GROUP_FRACTION = 0.75
GROUP_OBJECTIVE_DISTANCE = 600.0  # au
GROUP_ADVANCE = 200.0  # au

RETREAT_RATIO = 1.5
RETREAT_DISTANCE = LAZER_RANGE * 1.2
ATTACK_COUNT = 3
ATTACK_DISTANCE = LAZER_RANGE * 0.8

IMPATIENCE_LIMIT = 10.0  # s

INVASION_DURATION = 60.0  # s
MIN_WAIT_TIME = 30.0  # s
MAX_WAIT_TIME = 180.0  # s
FORECAST_INTERVAL = 1.0  # s
FORECAST_LIMIT = 300.0  # s

STARTER_FLEET = 4  # ships
EASY_SPENDING = 0.25
MEDIUM_INVEST_WINDOW = 60.0  # s


# =============================================================================
# ENUMERATIONS AND STATE
# =============================================================================

class Difficulty(Enum):
    """AI difficulty, selecting the economic policy."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PlanType(Enum):
    WAIT = "wait"
    INVADE = "invade"


class ActionType(Enum):
    MOVE = "move"
    GROUP = "group"
    ATTACK = "attack"
    RETREAT = "retreat"
    FLEE = "flee"
    DEFEND = "defend"


@dataclass
class Plan:
    """
    Macro plan.

    Attributes:
        type: WAIT or INVADE
        deadline: Simulation time at which the plan changes
        target: Handle of the celestial to invade
    """
    type: PlanType
    deadline: float
    target: int


@dataclass
class Action:
    """
    Tactical action applied to every friendly ship.

    Exactly one of patrol_point and orbit_target is set.
    """
    type: ActionType
    patrol_point: Optional[Vector2] = None
    orbit_target: Optional[int] = None

    @classmethod
    def patrol(cls, action_type: ActionType, point: Vector2) -> Action:
        return cls(type=action_type, patrol_point=point)

    @classmethod
    def orbit(cls, action_type: ActionType, celestial: int) -> Action:
        return cls(type=action_type, orbit_target=celestial)

    def apply(self, controller: SteeringController) -> None:
        """Issue this action as a command to one ship."""
        if self.patrol_point is not None:
            controller.patrol(self.patrol_point)
        else:
            controller.orbit(self.orbit_target)


# =============================================================================
# FORECASTING
# =============================================================================

def _forecast_positions(celestials: CelestialRegistry, handle: int, times: np.ndarray) -> np.ndarray:
    """Positions of a fixed or single-orbit celestial at the given future times."""
    celestial = celestials[handle]
    if celestial.orbit is None:
        return np.tile(celestial.position.to_tuple(), (len(times), 1))
    orbit = celestial.orbit
    center = celestials[orbit.center]
    angles = orbit.angle + angular_speed(orbit, center) * times
    return np.column_stack([
        center.position.x + orbit.radius * np.sin(angles),
        center.position.y + orbit.radius * np.cos(angles),
    ])


def _has_moving_center(celestials: CelestialRegistry, handle: int) -> bool:
    orbit = celestials[handle].orbit
    return orbit is not None and celestials[orbit.center].orbit is not None


def get_closest_approach_time(
    celestials: CelestialRegistry,
    a: int,
    b: int,
    interval: float = FORECAST_INTERVAL,
    limit: float = FORECAST_LIMIT,
) -> float:
    """
    Time from now at which two celestials are closest.

    Samples both orbits every interval seconds up to limit. Orbits around a
    center which itself orbits are not forecast: a warning is logged and
    limit returned.

    Args:
        celestials: Registry holding both bodies
        a: Handle of the first celestial
        b: Handle of the second celestial
        interval: Sampling interval (s)
        limit: Forecast horizon (s)

    Returns:
        Seconds until the minimum separation within the horizon
    """
    if interval <= 0:
        raise ValueError(f"Forecast interval must be positive, got {interval}")
    if _has_moving_center(celestials, a) or _has_moving_center(celestials, b):
        logger.warning(
            "Cannot forecast closest approach of celestials %d and %d (double orbit), "
            "assuming %.0fs", a, b, limit,
        )
        return limit

    times = np.arange(0.0, limit + interval / 2, interval)
    separation = np.linalg.norm(
        _forecast_positions(celestials, a, times) - _forecast_positions(celestials, b, times),
        axis=1,
    )
    return float(times[int(np.argmin(separation))])


def elect_leader(ships: Sequence[Ship], radius: float = LEADER_RADIUS) -> Ship:
    """The ship with the most other ships within radius (first one on ties)."""
    positions = np.array([s.position.to_tuple() for s in ships])
    distances = np.linalg.norm(positions[:, np.newaxis, :] - positions[np.newaxis, :, :], axis=2)
    counts = (distances < radius).sum(axis=1)
    return ships[int(np.argmax(counts))]


def _within(ships: Sequence[Ship], point: Vector2, radius: float) -> list[Ship]:
    return [s for s in ships if s.position.distance_to(point) < radius]


def _mean_position(ships: Sequence[Ship]) -> Vector2:
    x, y = np.mean([s.position.to_tuple() for s in ships], axis=0)
    return Vector2(float(x), float(y))


# =============================================================================
# STRATEGY AI
# =============================================================================

class StrategyAI:
    """
    Opponent decision loop for one computer-controlled player.

    Usage:
        ai = StrategyAI(PlayerId.ENEMY, home, account, registry, Difficulty.HARD)
        ai.update(time, friendlies, enemies)   # ~every 200 ms

    Attributes:
        player: Player this AI controls
        home: Handle of the home celestial
        account: The player's economy, whose spending the AI controls
        celestials: Celestial registry
        difficulty: Economic policy
        plan: Current macro plan
        action: Current tactical action
        impatience: Seconds spent retreating, decayed while not retreating
        telemetry: Debug lines describing the last update
    """

    def __init__(
        self,
        player: PlayerId,
        home: int,
        account: Account,
        celestials: CelestialRegistry,
        difficulty: Difficulty = Difficulty.MEDIUM,
        target: Optional[int] = None,
        start_time: float = 0.0,
    ) -> None:
        self.player = player
        self.home = home
        self.account = account
        self.celestials = celestials
        self.difficulty = difficulty
        self.start_time = start_time
        if target is None:
            target = self._find_opponent_home()
        self.plan = Plan(type=PlanType.WAIT, deadline=start_time, target=target)
        self.action = Action.orbit(ActionType.MOVE, home)
        self.impatience = 0.0
        self.telemetry: list[str] = []
        self._planned = False
        self._last_time: Optional[float] = None

    def _find_opponent_home(self) -> int:
        for handle, celestial in enumerate(self.celestials):
            if celestial.player not in (self.player, PlayerId.NEUTRAL, PlayerId.NONE):
                return handle
        raise ValueError(f"No opponent celestial for {self.player.value} to invade")

    @property
    def objective(self) -> int:
        """Celestial the force should be at under the current plan."""
        return self.plan.target if self.plan.type == PlanType.INVADE else self.home

    @property
    def starter_fleet_time(self) -> float:
        """Seconds of full spending needed to build the starter fleet from scratch."""
        return STARTER_FLEET * SHIP_COST / capital_to_income(0, self.account.bonus)

    def update(self, time: float, friendlies: Sequence[Ship], enemies: Sequence[Ship]) -> None:
        """
        Run one decision cycle.

        Args:
            time: Simulation time (s)
            friendlies: Ships controlled by this AI
            enemies: Opposing ships
        """
        dt = 0.0 if self._last_time is None else max(0.0, time - self._last_time)
        self._last_time = time
        self.update_plan(time)
        self.update_economy(time)
        self.update_ship_command(dt, friendlies, enemies)
        self._update_telemetry(time)

    # -------------------------------------------------------------------------
    # Plan
    # -------------------------------------------------------------------------

    def replan(self, time: float) -> None:
        """Wait until the next closest approach of home and target."""
        approach = get_closest_approach_time(self.celestials, self.home, self.plan.target)
        wait = min(max(approach, MIN_WAIT_TIME), MAX_WAIT_TIME)
        self.plan = Plan(type=PlanType.WAIT, deadline=time + wait, target=self.plan.target)
        self._planned = True
        logger.debug("%s waiting %.0fs before invading %d", self.player.value, wait, self.plan.target)

    def update_plan(self, time: float) -> None:
        if not self._planned:
            self.replan(time)
        elif time >= self.plan.deadline:
            if self.plan.type == PlanType.WAIT:
                self.plan.type = PlanType.INVADE
                self.plan.deadline = time + INVASION_DURATION
                logger.debug("%s invading %d", self.player.value, self.plan.target)
            else:
                self.replan(time)

    # -------------------------------------------------------------------------
    # Economy
    # -------------------------------------------------------------------------

    def update_economy(self, time: float) -> None:
        elapsed = time - self.start_time
        self.account.hold = False

        if self.difficulty == Difficulty.EASY:
            self.account.spending = EASY_SPENDING

        elif self.difficulty == Difficulty.MEDIUM:
            starter = self.starter_fleet_time
            if elapsed < starter:
                self.account.spending = 1.0
            elif elapsed < starter + MEDIUM_INVEST_WINDOW:
                self.account.spending = 0.0
            else:
                self.account.spending = 1.0

        elif self.difficulty == Difficulty.HARD:
            if self.plan.type == PlanType.INVADE or elapsed < self.starter_fleet_time:
                self.account.spending = 1.0
            else:
                remaining = self.plan.deadline - time
                payback = break_even_time(self.account.future_capital(), self.account.bonus)
                self.account.spending = 0.0 if payback < remaining else 1.0

    # -------------------------------------------------------------------------
    # Ship commands
    # -------------------------------------------------------------------------

    def update_ship_command(self, dt: float, friendlies: Sequence[Ship], enemies: Sequence[Ship]) -> None:
        """Choose an action for the whole force and issue it to every ship."""
        if not friendlies:
            return
        leader = elect_leader(friendlies)
        action = self.choose_action(leader, friendlies, enemies)

        if action.type == ActionType.RETREAT:
            self.impatience += dt
        elif action.type != ActionType.FLEE:
            self.impatience = max(0.0, self.impatience - dt)

        self.action = action
        for ship in friendlies:
            if ship.controller is not None:
                action.apply(ship.controller)

    def choose_action(self, leader: Ship, friendlies: Sequence[Ship], enemies: Sequence[Ship]) -> Action:
        """Evaluate the tactical ladder in priority order."""
        home_position = self.celestials[self.home].position
        leader_from_home = leader.position.distance_to(home_position)

        if self.impatience > IMPATIENCE_LIMIT:
            if leader_from_home > HOME_RADIUS:
                return Action.orbit(ActionType.FLEE, self.home)
            self.impatience = 0.0

        if _within(enemies, home_position, DEFENCE_RADIUS) and leader_from_home > DEFENCE_RADIUS:
            return Action.orbit(ActionType.DEFEND, self.home)

        nearby_enemies = _within(enemies, leader.position, VISION_RANGE)
        nearby_friendlies = _within(friendlies, leader.position, VISION_RANGE)
        if nearby_enemies and len(nearby_enemies) > RETREAT_RATIO * len(nearby_friendlies):
            threat = _mean_position(nearby_enemies)
            away = leader.position - threat
            if away.is_zero():
                away = home_position - threat
            if away.is_zero():
                away = Vector2(1.0, 0.0)
            return Action.patrol(ActionType.RETREAT, threat + away.scaled_to(RETREAT_DISTANCE))

        attack_count = 1 if self.plan.type == PlanType.WAIT else ATTACK_COUNT
        if len(nearby_enemies) >= attack_count:
            closest = min(nearby_enemies, key=lambda e: e.position.distance_to(leader.position))
            towards = leader.position - closest.position
            if towards.is_zero():
                towards = Vector2(1.0, 0.0)
            return Action.patrol(ActionType.ATTACK, closest.position + towards.scaled_to(ATTACK_DISTANCE))

        objective_position = self.celestials[self.objective].position
        grouped = len(_within(friendlies, leader.position, LEADER_RADIUS)) / len(friendlies)
        to_objective = objective_position - leader.position
        if grouped < GROUP_FRACTION and to_objective.length > GROUP_OBJECTIVE_DISTANCE:
            return Action.patrol(ActionType.GROUP, leader.position + to_objective.scaled_to(GROUP_ADVANCE))

        return Action.orbit(ActionType.MOVE, self.objective)

    # -------------------------------------------------------------------------
    # Telemetry
    # -------------------------------------------------------------------------

    def _update_telemetry(self, time: float) -> None:
        account = self.account
        self.telemetry = [
            f"plan: {self.plan.type.value} {self.plan.target} ({self.plan.deadline - time:.0f}s)",
            f"action: {self.action.type.value}",
            f"spending: {100 * account.spending:.0f}%",
            f"capital: {account.capital:.0f} (+{account.future_capital() - account.capital:.0f})",
            f"impatience: {self.impatience:.1f}s",
        ]
