"""Celestial Command real-time strategy core: steering, economy and strategic AI."""

from .vector import Vector2

from .bodies import (
    PlayerId,
    Orbit,
    Celestial,
    CelestialRegistry,
    Ship,
)

from .steering import (
    # Primitives
    target_velocity,
    target_acceleration,
    rotation_rate,
    thrust,
    avoid_collisions,
    deflect_velocity,
    safe_closing_speed,
    random_radial_point,
    orbital_radius,
    # Commands
    PatrolCommand,
    OrbitCommand,
    Command,
    SteeringOutput,
    # Controller
    SteeringController,
)

from .economy import (
    Account,
    capital_to_income,
    break_even_time,
)

from .strategy import (
    Difficulty,
    PlanType,
    Plan,
    ActionType,
    Action,
    StrategyAI,
    elect_leader,
    get_closest_approach_time,
)

from .config import GameSettings
from .maps import MAPS, MapLayout
from .match import Match, Player

__all__ = [
    "Vector2",
    # Bodies
    "PlayerId",
    "Orbit",
    "Celestial",
    "CelestialRegistry",
    "Ship",
    # Steering - primitives
    "target_velocity",
    "target_acceleration",
    "rotation_rate",
    "thrust",
    "avoid_collisions",
    "deflect_velocity",
    "safe_closing_speed",
    "random_radial_point",
    "orbital_radius",
    # Steering - commands and controller
    "PatrolCommand",
    "OrbitCommand",
    "Command",
    "SteeringOutput",
    "SteeringController",
    # Economy
    "Account",
    "capital_to_income",
    "break_even_time",
    # Strategy
    "Difficulty",
    "PlanType",
    "Plan",
    "ActionType",
    "Action",
    "StrategyAI",
    "elect_leader",
    "get_closest_approach_time",
    # Match
    "GameSettings",
    "MAPS",
    "MapLayout",
    "Match",
    "Player",
]
