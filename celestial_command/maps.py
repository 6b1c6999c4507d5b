"""
Preset celestial layouts.

Each builder registers its celestials in a CelestialRegistry and reports the
home celestial of every active player.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from .bodies import Celestial, CelestialRegistry, Orbit, PlayerId
from .vector import Vector2


@dataclass
class MapLayout:
    """
    A populated map.

    Attributes:
        bounds: (x, y, width, height) of the playable area
        celestials: Registry of every celestial on the map
        homes: Home celestial handle per active player
    """
    bounds: Tuple[float, float, float, float]
    celestials: CelestialRegistry
    homes: Dict[PlayerId, int]


def original_demo() -> MapLayout:
    """A large neutral planet with a player moon and an enemy moon."""
    registry = CelestialRegistry()
    planet = registry.add(Celestial(radius=500, player=PlayerId.NEUTRAL, position=Vector2(0, 0)))
    player_moon = registry.add(Celestial(
        radius=50, player=PlayerId.PLAYER,
        orbit=Orbit(center=planet, radius=1200, angle=math.pi / 2, clockwise=True),
    ))
    enemy_moon = registry.add(Celestial(
        radius=50, player=PlayerId.ENEMY,
        orbit=Orbit(center=planet, radius=1700, angle=-math.pi / 2, clockwise=False),
    ))
    return MapLayout(
        bounds=(-2000, -2000, 4000, 4000),
        celestials=registry,
        homes={PlayerId.PLAYER: player_moon, PlayerId.ENEMY: enemy_moon},
    )


def two_planets_demo() -> MapLayout:
    """Two neutral planets, each with one home moon."""
    registry = CelestialRegistry()
    left = registry.add(Celestial(radius=400, player=PlayerId.NEUTRAL, position=Vector2(-1500, 0)))
    right = registry.add(Celestial(radius=400, player=PlayerId.NEUTRAL, position=Vector2(1500, 0)))
    left_moon = registry.add(Celestial(
        radius=50, player=PlayerId.PLAYER,
        orbit=Orbit(center=left, radius=1200, angle=-math.pi, clockwise=True),
    ))
    right_moon = registry.add(Celestial(
        radius=50, player=PlayerId.ENEMY,
        orbit=Orbit(center=right, radius=1200, angle=0, clockwise=False),
    ))
    return MapLayout(
        bounds=(-3000, -2000, 6000, 4000),
        celestials=registry,
        homes={PlayerId.PLAYER: left_moon, PlayerId.ENEMY: right_moon},
    )


MAPS: Dict[str, Callable[[], MapLayout]] = {
    "original": original_demo,
    "two_planets": two_planets_demo,
}
