"""
Match driver: runs the core subsystems on their cadences.

Every frame the caller passes the elapsed time to Match.update(), which
- advances celestial orbits,
- steps every ship's controller (outputs are returned for the external
  physics integrator to apply),
- runs each player's economy once per simulated second, spawning new ships
  at their home,
- runs the enemy AI every 200 ms, after the economy so spending decisions see
  the latest capital.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List

from .bodies import PlayerId, Ship
from .config import GameSettings
from .economy import Account
from .maps import MAPS
from .steering import SteeringController, SteeringOutput, orbital_radius
from .strategy import StrategyAI
from .vector import Vector2

logger = logging.getLogger(__name__)


STARTING_SHIPS = 3
ECONOMY_INTERVAL = 1.0  # s
AI_INTERVAL = 0.2  # s


@dataclass(eq=False)
class Player:
    """
    An active player: home celestial, economy and fleet.

    Attributes:
        id: Player tag
        home: Handle of the home celestial
        account: Economic ledger
        ships: Ships currently alive
    """
    id: PlayerId
    home: int
    account: Account
    ships: List[Ship] = field(default_factory=list)


class Match:
    """
    One match between the player and the enemy AI.

    Usage:
        match = Match(GameSettings(difficulty=Difficulty.HARD, seed=1))
        outputs = match.update(dt)
        for ship, output in outputs.items():
            integrate(ship, output, dt)

    Attributes:
        settings: Match configuration
        celestials: Celestial registry for the chosen map
        players: Active players by id
        ai: Strategy AI controlling the enemy
        time: Simulation time (s)
    """

    def __init__(self, settings: GameSettings) -> None:
        self.settings = settings
        self.rng = random.Random(settings.seed)
        layout = MAPS[settings.map_name]()
        self.bounds = layout.bounds
        self.celestials = layout.celestials
        self.time = 0.0

        bonuses = {PlayerId.PLAYER: settings.player_bonus, PlayerId.ENEMY: settings.ai_bonus}
        self.players: Dict[PlayerId, Player] = {
            player_id: Player(id=player_id, home=home, account=Account(bonus=bonuses[player_id]))
            for player_id, home in layout.homes.items()
        }
        enemy = self.players[PlayerId.ENEMY]
        self.ai = StrategyAI(
            PlayerId.ENEMY, enemy.home, enemy.account, self.celestials, settings.difficulty,
        )

        self._economy_timer = 0.0
        self._ai_timer = 0.0
        for player in self.players.values():
            for _ in range(STARTING_SHIPS):
                self.spawn_ship(player)

    @property
    def ships(self) -> List[Ship]:
        return [ship for player in self.players.values() for ship in player.ships]

    def enemies_of(self, player_id: PlayerId) -> List[Ship]:
        return [ship for ship in self.ships if ship.player != player_id]

    # -------------------------------------------------------------------------
    # Ship management
    # -------------------------------------------------------------------------

    def spawn_ship(self, player: Player) -> Ship:
        """Create a ship on its home orbit, ordered to orbit home."""
        home = self.celestials[player.home]
        angle = 2 * math.pi * self.rng.random()
        ship = Ship(
            position=home.position + Vector2.from_polar(orbital_radius(home), angle),
            velocity=home.velocity,
            rotation=angle,
            player=player.id,
        )
        controller = SteeringController(ship, self.celestials, rng=random.Random(self.rng.getrandbits(32)))
        controller.orbit(player.home)
        player.ships.append(ship)
        logger.debug("Spawned %s ship at %s", player.id.value, ship.position)
        return ship

    def remove_ship(self, ship: Ship) -> None:
        """Remove a destroyed ship from its owner's fleet."""
        self.players[ship.player].ships.remove(ship)

    def credit_neutral_kill(self, player_id: PlayerId) -> None:
        self.players[player_id].account.credit_neutral_kill()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def update(self, dt: float) -> Dict[Ship, SteeringOutput]:
        """
        Advance the match by dt seconds.

        Returns:
            Steering output for every ship, for the physics integrator
        """
        self.time += dt
        self.celestials.update(dt)
        outputs = {ship: ship.controller.step(dt) for ship in self.ships}

        self._economy_timer += dt
        while self._economy_timer >= ECONOMY_INTERVAL:
            self._economy_timer -= ECONOMY_INTERVAL
            self.update_economy()

        self._ai_timer += dt
        if self._ai_timer >= AI_INTERVAL:
            self._ai_timer %= AI_INTERVAL
            enemy = self.players[PlayerId.ENEMY]
            self.ai.update(self.time, enemy.ships, self.enemies_of(PlayerId.ENEMY))

        return outputs

    def update_economy(self) -> None:
        """One economic second for every player."""
        for player in self.players.values():
            for _ in range(player.account.update()):
                self.spawn_ship(player)
