#!/usr/bin/env python3
"""
Run a match without rendering and print the enemy AI's telemetry.

Ships are moved by a simple Euler integrator standing in for the game's
physics engine.

Usage:
    python scripts/run_headless_match.py --difficulty hard --duration 300
    python scripts/run_headless_match.py --config settings.json --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from celestial_command.bodies import Ship
from celestial_command.config import GameSettings
from celestial_command.maps import MAPS
from celestial_command.match import Match
from celestial_command.steering import SteeringOutput
from celestial_command.strategy import Difficulty


def integrate(ship: Ship, output: SteeringOutput, dt: float) -> None:
    """Apply one tick of thrust and rotation to a ship."""
    ship.velocity = ship.velocity + ship.heading * (output.thrust * dt)
    ship.position = ship.position + ship.velocity * dt
    ship.rotation += output.rotation_rate * dt


def main():
    parser = argparse.ArgumentParser(
        description="Run a headless match against the strategy AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_headless_match.py --difficulty easy --map two_planets
    python scripts/run_headless_match.py --duration 600 --report-every 30
        """,
    )
    parser.add_argument("--config", help="JSON settings file (overrides other options)")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Enemy AI difficulty (default: medium)",
    )
    parser.add_argument("--map", choices=sorted(MAPS), default="original", help="Map preset")
    parser.add_argument("--ai-bonus", type=float, default=1.0, help="Enemy income multiplier")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--duration", type=float, default=300.0, help="Simulated seconds")
    parser.add_argument("--fps", type=int, default=30, help="Ticks per simulated second")
    parser.add_argument("--report-every", type=float, default=10.0, help="Seconds between reports")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.config:
            settings = GameSettings.from_json(args.config)
        else:
            settings = GameSettings.from_dict({
                "difficulty": args.difficulty,
                "map": args.map,
                "ai_bonus": args.ai_bonus,
                "seed": args.seed,
            })
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    match = Match(settings)
    dt = 1.0 / args.fps
    next_report = 0.0
    for _ in range(int(args.duration * args.fps)):
        for ship, output in match.update(dt).items():
            integrate(ship, output, dt)

        if match.time >= next_report:
            next_report += args.report_every
            fleets = ", ".join(
                f"{player_id.value}={len(player.ships)}"
                for player_id, player in match.players.items()
            )
            print(f"[{match.time:6.1f}s] ships: {fleets}")
            for line in match.ai.telemetry:
                print(f"          {line}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
