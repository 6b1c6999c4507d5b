"""
Match configuration.

Settings are plain values chosen before a match starts: AI difficulty,
income bonuses and the map. They can be built directly, from a dict (for
example parsed launch options) or from a JSON file.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .maps import MAPS
from .strategy import Difficulty


@dataclass
class GameSettings:
    """
    Configuration for one match.

    Attributes:
        difficulty: Enemy AI economic policy
        ai_bonus: Enemy income multiplier
        player_bonus: Player income multiplier
        map_name: Key into maps.MAPS
        seed: Random seed, None for an unseeded match
    """
    difficulty: Difficulty = Difficulty.MEDIUM
    ai_bonus: float = 1.0
    player_bonus: float = 1.0
    map_name: str = "original"
    seed: Optional[int] = None

    def __post_init__(self):
        if self.ai_bonus <= 0 or self.player_bonus <= 0:
            raise ValueError("Income bonuses must be positive")
        if self.map_name not in MAPS:
            raise ValueError(f"Unknown map '{self.map_name}', expected one of {sorted(MAPS)}")

    @classmethod
    def from_json(cls, path: str) -> 'GameSettings':
        """Load settings from a JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameSettings':
        """Create settings from a dictionary; missing keys take defaults."""
        difficulty = data.get("difficulty", Difficulty.MEDIUM.value)
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            raise ValueError(
                f"Unknown difficulty '{difficulty}', expected one of "
                f"{[d.value for d in Difficulty]}"
            ) from None

        seed = data.get("seed")
        return cls(
            difficulty=difficulty,
            ai_bonus=float(data.get("ai_bonus", 1.0)),
            player_bonus=float(data.get("player_bonus", 1.0)),
            map_name=data.get("map", "original"),
            seed=int(seed) if seed is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "difficulty": self.difficulty.value,
            "ai_bonus": self.ai_bonus,
            "player_bonus": self.player_bonus,
            "map": self.map_name,
            "seed": self.seed,
        }
