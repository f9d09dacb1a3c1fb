"""Game configuration and environment loading."""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    DIFFICULTY_SETTINGS, DEFAULT_DIFFICULTY, FOODS_EATEN_FOR_LEVEL_UP,
    SPEED_DECREASE, FLOOR_SPEED, SPEED_BOOST_DECREMENT,
    POWER_UP_SPAWN_CHANCE, POWER_UP_DURATIONS, SPAWN_ATTEMPTS,
)
from .models import PowerUpKind

logger = logging.getLogger(__name__)


def default_power_up_durations() -> dict[PowerUpKind, int]:
    return {PowerUpKind(kind): ms for kind, ms in POWER_UP_DURATIONS.items()}


@dataclass
class GameConfig:
    difficulty: str = DEFAULT_DIFFICULTY
    foods_eaten_for_level_up: int = FOODS_EATEN_FOR_LEVEL_UP
    base_speed: Optional[int] = None
    speed_decrease: int = SPEED_DECREASE
    floor_speed: int = FLOOR_SPEED
    speed_boost_decrement: int = SPEED_BOOST_DECREMENT
    power_up_spawn_chance: float = POWER_UP_SPAWN_CHANCE
    power_up_durations: dict[PowerUpKind, int] = field(default_factory=default_power_up_durations)
    spawn_attempts: int = SPAWN_ATTEMPTS
    grid_size: Optional[int] = None
    highscore_path: str = "highscore.json"
    host: str = "0.0.0.0"
    port: int = 8765

    def __post_init__(self):
        self.validate()

    @property
    def initial_speed(self) -> int:
        if self.base_speed is not None:
            return self.base_speed
        return DIFFICULTY_SETTINGS[self.difficulty]["initial_speed"]

    @property
    def size(self) -> int:
        if self.grid_size is not None:
            return self.grid_size
        return DIFFICULTY_SETTINGS[self.difficulty]["grid_size"]

    def validate(self):
        if self.difficulty not in DIFFICULTY_SETTINGS:
            raise ValueError(
                f"Unknown difficulty {self.difficulty!r}; "
                f"expected one of {sorted(DIFFICULTY_SETTINGS)}"
            )
        if self.foods_eaten_for_level_up < 1:
            raise ValueError("foods_eaten_for_level_up must be at least 1")
        if self.floor_speed <= 0 or self.initial_speed <= 0:
            raise ValueError("speeds must be positive")
        if self.speed_decrease < 0 or self.speed_boost_decrement < 0:
            raise ValueError("speed decrements must not be negative")
        if not 0.0 <= self.power_up_spawn_chance <= 1.0:
            raise ValueError("power_up_spawn_chance must be within [0, 1]")
        if self.spawn_attempts < 1:
            raise ValueError("spawn_attempts must be at least 1")
        # A 3-cell snake laid out from the centre needs room on both sides.
        if self.size < 5:
            raise ValueError("grid_size must be at least 5")
        missing = set(PowerUpKind) - set(self.power_up_durations)
        if missing:
            raise ValueError(f"power-up catalog is missing {sorted(k.value for k in missing)}")

    def with_difficulty(self, difficulty: str) -> "GameConfig":
        # Explicit overrides belong to the old preset, so they are dropped.
        return replace(self, difficulty=difficulty, base_speed=None, grid_size=None)

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Build a config from ``NEON_SNAKE_*`` variables (and a ``.env`` file if present)."""
        load_dotenv()
        kwargs = {}
        difficulty = os.getenv("NEON_SNAKE_DIFFICULTY")
        if difficulty:
            kwargs["difficulty"] = difficulty.lower()
        int_vars = {
            "NEON_SNAKE_FOODS_PER_LEVEL": "foods_eaten_for_level_up",
            "NEON_SNAKE_BASE_SPEED": "base_speed",
            "NEON_SNAKE_SPEED_DECREASE": "speed_decrease",
            "NEON_SNAKE_FLOOR_SPEED": "floor_speed",
            "NEON_SNAKE_GRID_SIZE": "grid_size",
            "NEON_SNAKE_PORT": "port",
        }
        for var, name in int_vars.items():
            raw = os.getenv(var)
            if raw:
                try:
                    kwargs[name] = int(raw)
                except ValueError:
                    raise ValueError(f"{var} must be an integer, got {raw!r}") from None
        path = os.getenv("NEON_SNAKE_HIGHSCORE_PATH")
        if path:
            kwargs["highscore_path"] = path
        host = os.getenv("NEON_SNAKE_HOST")
        if host:
            kwargs["host"] = host
        config = cls(**kwargs)
        logger.info(f"Loaded config: difficulty={config.difficulty}, grid={config.size}, speed={config.initial_speed}ms")
        return config
