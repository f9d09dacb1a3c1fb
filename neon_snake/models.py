"""Data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

Cell = tuple[int, int]
Vector = tuple[int, int]


class SessionState(Enum):
    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameOver"


class PowerUpKind(Enum):
    SPEED_BOOST = "speed_boost"
    SHRINK = "shrink"
    INVINCIBILITY = "invincibility"


@dataclass(frozen=True)
class PowerUp:
    cell: Cell
    kind: PowerUpKind


@dataclass
class ActiveEffect:
    kind: PowerUpKind
    expires_at: int

    def remaining(self, now: int) -> int:
        return max(0, self.expires_at - now)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session handed to renderers."""

    state: SessionState
    snake: tuple[Cell, ...]
    direction: Vector
    food: Optional[Cell]
    power_up: Optional[PowerUp]
    score: int
    level: int
    speed: int
    high_score: int
    foods_eaten: int
    grid_size: int
    now: int = 0
    active_effect: Optional[PowerUpKind] = None
    effect_remaining: int = 0

    @property
    def head(self) -> Optional[Cell]:
        return self.snake[0] if self.snake else None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "snake": [list(c) for c in self.snake],
            "head": list(self.head) if self.head else None,
            "direction": list(self.direction),
            "food": list(self.food) if self.food else None,
            "power_up": (
                {"cell": list(self.power_up.cell), "kind": self.power_up.kind.value}
                if self.power_up else None
            ),
            "score": self.score,
            "level": self.level,
            "speed": self.speed,
            "high_score": self.high_score,
            "foods_eaten": self.foods_eaten,
            "grid": [self.grid_size, self.grid_size],
            "now": self.now,
            "active_effect": self.active_effect.value if self.active_effect else None,
            "effect_remaining": self.effect_remaining,
        }
