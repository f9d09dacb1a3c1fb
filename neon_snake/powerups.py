"""Power-up spawning, activation and expiry."""

import logging
import random
from typing import Iterable, Optional

from .constants import FLOOR_SPEED, MIN_SNAKE_LENGTH, POWER_UP_SPAWN_CHANCE, SPEED_BOOST_DECREMENT
from .models import ActiveEffect, Cell, PowerUp, PowerUpKind
from .snake import SnakeState
from .spawn import SpawnPolicy

logger = logging.getLogger(__name__)


class PowerUpManager:
    """
    Tracks the power-up lying on the board and the effect currently in force.

    A power-up goes Idle -> Spawned (``on_board``) -> Active (``active``) -> Idle.
    Shrink resolves on collection and never becomes the active effect. Times
    are on the session's logical clock, in milliseconds.
    """

    def __init__(
        self,
        spawner: SpawnPolicy,
        durations: dict[PowerUpKind, int],
        rng: Optional[random.Random] = None,
        spawn_chance: float = POWER_UP_SPAWN_CHANCE,
        boost_decrement: int = SPEED_BOOST_DECREMENT,
        floor_speed: int = FLOOR_SPEED,
    ):
        self.spawner = spawner
        self.durations = durations
        self.rng = rng or spawner.rng
        self.spawn_chance = spawn_chance
        self.boost_decrement = boost_decrement
        self.floor_speed = floor_speed
        self.on_board: Optional[PowerUp] = None
        self.active: Optional[ActiveEffect] = None

    @property
    def active_kind(self) -> Optional[PowerUpKind]:
        return self.active.kind if self.active else None

    def is_active(self, kind: PowerUpKind) -> bool:
        return self.active is not None and self.active.kind is kind

    def maybe_spawn(self, exclude: Iterable[Cell]) -> Optional[PowerUp]:
        if self.on_board is not None:
            return None
        if self.rng.random() >= self.spawn_chance:
            return None
        cell, kind = self.spawner.place_power_up(exclude)
        self.on_board = PowerUp(cell, kind)
        logger.debug(f"Spawned {kind.value} at {cell}")
        return self.on_board

    def collect(self, cell: Cell) -> Optional[PowerUpKind]:
        if self.on_board is None or self.on_board.cell != cell:
            return None
        kind = self.on_board.kind
        self.on_board = None
        return kind

    def activate(self, kind: PowerUpKind, now: int, snake: SnakeState, speed: int, level_speed: int) -> int:
        """Apply ``kind`` and return the tick interval to use from now on.

        ``level_speed`` is the undiscounted interval for the current level,
        restored when a running speed boost is replaced by another effect.
        """
        if kind is PowerUpKind.SHRINK:
            removed = snake.shrink(MIN_SNAKE_LENGTH)
            logger.debug(f"Shrink removed {removed} cells, length now {len(snake)}")
            return speed

        if self.is_active(PowerUpKind.SPEED_BOOST):
            speed = level_speed
        self.active = ActiveEffect(kind, now + self.durations[kind])
        if kind is PowerUpKind.SPEED_BOOST:
            speed = max(self.floor_speed, speed - self.boost_decrement)
        logger.debug(f"Activated {kind.value} until t={self.active.expires_at}")
        return speed

    def expire(self, now: int) -> Optional[PowerUpKind]:
        if self.active is None or now <= self.active.expires_at:
            return None
        kind = self.active.kind
        self.active = None
        return kind

    def clear(self):
        self.on_board = None
        self.active = None
