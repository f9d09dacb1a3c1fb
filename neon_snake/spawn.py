"""Placement of food and power-ups on free cells."""

import logging
import random
from typing import Iterable, Optional, Sequence

from .constants import SPAWN_ATTEMPTS
from .grid import GridModel
from .models import Cell, PowerUpKind

logger = logging.getLogger(__name__)


class SpawnError(RuntimeError):
    """Raised when the grid has no free cell left to place something on."""


class SpawnPolicy:
    def __init__(
        self,
        grid: GridModel,
        rng: Optional[random.Random] = None,
        kinds: Sequence[PowerUpKind] = tuple(PowerUpKind),
        max_attempts: int = SPAWN_ATTEMPTS,
    ):
        self.grid = grid
        self.rng = rng or random.Random()
        self.kinds = list(kinds)
        self.max_attempts = max_attempts

    def random_free_cell(self, exclude: Iterable[Cell]) -> Cell:
        occupied = set(exclude)
        attempts = 0
        while attempts < self.max_attempts:
            cell = (self.rng.randrange(self.grid.width), self.rng.randrange(self.grid.height))
            if cell not in occupied:
                return cell
            attempts += 1

        # Crowded board: pick among what is actually left.
        free = [c for c in self.grid.cells() if c not in occupied]
        if not free:
            logger.error(f"No free cell on {self.grid!r} ({len(occupied)} occupied)")
            raise SpawnError(f"no free cell left on a {self.grid.width}x{self.grid.height} grid")
        logger.debug(f"Rejection sampling gave up after {attempts} attempts; {len(free)} cells free")
        return self.rng.choice(free)

    def place_food(self, exclude: Iterable[Cell]) -> Cell:
        return self.random_free_cell(exclude)

    def place_power_up(self, exclude: Iterable[Cell]) -> tuple[Cell, PowerUpKind]:
        cell = self.random_free_cell(exclude)
        kind = self.rng.choice(self.kinds)
        return cell, kind
