import random

import pytest

from neon_snake.config import GameConfig
from neon_snake.persistence import MemoryHighScoreStore
from neon_snake.session import GameSessionController


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def quiet_config():
    """Medium difficulty with power-up spawning switched off."""
    return GameConfig(power_up_spawn_chance=0.0)


@pytest.fixture
def session(quiet_config, store):
    game = GameSessionController(quiet_config, store, random.Random(1234))
    game.start()
    # Keep food out of the snake's way unless a test places it.
    game.food = (0, 0)
    return game
