"""
Neon Snake game engine.

The simulation is independent of any renderer: drive a
``GameSessionController`` with ``step`` (or its ``clock``), read
``snapshot()`` and subscribe an ``EventListener`` for sounds.
"""

from .config import GameConfig
from .events import EventListener
from .models import GameSnapshot, PowerUp, PowerUpKind, SessionState
from .persistence import HighScoreStore, JsonFileHighScoreStore, MemoryHighScoreStore
from .session import GameSessionController
from .spawn import SpawnError

__all__ = [
    'GameConfig',
    'EventListener',
    'GameSnapshot', 'PowerUp', 'PowerUpKind', 'SessionState',
    'HighScoreStore', 'JsonFileHighScoreStore', 'MemoryHighScoreStore',
    'GameSessionController',
    'SpawnError',
]
