"""
High score persistence.

The session reads the stored high score once at start-up and writes it back
whenever a finished game beats it. Storage problems never interrupt play: a
failed read counts as 0 and a failed write is logged and dropped.
"""

import json
import logging
import os

from .constants import HIGHSCORE_KEY

logger = logging.getLogger(__name__)


class HighScoreStore:
    """Port for the single durable ``highScore`` value."""

    def load(self) -> int:
        raise NotImplementedError

    def save(self, score: int) -> None:
        raise NotImplementedError


class MemoryHighScoreStore(HighScoreStore):
    def __init__(self, score: int = 0):
        self.score = score
        self.saves = 0

    def load(self) -> int:
        return self.score

    def save(self, score: int) -> None:
        self.score = score
        self.saves += 1


class JsonFileHighScoreStore(HighScoreStore):
    def __init__(self, path: str):
        self.path = path

    def load(self) -> int:
        if not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            score = int(data.get(HIGHSCORE_KEY, 0))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Could not read high score from {self.path}: {e}")
            return 0
        return max(0, score)

    def save(self, score: int) -> None:
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({HIGHSCORE_KEY: score}, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning(f"Could not persist high score {score} to {self.path}: {e}")
            return
        logger.info(f"Saved high score {score} to {self.path}")
