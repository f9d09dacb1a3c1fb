"""Game session state machine and per-tick simulation."""

import logging
import random
from typing import Optional, Union

from .clock import SimulationClock
from .config import GameConfig
from .constants import DIRECTIONS, INITIAL_LENGTH, SCORE_PER_FOOD
from .events import EventListener
from .grid import GridModel
from .models import Cell, GameSnapshot, PowerUpKind, SessionState, Vector
from .persistence import HighScoreStore, MemoryHighScoreStore
from .powerups import PowerUpManager
from .progression import ProgressionPolicy
from .snake import SnakeState
from .spawn import SpawnPolicy

logger = logging.getLogger(__name__)


class GameSessionController:
    """
    Runs one player's game: start -> playing <-> paused, playing -> gameOver.

    Effect timers use ``now``, a logical millisecond clock that only moves
    inside ``step``. Nothing advances while paused, so a pause of any length
    leaves remaining effect time untouched.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[HighScoreStore] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.store = store or MemoryHighScoreStore()
        self.rng = rng or random.Random()
        self.listeners: list[EventListener] = []
        self.high_score = self.store.load()
        self.state = SessionState.START
        self.clock = SimulationClock(lambda: self.speed, self.step)
        self._new_session()

    def _new_session(self):
        cfg = self.config
        self.grid = GridModel(cfg.size, cfg.size)
        self.spawner = SpawnPolicy(self.grid, self.rng, tuple(cfg.power_up_durations), cfg.spawn_attempts)
        self.powerups = PowerUpManager(
            self.spawner,
            cfg.power_up_durations,
            self.rng,
            spawn_chance=cfg.power_up_spawn_chance,
            boost_decrement=cfg.speed_boost_decrement,
            floor_speed=cfg.floor_speed,
        )
        self.progression = ProgressionPolicy(
            cfg.initial_speed, cfg.speed_decrease, cfg.floor_speed, cfg.foods_eaten_for_level_up,
        )
        self.snake = SnakeState.spawn(self.grid.center, INITIAL_LENGTH, DIRECTIONS["right"])
        self.score = 0
        self.level = 1
        self.foods_eaten = 0
        self.now = 0
        self.speed = self.progression.speed_for_level(1)
        self.food: Cell = self.spawner.place_food(self.snake.cells)

    def add_listener(self, listener: EventListener):
        self.listeners.append(listener)

    def _emit(self, hook: str, *args):
        for listener in self.listeners:
            getattr(listener, hook)(*args)

    # ── Commands ──────────────────────────────────────────────────

    def start(self) -> bool:
        if self.state is not SessionState.START:
            return False
        self._begin()
        return True

    def restart(self) -> bool:
        if self.state is SessionState.START:
            return False
        self._begin()
        return True

    def _begin(self):
        # An effect cut short by a restart still reports its end.
        ended = self.powerups.active_kind
        self.powerups.clear()
        if ended is not None:
            self._emit("on_power_up_expire", ended)
        self._new_session()
        self.state = SessionState.PLAYING
        self.clock.start()
        logger.info(
            f"Game started: {self.config.difficulty}, {self.grid.width}x{self.grid.height}, "
            f"{self.speed}ms per tick"
        )
        self._emit("on_start")

    def pause(self) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        self.state = SessionState.PAUSED
        self.clock.stop()
        logger.info(f"Paused at t={self.now}")
        self._emit("on_pause")
        return True

    def resume(self) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        self.state = SessionState.PLAYING
        self.clock.start()
        logger.info(f"Resumed at t={self.now}")
        self._emit("on_resume")
        return True

    def toggle_pause(self) -> bool:
        if self.state is SessionState.PLAYING:
            return self.pause()
        return self.resume()

    def post_direction(self, direction: Union[str, Vector]) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        if isinstance(direction, str):
            direction = DIRECTIONS.get(direction.lower())
        if not isinstance(direction, (tuple, list)) or len(direction) != 2:
            return False
        if not all(isinstance(v, int) for v in direction):
            return False
        if tuple(direction) not in DIRECTIONS.values():
            return False
        return self.snake.propose(tuple(direction))

    def set_difficulty(self, difficulty: str) -> bool:
        if self.state not in (SessionState.START, SessionState.GAME_OVER):
            return False
        self.config = self.config.with_difficulty(difficulty)
        logger.info(f"Difficulty set to {difficulty}")
        return True

    # ── Simulation ────────────────────────────────────────────────

    def step(self, elapsed_ms: Optional[int] = None):
        if self.state is not SessionState.PLAYING:
            return
        self.now += self.speed if elapsed_ms is None else elapsed_ms

        head = self.snake.advance()
        invincible = self.powerups.is_active(PowerUpKind.INVINCIBILITY)
        if not self.grid.contains(head):
            if not invincible:
                self._game_over("wall")
                return
            head = self.grid.wrap(head)

        growing = head == self.food
        if not invincible and self.snake.hits_body(head, growing):
            self._game_over("self")
            return

        self.snake.commit(head, grow=growing)
        if growing:
            self._eat(head)

        kind = self.powerups.collect(head)
        if kind is not None:
            self._activate(kind)

        expired = self.powerups.expire(self.now)
        if expired is not None:
            self._expire(expired)

    def _occupied(self) -> set[Cell]:
        occupied = set(self.snake.cells)
        if self.powerups.on_board is not None:
            occupied.add(self.powerups.on_board.cell)
        return occupied

    def _eat(self, cell: Cell):
        self.score += SCORE_PER_FOOD
        self.foods_eaten += 1
        self._emit("on_eat", cell)

        self.food = self.spawner.place_food(self._occupied())
        self.powerups.maybe_spawn(set(self.snake.cells) | {self.food})

        new_level = self.progression.on_food_eaten(self.foods_eaten)
        if new_level is not None:
            self.level = new_level
            # Overrides any running speed-boost discount.
            self.speed = self.progression.speed_for_level(self.level)
            logger.info(f"Level {self.level}: {self.speed}ms per tick")
            self._emit("on_level_up", self.level)

    def _activate(self, kind: PowerUpKind):
        self.speed = self.powerups.activate(
            kind, self.now, self.snake, self.speed, self.progression.speed_for_level(self.level),
        )
        self._emit("on_power_up_activate", kind)

    def _expire(self, kind: PowerUpKind):
        if kind is PowerUpKind.SPEED_BOOST:
            self.speed = self.progression.speed_for_level(self.level)
        logger.debug(f"{kind.value} expired at t={self.now}")
        self._emit("on_power_up_expire", kind)

    def _game_over(self, reason: str):
        self.state = SessionState.GAME_OVER
        self.clock.stop()
        if self.score > self.high_score:
            self.high_score = self.score
            self.store.save(self.score)
        logger.info(f"Game over ({reason}): score={self.score} level={self.level} high={self.high_score}")
        self._emit("on_game_over", self.score, self.high_score)

    def snapshot(self) -> GameSnapshot:
        active = self.powerups.active
        return GameSnapshot(
            state=self.state,
            snake=tuple(self.snake.cells),
            direction=self.snake.direction,
            food=self.food,
            power_up=self.powerups.on_board,
            score=self.score,
            level=self.level,
            speed=self.speed,
            high_score=self.high_score,
            foods_eaten=self.foods_eaten,
            grid_size=self.grid.width,
            now=self.now,
            active_effect=active.kind if active else None,
            effect_remaining=active.remaining(self.now) if active else 0,
        )
