"""Tests for GameSessionController: state machine and tick behaviour."""

import random

import pytest

from neon_snake.config import GameConfig
from neon_snake.events import EventListener
from neon_snake.models import ActiveEffect, PowerUp, PowerUpKind, SessionState
from neon_snake.persistence import MemoryHighScoreStore
from neon_snake.session import GameSessionController
from neon_snake.snake import SnakeState

RIGHT, LEFT, UP, DOWN = (1, 0), (-1, 0), (0, -1), (0, 1)


class RecordingListener(EventListener):
    def __init__(self):
        self.calls = []

    def on_start(self):
        self.calls.append(("start",))

    def on_eat(self, cell):
        self.calls.append(("eat", cell))

    def on_level_up(self, level):
        self.calls.append(("level_up", level))

    def on_game_over(self, score, high_score):
        self.calls.append(("game_over", score, high_score))

    def on_pause(self):
        self.calls.append(("pause",))

    def on_resume(self):
        self.calls.append(("resume",))

    def on_power_up_activate(self, kind):
        self.calls.append(("activate", kind))

    def on_power_up_expire(self, kind):
        self.calls.append(("expire", kind))

    def names(self):
        return [call[0] for call in self.calls]


def feed_ahead(session):
    """Put the food directly in front of the snake."""
    hx, hy = session.snake.head
    dx, dy = session.snake.direction
    session.food = (hx + dx, hy + dy)


class TestStateMachine:
    def test_initial_state(self, quiet_config, store):
        game = GameSessionController(quiet_config, store, random.Random(0))
        assert game.state is SessionState.START
        assert game.clock.running is False

    def test_step_is_noop_before_start(self, quiet_config, store):
        game = GameSessionController(quiet_config, store, random.Random(0))
        before = list(game.snake.cells)
        game.step()
        assert list(game.snake.cells) == before
        assert game.now == 0

    def test_start_enters_playing(self, session):
        assert session.state is SessionState.PLAYING
        assert session.clock.running is True
        assert session.start() is False

    def test_pause_and_resume(self, session):
        assert session.resume() is False
        assert session.pause() is True
        assert session.state is SessionState.PAUSED
        assert session.clock.running is False
        assert session.pause() is False
        assert session.resume() is True
        assert session.state is SessionState.PLAYING
        assert session.clock.running is True

    def test_toggle_pause(self, session):
        session.toggle_pause()
        assert session.state is SessionState.PAUSED
        session.toggle_pause()
        assert session.state is SessionState.PLAYING

    def test_paused_session_does_not_move(self, session):
        session.pause()
        before = list(session.snake.cells)
        session.step()
        assert session.clock.feed(10_000) == 0
        assert list(session.snake.cells) == before

    def test_restart_from_start_rejected(self, quiet_config, store):
        game = GameSessionController(quiet_config, store, random.Random(0))
        assert game.restart() is False

    def test_restart_after_game_over(self, session):
        feed_ahead(session)
        session.step()
        session.snake = SnakeState([(19, 10), (18, 10), (17, 10)], RIGHT)
        session.step()
        assert session.state is SessionState.GAME_OVER
        assert session.restart() is True
        assert session.state is SessionState.PLAYING
        assert session.score == 0
        assert session.level == 1
        assert session.now == 0
        assert list(session.snake.cells) == [(10, 10), (9, 10), (8, 10)]

    def test_restart_reports_cut_short_effect(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        session.powerups.active = ActiveEffect(PowerUpKind.INVINCIBILITY, 5000)
        session.restart()
        assert listener.calls == [("expire", PowerUpKind.INVINCIBILITY), ("start",)]
        assert session.powerups.active_kind is None

    def test_restart_without_effect_reports_only_start(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        session.restart()
        assert listener.names() == ["start"]

    def test_restart_clears_effects(self, session):
        session.powerups.active = ActiveEffect(PowerUpKind.INVINCIBILITY, 5000)
        session.powerups.on_board = PowerUp((1, 1), PowerUpKind.SHRINK)
        session.restart()
        assert session.powerups.active is None
        assert session.powerups.on_board is None

    def test_input_ignored_outside_playing(self, session):
        session.pause()
        assert session.post_direction(UP) is False
        assert session.snake.pending is None

    def test_post_direction_accepts_names(self, session):
        assert session.post_direction("up") is True
        assert session.snake.pending == UP

    def test_post_direction_rejects_non_unit_vectors(self, session):
        assert session.post_direction((1, 1)) is False
        assert session.post_direction("sideways") is False

    def test_post_direction_rejects_malformed_values(self, session):
        assert session.post_direction(5) is False
        assert session.post_direction(None) is False
        assert session.post_direction([0]) is False
        assert session.post_direction((0, -1, 0)) is False
        assert session.post_direction(("0", "-1")) is False
        assert session.post_direction([0, -1]) is True
        assert session.snake.pending == UP

    def test_set_difficulty_only_between_games(self, session):
        assert session.set_difficulty("hard") is False
        session.snake = SnakeState([(19, 10)], RIGHT)
        session.step()
        assert session.set_difficulty("hard") is True
        session.restart()
        assert session.grid.width == 25
        assert session.speed == 100
        assert session.snake.head == (12, 12)

    def test_unknown_difficulty(self, quiet_config, store):
        game = GameSessionController(quiet_config, store, random.Random(0))
        with pytest.raises(ValueError):
            game.set_difficulty("nightmare")

    def test_events(self, quiet_config, store):
        game = GameSessionController(quiet_config, store, random.Random(0))
        listener = RecordingListener()
        game.add_listener(listener)
        game.start()
        game.pause()
        game.resume()
        assert listener.names() == ["start", "pause", "resume"]


class TestTick:
    def test_moves_one_cell(self, session):
        """Grid 20x20, snake at (10,10),(9,10),(8,10) heading right."""
        session.step()
        assert list(session.snake.cells) == [(11, 10), (10, 10), (9, 10)]
        assert session.score == 0

    def test_eating_food(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        session.food = (11, 10)
        session.step()
        assert session.score == 10
        assert len(session.snake) == 4
        assert session.food not in session.snake
        assert listener.calls == [("eat", (11, 10))]

    def test_length_changes_only_on_growth(self, quiet_config, store):
        rng = random.Random(2024)
        game = GameSessionController(quiet_config, store, rng)
        game.start()
        for _ in range(500):
            if game.state is not SessionState.PLAYING:
                break
            game.post_direction(rng.choice([UP, DOWN, LEFT, RIGHT]))
            before_len, before_score = len(game.snake), game.score
            game.step()
            if game.state is not SessionState.PLAYING:
                break
            ate = game.score > before_score
            assert len(game.snake) == before_len + (1 if ate else 0)
            assert len(set(game.snake.cells)) == len(game.snake)
            assert game.food not in game.snake

    def test_reverse_input_ignored(self, session):
        assert session.post_direction(LEFT) is False
        session.step()
        assert session.snake.direction == RIGHT
        assert session.state is SessionState.PLAYING

    def test_turn(self, session):
        session.post_direction(UP)
        session.step()
        assert session.snake.head == (10, 9)

    def test_wall_collision_ends_game(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        session.snake = SnakeState([(19, 10), (18, 10), (17, 10)], RIGHT)
        session.step()
        assert session.state is SessionState.GAME_OVER
        assert session.clock.running is False
        assert listener.names() == ["game_over"]
        assert list(session.snake.cells) == [(19, 10), (18, 10), (17, 10)]

    def test_self_collision_ends_game(self, session):
        session.snake = SnakeState([(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)], LEFT)
        session.post_direction(DOWN)
        session.step()
        assert session.state is SessionState.GAME_OVER

    def test_moving_into_vacated_tail(self, session):
        session.snake = SnakeState([(5, 5), (6, 5), (6, 6), (5, 6)], LEFT)
        session.post_direction(DOWN)
        session.step()
        assert session.state is SessionState.PLAYING
        assert list(session.snake.cells) == [(5, 6), (5, 5), (6, 5), (6, 6)]

    def test_growing_into_tail_is_fatal(self, session):
        session.snake = SnakeState([(5, 5), (6, 5), (6, 6), (5, 6)], LEFT)
        session.food = (5, 6)
        session.post_direction(DOWN)
        session.step()
        assert session.state is SessionState.GAME_OVER

    def test_logical_clock_advances_by_speed(self, session):
        session.step()
        session.step()
        assert session.now == 300
        session.step(40)
        assert session.now == 340


class TestProgression:
    def test_level_up_after_five_foods(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        for _ in range(5):
            feed_ahead(session)
            session.step()
        assert session.score == 50
        assert session.level == 2
        assert session.speed == 130
        assert ("level_up", 2) in listener.calls

    def test_level_up_overrides_speed_boost(self, store):
        config = GameConfig(power_up_spawn_chance=0.0, foods_eaten_for_level_up=1)
        game = GameSessionController(config, store, random.Random(3))
        game.start()
        game.powerups.on_board = PowerUp((11, 10), PowerUpKind.SPEED_BOOST)
        game.food = (0, 0)
        game.step()
        assert game.speed == 100
        feed_ahead(game)
        game.step()
        assert game.level == 2
        assert game.speed == 130
        assert game.powerups.is_active(PowerUpKind.SPEED_BOOST)

    def test_floor_speed(self, store):
        config = GameConfig(power_up_spawn_chance=0.0, foods_eaten_for_level_up=1)
        game = GameSessionController(config, store, random.Random(3))
        game.start()
        game.food = (0, 0)
        game.snake = SnakeState.spawn((2, 5), 3, RIGHT)
        for _ in range(12):
            feed_ahead(game)
            game.step()
        assert game.level == 13
        assert game.speed == 50

    def test_clock_uses_new_speed(self, session):
        for _ in range(5):
            feed_ahead(session)
            session.step()
        session.food = (0, 0)
        assert session.clock.feed(129) == 0
        assert session.clock.feed(1) == 1


class TestPowerUps:
    def test_spawn_on_food(self, store):
        config = GameConfig(power_up_spawn_chance=1.0)
        game = GameSessionController(config, store, random.Random(8))
        game.start()
        game.food = (11, 10)
        game.step()
        power_up = game.powerups.on_board
        assert power_up is not None
        assert power_up.cell not in game.snake
        assert power_up.cell != game.food

    def test_speed_boost_and_expiry(self, session):
        listener = RecordingListener()
        session.add_listener(listener)
        session.powerups.on_board = PowerUp((11, 10), PowerUpKind.SPEED_BOOST)
        session.step()
        assert session.speed == 100
        assert session.snapshot().active_effect is PowerUpKind.SPEED_BOOST
        session.step(5001)
        assert session.speed == 150
        assert session.powerups.active is None
        assert listener.calls == [
            ("activate", PowerUpKind.SPEED_BOOST),
            ("expire", PowerUpKind.SPEED_BOOST),
        ]

    def test_boost_expiry_uses_current_level(self, store):
        config = GameConfig(power_up_spawn_chance=0.0, foods_eaten_for_level_up=1)
        game = GameSessionController(config, store, random.Random(3))
        game.start()
        game.food = (0, 0)
        game.powerups.active = ActiveEffect(PowerUpKind.SPEED_BOOST, 100)
        game.speed = 100
        feed_ahead(game)
        game.step()
        feed_ahead(game)
        game.step()
        assert game.level == 3
        assert game.powerups.active is None
        assert game.speed == 110

    def test_shrink(self, session):
        session.snake = SnakeState.spawn((10, 10), 8, RIGHT)
        session.powerups.on_board = PowerUp((11, 10), PowerUpKind.SHRINK)
        session.step()
        assert len(session.snake) == 4
        assert session.snake.head == (11, 10)
        assert session.powerups.active is None

    def test_invincibility_wraps_walls(self, session):
        session.snake = SnakeState([(19, 10), (18, 10), (17, 10)], RIGHT)
        session.powerups.active = ActiveEffect(PowerUpKind.INVINCIBILITY, 10_000)
        session.step()
        assert session.state is SessionState.PLAYING
        assert session.snake.head == (0, 10)

    def test_invincibility_wraps_vertically(self, session):
        session.snake = SnakeState([(4, 0), (4, 1), (4, 2)], UP)
        session.powerups.active = ActiveEffect(PowerUpKind.INVINCIBILITY, 10_000)
        session.step()
        assert session.snake.head == (4, 19)

    def test_invincibility_ignores_self_collision(self, session):
        session.snake = SnakeState([(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)], LEFT)
        session.powerups.active = ActiveEffect(PowerUpKind.INVINCIBILITY, 10_000)
        session.post_direction(DOWN)
        session.step()
        assert session.state is SessionState.PLAYING
        assert session.snake.head == (5, 6)

    def test_invincibility_expires(self, session):
        session.powerups.on_board = PowerUp((11, 10), PowerUpKind.INVINCIBILITY)
        session.step()
        assert session.powerups.active.expires_at == 150 + 8000
        for _ in range(3):
            session.step(3000)
        assert session.powerups.active is None
        session.snake = SnakeState([(19, 10), (18, 10), (17, 10)], RIGHT)
        session.step()
        assert session.state is SessionState.GAME_OVER

    def test_pause_freezes_effect_timer(self, session):
        session.powerups.on_board = PowerUp((11, 10), PowerUpKind.INVINCIBILITY)
        session.step()
        remaining = session.snapshot().effect_remaining
        assert remaining == 8000
        session.pause()
        session.clock.feed(60_000)
        session.step(60_000)
        session.resume()
        assert session.snapshot().effect_remaining == remaining
        assert session.powerups.is_active(PowerUpKind.INVINCIBILITY)


class TestHighScore:
    def test_game_over_saves_new_high_score(self, session, store):
        for _ in range(3):
            feed_ahead(session)
            session.step()
        session.snake = SnakeState([(19, 10)], RIGHT)
        session.step()
        assert session.high_score == 30
        assert store.score == 30

    def test_lower_score_not_saved(self, quiet_config):
        store = MemoryHighScoreStore(500)
        game = GameSessionController(quiet_config, store, random.Random(0))
        game.start()
        game.snake = SnakeState([(19, 10)], RIGHT)
        game.step()
        assert game.high_score == 500
        assert store.saves == 0

    def test_high_score_survives_restart(self, session, store):
        feed_ahead(session)
        session.step()
        session.snake = SnakeState([(19, 10)], RIGHT)
        session.step()
        session.restart()
        assert session.high_score == 10
        assert session.snapshot().high_score == 10

    def test_high_score_read_at_init(self, quiet_config):
        store = MemoryHighScoreStore(120)
        game = GameSessionController(quiet_config, store, random.Random(0))
        assert game.high_score == 120


class TestSnapshot:
    def test_snapshot_fields(self, session):
        snap = session.snapshot()
        assert snap.state is SessionState.PLAYING
        assert snap.snake == ((10, 10), (9, 10), (8, 10))
        assert snap.head == (10, 10)
        assert snap.food == (0, 0)
        assert snap.power_up is None
        assert snap.level == 1
        assert snap.speed == 150

    def test_snapshot_is_immutable(self, session):
        snap = session.snapshot()
        with pytest.raises(AttributeError):
            snap.score = 99
        session.step()
        assert snap.snake == ((10, 10), (9, 10), (8, 10))

    def test_to_dict(self, session):
        session.powerups.on_board = PowerUp((3, 4), PowerUpKind.SHRINK)
        data = session.snapshot().to_dict()
        assert data["state"] == "playing"
        assert data["snake"][0] == [10, 10]
        assert data["power_up"] == {"cell": [3, 4], "kind": "shrink"}
        assert data["grid"] == [20, 20]
        assert data["active_effect"] is None
