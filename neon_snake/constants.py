"""Game constants."""

INITIAL_LENGTH = 3
MIN_SNAKE_LENGTH = 3

SCORE_PER_FOOD = 10
FOODS_EATEN_FOR_LEVEL_UP = 5

# Tick intervals in milliseconds; lower is faster. Initial speed comes
# from the difficulty preset.
SPEED_DECREASE = 20
FLOOR_SPEED = 50
SPEED_BOOST_DECREMENT = 50

POWER_UP_SPAWN_CHANCE = 0.15
SPAWN_ATTEMPTS = 500

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

DIFFICULTY_SETTINGS = {
    "easy": {"initial_speed": 200, "grid_size": 20},
    "medium": {"initial_speed": 150, "grid_size": 20},
    "hard": {"initial_speed": 100, "grid_size": 25},
}
DEFAULT_DIFFICULTY = "medium"

# Power-up catalog, flattened to kind -> effect duration in milliseconds.
# Every kind shares POWER_UP_SPAWN_CHANCE and is drawn uniformly, so there
# is no per-kind spawn probability. Shrink resolves instantly.
POWER_UP_DURATIONS = {
    "speed_boost": 5000,
    "shrink": 0,
    "invincibility": 8000,
}

HIGHSCORE_KEY = "highScore"
