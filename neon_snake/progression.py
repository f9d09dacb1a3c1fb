"""Score to level and level to speed mapping."""

from typing import Optional


class ProgressionPolicy:
    def __init__(self, base_speed: int, speed_decrease: int, floor_speed: int, foods_per_level: int):
        self.base_speed = base_speed
        self.speed_decrease = speed_decrease
        self.floor_speed = floor_speed
        self.foods_per_level = foods_per_level

    def level_for(self, foods_eaten: int) -> int:
        return 1 + foods_eaten // self.foods_per_level

    def speed_for_level(self, level: int) -> int:
        return max(self.floor_speed, self.base_speed - (level - 1) * self.speed_decrease)

    def on_food_eaten(self, foods_eaten: int) -> Optional[int]:
        """Return the new level if eating the ``foods_eaten``-th food levels up."""
        if foods_eaten > 0 and foods_eaten % self.foods_per_level == 0:
            return self.level_for(foods_eaten)
        return None
