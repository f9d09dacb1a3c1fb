"""
Session event notifications.

Audio and render collaborators subclass ``EventListener`` and override the
hooks they care about; every hook defaults to doing nothing.
"""

from .models import Cell, PowerUpKind


class EventListener:
    def on_start(self):
        pass

    def on_eat(self, cell: Cell):
        pass

    def on_level_up(self, level: int):
        pass

    def on_game_over(self, score: int, high_score: int):
        pass

    def on_pause(self):
        pass

    def on_resume(self):
        pass

    def on_power_up_activate(self, kind: PowerUpKind):
        pass

    def on_power_up_expire(self, kind: PowerUpKind):
        pass
