from __future__ import annotations

from star_catcher.catcher import Catcher
from star_catcher.events import EventQueue
from star_catcher.powerups import PowerUpManager
from star_catcher.spawner import Spawner


class World:
    """Everything that belongs to one game. Built fresh on every start."""

    def __init__(self, config, rng, now=0.0, catcher_speed=None):
        self.config = config
        self.score = 0
        self.lives = config.MAX_LIVES
        self.items = []
        self.events = EventQueue()
        self.catcher = Catcher(
            config.SCREEN_WIDTH,
            config.SCREEN_HEIGHT,
            base_width=config.CATCHER_WIDTH,
            height=config.CATCHER_HEIGHT,
            speed=config.CATCHER_SPEED if catcher_speed is None else catcher_speed,
            offset_y=config.CATCHER_OFFSET_Y,
        )
        self.powerups = PowerUpManager(
            self.catcher,
            self.events,
            widen_duration=config.WIDEN_DURATION_MS,
            widen_multiplier=config.WIDEN_MULTIPLIER,
            slowdown_duration=config.SLOWDOWN_DURATION_MS,
            slowdown_multiplier=config.SLOWDOWN_MULTIPLIER,
        )
        self.spawner = Spawner(
            rng,
            interval=config.SPAWN_INTERVAL_MS,
            item_size=config.ITEM_SIZE,
            slowdown_enabled=config.SLOWDOWN_ENABLED,
        )
        # Delay the first item by a full interval
        self.spawner.last_spawn_time = now

    def lose_life(self):
        self.lives = max(0, self.lives - 1)
        return self.lives

    def discard(self):
        self.powerups.cancel_all()
        self.events.cancel_all()
