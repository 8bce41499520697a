from __future__ import annotations

import numpy as np

from star_catcher.items import FallingItem, ItemKind
from star_catcher.log import get_logger

logger = get_logger("spawner")

BOMB_THRESHOLD = 0.15
WIDEN_THRESHOLD = 0.20
SLOWDOWN_THRESHOLD = 0.25

SPAWN_MARGIN = 20
SPAWN_Y = -20


def classify(r, slowdown_enabled=True):
    """Map one uniform draw in [0, 1) to an item kind. First threshold wins."""
    if r < BOMB_THRESHOLD:
        return ItemKind.BOMB
    if r < WIDEN_THRESHOLD:
        return ItemKind.WIDEN
    if slowdown_enabled and r < SLOWDOWN_THRESHOLD:
        return ItemKind.SLOWDOWN
    return ItemKind.STAR


class Spawner:
    def __init__(self, rng: np.random.Generator, interval=1000, item_size=30, slowdown_enabled=True):
        self.rng = rng
        self.interval = interval
        self.item_size = item_size
        self.slowdown_enabled = slowdown_enabled
        self.last_spawn_time = 0.0

    def maybe_spawn(self, now, bounds_width, running=True):
        if not running or now - self.last_spawn_time <= self.interval:
            return None

        kind = classify(self.rng.random(), self.slowdown_enabled)
        x = self.rng.uniform(SPAWN_MARGIN, bounds_width - SPAWN_MARGIN)
        self.last_spawn_time = now
        logger.debug("spawned %s at x=%.1f", kind.value, x, extra={"t_ms": now})
        return FallingItem(kind=kind, x=float(x), y=float(SPAWN_Y), size=self.item_size)
