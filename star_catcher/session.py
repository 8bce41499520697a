"""Game lifecycle: Idle -> Running -> GameOver, score, lives and high score."""

from __future__ import annotations

from enum import Enum

import numpy as np

from star_catcher.engine import CollisionEngine
from star_catcher.items import Feedback, FeedbackEvent
from star_catcher.log import get_logger
from star_catcher.world import World

logger = get_logger("session")

START_MESSAGE = "Press 'Start Game' to begin! Use Left/Right arrow keys to move."


class Status(Enum):
    IDLE = "idle"
    RUNNING = "running"
    GAME_OVER = "game_over"


class GameSession:
    def __init__(self, config, store=None, rng=None, now=0.0):
        self.config = config
        self.store = store
        self.rng = rng if rng is not None else np.random.default_rng()
        self.engine = CollisionEngine(config.SCREEN_HEIGHT, star_points=config.STAR_POINTS)

        self.catcher_speed = config.CATCHER_SPEED
        self.star_speed = config.STAR_SPEED
        self.high_score = store.load() if store is not None else 0
        self.status = Status.IDLE
        self.world = World(config, self.rng, now=now, catcher_speed=self.catcher_speed)
        self.message = START_MESSAGE
        self.game_over_count = 0
        self.generation = 0

    # --- Views ---
    @property
    def running(self):
        return self.status is Status.RUNNING

    @property
    def score(self):
        return self.world.score

    @property
    def lives(self):
        return self.world.lives

    @property
    def catcher(self):
        return self.world.catcher

    @property
    def items(self):
        return self.world.items

    @property
    def powerups(self):
        return self.world.powerups

    def fall_speed(self):
        return self.world.powerups.fall_speed(self.star_speed)

    # --- Transitions ---
    def start(self, now):
        """First start and restart are the same transition: a brand new world."""
        self._replace_world(now)
        self.status = Status.RUNNING
        self.message = None
        logger.info("game started (high score %d)", self.high_score, extra={"t_ms": now})

    def reset(self, now=0.0):
        """Stop ticking and go back to Idle with a fresh world."""
        self._replace_world(now)
        self.status = Status.IDLE
        self.message = START_MESSAGE

    def _replace_world(self, now):
        self.world.discard()
        self.generation += 1
        self.world = World(self.config, self.rng, now=now, catcher_speed=self.catcher_speed)

    def tick(self, now):
        # Expiries keep firing after GameOver, until the world is replaced
        self.world.events.run_due(now)
        if not self.running:
            return []

        world = self.world
        world.catcher.apply_velocity()

        item = world.spawner.maybe_spawn(now, self.config.SCREEN_WIDTH, running=True)
        if item is not None:
            world.items.append(item)

        result = self.engine.tick(world, self.fall_speed(), now)
        events = list(result.events)
        if result.lives_exhausted:
            events.append(self._end_game(now))
        return events

    def _end_game(self, now):
        self.status = Status.GAME_OVER
        self.world.catcher.stop()
        self.game_over_count += 1
        final = self.world.score
        if final > self.high_score:
            self.high_score = final
            if self.store is not None:
                self.store.save(final)
            logger.info("game over, new high score %d", final, extra={"t_ms": now})
        else:
            logger.info("game over, score %d (high score %d)", final, self.high_score, extra={"t_ms": now})
        self.message = f"Game Over! Your final score is: {final}. Press 'Play Again?' to retry."
        # sfx: game_over
        return FeedbackEvent(
            Feedback.NEGATIVE, "GAME OVER", self.config.SCREEN_WIDTH / 2, self.config.SCREEN_HEIGHT / 2, "game_over"
        )

    # --- Player input ---
    def press(self, direction):
        if self.running:
            self.world.catcher.steer(direction)

    def release(self):
        if self.running:
            self.world.catcher.stop()

    def drag(self, delta_x):
        if self.running:
            self.world.catcher.drag(delta_x, self.config.DRAG_SENSITIVITY)

    def end_drag(self):
        self.release()

    # --- Knobs ---
    def set_catcher_speed(self, value):
        speed = self.config.clamp_catcher_speed(value)
        if speed is None:
            logger.warning("ignoring catcher speed %r", value)
            return
        self.catcher_speed = speed
        self.world.catcher.set_speed(speed)

    def set_star_speed(self, value):
        speed = self.config.clamp_star_speed(value)
        if speed is None:
            logger.warning("ignoring star speed %r", value)
            return
        self.star_speed = speed

    # --- Message surface ---
    def encouragement_prompt(self):
        return (
            "Generate a short, encouraging message for a child who is playing a star-catching game. "
            "The message should be positive, simple, and congratulate them on their effort or score. "
            f"Keep it under 20 words. Current score: {self.score}."
        )

    def star_fact_prompt(self):
        return "Generate a very simple and interesting fact about stars or space, suitable for a child. Keep it under 15 words."

    def show_message(self, text):
        self.message = text

    def message_ticket(self):
        """Identifies the current game and phase; changes on start, reset and game over."""
        return (self.generation, self.status)
