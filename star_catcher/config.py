"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from star_catcher.log import get_logger

logger = get_logger("config")


@dataclass(frozen=True)
class GameConfig:
    # Screen
    SCREEN_WIDTH: int = 640
    SCREEN_HEIGHT: int = 480
    FPS: int = 30

    # Catcher
    CATCHER_WIDTH: int = 100
    CATCHER_HEIGHT: int = 20
    CATCHER_OFFSET_Y: int = 60
    CATCHER_SPEED: float = 8.0
    CATCHER_SPEED_RANGE: tuple = (1.0, 20.0)
    DRAG_SENSITIVITY: float = 0.5

    # Falling items
    ITEM_SIZE: int = 30
    STAR_SPEED: float = 3.0
    STAR_SPEED_RANGE: tuple = (1.0, 10.0)
    SPAWN_INTERVAL_MS: int = 1000
    SLOWDOWN_ENABLED: bool = True

    # Power-ups
    WIDEN_DURATION_MS: int = 5000
    WIDEN_MULTIPLIER: float = 1.5
    SLOWDOWN_DURATION_MS: int = 7000
    SLOWDOWN_MULTIPLIER: float = 0.3

    # Session
    MAX_LIVES: int = 3
    STAR_POINTS: int = 10

    # Collaborators
    RELAY_URL: str = "http://localhost:8888/.netlify/functions/gemini-proxy"
    RELAY_TIMEOUT_S: float = 20.0
    HIGH_SCORE_PATH: Path = Path.home() / ".star_catcher" / "high_score.json"
    LOG_LEVEL: str = "info"

    @property
    def frame_ms(self) -> float:
        return 1000.0 / self.FPS

    def clamp_catcher_speed(self, value):
        return _clamp_number(value, self.CATCHER_SPEED_RANGE)

    def clamp_star_speed(self, value):
        return _clamp_number(value, self.STAR_SPEED_RANGE)


def _clamp_number(value, bounds):
    """Coerce a knob value into its range; None when it is not a number at all."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    low, high = bounds
    return min(high, max(low, number))


def _env_number(name: str, default: float, cast=float):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %s", name, raw, default)
        return default


_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning("Ignoring malformed %s=%r, using %s", name, raw, default)
    return default


def load_config(**overrides) -> GameConfig:
    """Load configuration from .env and environment variables."""
    load_dotenv(find_dotenv(usecwd=True))
    base = GameConfig()

    catcher_speed = base.clamp_catcher_speed(
        _env_number("STAR_CATCHER_CATCHER_SPEED", base.CATCHER_SPEED)
    )
    star_speed = base.clamp_star_speed(
        _env_number("STAR_CATCHER_STAR_SPEED", base.STAR_SPEED)
    )

    config = replace(
        base,
        CATCHER_SPEED=catcher_speed if catcher_speed is not None else base.CATCHER_SPEED,
        STAR_SPEED=star_speed if star_speed is not None else base.STAR_SPEED,
        SLOWDOWN_ENABLED=_env_flag("STAR_CATCHER_SLOWDOWN", base.SLOWDOWN_ENABLED),
        RELAY_URL=os.environ.get("STAR_CATCHER_RELAY_URL", base.RELAY_URL),
        RELAY_TIMEOUT_S=_env_number("STAR_CATCHER_RELAY_TIMEOUT_S", base.RELAY_TIMEOUT_S),
        HIGH_SCORE_PATH=Path(
            os.environ.get("STAR_CATCHER_HIGH_SCORE_PATH", str(base.HIGH_SCORE_PATH))
        ).expanduser(),
        LOG_LEVEL=os.environ.get("STAR_CATCHER_LOG_LEVEL", base.LOG_LEVEL),
    )
    if overrides:
        config = replace(config, **overrides)
    return config
