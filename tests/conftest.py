from __future__ import annotations

import os

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from star_catcher.config import GameConfig
from star_catcher.world import World


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def world(config: GameConfig, rng: np.random.Generator) -> World:
    return World(config, rng, now=0.0)
