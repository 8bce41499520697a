from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from star_catcher.config import GameConfig
from star_catcher.items import FallingItem, ItemKind
from star_catcher.session import GameSession, Status
from star_catcher.storage import HighScoreStore


def _session(store: HighScoreStore | None = None, seed: int = 0) -> GameSession:
    return GameSession(GameConfig(), store=store, rng=np.random.default_rng(seed))


def _force_game_over(session: GameSession, now: float) -> None:
    session.world.lives = 1
    session.items.append(FallingItem(ItemKind.STAR, 10, session.config.SCREEN_HEIGHT + 1))
    session.tick(now)
    assert session.status is Status.GAME_OVER


def test_new_session_is_idle_and_does_not_tick() -> None:
    session = _session()
    assert session.status is Status.IDLE
    assert session.score == 0
    assert session.lives == 3

    session.items.append(FallingItem(ItemKind.STAR, 10, 100))
    assert session.tick(5000) == []
    assert session.items[0].y == 100


def test_end_to_end_scenario() -> None:
    session = _session()
    session.start(0)
    height = session.config.SCREEN_HEIGHT

    # Missed star
    session.items.append(FallingItem(ItemKind.STAR, 100, height + 1))
    session.tick(16)
    assert (session.lives, session.score) == (2, 0)

    # Caught star
    session.catcher.x = 90
    session.items.append(FallingItem(ItemKind.STAR, 100, session.catcher.y))
    session.tick(32)
    assert session.score == 10

    # Two misses in a row
    session.items.append(FallingItem(ItemKind.STAR, 100, height + 1))
    session.tick(48)
    assert session.lives == 1
    assert session.status is Status.RUNNING

    session.items.append(FallingItem(ItemKind.STAR, 100, height + 1))
    events = session.tick(64)
    assert session.lives == 0
    assert session.status is Status.GAME_OVER
    assert session.score == 10
    assert events[-1].cue == "game_over"
    assert "10" in session.message


def test_game_over_fires_once() -> None:
    session = _session()
    session.start(0)
    _force_game_over(session, 10)

    session.items.append(FallingItem(ItemKind.STAR, 10, session.config.SCREEN_HEIGHT + 1))
    for t in range(20, 5000, 33):
        assert session.tick(t) == []

    assert session.game_over_count == 1
    assert session.lives == 0


def test_high_score_only_grows(tmp_path: Path) -> None:
    store = HighScoreStore(tmp_path / "best.json")
    store.save(200)

    session = _session(store)
    assert session.high_score == 200

    session.start(0)
    session.world.score = 150
    _force_game_over(session, 10)
    assert session.high_score == 200
    assert store.load() == 200

    session.start(100)
    assert session.score == 0
    assert session.lives == 3
    session.world.score = 250
    _force_game_over(session, 110)
    assert session.high_score == 250
    assert store.load() == 250


def test_restart_cancels_expiries_of_previous_game() -> None:
    session = _session()
    session.start(0)
    old_world = session.world
    session.powerups.activate_slowdown(0)
    session.powerups.activate_widen(0)

    session.start(1000)
    assert session.world is not old_world
    assert old_world.events.pending() == []

    session.powerups.activate_slowdown(2000)
    session.tick(7500)
    assert session.powerups.fall_speed_multiplier == pytest.approx(0.3)
    assert session.powerups.slowdown.active
    assert session.catcher.width == 100


def test_expiry_still_fires_after_game_over() -> None:
    session = _session()
    session.start(0)
    session.powerups.activate_widen(0)
    _force_game_over(session, 100)
    assert session.catcher.width == 150

    session.tick(5000)
    assert session.catcher.width == 100
    assert not session.powerups.widen.active


def test_reset_returns_to_idle_with_nothing_pending() -> None:
    session = _session()
    session.start(0)
    session.powerups.activate_widen(0)
    old_world = session.world

    session.reset()

    assert session.status is Status.IDLE
    assert old_world.events.pending() == []
    assert session.catcher.width == 100


def test_input_only_applies_while_running() -> None:
    session = _session()
    session.press(1)
    assert session.catcher.dx == 0

    session.start(0)
    session.press(1)
    assert session.catcher.dx == session.catcher_speed
    session.release()
    assert session.catcher.dx == 0
    session.drag(-100)
    assert session.catcher.dx == -session.catcher_speed
    session.end_drag()
    assert session.catcher.dx == 0


def test_knobs_clamp_or_ignore_bad_values() -> None:
    session = _session()
    session.start(0)

    session.set_catcher_speed("fast")
    assert session.catcher_speed == session.config.CATCHER_SPEED
    session.set_catcher_speed(999)
    assert session.catcher_speed == 20.0
    assert session.catcher.speed == 20.0

    session.set_star_speed(-5)
    assert session.star_speed == 1.0
    session.set_star_speed(None)
    assert session.star_speed == 1.0
    session.set_star_speed(float("nan"))
    assert session.star_speed == 1.0


def test_slowdown_scales_configured_star_speed() -> None:
    session = _session()
    session.start(0)
    session.set_star_speed(5)
    assert session.fall_speed() == 5
    session.powerups.activate_slowdown(0)
    assert session.fall_speed() == pytest.approx(1.5)


def test_random_play_keeps_invariants() -> None:
    session = _session(seed=42)
    session.set_star_speed(10)
    rng = np.random.default_rng(7)
    now = 0.0
    session.start(now)
    game_overs = 0

    for _ in range(20_000):
        now += 33.0
        roll = rng.random()
        if roll < 0.2:
            session.press(int(rng.integers(-1, 2)))
        elif roll < 0.25:
            session.drag(float(rng.uniform(-50, 50)))
        events = session.tick(now)
        game_overs += sum(1 for e in events if e.cue == "game_over")

        catcher = session.catcher
        assert 0 <= catcher.x <= session.config.SCREEN_WIDTH - catcher.width
        assert session.lives >= 0
        assert session.score % 10 == 0

        if session.status is Status.GAME_OVER:
            assert session.lives == 0
            session.start(now)

    assert game_overs == session.game_over_count
    assert game_overs > 0


def test_prompts_mention_score() -> None:
    session = _session()
    session.start(0)
    session.world.score = 70
    assert "Current score: 70." in session.encouragement_prompt()
    assert "stars or space" in session.star_fact_prompt()
