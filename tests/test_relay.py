from __future__ import annotations

import json
from concurrent.futures import Future

import httpx
import numpy as np
import pytest

from star_catcher.config import GameConfig
from star_catcher.items import FallingItem, ItemKind
from star_catcher.relay import PendingMessage, RelayError, TextRelay, fetch_message, request_message
from star_catcher.session import GameSession, Status

URL = "http://relay.test/gemini-proxy"


def _relay(handler) -> TextRelay:
    return TextRelay(URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_generate_posts_prompt_and_returns_text() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"text": "  Stars are suns!  "})

    assert _relay(handler).generate("tell me") == "Stars are suns!"
    assert seen == [{"prompt": "tell me"}]


def test_error_status_surfaces_relay_error_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Server configuration error: API key not found."})

    with pytest.raises(RelayError, match="API key not found"):
        _relay(handler).generate("hi")


def test_non_json_body_is_a_relay_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(RelayError):
        _relay(handler).generate("hi")


def test_missing_text_is_a_relay_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": []})

    with pytest.raises(RelayError):
        _relay(handler).generate("hi")


def test_network_failure_is_a_relay_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RelayError, match="Please try again"):
        _relay(handler).generate("hi")


def test_request_message_never_touches_game_state() -> None:
    session = GameSession(GameConfig(), rng=np.random.default_rng(0))
    session.start(0)
    session.world.score = 30

    prompts: list[str] = []

    def ok(request: httpx.Request) -> httpx.Response:
        prompts.append(json.loads(request.content)["prompt"])
        return httpx.Response(200, json={"text": "Great job!"})

    assert request_message(session, _relay(ok), "encouragement") == "✨ Great job!"
    assert "Current score: 30." in prompts[0]

    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    assert request_message(session, _relay(broken), "star_fact") == "Error: boom"
    assert (session.score, session.lives, session.status) == (30, 3, Status.RUNNING)


def test_star_fact_message_format() -> None:
    session = GameSession(GameConfig(), rng=np.random.default_rng(0))

    def ok(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"text": "The Sun is a star."})

    assert request_message(session, _relay(ok), "star_fact") == "✨ Did you know? The Sun is a star."


def test_fetch_message_formats_errors_instead_of_raising() -> None:
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert fetch_message(_relay(broken), "hi") == "Error: Error fetching data. Please try again."


def test_pending_message_waits_for_reply_then_shows_it() -> None:
    session = GameSession(GameConfig(), rng=np.random.default_rng(0))
    session.start(0)
    session.show_message("Loading...")
    future: Future = Future()
    pending = PendingMessage(session, future)

    assert pending.poll() is False
    assert session.message == "Loading..."

    future.set_result("✨ Great job!")
    assert pending.poll() is True
    assert session.message == "✨ Great job!"


def test_reply_arriving_after_game_over_keeps_game_over_text() -> None:
    session = GameSession(GameConfig(), rng=np.random.default_rng(0))
    session.start(0)
    future: Future = Future()
    pending = PendingMessage(session, future)

    session.world.lives = 1
    session.world.items.append(_missed_star(session))
    session.tick(session.config.frame_ms)
    assert session.status is Status.GAME_OVER
    game_over_text = session.message

    future.set_result("✨ Great job!")
    assert pending.poll() is True
    assert session.message == game_over_text


def test_reply_from_previous_game_is_dropped_after_restart() -> None:
    session = GameSession(GameConfig(), rng=np.random.default_rng(0))
    session.start(0)
    future: Future = Future()
    pending = PendingMessage(session, future)

    session.start(1000)
    session.show_message("fresh")
    future.set_result("✨ Did you know? The Sun is a star.")

    assert pending.poll() is True
    assert session.message == "fresh"


def _missed_star(session: GameSession) -> FallingItem:
    return FallingItem(ItemKind.STAR, x=0, y=session.config.SCREEN_HEIGHT + 1)
