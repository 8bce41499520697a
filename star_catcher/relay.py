"""Client for the text-generation relay.

The relay accepts ``{"prompt": ...}`` and answers ``{"text": ...}`` on
success or ``{"error": ...}`` with a non-2xx status. The API key lives with
the relay, never with the game.
"""

from __future__ import annotations

import httpx

from star_catcher.log import get_logger

logger = get_logger("relay")


class RelayError(Exception):
    """Raised when the relay cannot produce text. The message is user-facing."""


class TextRelay:
    def __init__(self, url: str, timeout_s: float = 20.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_s, connect=5.0))

    def generate(self, prompt: str) -> str:
        logger.debug("relay request → %s (chars=%d)", self.url, len(prompt))
        try:
            resp = self._client.post(self.url, json={"prompt": prompt})
        except httpx.HTTPError as e:
            logger.warning("relay request failed: %s", e)
            raise RelayError("Error fetching data. Please try again.") from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("relay returned non-JSON body (%d): %s", resp.status_code, resp.text[:200])
            raise RelayError("Failed to get a response from the relay.") from e

        if not resp.is_success:
            err = data.get("error") if isinstance(data, dict) else None
            logger.warning("relay error (%d): %s", resp.status_code, err)
            raise RelayError(err or f"Relay error ({resp.status_code}).")

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise RelayError("Failed to get a response from the relay.")

        logger.debug("relay response ← %d chars", len(text))
        return text.strip()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


def fetch_message(relay, prompt, kind="encouragement"):
    """Ask the relay for text and format it for the message surface.

    Failures come back as an ``Error: ...`` message instead of raising.
    """
    try:
        text = relay.generate(prompt)
    except RelayError as e:
        return f"Error: {e}"
    if kind == "encouragement":
        return f"✨ {text}"
    return f"✨ Did you know? {text}"


def build_prompt(session, kind="encouragement"):
    return session.encouragement_prompt() if kind == "encouragement" else session.star_fact_prompt()


def request_message(session, relay, kind="encouragement"):
    """Fetch a message and show it right away. Score, lives and status are untouched."""
    session.show_message(fetch_message(relay, build_prompt(session, kind), kind))
    return session.message


class PendingMessage:
    """A relay request running off the frame loop.

    The reply is only shown if the session is still in the same game and
    phase it was in when the request was made; otherwise it is dropped.
    """

    def __init__(self, session, future):
        self.session = session
        self.future = future
        self.ticket = session.message_ticket()

    def poll(self):
        """Apply the reply once it is ready. Returns True when finished."""
        if not self.future.done():
            return False
        message = self.future.result()
        if self.session.message_ticket() != self.ticket:
            logger.debug("dropping stale relay reply %r", message[:40])
            return True
        self.session.show_message(message)
        return True
