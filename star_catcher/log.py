"""Logging for the star catcher game.

Records may carry ``t_ms``, the simulated game time the event happened at
(pass it with ``extra={"t_ms": now}``). It is shown next to the wall clock on
the console and written as its own field in the JSON-lines file.
"""

from __future__ import annotations

import json
import logging
import sys

CONSOLE_FORMAT = "%(asctime)s %(levelname).1s [%(game_time)s] %(name)s: %(message)s"


def format_game_time(t_ms) -> str:
    """``83500.0`` -> ``01:23.5``; records without a game time show dashes."""
    if t_ms is None:
        return "--:--.-"
    seconds = t_ms / 1000
    return f"{int(seconds // 60):02d}:{seconds % 60:04.1f}"


class GameTimeFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.t_ms = getattr(record, "t_ms", None)
        record.game_time = format_game_time(record.t_ms)
        return True


class JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "t_ms": record.t_ms,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "info", log_file: str | None = None) -> None:
    """Configure the star_catcher logger: console always, JSON lines when ``log_file`` is set."""
    root = logging.getLogger("star_catcher")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handlers = [logging.StreamHandler(sys.stderr)]
    handlers[0].setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        handlers[1].setFormatter(JsonLinesFormatter())

    for handler in handlers:
        handler.addFilter(GameTimeFilter())
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"star_catcher.{name}")
