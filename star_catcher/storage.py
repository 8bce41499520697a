from __future__ import annotations

import json
from pathlib import Path

from star_catcher.log import get_logger

logger = get_logger("storage")


class HighScoreStore:
    """A single named scalar kept in a small JSON file."""

    def __init__(self, path, key="high_score"):
        self.path = Path(path)
        self.key = key

    def load(self) -> int:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            value = int(data.get(self.key, 0))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read %s (%s), starting from 0", self.path, e)
            return 0
        return max(0, value)

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                data = {}
        except (OSError, ValueError):
            pass
        data[self.key] = int(score)

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)
        logger.info("Saved %s=%d to %s", self.key, score, self.path)
