from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ItemKind(Enum):
    STAR = "star"
    BOMB = "bomb"
    WIDEN = "widen"
    SLOWDOWN = "slowdown"

    @property
    def is_powerup(self) -> bool:
        return self in (ItemKind.WIDEN, ItemKind.SLOWDOWN)


@dataclass
class FallingItem:
    kind: ItemKind
    x: float
    y: float
    size: int = 30


class Feedback(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class FeedbackEvent:
    """Something the host should show (floating text) and play (sound cue)."""

    feedback: Feedback
    text: str
    x: float
    y: float
    cue: str
