"""Per-frame item movement, catcher collisions and scoring."""

from __future__ import annotations

from dataclasses import dataclass, field

from star_catcher.items import Feedback, FeedbackEvent, ItemKind
from star_catcher.log import get_logger

logger = get_logger("engine")


def overlaps(item, catcher):
    return (
        item.y + item.size > catcher.y
        and item.x + item.size > catcher.x
        and item.x < catcher.x + catcher.width
        and item.y < catcher.y + catcher.height
    )


@dataclass
class TickResult:
    events: list = field(default_factory=list)
    caught: list = field(default_factory=list)
    missed: list = field(default_factory=list)
    lives_lost: int = 0
    lives_exhausted: bool = False


class CollisionEngine:
    """Advances and resolves the item registry in one deterministic pass.

    Items are visited newest-spawned first. Each item is moved and then
    resolved as caught, missed or still in flight. When a life loss drives
    lives to zero the pass stops: items not yet visited are left untouched.
    """

    def __init__(self, bounds_height, star_points=10):
        self.bounds_height = bounds_height
        self.star_points = star_points

    def tick(self, world, fall_speed, now):
        result = TickResult()
        items = world.items

        for i in range(len(items) - 1, -1, -1):
            item = items[i]
            item.y += fall_speed

            if overlaps(item, world.catcher):
                del items[i]
                result.caught.append(item)
                self._on_caught(world, item, now, result)
            elif item.y > self.bounds_height:
                del items[i]
                result.missed.append(item)
                self._on_missed(world, item, result)
            else:
                continue

            if result.lives_exhausted:
                logger.debug("lives exhausted, %d item(s) left unresolved", i, extra={"t_ms": now})
                break

        return result

    def _on_caught(self, world, item, now, result):
        kind = item.kind
        if kind is ItemKind.STAR:
            world.score += self.star_points
            result.events.append(
                FeedbackEvent(Feedback.POSITIVE, f"+{self.star_points}", item.x, item.y, "star_catch")
            )
            # sfx: star_catch
        elif kind is ItemKind.BOMB:
            self._take_hit(world, item, result, "bomb_hit")
        elif kind is ItemKind.WIDEN:
            world.powerups.activate_widen(now)
            result.events.append(FeedbackEvent(Feedback.POSITIVE, "MEGA CATCHER!", item.x, item.y, "powerup"))
        elif kind is ItemKind.SLOWDOWN:
            world.powerups.activate_slowdown(now)
            result.events.append(FeedbackEvent(Feedback.POSITIVE, "SLOW TIME!", item.x, item.y, "powerup"))
        else:
            raise ValueError(f"unhandled item kind: {kind!r}")

    def _on_missed(self, world, item, result):
        kind = item.kind
        if kind is ItemKind.STAR:
            self._take_hit(world, item, result, "star_miss")
        elif kind is ItemKind.BOMB or kind.is_powerup:
            # Dodged bombs and lost power-ups cost nothing
            pass
        else:
            raise ValueError(f"unhandled item kind: {kind!r}")

    def _take_hit(self, world, item, result, cue):
        if world.lives <= 0:
            return
        world.lose_life()
        result.lives_lost += 1
        result.events.append(FeedbackEvent(Feedback.NEGATIVE, "-1 Life", item.x, item.y, cue))
        if world.lives == 0:
            result.lives_exhausted = True
