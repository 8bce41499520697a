"""Deferred callbacks drained by the tick loop.

Power-up expiries are placed on this queue instead of a separate timer, so an
expiry always runs between two ticks and never in the middle of one.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable

from star_catcher.log import get_logger

logger = get_logger("events")


@dataclass(order=True)
class ScheduledEvent:
    due: float
    seq: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class EventQueue:
    def __init__(self):
        self._heap: list[ScheduledEvent] = []
        self._counter = itertools.count()

    def schedule(self, due, callback, name="event"):
        event = ScheduledEvent(due=due, seq=next(self._counter), name=name, callback=callback)
        heapq.heappush(self._heap, event)
        return event

    def cancel(self, event):
        if event is not None:
            event.cancelled = True

    def cancel_all(self):
        for event in self._heap:
            event.cancelled = True
        self._heap.clear()

    def pending(self):
        return [e for e in sorted(self._heap) if not e.cancelled]

    def run_due(self, now):
        """Run every live event due at or before ``now``. Returns how many ran."""
        ran = 0
        while self._heap and self._heap[0].due <= now:
            event = heapq.heappop(self._heap)
            if event.cancelled:
                continue
            logger.debug("running %s (due=%.0f)", event.name, event.due, extra={"t_ms": now})
            event.callback()
            ran += 1
        return ran
