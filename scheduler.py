from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ScheduledEvent:
    name: str
    due_tick: int
    callback: Callable[[], None]


class TickScheduler:
    """Deferred callbacks keyed to the simulation tick counter.

    Callbacks only run from run_due(), which the session calls between ticks,
    so nothing scheduled here can fire in the middle of entity updates.
    """

    def __init__(self) -> None:
        self._queue: List[ScheduledEvent] = []

    def schedule(self, name: str, due_tick: int, callback: Callable[[], None]) -> None:
        """Queue a callback; an existing entry with the same name is replaced."""
        self.cancel(name)
        self._queue.append(ScheduledEvent(name=name, due_tick=due_tick, callback=callback))
        self._queue.sort(key=lambda e: e.due_tick)
        logger.debug("scheduled %s at tick %d", name, due_tick)

    def cancel(self, name: str) -> bool:
        before = len(self._queue)
        self._queue = [e for e in self._queue if e.name != name]
        cancelled = len(self._queue) != before
        if cancelled:
            logger.debug("cancelled %s", name)
        return cancelled

    def pending(self, name: str) -> Optional[ScheduledEvent]:
        for e in self._queue:
            if e.name == name:
                return e
        return None

    def run_due(self, tick: int) -> int:
        """Run every callback whose due tick has arrived. Returns how many ran."""
        due = [e for e in self._queue if e.due_tick <= tick]
        if not due:
            return 0
        self._queue = [e for e in self._queue if e.due_tick > tick]
        for e in due:
            logger.debug("running %s (due %d) at tick %d", e.name, e.due_tick, tick)
            e.callback()
        return len(due)
