"""Bounded navigation history used by the detection heuristics."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationEvent:
    """A visit to a single screen.

    ``retention_time`` stays ``None`` while the user is still on the screen.
    It is set once, when the next transition happens, by :meth:`finalize`.
    """

    screen_id: str
    retention_time: int | None = None

    @property
    def is_finalized(self) -> bool:
        return self.retention_time is not None

    def finalize(self, retention_time: int) -> NavigationEvent:
        """Return a finalized copy carrying the time spent on the screen."""
        if self.is_finalized:
            raise ValueError(f"Event for {self.screen_id!r} is already finalized")
        if retention_time < 0:
            raise ValueError(f"Retention time must be >= 0, got {retention_time}")
        return replace(self, retention_time=int(retention_time))


class NavigationHistory:
    """Fixed-capacity ring buffer of finalized events, newest first.

    Pushing onto a full history evicts the oldest event.
    """

    DEFAULT_CAPACITY = 6

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._events: deque[NavigationEvent] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._events) == self._capacity

    def push(self, event: NavigationEvent) -> None:
        """Insert a finalized event at the head, dropping the tail when full."""
        if not event.is_finalized:
            raise ValueError(f"Cannot store unfinalized event for {event.screen_id!r}")

        if self.is_full:
            logger.debug(f"History full, evicting {self._events[-1].screen_id!r}")

        # deque(maxlen) discards from the opposite end on appendleft
        self._events.appendleft(event)

    def clear(self) -> None:
        """Remove all events."""
        self._events.clear()

    def items(self) -> tuple[NavigationEvent, ...]:
        """Snapshot of the current events, newest first."""
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"NavigationHistory(capacity={self._capacity}, events={list(self._events)!r})"
