"""Per-event serialization of mutating operations."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class _EventLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0  # threads inside or waiting on hold()


class EventLocks:
    """One re-entrant lock per event id.

    Capacity checks and waiting-list position assignment read and then write
    shared per-event state, so they must not interleave for the same event.
    Different events never contend.

    A lock is dropped once no thread holds or waits for it through ``hold``, so
    the table only contains events with operations in flight.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _EventLock] = {}

    def lock_for(self, event_id: str) -> threading.RLock:
        """The current lock for ``event_id``.

        Use ``hold`` for mutual exclusion; a lock obtained here may be replaced
        once every ``hold`` on the event has finished.
        """
        with self._guard:
            return self._entry(event_id).lock

    @contextmanager
    def hold(self, event_id: str) -> Iterator[None]:
        """Hold the lock for ``event_id`` for the duration of the block."""
        with self._guard:
            entry = self._entry(event_id)
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0 and self._locks.get(event_id) is entry:
                    del self._locks[event_id]

    def _entry(self, event_id: str) -> _EventLock:
        entry = self._locks.get(event_id)
        if entry is None:
            entry = _EventLock()
            self._locks[event_id] = entry
        return entry

    def __len__(self) -> int:
        return len(self._locks)
