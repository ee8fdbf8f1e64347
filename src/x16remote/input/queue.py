"""Ordered container for the timed events of one submission.

A queue is filled by a translation pass and then handed to the
scheduler. Handing it over seals it: from then on only the scheduler
reads it, and any further append is an error.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from x16remote.domain.models import InputEvent, JoystickEvent, KeyEvent, WaitEvent


class EventQueueError(Exception):
    """Raised when a sealed queue is modified."""


class EventQueue:
    """An append-only-then-drain-only sequence of input events."""

    def __init__(self, events: Iterable[InputEvent] = ()) -> None:
        self._events: list[InputEvent] = list(events)
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Transfer ownership to the scheduler."""
        self._sealed = True

    def append(self, event: InputEvent) -> None:
        if self._sealed:
            raise EventQueueError("Cannot append to a queue that was already submitted")
        self._events.append(event)

    def extend(self, events: Iterable[InputEvent]) -> None:
        for event in events:
            self.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[InputEvent]:
        return iter(self._events)

    def __getitem__(self, index: int) -> InputEvent:
        return self._events[index]

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"EventQueue({len(self._events)} events, {state})"

    @property
    def key_event_count(self) -> int:
        """Number of key and joystick transitions (everything but waits)."""
        return sum(1 for e in self._events if isinstance(e, (KeyEvent, JoystickEvent)))

    @property
    def wait_count(self) -> int:
        return sum(1 for e in self._events if isinstance(e, WaitEvent))

    @property
    def total_delay_ms(self) -> int:
        """Minimum wall time needed to drain the whole queue."""
        return sum(e.delay_ms for e in self._events)
