"""Tick-driven replay of submitted event queues.

The scheduler owns an ordered list of pending queues and drains the
head queue event by event as simulated time accumulates. The host
calls ``tick(now)`` once per frame from the same context that drives
the emulated machine; nothing in here blocks or sleeps.

Timing: each tick adds the wall time elapsed since the previous tick
to an accumulator. An event is dispatched once the accumulator covers
its ``delay_ms``, which is then subtracted. Time left over when the
next event is not yet due is carried into the following tick, so the
replay cadence does not depend on the host frame rate.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable

from x16remote.domain.models import InputEvent, JoystickEvent, KeyEvent
from x16remote.injectors.base import KeyInjectionError, KeyInjector
from x16remote.input.queue import EventQueue

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SimulatedClock:
    """A millisecond clock that only moves when told to.

    Stands in for monotonic_ms when replaying without a host frame loop.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class InputScheduler:
    """Replays event queues against a KeyInjector at their recorded cadence.

    States: Idle (nothing pending) and Active (draining). ``submit``
    moves Idle to Active and starts the clock; the scheduler returns to
    Idle as soon as the last pending queue is drained.
    """

    def __init__(
        self,
        injector: KeyInjector,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._injector = injector
        self._clock = clock
        self._pending: deque[EventQueue] = deque()
        self._cursor = 0
        self._accumulated_ms = 0.0
        self._last_tick_ms = 0.0
        self._active = False
        self._completed_queues = 0

    @property
    def injector(self) -> KeyInjector:
        return self._injector

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def cursor(self) -> int:
        """Index of the next event in the head queue."""
        return self._cursor

    @property
    def accumulated_ms(self) -> float:
        return self._accumulated_ms

    @property
    def pending_queue_count(self) -> int:
        return len(self._pending)

    @property
    def completed_queue_count(self) -> int:
        return self._completed_queues

    def pending_event_count(self) -> int:
        """Total undispatched events across all pending queues."""
        total = sum(len(q) for q in self._pending)
        return total - self._cursor if self._pending else 0

    def submit(self, queue: EventQueue | None, now: float | None = None) -> bool:
        """Append a queue to the pending list, taking ownership of it.

        A missing queue is rejected and logged. Returns True if the queue
        was accepted.
        """
        if queue is None:
            logger.error("Rejected submission: no event queue given")
            return False

        queue.seal()
        self._pending.append(queue)
        logger.info(
            "Submitted queue with %d events (%d queues pending)",
            len(queue), len(self._pending),
        )

        if not self._active:
            self._active = True
            self._cursor = 0
            self._accumulated_ms = 0.0
            self._last_tick_ms = self._clock() if now is None else now
            logger.info("Input scheduler started")
        return True

    def tick(self, now: float | None = None) -> int:
        """Dispatch every event that has become due. Returns how many.

        An injector exception other than KeyInjectionError propagates to
        the caller; the event that raised it is already consumed.
        """
        if not self._active:
            return 0

        if now is None:
            now = self._clock()
        elapsed = max(now - self._last_tick_ms, 0.0)
        self._last_tick_ms = now
        self._accumulated_ms += elapsed

        dispatched = 0
        while self._pending:
            queue = self._pending[0]

            while self._cursor < len(queue):
                event = queue[self._cursor]
                if self._accumulated_ms < event.delay_ms:
                    return dispatched
                # Consume the event before dispatch so an exception from the
                # injector drops it instead of replaying it on every tick.
                self._accumulated_ms -= event.delay_ms
                self._cursor += 1
                self._dispatch(event)
                dispatched += 1

            self._pending.popleft()
            self._cursor = 0
            self._completed_queues += 1
            logger.info("Completed queue with %d events", len(queue))

        self._go_idle()
        return dispatched

    def flush(self) -> int:
        """Drop all pending input and return to Idle.

        Returns the number of undispatched events that were discarded.
        """
        dropped = self.pending_event_count()
        if self._active:
            self._pending.clear()
            self._go_idle()
            logger.info("Flushed %d pending events", dropped)
        return dropped

    def _go_idle(self) -> None:
        self._active = False
        self._cursor = 0
        self._accumulated_ms = 0.0
        logger.info("All input queues processed - scheduler idle")

    def _dispatch(self, event: InputEvent) -> None:
        try:
            if isinstance(event, KeyEvent):
                self._injector.inject_key_event(event.is_down, event.code)
                logger.debug(
                    "Dispatched key %d %s (delay %dms)",
                    event.code, "down" if event.is_down else "up", event.delay_ms,
                )
            elif isinstance(event, JoystickEvent):
                self._injector.inject_joystick_event(event.joystick, event.button, event.is_down)
                logger.debug(
                    "Dispatched joystick %d button %d %s",
                    event.joystick, event.button, "down" if event.is_down else "up",
                )
        except KeyInjectionError as e:
            logger.error("Injection failed on %s backend: %s", e.backend or "unknown", e)
