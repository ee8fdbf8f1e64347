"""Injectors that log or record events instead of delivering them."""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from x16remote.injectors.base import KeyInjector

logger = logging.getLogger(__name__)


class InjectedEvent(NamedTuple):
    kind: str  # "key" or "joystick"
    code: int
    is_down: bool
    joystick: int = 0
    timestamp_ms: float | None = None


class LoggingInjector(KeyInjector):
    """Logs every event at INFO level. Useful on a headless host."""

    name = "log"

    def inject_key_event(self, is_down: bool, code: int) -> None:
        logger.info("key %s code=%d (0x%02X)", "down" if is_down else "up", code, code)

    def inject_joystick_event(self, joystick: int, button: int, is_down: bool) -> None:
        logger.info(
            "joystick %d button %d %s", joystick, button, "down" if is_down else "up",
        )


class RecordingInjector(KeyInjector):
    """Keeps every dispatched event, in order.

    ``clock`` is optional; when given, each event is stamped with the
    clock value at the moment it was injected.
    """

    name = "recording"

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock
        self.events: list[InjectedEvent] = []

    def _now(self) -> float | None:
        return self._clock() if self._clock is not None else None

    def inject_key_event(self, is_down: bool, code: int) -> None:
        self.events.append(InjectedEvent("key", code, is_down, timestamp_ms=self._now()))

    def inject_joystick_event(self, joystick: int, button: int, is_down: bool) -> None:
        self.events.append(
            InjectedEvent("joystick", button, is_down, joystick=joystick, timestamp_ms=self._now())
        )

    @property
    def key_events(self) -> list[tuple[int, bool]]:
        """``(code, is_down)`` pairs of the recorded key events."""
        return [(e.code, e.is_down) for e in self.events if e.kind == "key"]

    def clear(self) -> None:
        self.events.clear()
