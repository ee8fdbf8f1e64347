"""Host-facing entry point for synthetic input.

Bundles translation and scheduling behind the three operations a host
needs: submit text (or joystick commands), tick once per frame, and
report how much input is still pending.
"""

from __future__ import annotations

import logging
from typing import Callable

from x16remote.domain.models import SubmissionReceipt, TypingMode
from x16remote.injectors.base import KeyInjector
from x16remote.input.joystick import DEFAULT_HOLD_MS, translate_joystick
from x16remote.input.queue import EventQueue
from x16remote.input.scheduler import InputScheduler, monotonic_ms
from x16remote.input.translator import translate_text

logger = logging.getLogger(__name__)

DEFAULT_TYPING_RATE_MS = 35
MIN_TYPING_RATE_MS = 30


class InputController:
    """Translates submissions and feeds them to an InputScheduler."""

    def __init__(
        self,
        injector: KeyInjector,
        clock: Callable[[], float] = monotonic_ms,
        min_typing_rate_ms: int = MIN_TYPING_RATE_MS,
        joystick_hold_ms: int = DEFAULT_HOLD_MS,
    ) -> None:
        self._scheduler = InputScheduler(injector=injector, clock=clock)
        self._min_typing_rate_ms = min_typing_rate_ms
        self._joystick_hold_ms = joystick_hold_ms

    @property
    def scheduler(self) -> InputScheduler:
        return self._scheduler

    @property
    def is_active(self) -> bool:
        return self._scheduler.is_active

    def effective_rate(self, typing_rate_ms: int) -> int:
        """Clamp a requested typing rate to the configured floor."""
        return max(int(typing_rate_ms), self._min_typing_rate_ms)

    def submit(
        self,
        text: str,
        typing_rate_ms: int = DEFAULT_TYPING_RATE_MS,
        mode: TypingMode = TypingMode.NATIVE_ASCII,
        now: float | None = None,
    ) -> SubmissionReceipt:
        """Translate ``text`` and queue it for replay."""
        rate = self.effective_rate(typing_rate_ms)
        queue = translate_text(text, typing_rate_ms=rate, mode=mode)
        return self._submit_queue(queue, rate, now)

    def submit_joystick(
        self,
        commands: str,
        joystick: int = 1,
        typing_rate_ms: int = DEFAULT_TYPING_RATE_MS,
        now: float | None = None,
    ) -> SubmissionReceipt:
        """Translate a joystick command script and queue it for replay.

        Raises:
            ValueError: If ``joystick`` is out of range.
        """
        rate = self.effective_rate(typing_rate_ms)
        queue = translate_joystick(
            commands, joystick=joystick, typing_rate_ms=rate, hold_ms=self._joystick_hold_ms,
        )
        return self._submit_queue(queue, rate, now)

    def tick(self, now: float | None = None) -> int:
        return self._scheduler.tick(now)

    def pending_event_count(self) -> int:
        return self._scheduler.pending_event_count()

    def flush(self) -> int:
        return self._scheduler.flush()

    def _submit_queue(self, queue: EventQueue, rate: int, now: float | None) -> SubmissionReceipt:
        self._scheduler.submit(queue, now=now)
        return SubmissionReceipt(
            event_count=len(queue),
            key_event_count=queue.key_event_count,
            wait_count=queue.wait_count,
            estimated_time_ms=queue.total_delay_ms,
            typing_rate_ms=rate,
            pending_events=self._scheduler.pending_event_count(),
        )
