"""Abstract base class for the host's input injection path.

The scheduler pushes every due key or joystick event through exactly
one injector call. Implementations deliver it to the emulated machine,
a USB HID gadget, a log, or a recording used for previews and tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class KeyInjector(ABC):
    """Synchronous sink for key and joystick transitions.

    Injection is called from inside ``InputScheduler.tick()`` on the
    host frame loop, so implementations must not block for long.

    Example usage::

        scheduler = InputScheduler(injector=LoggingInjector())
        scheduler.submit(translate_text("hello`ENTER`", typing_rate_ms=35))
    """

    name: str = "abstract"

    @abstractmethod
    def inject_key_event(self, is_down: bool, code: int) -> None:
        """Deliver one key transition.

        Args:
            is_down: True for key-down, False for key-up.
            code: Scan code (USB HID usage ID).

        Raises:
            KeyInjectionError: If the event cannot be delivered.
        """
        ...

    def inject_joystick_event(self, joystick: int, button: int, is_down: bool) -> None:
        """Deliver one joystick button transition.

        Backends without a joystick path log and drop the event.
        """
        logger.warning(
            "%s injector has no joystick support; dropped joystick %d button %d %s",
            self.name, joystick, button, "down" if is_down else "up",
        )

    def close(self) -> None:
        """Release any resources held by the injector."""


class KeyInjectionError(Exception):
    """Raised when an input event cannot be delivered."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend
