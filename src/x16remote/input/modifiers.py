"""Logical shift/ctrl/Commodore tracking across a translation pass.

The state machine only emits a modifier transition when the required
state differs from the held state, so a run of characters sharing the
same requirement costs at most one press and one release per modifier.
The Commodore key sits on left Alt.
"""

from __future__ import annotations

from dataclasses import dataclass

from x16remote.domain.models import KeyEvent
from x16remote.input.keymap import SCANCODE_LALT, SCANCODE_LCTRL, SCANCODE_LSHIFT
from x16remote.input.queue import EventQueue

# Delay before modifier transitions and key releases
KEY_EVENT_MIN_DELAY_MS = 1


@dataclass
class ModifierState:
    """Which modifiers are logically held down."""

    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def any_held(self) -> bool:
        return self.shift or self.ctrl or self.alt

    def apply(
        self,
        queue: EventQueue,
        needs_shift: bool,
        needs_ctrl: bool,
        needs_alt: bool = False,
    ) -> int:
        """Emit the transitions needed to reach the required state.

        Transitions go out in shift, ctrl, Commodore order. Returns the
        number of events emitted.
        """
        emitted = 0
        for attr, code, needed in (
            ("shift", SCANCODE_LSHIFT, needs_shift),
            ("ctrl", SCANCODE_LCTRL, needs_ctrl),
            ("alt", SCANCODE_LALT, needs_alt),
        ):
            if needed != getattr(self, attr):
                queue.append(KeyEvent(code=code, is_down=needed, delay_ms=KEY_EVENT_MIN_DELAY_MS))
                setattr(self, attr, needed)
                emitted += 1
        return emitted

    def type_key(
        self,
        queue: EventQueue,
        code: int,
        typing_rate_ms: int,
        needs_shift: bool = False,
        needs_ctrl: bool = False,
        needs_alt: bool = False,
    ) -> None:
        """Bring modifiers into line, then press and release ``code``."""
        self.apply(queue, needs_shift, needs_ctrl, needs_alt)
        queue.append(KeyEvent(
            code=code, is_down=True, delay_ms=max(typing_rate_ms, KEY_EVENT_MIN_DELAY_MS),
        ))
        queue.append(KeyEvent(code=code, is_down=False, delay_ms=KEY_EVENT_MIN_DELAY_MS))

    def release_all(self, queue: EventQueue) -> int:
        """Release every held modifier so nothing is left stuck."""
        return self.apply(queue, needs_shift=False, needs_ctrl=False, needs_alt=False)
