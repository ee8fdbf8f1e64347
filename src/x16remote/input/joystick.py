"""Whitespace-delimited joystick command scripts.

    up fire left pause:500 down
    JOY2_START _1.5 JOY2_A

Button tokens press and release one button. ``JOY<n>_`` prefixed tokens
address joystick n explicitly, bare names address the requested
joystick. ``_500``, ``_1.5`` and ``PAUSE:500`` insert pauses.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from x16remote.domain.models import JoystickEvent, WaitEvent
from x16remote.input.macros import parse_wait_ms
from x16remote.input.modifiers import KEY_EVENT_MIN_DELAY_MS
from x16remote.input.queue import EventQueue

logger = logging.getLogger(__name__)

NUM_JOYSTICKS = 4
DEFAULT_HOLD_MS = 50

# Button codes as the emulator's joystick port numbers them
JOYSTICK_BUTTONS: Mapping[str, int] = MappingProxyType({
    "A": 0, "X": 1, "BACK": 2, "START": 3,
    "UP": 4, "DOWN": 5, "LEFT": 6, "RIGHT": 7,
    "B": 8, "Y": 9, "L": 10, "R": 11,
    # Aliases
    "FIRE": 0, "SELECT": 2,
    "BUTTON_A": 0, "BUTTON_B": 8, "BUTTON_X": 1, "BUTTON_Y": 9,
    "DPAD_UP": 4, "DPAD_DOWN": 5, "DPAD_LEFT": 6, "DPAD_RIGHT": 7,
    "L_SHOULDER": 10, "R_SHOULDER": 11,
})

_JOY_PREFIX = re.compile(r"JOY([1-9]?)_(.+)")


def resolve_joystick_token(token: str, joystick: int) -> tuple[int, int] | None:
    """Resolve an upper-cased token to ``(joystick, button)``, or None."""
    match = _JOY_PREFIX.fullmatch(token)
    if match is not None:
        number, name = match.groups()
        if number:
            joystick = int(number)
            if joystick > NUM_JOYSTICKS:
                return None
    else:
        name = token
    button = JOYSTICK_BUTTONS.get(name)
    if button is None:
        return None
    return joystick, button


def _pause_value(token: str) -> str | None:
    if token.startswith("_") and len(token) > 1:
        return token[1:]
    if token.startswith("PAUSE:") and len(token) > 6:
        return token[6:]
    return None


def translate_joystick(
    commands: str,
    joystick: int = 1,
    typing_rate_ms: int = 35,
    hold_ms: int = DEFAULT_HOLD_MS,
) -> EventQueue:
    """Translate a joystick command script into press/release events.

    Raises:
        ValueError: If ``joystick`` is not between 1 and 4.
    """
    if not 1 <= joystick <= NUM_JOYSTICKS:
        raise ValueError(f"Joystick number must be 1-{NUM_JOYSTICKS}, got {joystick}")

    rate = max(int(typing_rate_ms), KEY_EVENT_MIN_DELAY_MS)
    hold = max(int(hold_ms), KEY_EVENT_MIN_DELAY_MS)
    queue = EventQueue()

    for raw_token in commands.split():
        token = raw_token.upper()

        pause = _pause_value(token)
        if pause is not None:
            wait_ms = parse_wait_ms(pause)
            if wait_ms is None:
                logger.warning("Invalid pause duration %r skipped", raw_token)
            else:
                queue.append(WaitEvent.of(wait_ms))
            continue

        resolved = resolve_joystick_token(token, joystick)
        if resolved is None:
            logger.warning("Unknown joystick command %r skipped", raw_token)
            continue

        number, button = resolved
        queue.append(JoystickEvent(joystick=number, button=button, is_down=True, delay_ms=rate))
        queue.append(JoystickEvent(joystick=number, button=button, is_down=False, delay_ms=hold))

    logger.info("Translated joystick commands into %d events (joystick=%d)", len(queue), joystick)
    return queue
