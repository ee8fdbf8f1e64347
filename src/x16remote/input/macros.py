"""Backtick macro tokens: named keys, color codes and pauses.

A macro is written as ```NAME``` inside submitted text. Names are
case-insensitive and drawn from letters, digits, ``_``, ``-`` and ``.``.

    `ENTER`   `F1`   `CLR`        named keys
    `RED`     `RVS_ON`            Commodore color/reverse codes (ctrl+digit)
    `ORG`     `GRY3`              second color row (Commodore+digit)
    `HEART`   `ULCORNER`          PETSCII symbols and box drawing
    `JOY_A`   `JOY2_UP`           keyboard stand-ins for joystick buttons
    `_500`    `_1.5`              pause for 500 ms / 1.5 s
    `PAUSE`                       pause for one second
    `K40`                         raw scan code 40

Malformed macros never abort a submission: they are logged, produce
no events, and the text after their closing backtick is typed normally.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from x16remote.domain.models import MacroAction, MacroKind, WaitEvent
from x16remote.input.keymap import KEY_CODES
from x16remote.input.modifiers import ModifierState
from x16remote.input.queue import EventQueue

logger = logging.getLogger(__name__)

MACRO_DELIMITER = "`"
WAIT_PREFIX = "_"

_RAW_KEY_PATTERN = re.compile(r"K(\d+)")
_WAIT_PATTERN = re.compile(r"(\d+)(\.\d+)?")

# Longest pause a single wait token may request
MAX_WAIT_MS = 60_000


def is_macro_name_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char in "_-.")


def _key(name: str, shift: bool = False, ctrl: bool = False, cbm: bool = False) -> MacroAction:
    return MacroAction(
        MacroKind.KEY, KEY_CODES[name], needs_shift=shift, needs_ctrl=ctrl, needs_alt=cbm,
    )


def _wait(milliseconds: int) -> MacroAction:
    return MacroAction(MacroKind.WAIT, milliseconds)


# Keyboard stand-ins for joystick buttons, for mixed keyboard/joystick text
_JOYSTICK_KEYS: Mapping[str, str] = {
    "UP": "UP", "DOWN": "DOWN", "LEFT": "LEFT", "RIGHT": "RIGHT",
    "A": "SPACE", "B": "ENTER", "X": "x", "Y": "y",
    "BACK": "s", "START": "s", "L": "SPACE", "R": "SPACE",
}


MACRO_TABLE: Mapping[str, MacroAction] = MappingProxyType({
    # Control keys
    "ENTER": _key("ENTER"), "RETURN": _key("ENTER"),
    "TAB": _key("TAB"),
    "BACKSPACE": _key("BACKSPACE"),
    "ESCAPE": _key("ESCAPE"), "ESC": _key("ESCAPE"),
    "SPACE": _key("SPACE"),
    "CAPSLOCK": _key("CAPSLOCK"),
    "STOP": _key("PAUSE_BREAK"),
    # Cursor keys
    "UP": _key("UP"), "DOWN": _key("DOWN"),
    "LEFT": _key("LEFT"), "RIGHT": _key("RIGHT"),
    "CRSR_UP": _key("UP"), "CRSR_DOWN": _key("DOWN"),
    "CRSR_LEFT": _key("LEFT"), "CRSR_RIGHT": _key("RIGHT"),
    # Navigation
    "HOME": _key("HOME"), "END": _key("END"),
    "PAGEUP": _key("PAGEUP"), "PAGEDOWN": _key("PAGEDOWN"),
    "INSERT": _key("INSERT"), "DELETE": _key("DELETE"),
    # Function keys
    **{f"F{n}": _key(f"F{n}") for n in range(1, 13)},
    # Commodore screen control
    "CLR": _key("HOME", shift=True),
    "DEL": _key("BACKSPACE"),
    "INST": _key("BACKSPACE", shift=True),
    # Colors and reverse video (ctrl + digit)
    "BLK": _key("1", ctrl=True), "BLACK": _key("1", ctrl=True),
    "WHT": _key("2", ctrl=True), "WHITE": _key("2", ctrl=True),
    "RED": _key("3", ctrl=True),
    "CYN": _key("4", ctrl=True), "CYAN": _key("4", ctrl=True),
    "PUR": _key("5", ctrl=True), "PURPLE": _key("5", ctrl=True),
    "GRN": _key("6", ctrl=True), "GREEN": _key("6", ctrl=True),
    "BLU": _key("7", ctrl=True), "BLUE": _key("7", ctrl=True),
    "YEL": _key("8", ctrl=True), "YELLOW": _key("8", ctrl=True),
    "RVS_ON": _key("9", ctrl=True),
    "RVS_OFF": _key("0", ctrl=True),
    # Second color row (Commodore + digit)
    "ORG": _key("1", cbm=True), "BRN": _key("2", cbm=True),
    "LRED": _key("3", cbm=True), "GRY1": _key("4", cbm=True),
    "GRY2": _key("5", cbm=True), "LGRN": _key("6", cbm=True),
    "LBLU": _key("7", cbm=True), "GRY3": _key("8", cbm=True),
    # PETSCII symbols (shifted letters in the graphics charset)
    "SPADE": _key("a", shift=True), "HEART": _key("s", shift=True),
    "CLUB": _key("x", shift=True), "DIAMOND": _key("z", shift=True),
    "BALL": _key("q", shift=True), "CIRCLE": _key("w", shift=True),
    "CROSS": _key("v", shift=True),
    "DIAGONAL1": _key("n", shift=True), "DIAGONAL2": _key("m", shift=True),
    "POUND": _key("\\"), "UPARROW": _key("6", shift=True),
    "LEFTARROW": _key("-", shift=True), "PI": _key("`", shift=True),
    # Box drawing and blocks
    "HLINE": _key("c", shift=True), "VLINE": _key("b", shift=True),
    "ULCORNER": _key("a", cbm=True), "URCORNER": _key("s", cbm=True),
    "LLCORNER": _key("z", cbm=True), "LRCORNER": _key("x", cbm=True),
    "TEE_UP": _key("e", cbm=True), "TEE_DOWN": _key("r", cbm=True),
    "TEE_LEFT": _key("w", cbm=True), "TEE_RIGHT": _key("q", cbm=True),
    "BLOCK": _key("SPACE", shift=True), "SOLID_SQUARE": _key("SPACE", shift=True),
    "LBLOCK": _key("k", cbm=True), "BBLOCK": _key("i", cbm=True),
    "TBLOCK": _key("t", cbm=True),
    "CHECKERBOARD": _key("=", cbm=True),
    # Joystick names typed on the keyboard (JOY_A, JOY1_A .. JOY4_A, ...)
    **{
        f"{prefix}_{button}": _key(key)
        for prefix in ("JOY", "JOY1", "JOY2", "JOY3", "JOY4")
        for button, key in _JOYSTICK_KEYS.items()
    },
    # Fixed pauses
    "PAUSE": _wait(1000),
    "SHORT_PAUSE": _wait(250),
})


def parse_wait_ms(value: str) -> int | None:
    """Parse a pause length. ``"500"`` is milliseconds, ``"1.5"`` is seconds.

    Only plain decimal numbers are accepted; anything else returns None.
    Lengths above MAX_WAIT_MS are capped.
    """
    match = _WAIT_PATTERN.fullmatch(value)
    if match is None:
        return None
    if match.group(2):
        wait_ms = int(round(float(value) * 1000))
    else:
        wait_ms = int(value)
    if wait_ms > MAX_WAIT_MS:
        logger.warning("Wait of %d ms capped to %d ms", wait_ms, MAX_WAIT_MS)
        return MAX_WAIT_MS
    return wait_ms


def scan_macro_name(text: str, start: int) -> str:
    end = start
    while end < len(text) and is_macro_name_char(text[end]):
        end += 1
    return text[start:end]


def resolve_macro(name: str) -> MacroAction | None:
    """Look up an upper-cased macro name, including raw ``K<n>`` codes."""
    action = MACRO_TABLE.get(name)
    if action is not None:
        return action
    match = _RAW_KEY_PATTERN.fullmatch(name)
    if match is not None:
        code = int(match.group(1))
        if 0 <= code <= 255:
            return MacroAction(MacroKind.KEY, code)
    return None


def parse_macro(
    text: str,
    start: int,
    queue: EventQueue,
    modifiers: ModifierState,
    typing_rate_ms: int,
) -> int:
    """Parse the macro whose name begins at ``start`` (just past the backtick).

    Enqueues the events the macro stands for and updates ``modifiers``.
    Returns the number of characters between the delimiters; the caller
    skips the closing delimiter itself.

    The opening backtick pairs with the next backtick in the text, so a
    malformed token such as ```CRSR UP``` is dropped whole. A backtick
    with no partner is unterminated: only the name characters after it
    are consumed and the rest is typed as text.
    """
    end = text.find(MACRO_DELIMITER, start)
    if end < 0:
        raw_name = scan_macro_name(text, start)
        logger.warning("Unterminated macro %r at position %d", raw_name, start - 1)
        return len(raw_name)

    raw_name = text[start:end]
    consumed = len(raw_name)
    if consumed == 0:
        logger.warning("Empty macro at position %d skipped", start - 1)
        return 0
    if not all(is_macro_name_char(c) for c in raw_name):
        logger.warning("Malformed macro %r at position %d skipped", raw_name, start - 1)
        return consumed

    name = raw_name.upper()

    if name.startswith(WAIT_PREFIX) and len(name) > 1:
        wait_ms = parse_wait_ms(name[1:])
        if wait_ms is None:
            logger.warning("Invalid wait value in macro %r", raw_name)
            return consumed
        queue.append(WaitEvent.of(wait_ms))
        logger.debug("Macro %s -> wait %d ms", name, wait_ms)
        return consumed

    action = resolve_macro(name)
    if action is None:
        logger.warning("Unknown macro %r skipped", raw_name)
        return consumed

    if action.kind is MacroKind.WAIT:
        queue.append(WaitEvent.of(action.value))
    else:
        modifiers.type_key(
            queue,
            action.value,
            typing_rate_ms,
            needs_shift=action.needs_shift,
            needs_ctrl=action.needs_ctrl,
            needs_alt=action.needs_alt,
        )
    logger.debug("Macro %s -> %s %d", name, action.kind.value, action.value)
    return consumed
