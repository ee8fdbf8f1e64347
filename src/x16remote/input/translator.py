"""Single-pass translation of submitted text into a timed event queue.

Walks the text once, expanding macros, mapping literal characters to
scan codes and tracking shift/ctrl so that modifier transitions are
only emitted when the requirement changes. Every queue ends with all
modifiers released.
"""

from __future__ import annotations

import logging

from x16remote.domain.models import TypingMode
from x16remote.input.keymap import is_uppercase_letter, lookup
from x16remote.input.macros import MACRO_DELIMITER, parse_macro
from x16remote.input.modifiers import KEY_EVENT_MIN_DELAY_MS, ModifierState
from x16remote.input.queue import EventQueue

logger = logging.getLogger(__name__)

# Two-character escapes accepted in submitted text
ESCAPE_SEQUENCES: dict[str, str] = {"n": "\n", "t": "\t"}


def translate_text(
    text: str,
    typing_rate_ms: int,
    mode: TypingMode = TypingMode.NATIVE_ASCII,
) -> EventQueue:
    """Translate ``text`` into key events typed at ``typing_rate_ms`` per key.

    Args:
        text: Characters to type, with optional backtick macros and
              ``\\n``/``\\t`` escapes.
        typing_rate_ms: Delay before each key-down, in milliseconds.
        mode: NATIVE_ASCII holds shift for uppercase letters;
              NATIVE_DEVICE follows the device charset and does not;
              RAW types each character's code point as a scan code.
    """
    rate = max(int(typing_rate_ms), KEY_EVENT_MIN_DELAY_MS)
    if mode is TypingMode.RAW:
        return _translate_raw(text, rate)

    queue = EventQueue()
    modifiers = ModifierState()
    characters = 0

    i = 0
    while i < len(text):
        char = text[i]

        if char == MACRO_DELIMITER:
            consumed = parse_macro(text, i + 1, queue, modifiers, rate)
            i += 1 + consumed
            if i < len(text) and text[i] == MACRO_DELIMITER:
                i += 1
            continue

        if char == "\\" and i + 1 < len(text) and text[i + 1] in ESCAPE_SEQUENCES:
            char = ESCAPE_SEQUENCES[text[i + 1]]
            i += 2
        else:
            i += 1

        mapping = lookup(char)
        if mapping is None:
            continue

        needs_shift = mapping.needs_shift or (
            mode is TypingMode.NATIVE_ASCII and is_uppercase_letter(char)
        )
        modifiers.type_key(
            queue,
            mapping.code,
            rate,
            needs_shift=needs_shift,
            needs_ctrl=mapping.needs_ctrl,
        )
        characters += 1

    modifiers.release_all(queue)

    logger.info(
        "Translated %d characters into %d events (mode=%s, rate=%dms)",
        characters, len(queue), mode.value, rate,
    )
    return queue


def _translate_raw(text: str, rate: int) -> EventQueue:
    """Press and release one scan code per character, with no macros or modifiers."""
    queue = EventQueue()
    modifiers = ModifierState()
    for char in text:
        code = ord(char)
        if code > 0xFF:
            continue
        modifiers.type_key(queue, code, rate)
    logger.info("Translated %d raw scan codes into %d events", len(queue) // 2, len(queue))
    return queue
