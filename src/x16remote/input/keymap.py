"""Scan codes and the literal character table.

The emulator's keyboard path takes SDL scancodes, which are numerically
identical to USB HID usage IDs (Keyboard/Keypad Page 0x07), so the same
codes drive both the emulated machine and a USB HID gadget.

Letters map to the same code in either case. Whether shift is held for
a letter is decided by the typing mode during translation, so plain
ASCII text and the device's own charset share one table.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from x16remote.domain.models import CharacterMapping

# ---------------------------------------------------------------------------
# Modifier scan codes
# ---------------------------------------------------------------------------

SCANCODE_LCTRL: int = 0xE0
SCANCODE_LSHIFT: int = 0xE1
SCANCODE_LALT: int = 0xE2
SCANCODE_LGUI: int = 0xE3
SCANCODE_RCTRL: int = 0xE4
SCANCODE_RSHIFT: int = 0xE5
SCANCODE_RALT: int = 0xE6
SCANCODE_RGUI: int = 0xE7

MODIFIER_SCANCODES: frozenset[int] = frozenset(range(SCANCODE_LCTRL, SCANCODE_RGUI + 1))

# ---------------------------------------------------------------------------
# Key name -> scan code
# ---------------------------------------------------------------------------

KEY_CODES: Mapping[str, int] = MappingProxyType({
    # Letters (a=0x04 .. z=0x1D)
    "a": 0x04, "b": 0x05, "c": 0x06, "d": 0x07,
    "e": 0x08, "f": 0x09, "g": 0x0A, "h": 0x0B,
    "i": 0x0C, "j": 0x0D, "k": 0x0E, "l": 0x0F,
    "m": 0x10, "n": 0x11, "o": 0x12, "p": 0x13,
    "q": 0x14, "r": 0x15, "s": 0x16, "t": 0x17,
    "u": 0x18, "v": 0x19, "w": 0x1A, "x": 0x1B,
    "y": 0x1C, "z": 0x1D,
    # Numbers (1=0x1E .. 0=0x27)
    "1": 0x1E, "2": 0x1F, "3": 0x20, "4": 0x21,
    "5": 0x22, "6": 0x23, "7": 0x24, "8": 0x25,
    "9": 0x26, "0": 0x27,
    # Control keys
    "ENTER": 0x28,
    "ESCAPE": 0x29,
    "BACKSPACE": 0x2A,
    "TAB": 0x2B,
    "SPACE": 0x2C,
    # Punctuation / symbols (US layout)
    "-": 0x2D, "=": 0x2E,
    "[": 0x2F, "]": 0x30,
    "\\": 0x31,
    ";": 0x33, "'": 0x34,
    "`": 0x35,
    ",": 0x36, ".": 0x37, "/": 0x38,
    # Lock keys
    "CAPSLOCK": 0x39,
    # Function keys
    "F1": 0x3A, "F2": 0x3B, "F3": 0x3C, "F4": 0x3D,
    "F5": 0x3E, "F6": 0x3F, "F7": 0x40, "F8": 0x41,
    "F9": 0x42, "F10": 0x43, "F11": 0x44, "F12": 0x45,
    # Navigation
    "PRINTSCREEN": 0x46,
    "SCROLLLOCK": 0x47,
    "PAUSE_BREAK": 0x48,
    "INSERT": 0x49,
    "HOME": 0x4A,
    "PAGEUP": 0x4B,
    "DELETE": 0x4C,
    "END": 0x4D,
    "PAGEDOWN": 0x4E,
    "RIGHT": 0x4F, "LEFT": 0x50,
    "DOWN": 0x51, "UP": 0x52,
    # Modifiers
    "LCTRL": SCANCODE_LCTRL, "LSHIFT": SCANCODE_LSHIFT,
    "LALT": SCANCODE_LALT, "LGUI": SCANCODE_LGUI,
    "RCTRL": SCANCODE_RCTRL, "RSHIFT": SCANCODE_RSHIFT,
    "RALT": SCANCODE_RALT, "RGUI": SCANCODE_RGUI,
})

# Characters typed with shift held, and the unshifted key they sit on
SHIFT_CHARS: Mapping[str, str] = MappingProxyType({
    "!": "1", "@": "2", "#": "3", "$": "4",
    "%": "5", "^": "6", "&": "7", "*": "8",
    "(": "9", ")": "0", "_": "-", "+": "=",
    "{": "[", "}": "]", "|": "\\",
    ":": ";", '"': "'", "~": "`",
    "<": ",", ">": ".", "?": "/",
})


def _build_character_table() -> tuple[CharacterMapping | None, ...]:
    table: list[CharacterMapping | None] = [None] * 128
    for letter in "abcdefghijklmnopqrstuvwxyz":
        code = KEY_CODES[letter]
        table[ord(letter)] = CharacterMapping(letter, code)
        table[ord(letter.upper())] = CharacterMapping(letter.upper(), code)
    for char in "0123456789-=[]\\;',./":
        table[ord(char)] = CharacterMapping(char, KEY_CODES[char])
    for char, base in SHIFT_CHARS.items():
        table[ord(char)] = CharacterMapping(char, KEY_CODES[base], needs_shift=True)
    table[ord(" ")] = CharacterMapping(" ", KEY_CODES["SPACE"])
    table[ord("\n")] = CharacterMapping("\n", KEY_CODES["ENTER"])
    table[ord("\r")] = CharacterMapping("\r", KEY_CODES["ENTER"])
    table[ord("\t")] = CharacterMapping("\t", KEY_CODES["TAB"])
    table[ord("\b")] = CharacterMapping("\b", KEY_CODES["BACKSPACE"])
    # The backtick opens a macro and is never typed literally.
    table[ord("`")] = None
    return tuple(table)


# Indexed by 7-bit character value; None means "no mapping"
CHARACTER_TABLE: tuple[CharacterMapping | None, ...] = _build_character_table()


def lookup(char: str) -> CharacterMapping | None:
    """Return the mapping for a single character, or None if it has none.

    Characters outside the 7-bit range are never mapped. Callers skip
    unmapped characters silently.
    """
    if len(char) != 1:
        return None
    value = ord(char)
    if value >= len(CHARACTER_TABLE):
        return None
    return CHARACTER_TABLE[value]


def is_uppercase_letter(char: str) -> bool:
    return "A" <= char <= "Z"


_CODE_NAMES: Mapping[int, str] = MappingProxyType(
    {code: name for name, code in reversed(list(KEY_CODES.items()))}
)


def code_to_key_name(code: int) -> str:
    """Readable name for a scan code, e.g. ``0x28 -> "ENTER"``."""
    return _CODE_NAMES.get(code, f"K{code}")

