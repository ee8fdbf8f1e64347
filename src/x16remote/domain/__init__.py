"""Domain models for x16remote.

Typing modes, static table entries and the timed input events that
flow from translation into the scheduler. Events use Pydantic v2
models combined into a discriminated union.
"""

from x16remote.domain.models import (
    CharacterMapping,
    InputEvent,
    JoystickEvent,
    KeyEvent,
    MacroAction,
    MacroKind,
    SubmissionReceipt,
    TypingMode,
    WaitEvent,
)

__all__ = [
    "CharacterMapping",
    "InputEvent",
    "JoystickEvent",
    "KeyEvent",
    "MacroAction",
    "MacroKind",
    "SubmissionReceipt",
    "TypingMode",
    "WaitEvent",
]
