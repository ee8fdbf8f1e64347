"""Core domain models for the x16remote input scheduler.

These models represent the data flowing from a submission to the
emulated machine: the typing mode a submission is translated under,
the static character and macro tables, and the timed input events
that the scheduler replays.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TypingMode(str, enum.Enum):
    """How literal characters map onto the emulated keyboard."""

    NATIVE_ASCII = "ascii"  # Uppercase letters are typed with shift held
    NATIVE_DEVICE = "petscii"  # Device charset defaults to uppercase, no shift
    RAW = "raw"  # Each character is itself a scan code; no macros or modifiers


class MacroKind(str, enum.Enum):
    """What a named macro resolves to."""

    KEY = "key"
    WAIT = "wait"


# ---------------------------------------------------------------------------
# Static table entries
# ---------------------------------------------------------------------------


class CharacterMapping(NamedTuple):
    """A literal character and the key that types it."""

    character: str
    code: int
    needs_shift: bool = False
    needs_ctrl: bool = False


class MacroAction(NamedTuple):
    """The action a macro name stands for.

    For KEY actions ``value`` is a scan code, for WAIT actions it is a
    duration in milliseconds. ``needs_alt`` holds the Commodore
    key, which the emulated keyboard puts on Alt.
    """

    kind: MacroKind
    value: int
    needs_shift: bool = False
    needs_ctrl: bool = False
    needs_alt: bool = False


# ---------------------------------------------------------------------------
# Input events (discriminated union)
# ---------------------------------------------------------------------------


class KeyEvent(BaseModel):
    """A single key transition on the emulated keyboard."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["key"] = "key"
    code: int = Field(ge=0, le=255, description="Scan code (USB HID usage ID)")
    is_down: bool = Field(description="True for key-down, False for key-up")
    delay_ms: int = Field(
        default=0, ge=0, description="Milliseconds to wait after the previous event"
    )


class WaitEvent(BaseModel):
    """A pause in the replay. Dispatching it makes no external call."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["wait"] = "wait"
    milliseconds: int = Field(ge=0, description="Length of the pause")
    delay_ms: int = Field(
        default=0, ge=0, description="Milliseconds to wait after the previous event"
    )

    @classmethod
    def of(cls, milliseconds: int) -> WaitEvent:
        """A wait whose own delay is the pause it represents."""
        return cls(milliseconds=milliseconds, delay_ms=milliseconds)


class JoystickEvent(BaseModel):
    """A button or direction transition on one of the emulated joysticks."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["joystick"] = "joystick"
    joystick: int = Field(ge=1, le=4, description="Joystick number")
    button: int = Field(ge=0, le=15, description="Button code")
    is_down: bool = Field(description="True for press, False for release")
    delay_ms: int = Field(
        default=0, ge=0, description="Milliseconds to wait after the previous event"
    )


InputEvent = Annotated[
    Union[KeyEvent, WaitEvent, JoystickEvent],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Submission results
# ---------------------------------------------------------------------------


class SubmissionReceipt(BaseModel):
    """Summary of a queue handed to the scheduler."""

    model_config = ConfigDict(frozen=True)

    event_count: int = Field(ge=0, description="Total events in the queue")
    key_event_count: int = Field(ge=0, description="Key and joystick transitions")
    wait_count: int = Field(ge=0, description="Pause events")
    estimated_time_ms: int = Field(ge=0, description="Sum of all event delays")
    typing_rate_ms: int = Field(ge=0, description="Effective typing rate used")
    pending_events: int = Field(ge=0, description="Undispatched events after submission")
