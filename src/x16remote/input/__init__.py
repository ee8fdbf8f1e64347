"""Text/macro translation and timed replay of synthetic input.

Public API:
    translate_text -- Text with macros -> EventQueue
    translate_joystick -- Joystick command script -> EventQueue
    EventQueue -- Ordered timed events of one submission
    InputScheduler -- Tick-driven drain loop
    InputController -- Host facade (submit / tick / pending_event_count)
"""

from x16remote.input.controller import InputController
from x16remote.input.joystick import translate_joystick
from x16remote.input.queue import EventQueue, EventQueueError
from x16remote.input.scheduler import InputScheduler
from x16remote.input.translator import translate_text

__all__ = [
    "EventQueue",
    "EventQueueError",
    "InputController",
    "InputScheduler",
    "translate_joystick",
    "translate_text",
]
