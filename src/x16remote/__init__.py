"""x16remote -- Synthetic human input for a retro-computer emulator.

Translates text with embedded macros (special keys, pauses, color
codes) into precisely timed key-down/key-up and joystick events and
replays them against the emulated machine's input path, one host
frame at a time.
"""

__version__ = "0.1.0"
