"""USB HID gadget injector.

Replays events on a real machine by writing 8-byte boot keyboard
reports to a Linux USB gadget device (e.g. /dev/hidg0 on a Raspberry
Pi wired to the target's keyboard port). Each report carries the full
keyboard state:

    [modifier_byte, 0x00, key1, key2, key3, key4, key5, key6]

so the injector tracks which keys are held and rewrites the report on
every transition. Scan codes are already USB HID usage IDs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from x16remote.injectors.base import KeyInjectionError, KeyInjector
from x16remote.input.keymap import MODIFIER_SCANCODES, SCANCODE_LCTRL

logger = logging.getLogger(__name__)

REPORT_LENGTH = 8
MAX_PRESSED_KEYS = 6
# 8-byte empty report = all keys released
RELEASE_REPORT = b"\x00" * REPORT_LENGTH


class HidGadgetInjector(KeyInjector):
    """Writes USB HID keyboard reports for each key transition.

    Usage::

        injector = HidGadgetInjector("/dev/hidg0")
        injector.open()
        injector.inject_key_event(True, 0x28)   # Enter down
        injector.inject_key_event(False, 0x28)  # Enter up
        injector.close()
    """

    name = "hid"

    def __init__(self, device_path: str = "/dev/hidg0") -> None:
        self._device_path = Path(device_path)
        self._fd: int | None = None
        self._modifiers = 0x00
        self._pressed: list[int] = []

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    @property
    def device_path(self) -> Path:
        return self._device_path

    def open(self) -> None:
        """Open the HID gadget device for writing."""
        try:
            self._fd = os.open(str(self._device_path), os.O_WRONLY)
            logger.info("Opened HID device: %s", self._device_path)
        except OSError as e:
            raise KeyInjectionError(
                f"Cannot open HID device {self._device_path}: {e}", backend=self.name
            ) from e

    def close(self) -> None:
        """Release all keys and close the device."""
        if self._fd is None:
            return
        self._modifiers = 0x00
        self._pressed.clear()
        try:
            self._write_report(RELEASE_REPORT)
        except KeyInjectionError:
            logger.warning("Could not send release report while closing %s", self._device_path)
        try:
            os.close(self._fd)
        except OSError as e:
            logger.warning("Error closing HID device %s: %s", self._device_path, e)
        self._fd = None
        logger.info("Closed HID device")

    def build_report(self) -> bytes:
        """The 8-byte report for the current keyboard state."""
        keys = self._pressed + [0x00] * (MAX_PRESSED_KEYS - len(self._pressed))
        return bytes([self._modifiers, 0x00, *keys])

    def inject_key_event(self, is_down: bool, code: int) -> None:
        if code in MODIFIER_SCANCODES:
            bit = 1 << (code - SCANCODE_LCTRL)
            if is_down:
                self._modifiers |= bit
            else:
                self._modifiers &= ~bit
        elif is_down:
            if code not in self._pressed:
                if len(self._pressed) >= MAX_PRESSED_KEYS:
                    raise KeyInjectionError(
                        f"Cannot press scan code 0x{code:02X}: "
                        f"{MAX_PRESSED_KEYS} keys already held",
                        backend=self.name,
                    )
                self._pressed.append(code)
        elif code in self._pressed:
            self._pressed.remove(code)

        self._write_report(self.build_report())
        logger.debug("HID key %s scan=0x%02X mod=0x%02X",
                     "down" if is_down else "up", code, self._modifiers)

    def _write_report(self, report: bytes) -> None:
        if self._fd is None:
            raise KeyInjectionError("HID device not open", backend=self.name)
        if len(report) != REPORT_LENGTH:
            raise KeyInjectionError(
                f"HID report must be {REPORT_LENGTH} bytes, got {len(report)}", backend=self.name
            )
        try:
            os.write(self._fd, report)
        except OSError as e:
            raise KeyInjectionError(f"Failed to write HID report: {e}", backend=self.name) from e

    def __enter__(self) -> HidGadgetInjector:
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()
