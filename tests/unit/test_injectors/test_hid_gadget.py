"""Tests for the HID gadget injector (mocked /dev/hidg0)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from x16remote.injectors.base import KeyInjectionError
from x16remote.injectors.hid_gadget import RELEASE_REPORT, HidGadgetInjector
from x16remote.input.keymap import SCANCODE_LCTRL, SCANCODE_LSHIFT, SCANCODE_RGUI


@pytest.fixture
def injector() -> HidGadgetInjector:
    inj = HidGadgetInjector(device_path="/dev/hidg0")
    inj._fd = 42
    return inj


class TestHidGadgetOpen:
    def test_defaults(self) -> None:
        inj = HidGadgetInjector()
        assert str(inj.device_path) == "/dev/hidg0"
        assert not inj.is_open
        assert inj.name == "hid"

    def test_open_sets_fd(self) -> None:
        inj = HidGadgetInjector()
        with patch("os.open", return_value=42):
            inj.open()
        assert inj.is_open
        # Clean up without real close
        inj._fd = None

    def test_open_failure_raises(self) -> None:
        inj = HidGadgetInjector(device_path="/dev/nonexistent")
        with patch("os.open", side_effect=OSError("No such device")):
            with pytest.raises(KeyInjectionError, match="Cannot open") as exc_info:
                inj.open()
        assert exc_info.value.backend == "hid"
        assert not inj.is_open

    def test_close_sends_release_report(self, injector: HidGadgetInjector) -> None:
        with patch("os.write") as mock_write, patch("os.close") as mock_close:
            injector.close()
        mock_write.assert_called_once_with(42, RELEASE_REPORT)
        mock_close.assert_called_once_with(42)
        assert not injector.is_open

    def test_close_when_not_open(self) -> None:
        inj = HidGadgetInjector()
        with patch("os.close") as mock_close:
            inj.close()
        mock_close.assert_not_called()

    def test_context_manager(self) -> None:
        inj = HidGadgetInjector()
        with patch("os.open", return_value=42), \
             patch("os.write"), \
             patch("os.close"):
            with inj:
                assert inj.is_open
            assert not inj.is_open


class TestHidGadgetReports:
    def test_key_down_and_up(self, injector: HidGadgetInjector) -> None:
        reports: list[bytes] = []
        with patch("os.write", side_effect=lambda fd, data: reports.append(data)):
            injector.inject_key_event(True, 0x28)  # Enter
            injector.inject_key_event(False, 0x28)
        assert reports == [
            bytes([0x00, 0x00, 0x28, 0x00, 0x00, 0x00, 0x00, 0x00]),
            RELEASE_REPORT,
        ]

    def test_shift_sets_modifier_bit(self, injector: HidGadgetInjector) -> None:
        reports: list[bytes] = []
        with patch("os.write", side_effect=lambda fd, data: reports.append(data)):
            injector.inject_key_event(True, SCANCODE_LSHIFT)
            injector.inject_key_event(True, 0x04)
            injector.inject_key_event(False, 0x04)
            injector.inject_key_event(False, SCANCODE_LSHIFT)
        assert reports[0][0] == 0x02
        assert reports[1] == bytes([0x02, 0x00, 0x04, 0x00, 0x00, 0x00, 0x00, 0x00])
        assert reports[2][0] == 0x02
        assert reports[3] == RELEASE_REPORT

    def test_modifier_bits(self, injector: HidGadgetInjector) -> None:
        with patch("os.write"):
            injector.inject_key_event(True, SCANCODE_LCTRL)
            injector.inject_key_event(True, SCANCODE_RGUI)
        assert injector.build_report()[0] == 0x81

    def test_multiple_keys_held(self, injector: HidGadgetInjector) -> None:
        with patch("os.write"):
            injector.inject_key_event(True, 0x04)
            injector.inject_key_event(True, 0x05)
            injector.inject_key_event(False, 0x04)
        assert injector.build_report() == bytes([0, 0, 0x05, 0, 0, 0, 0, 0])

    def test_repeated_down_not_duplicated(self, injector: HidGadgetInjector) -> None:
        with patch("os.write"):
            injector.inject_key_event(True, 0x04)
            injector.inject_key_event(True, 0x04)
        assert injector.build_report()[2:4] == bytes([0x04, 0x00])

    def test_seventh_key_rejected(self, injector: HidGadgetInjector) -> None:
        with patch("os.write"):
            for code in range(0x04, 0x0A):
                injector.inject_key_event(True, code)
            with pytest.raises(KeyInjectionError, match="already held"):
                injector.inject_key_event(True, 0x0A)

    def test_write_not_open(self) -> None:
        inj = HidGadgetInjector()
        with pytest.raises(KeyInjectionError, match="not open"):
            inj.inject_key_event(True, 0x04)

    def test_write_wrong_length(self, injector: HidGadgetInjector) -> None:
        with pytest.raises(KeyInjectionError, match="must be 8 bytes"):
            injector._write_report(b"\x00" * 5)

    def test_write_os_error(self, injector: HidGadgetInjector) -> None:
        with patch("os.write", side_effect=OSError("I/O error")):
            with pytest.raises(KeyInjectionError, match="Failed to write"):
                injector.inject_key_event(True, 0x04)

    def test_joystick_dropped(self, injector: HidGadgetInjector) -> None:
        with patch("os.write") as mock_write:
            injector.inject_joystick_event(1, 0, True)
        mock_write.assert_not_called()
