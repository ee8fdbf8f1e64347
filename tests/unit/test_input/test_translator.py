"""Tests for text-to-event translation."""

from __future__ import annotations

import logging

import pytest

from x16remote.domain.models import KeyEvent, TypingMode, WaitEvent
from x16remote.input.keymap import KEY_CODES, SCANCODE_LALT, SCANCODE_LCTRL, SCANCODE_LSHIFT
from x16remote.input.translator import translate_text


def _keys(queue) -> list[tuple[int, bool]]:
    return [(e.code, e.is_down) for e in queue if isinstance(e, KeyEvent)]


def _modifier_events(queue, code: int) -> list[bool]:
    return [e.is_down for e in queue if isinstance(e, KeyEvent) and e.code == code]


class TestBasicTranslation:
    def test_hi_enter_sequence(self) -> None:
        queue = translate_text("Hi`ENTER`", typing_rate_ms=30, mode=TypingMode.NATIVE_ASCII)
        assert list(queue) == [
            KeyEvent(code=SCANCODE_LSHIFT, is_down=True, delay_ms=1),
            KeyEvent(code=0x0B, is_down=True, delay_ms=30),
            KeyEvent(code=0x0B, is_down=False, delay_ms=1),
            KeyEvent(code=SCANCODE_LSHIFT, is_down=False, delay_ms=1),
            KeyEvent(code=0x0C, is_down=True, delay_ms=30),
            KeyEvent(code=0x0C, is_down=False, delay_ms=1),
            KeyEvent(code=0x28, is_down=True, delay_ms=30),
            KeyEvent(code=0x28, is_down=False, delay_ms=1),
        ]

    def test_two_events_per_plain_character(self) -> None:
        queue = translate_text("ab", typing_rate_ms=35)
        assert _keys(queue) == [(0x04, True), (0x04, False), (0x05, True), (0x05, False)]

    def test_empty_text(self) -> None:
        queue = translate_text("", typing_rate_ms=35)
        assert len(queue) == 0

    def test_space_and_digits(self) -> None:
        queue = translate_text("1 2", typing_rate_ms=35)
        assert [code for code, down in _keys(queue) if down] == [
            KEY_CODES["1"], KEY_CODES["SPACE"], KEY_CODES["2"],
        ]

    def test_unmapped_characters_skipped(self) -> None:
        queue = translate_text("aéb\x01", typing_rate_ms=35)
        assert [code for code, down in _keys(queue) if down] == [0x04, 0x05]


class TestModifiers:
    def test_uppercase_run_shares_one_shift(self) -> None:
        queue = translate_text("ABC", typing_rate_ms=30)
        assert _modifier_events(queue, SCANCODE_LSHIFT) == [True, False]
        assert len(queue) == 2 + 3 * 2

    def test_shift_toggles_between_runs(self) -> None:
        queue = translate_text("AbC", typing_rate_ms=30)
        assert _modifier_events(queue, SCANCODE_LSHIFT) == [True, False, True, False]

    def test_trailing_modifier_released(self) -> None:
        queue = translate_text("A!", typing_rate_ms=30)
        last = queue[len(queue) - 1]
        assert last == KeyEvent(code=SCANCODE_LSHIFT, is_down=False, delay_ms=1)
        assert _modifier_events(queue, SCANCODE_LSHIFT) == [True, False]

    def test_every_press_has_a_release(self) -> None:
        queue = translate_text("Hello, World!`RED`x`CLR`", typing_rate_ms=30)
        held: set[int] = set()
        for code, down in _keys(queue):
            if down:
                held.add(code)
            else:
                held.discard(code)
        assert held == set()

    def test_petscii_mode_does_not_shift_letters(self) -> None:
        queue = translate_text("HI", typing_rate_ms=30, mode=TypingMode.NATIVE_DEVICE)
        assert _modifier_events(queue, SCANCODE_LSHIFT) == []
        assert len(queue) == 4

    def test_petscii_mode_still_shifts_symbols(self) -> None:
        queue = translate_text("!", typing_rate_ms=30, mode=TypingMode.NATIVE_DEVICE)
        assert _modifier_events(queue, SCANCODE_LSHIFT) == [True, False]

    def test_color_macro_then_text_releases_ctrl_once(self) -> None:
        queue = translate_text("`RED`hello", typing_rate_ms=30)
        assert _modifier_events(queue, SCANCODE_LCTRL) == [True, False]
        codes = _keys(queue)
        ctrl_up = codes.index((SCANCODE_LCTRL, False))
        first_h = codes.index((KEY_CODES["h"], True))
        assert ctrl_up < first_h

    def test_commodore_color_then_text_releases_alt_once(self) -> None:
        queue = translate_text("`ORG`hi", typing_rate_ms=30)
        assert _modifier_events(queue, SCANCODE_LALT) == [True, False]
        assert _modifier_events(queue, SCANCODE_LCTRL) == []
        codes = _keys(queue)
        assert codes.index((SCANCODE_LALT, False)) < codes.index((KEY_CODES["h"], True))


class TestMacrosInText:
    def test_wait_macro_inserted_in_place(self) -> None:
        queue = translate_text("a`_500`b", typing_rate_ms=30)
        assert isinstance(queue[2], WaitEvent)
        assert queue[2].milliseconds == 500
        assert queue.wait_count == 1
        assert queue.key_event_count == 4

    def test_unknown_macro_leaves_text_intact(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            queue = translate_text("a`FOOBAR`b", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [0x04, 0x05]
        assert "FOOBAR" in caplog.text

    def test_empty_macro_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="x16remote.input.macros"):
            queue = translate_text("a``b", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [0x04, 0x05]
        assert "Empty macro" in caplog.text

    def test_unterminated_macro_resumes_after_name(self) -> None:
        queue = translate_text("`ENTER x", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [
            KEY_CODES["SPACE"], KEY_CODES["x"],
        ]

    def test_trailing_backtick(self) -> None:
        queue = translate_text("a`", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [0x04]

    def test_malformed_macro_does_not_leak_into_text(self) -> None:
        queue = translate_text("`CRSR UP`LIST", typing_rate_ms=30)
        downs = [code for code, down in _keys(queue) if down and code != SCANCODE_LSHIFT]
        assert downs == [KEY_CODES["l"], KEY_CODES["i"], KEY_CODES["s"], KEY_CODES["t"]]

    def test_symbol_macro_dropped_whole(self) -> None:
        queue = translate_text("`!`abc", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [0x04, 0x05, 0x06]

    def test_malformed_then_valid_macro(self) -> None:
        queue = translate_text("`A B``ENTER`", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [KEY_CODES["ENTER"]]


class TestEscapes:
    def test_newline_escape(self) -> None:
        queue = translate_text("a\\nb", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [
            0x04, KEY_CODES["ENTER"], 0x05,
        ]

    def test_tab_escape(self) -> None:
        queue = translate_text("\\t", typing_rate_ms=30)
        assert _keys(queue) == [(KEY_CODES["TAB"], True), (KEY_CODES["TAB"], False)]

    def test_backslash_alone_is_typed(self) -> None:
        queue = translate_text("\\x", typing_rate_ms=30)
        assert [code for code, down in _keys(queue) if down] == [
            KEY_CODES["\\"], KEY_CODES["x"],
        ]

    def test_literal_newline(self) -> None:
        queue = translate_text("\n", typing_rate_ms=30)
        assert _keys(queue) == [(KEY_CODES["ENTER"], True), (KEY_CODES["ENTER"], False)]


class TestTiming:
    def test_key_down_uses_rate(self) -> None:
        queue = translate_text("xy", typing_rate_ms=42)
        downs = [e.delay_ms for e in queue if isinstance(e, KeyEvent) and e.is_down]
        ups = [e.delay_ms for e in queue if isinstance(e, KeyEvent) and not e.is_down]
        assert downs == [42, 42]
        assert ups == [1, 1]

    def test_total_time_lower_bound(self) -> None:
        text = "hello world"
        queue = translate_text(text, typing_rate_ms=30)
        assert queue.total_delay_ms >= len(text) * 30


class TestRawMode:
    def test_characters_are_scan_codes(self) -> None:
        queue = translate_text("\x28\x04", typing_rate_ms=30, mode=TypingMode.RAW)
        assert list(queue) == [
            KeyEvent(code=0x28, is_down=True, delay_ms=30),
            KeyEvent(code=0x28, is_down=False, delay_ms=1),
            KeyEvent(code=0x04, is_down=True, delay_ms=30),
            KeyEvent(code=0x04, is_down=False, delay_ms=1),
        ]

    def test_no_macros_or_modifiers(self) -> None:
        queue = translate_text("`A", typing_rate_ms=30, mode=TypingMode.RAW)
        assert [code for code, down in _keys(queue) if down] == [ord("`"), ord("A")]
        assert _modifier_events(queue, SCANCODE_LSHIFT) == []

    def test_wide_characters_skipped(self) -> None:
        queue = translate_text("☺\x04", typing_rate_ms=30, mode=TypingMode.RAW)
        assert _keys(queue) == [(0x04, True), (0x04, False)]
