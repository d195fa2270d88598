"""Tests for mailrepl.keys -- raw input parsing and key matching."""

from __future__ import annotations

import pytest

from mailrepl.keys import (
    is_printable_text,
    matches_key,
    normalize_key_id,
    parse_key,
    sanitize_text,
)


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


class TestParseKeySpecialKeys:
    """Single-byte and legacy escape sequences."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            ("\x1b", "escape"),
            (" ", "space"),
            ("\x00", "ctrl+space"),
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOD", "left"),
            ("\x1bOC", "right"),
            ("\x1b[H", "home"),
            ("\x1b[F", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[Z", "shift+tab"),
        ],
    )
    def test_special_keys(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected


class TestParseKeyModifiers:
    """Ctrl and Alt combinations."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            ("\x01", "ctrl+a"),
            ("\x02", "ctrl+b"),
            ("\x03", "ctrl+c"),
            ("\x04", "ctrl+d"),
            ("\x06", "ctrl+f"),
            ("\x1a", "ctrl+z"),
            ("\x1bb", "alt+b"),
            ("\x1bB", "alt+b"),
            ("\x1b\r", "alt+enter"),
            ("\x1b\x7f", "alt+backspace"),
            ("\x1b[1;5C", "ctrl+right"),
            ("\x1b[1;3D", "alt+left"),
            ("\x1b[1;2A", "shift+up"),
        ],
    )
    def test_modifiers(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected


class TestParseKeyPrintable:
    """Printable characters are their own key id."""

    @pytest.mark.parametrize("char", ["a", "Z", "1", "-", "é", "日"])
    def test_single_character(self, char: str) -> None:
        assert parse_key(char) == char

    def test_empty_input(self) -> None:
        assert parse_key("") is None

    def test_multi_character_text_is_not_a_key(self) -> None:
        assert parse_key("folder") is None

    def test_unknown_escape_sequence(self) -> None:
        assert parse_key("\x1b[99~") is None


class TestIsPrintableText:
    """Distinguishes text to insert from control input."""

    @pytest.mark.parametrize("data", ["a", "hello world", "ünïcödé", "🦀"])
    def test_printable(self, data: str) -> None:
        assert is_printable_text(data) is True

    @pytest.mark.parametrize("data", ["", "\t", "\r", "\x1b[D", "\x7f", "a\x03"])
    def test_not_printable(self, data: str) -> None:
        assert is_printable_text(data) is False


class TestSanitizeText:
    """Pasted text keeps its printable characters."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            ("folder\tlist", "folder list"),
            ("a\x03b", "ab"),
            ("x\x1b[Dy", "x[Dy"),
            ("\x85é\x7f", "é"),
            ("plain", "plain"),
            ("\x00\x01", ""),
        ],
    )
    def test_sanitize(self, data: str, expected: str) -> None:
        assert sanitize_text(data) == expected


# ---------------------------------------------------------------------------
# Key ids
# ---------------------------------------------------------------------------


class TestNormalizeKeyId:
    """Key identifiers are put in canonical form."""

    @pytest.mark.parametrize(
        "key_id, expected",
        [
            ("tab", "tab"),
            ("Tab", "tab"),
            ("ctrl+c", "ctrl+c"),
            ("Ctrl+C", "ctrl+c"),
            ("alt+ctrl+x", "ctrl+alt+x"),
            ("shift+ctrl+up", "ctrl+shift+up"),
            ("pageup", "pageUp"),
            ("ctrl++", "ctrl++"),
        ],
    )
    def test_normalize(self, key_id: str, expected: str) -> None:
        assert normalize_key_id(key_id) == expected

    @pytest.mark.parametrize("key_id", ["", "ctrl+", "hyper+x"])
    def test_invalid(self, key_id: str) -> None:
        with pytest.raises(ValueError):
            normalize_key_id(key_id)


class TestMatchesKey:
    """matches_key compares parsed input to a key id."""

    def test_matches(self) -> None:
        assert matches_key("\t", "tab")
        assert matches_key("\x03", "ctrl+c")
        assert matches_key("\x03", "Ctrl+C")
        assert matches_key("\x1b[D", "left")

    def test_does_not_match(self) -> None:
        assert not matches_key("\t", "enter")
        assert not matches_key("a", "ctrl+a")
        assert not matches_key("", "tab")

    def test_invalid_key_id_never_matches(self) -> None:
        assert not matches_key("a", "hyper+a")
