"""Tests for mailrepl.render -- widths, tables and the prompt renderer."""

from __future__ import annotations

import pytest

from mailrepl.render import (
    Frame,
    LineRenderer,
    format_table,
    pad,
    render_prompt,
    truncate,
    visible_width,
)


class TestWidths:
    """Column widths follow wcwidth."""

    @pytest.mark.parametrize(
        ("text", "width"),
        [("", 0), ("abc", 3), ("日本", 4), ("é", 1), ("a\x1bb", 2)],
    )
    def test_visible_width(self, text: str, width: int) -> None:
        assert visible_width(text) == width

    def test_pad(self) -> None:
        assert pad("ab", 4) == "ab  "
        assert pad("日", 4) == "日  "
        assert pad("abcdef", 3) == "abcdef"

    def test_truncate(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("envelope", 5) == "enve…"
        assert truncate("日本語", 5) == "日本…"
        assert truncate("abc", 3, ellipsis="...") == "abc"
        assert truncate("abcd", 3, ellipsis=".") == "ab."


class TestFormatTable:
    """Tables are markdown-style with aligned columns."""

    def test_layout(self) -> None:
        lines = format_table(["ID", "SUBJECT"], [["1", "Hello"], ["22", "Hi"]])
        assert lines == [
            "| ID | SUBJECT |",
            "|----|---------|",
            "| 1  | Hello   |",
            "| 22 | Hi      |",
        ]

    def test_wide_characters_align(self) -> None:
        lines = format_table(["A"], [["日本"], ["x"]])
        assert lines == ["| A    |", "|------|", "| 日本 |", "| x    |"]

    def test_headers_only(self) -> None:
        assert format_table(["ID"], []) == ["| ID |", "|----|"]


class TestRenderPrompt:
    """The prompt line plus an optional candidate line."""

    def test_prompt_and_cursor(self) -> None:
        lines, col = render_prompt(Frame("folder", 3, prompt="mail"), 80)
        assert lines == ["mail> folder"]
        assert col == len("mail> ") + 3

    def test_cursor_after_wide_characters(self) -> None:
        _, col = render_prompt(Frame("日本", 2), 80)
        assert col == 2 + 4

    def test_completions_line(self) -> None:
        lines, _ = render_prompt(Frame("account ", 8, ["doctor", "list"]), 80)
        assert lines[1] == "doctor  list"

    def test_completions_truncated(self) -> None:
        lines, _ = render_prompt(Frame("", 0, ["envelope", "message"]), 10)
        assert lines[1] == "envelope …"
        assert visible_width(lines[1]) <= 10


class TestLineRenderer:
    """Redraws in place and prints log lines above the prompt."""

    def make(self) -> tuple[LineRenderer, list[str]]:
        out: list[str] = []
        return LineRenderer(out.append), out

    def test_first_draw(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("ab", 1, prompt="p"), 80)
        assert "".join(out) == "p> ab\x1b[5G"

    def test_redraw_clears_previous(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("a", 1), 80)
        out.clear()
        renderer.draw(Frame("ab", 2), 80)
        assert "".join(out) == "\r\x1b[0J> ab\x1b[5G"

    def test_draw_with_completions_returns_to_first_line(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("", 0, ["flag", "folder"]), 80)
        assert "".join(out) == "> \r\nflag  folder\x1b[1A\x1b[3G"

    def test_print_lines_above_prompt(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("x", 1), 80)
        out.clear()
        renderer.print_lines(["> x", "x: command not found"])
        assert "".join(out) == "\r\x1b[0J> x\r\nx: command not found\r\n"
        out.clear()
        renderer.draw(Frame("", 0), 80)
        assert "".join(out) == "> \x1b[3G"

    def test_print_nothing(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("x", 1), 80)
        out.clear()
        renderer.print_lines([])
        assert out == []

    def test_finish(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("x", 1), 80)
        out.clear()
        renderer.finish()
        assert out == ["\r\x1b[0J"]
        out.clear()
        renderer.finish()
        assert out == []


class TestLineRendererWrapping:
    """Prompt lines wider than the terminal occupy several screen rows."""

    def make(self) -> tuple[LineRenderer, list[str]]:
        out: list[str] = []
        return LineRenderer(out.append), out

    def test_cursor_on_wrapped_row(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("abcdefghijkl", 12), 10)
        assert "".join(out) == "> abcdefghijkl\x1b[5G"

    def test_cursor_on_first_row_of_wrapped_line(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("abcdefghijkl", 3), 10)
        assert "".join(out) == "> abcdefghijkl\x1b[1A\x1b[6G"

    def test_redraw_clears_from_first_row(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("abcdefghijkl", 12), 10)
        out.clear()
        renderer.draw(Frame("a", 1), 10)
        assert "".join(out) == "\x1b[1A\r\x1b[0J> a\x1b[4G"

    def test_wrapped_line_with_completions(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("abcdefghijkl", 12, ["list"]), 10)
        assert "".join(out) == "> abcdefghijkl\r\nlist\x1b[1A\x1b[5G"

    def test_line_exactly_terminal_width(self) -> None:
        renderer, out = self.make()
        renderer.draw(Frame("abcdefgh", 8), 10)
        assert "".join(out) == "> abcdefgh\x1b[11G"
        out.clear()
        renderer.finish()
        assert out == ["\r\x1b[0J"]
