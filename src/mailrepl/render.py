"""Plain-text rendering: frames for the prompt line and column tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import wcwidth as _wcwidth

_CLEAR_FROM_CURSOR = "\x1b[0J"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_COLUMN_FMT = "\x1b[{}G"

COMPLETION_SEPARATOR = "  "


def visible_width(text: str) -> int:
    """Terminal column width of *text* (control characters count as zero)."""
    width = 0
    for ch in text:
        w = _wcwidth.wcwidth(ch)
        width += w if w > 0 else 0
    return width


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - visible_width(text))


def truncate(text: str, width: int, ellipsis: str = "…") -> str:
    if visible_width(text) <= width:
        return text
    limit = width - visible_width(ellipsis)
    out = ""
    for ch in text:
        if visible_width(out + ch) > limit:
            break
        out += ch
    return out + ellipsis


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """Lay out *rows* under *headers* as a markdown-style text table."""
    widths = [visible_width(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], visible_width(cell))

    def line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(pad(c, w) for c, w in zip(cells, widths)) + " |"

    separator = "|" + "|".join("-" * (w + 2) for w in widths) + "|"
    return [line(headers), separator, *(line(row) for row in rows)]


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to draw the REPL for one keystroke."""

    buffer_text: str
    cursor: int
    completions: list[str] = field(default_factory=list)
    log_text: str = ""
    prompt: str = ""


def render_prompt(frame: Frame, width: int) -> tuple[list[str], int]:
    """Return the prompt lines and the cursor column on the first line.

    The first line holds the prompt and the buffer; an optional second line
    lists completion candidates, truncated to *width*.
    """
    prefix = f"{frame.prompt}> "
    lines = [prefix + frame.buffer_text]
    cursor_col = visible_width(prefix) + visible_width(frame.buffer_text[: frame.cursor])

    if frame.completions:
        listing = COMPLETION_SEPARATOR.join(frame.completions)
        lines.append(truncate(listing, max(1, width)))

    return lines, cursor_col


def _rows(text: str, width: int) -> int:
    """Screen rows *text* occupies once the terminal wraps it at *width*."""
    return max(1, (visible_width(text) + width - 1) // width)


class LineRenderer:
    """Redraws the prompt area in place and prints new log lines above it.

    Long prompt lines wrap, so the renderer tracks screen rows rather than
    logical lines: how many rows the last draw used and which of them holds
    the cursor.
    """

    def __init__(self, write) -> None:
        self._write = write
        self._drawn_rows = 0
        self._cursor_row = 0

    def print_lines(self, lines: Sequence[str]) -> None:
        """Print log lines above the prompt; the prompt is redrawn by ``draw``."""
        if not lines:
            return
        self._clear()
        self._write("".join(f"{line}\r\n" for line in lines))
        self._drawn_rows = 0
        self._cursor_row = 0

    def draw(self, frame: Frame, width: int) -> None:
        width = max(1, width)
        lines, cursor_col = render_prompt(frame, width)
        self._clear()
        self._write("\r\n".join(lines))

        total_rows = sum(_rows(line, width) for line in lines)
        cursor_row = min(cursor_col // width, _rows(lines[0], width) - 1)
        up = total_rows - 1 - cursor_row
        if up:
            self._write(_CURSOR_UP_FMT.format(up))
        self._write(_CURSOR_COLUMN_FMT.format(cursor_col - cursor_row * width + 1))

        self._drawn_rows = total_rows
        self._cursor_row = cursor_row

    def finish(self) -> None:
        """Leave the prompt area so later output starts on a fresh line."""
        self._clear()
        self._drawn_rows = 0
        self._cursor_row = 0

    def _clear(self) -> None:
        # Back to the first prompt row, then clear everything below it.
        if not self._drawn_rows:
            return
        if self._cursor_row:
            self._write(_CURSOR_UP_FMT.format(self._cursor_row))
        self._write("\r" + _CLEAR_FROM_CURSOR)
