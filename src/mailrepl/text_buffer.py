"""Single-line text buffer with a character-indexed cursor."""

from __future__ import annotations


class TextBuffer:
    """Mutable line of text with a cursor.

    Positions count characters (code points), so a multi-byte character
    always occupies exactly one cursor step. The cursor stays within
    ``[0, len(text)]``; every mutator routes through :meth:`clamp`.
    """

    def __init__(self, text: str = "") -> None:
        self._text: str = text
        self._cursor: int = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def clamp(self, pos: int) -> int:
        """Return *pos* bounded to ``[0, len(text)]``."""
        return max(0, min(pos, len(self._text)))

    def before_cursor(self) -> str:
        return self._text[: self._cursor]

    def insert_char(self, char: str) -> None:
        cursor = self.clamp(self._cursor)
        self._text = self._text[:cursor] + char + self._text[cursor:]
        self._cursor = self.clamp(cursor + 1)

    def insert_text(self, text: str) -> None:
        """Insert *text* one character at a time (pastes, multi-char input)."""
        for char in text:
            self.insert_char(char)

    def delete_char_before_cursor(self) -> None:
        cursor = self.clamp(self._cursor)
        if cursor == 0:
            return
        self._text = self._text[: cursor - 1] + self._text[cursor:]
        self._cursor = self.clamp(cursor - 1)

    def delete_char_at_cursor(self) -> None:
        cursor = self.clamp(self._cursor)
        if cursor == len(self._text):
            return
        self._text = self._text[:cursor] + self._text[cursor + 1 :]
        self._cursor = self.clamp(cursor)

    def move_left(self) -> None:
        self._cursor = self.clamp(self._cursor - 1)

    def move_right(self) -> None:
        self._cursor = self.clamp(self._cursor + 1)

    def set_text(self, text: str) -> None:
        """Replace the content and put the cursor at the end."""
        self._text = text
        self._cursor = self.clamp(len(text))

    def reset(self) -> None:
        self._text = ""
        self._cursor = 0

    def __repr__(self) -> str:
        return f"TextBuffer(text={self._text!r}, cursor={self._cursor})"
