"""Append-only log of submitted lines and their results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EntryKind = Literal["input", "output", "error"]


@dataclass(frozen=True)
class LogEntry:
    kind: EntryKind
    text: str


class SessionLog:
    """Records what the user submitted and what came back.

    Entries are only ever appended. Multi-line output is stored as one entry
    per line so that ``lines`` and ``text`` stay in step.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def record_input(self, line: str) -> None:
        self._entries.append(LogEntry("input", line))

    def record_output(self, text: str) -> None:
        self._append_lines("output", text)

    def record_error(self, text: str) -> None:
        self._append_lines("error", text)

    def _append_lines(self, kind: EntryKind, text: str) -> None:
        for line in text.splitlines() or [""]:
            self._entries.append(LogEntry(kind, line))

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def lines(self) -> list[str]:
        return [entry.text for entry in self._entries]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def submitted(self) -> list[str]:
        """Only the lines the user entered."""
        return [entry.text for entry in self._entries if entry.kind == "input"]

    def since(self, index: int) -> tuple[LogEntry, ...]:
        """Entries appended after the first *index* ones."""
        return tuple(self._entries[index:])

    def __len__(self) -> int:
        return len(self._entries)
