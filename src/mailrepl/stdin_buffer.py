"""StdinBuffer buffers raw input and yields complete key sequences.

Reads from a terminal can arrive in partial chunks, especially for escape
sequences. Without buffering, a partial sequence would be misread as a
plain Escape followed by ordinary characters.
"""

from __future__ import annotations

import re

from mailrepl.keys import sanitize_text

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Check if a string is a complete escape sequence or needs more data.

    Returns 'complete', 'incomplete', or 'not-escape'.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # OSC / DCS / APC strings end with ST (or BEL for OSC)
    if after_esc[0] in "]P_":
        if data.endswith(f"{ESC}\\") or (after_esc[0] == "]" and data.endswith("\x07")):
            return "complete"
        return "incomplete"

    # Meta key sequences: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char_code = ord(payload[-1])

    if 0x40 <= last_char_code <= 0x7E:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns (sequences, remainder).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
            seq_end += 1
        else:
            return sequences, remaining

    return sequences, ""


def _clean_paste(text: str) -> str:
    text = text.replace("\r\n", "").replace("\r", "").replace("\n", "")
    return sanitize_text(text)


class StdinBuffer:
    """Accumulates raw input and hands back complete sequences.

    Bracketed paste content is returned as one item with line breaks and
    control characters removed, so a paste never submits the line on its own.
    """

    def __init__(self) -> None:
        self._buffer: str = ""
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

    @property
    def pending(self) -> bool:
        """``True`` while an escape sequence is waiting for more bytes."""
        return bool(self._buffer)

    def process(self, data: str) -> list[str]:
        """Feed input data and return every sequence completed by it."""
        out: list[str] = []
        self._buffer += data

        while self._buffer:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end_index == -1:
                    break
                pasted = _clean_paste(self._paste_buffer[:end_index])
                if pasted:
                    out.append(pasted)
                self._buffer = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
                self._paste_buffer = ""
                self._paste_mode = False
                continue

            start_index = self._buffer.find(BRACKETED_PASTE_START)
            if start_index != -1:
                sequences, _ = _extract_complete_sequences(self._buffer[:start_index])
                out.extend(sequences)
                self._buffer = self._buffer[start_index + len(BRACKETED_PASTE_START) :]
                self._paste_mode = True
                continue

            sequences, remainder = _extract_complete_sequences(self._buffer)
            out.extend(sequences)
            self._buffer = remainder
            break

        return out

    def flush(self) -> list[str]:
        """Give up waiting and return whatever is buffered as one sequence."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""
