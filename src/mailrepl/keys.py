"""Keyboard input parsing for the REPL.

Turns raw terminal input (one complete sequence at a time, as produced by
:mod:`mailrepl.stdin_buffer`) into key identifiers such as ``"left"``,
``"ctrl+c"`` or ``"a"``, and matches input against those identifiers.
"""

from __future__ import annotations

KeyId = str


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: tuple[str, ...] = ("ctrl", "shift", "alt")

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

# xterm-style modified cursor keys: CSI 1 ; <modifier> <letter>
_MODIFIED_CURSOR_LETTERS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_MODIFIER_PREFIXES: dict[int, str] = {
    2: "shift+",
    3: "alt+",
    4: "shift+alt+",
    5: "ctrl+",
    6: "ctrl+shift+",
    7: "ctrl+alt+",
    8: "ctrl+shift+alt+",
}


# ---------------------------------------------------------------------------
# Key ID normalisation
# ---------------------------------------------------------------------------


def normalize_key_id(key_id: KeyId) -> KeyId:
    """Put modifiers of *key_id* in canonical ``ctrl+shift+alt+`` order.

    ``"Alt+Ctrl+X"`` becomes ``"ctrl+alt+x"``. Raises ``ValueError`` for an
    identifier without a base key.
    """
    parts = key_id.split("+")
    # A trailing empty part means the base key itself is "+".
    if len(parts) > 1 and parts[-1] == "" and parts[-2] == "":
        parts = parts[:-2] + ["+"]

    modifiers = {p.lower() for p in parts[:-1]}
    base = parts[-1]
    unknown = modifiers.difference(MODIFIERS)
    if not base or unknown:
        raise ValueError(f"Invalid key identifier: {key_id!r}")

    if len(base) > 1 or "ctrl" in modifiers or "alt" in modifiers:
        base = base.lower()
    if base == "pageup":
        base = "pageUp"
    elif base == "pagedown":
        base = "pageDown"

    prefix = "".join(f"{m}+" for m in MODIFIERS if m in modifiers)
    return prefix + base


# ---------------------------------------------------------------------------
# parse_key: determine what key was pressed from raw input
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``.

    Printable input of more than one character (a paste, or a multi-key
    chunk from a non-interactive stream) is not a single key and yields
    ``None``; see :func:`is_printable_text`.
    """
    if not data:
        return None

    # --- Legacy escape sequences ---
    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    if data.startswith("\x1b[1;") and len(data) == 6:
        letter = data[-1]
        prefix = _MODIFIER_PREFIXES.get(int(data[4])) if data[4].isdigit() else None
        if letter in _MODIFIED_CURSOR_LETTERS and prefix is not None:
            return prefix + _MODIFIED_CURSOR_LETTERS[letter]

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def is_printable_text(data: str) -> bool:
    """``True`` if *data* is ordinary text to insert rather than a key."""
    return bool(data) and not any(
        ord(ch) < 32 or ord(ch) == 0x7F or 0x80 <= ord(ch) <= 0x9F for ch in data
    )


def sanitize_text(data: str) -> str:
    """Make pasted *data* insertable: tabs become spaces, other controls go."""
    return "".join(
        " " if ch == "\t" else ch for ch in data if ch == "\t" or is_printable_text(ch)
    )


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if raw input *data* is the key named by *key_id*."""
    parsed = parse_key(data)
    if parsed is None:
        return False
    try:
        return parsed == normalize_key_id(key_id)
    except ValueError:
        return False
