"""Composing messages in the user's external editor."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path

import click

logger = logging.getLogger(__name__)

DRAFT_FILENAME = "mailrepl-draft.eml"
FALLBACK_EDITOR = "vi"


class EditorError(Exception):
    """The external editor could not be run."""


def local_draft_path() -> Path:
    return Path(tempfile.gettempdir()) / DRAFT_FILENAME


def editor_command() -> list[str]:
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or FALLBACK_EDITOR
    return shlex.split(editor)


def open_with_editor(template: str, draft: Path | None = None) -> str:
    """Write *template* to the draft file, open it, and return the result."""
    path = draft or local_draft_path()
    logger.debug("Writing draft to %s", path)
    path.write_text(template, encoding="utf-8")

    command = [*editor_command(), str(path)]
    logger.debug("Launching editor: %s", command)
    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise EditorError(f"cannot launch editor: {e}") from e

    return path.read_text(encoding="utf-8")


def remove_draft(draft: Path | None = None) -> None:
    path = draft or local_draft_path()
    path.unlink(missing_ok=True)


def compose(template: str, draft: Path | None = None) -> str | None:
    """Edit *template* until the user sends or discards it.

    Returns the text to send, or ``None`` when the draft is discarded. The
    draft file is removed however the session ends.
    """
    try:
        text = open_with_editor(template, draft)
        while True:
            choice = click.prompt(
                "What would you like to do?",
                type=click.Choice(["send", "edit", "discard"]),
                default="send",
            )
            if choice != "edit":
                return text if choice == "send" else None
            text = open_with_editor(text, draft)
    finally:
        remove_draft(draft)
