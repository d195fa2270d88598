"""Key-event loop tying the text buffer, completer and session log together."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mailrepl.completer import Completer
from mailrepl.dispatch import (
    CommandExecutor,
    CommandNotFoundError,
    DispatchError,
    resolve_command,
)
from mailrepl.grammar import CommandGrammar
from mailrepl.keybindings import EditMode, ReplKeybindingsManager
from mailrepl.keys import is_printable_text, sanitize_text
from mailrepl.render import Frame
from mailrepl.session_log import SessionLog
from mailrepl.text_buffer import TextBuffer

logger = logging.getLogger(__name__)


class InputLoop:
    """Maps key input to editing, completion and submission.

    The loop owns the buffer, the completion list and the session log.
    ``handle_input`` returns ``False`` once a quit key has been pressed.
    With vi keybindings the loop is modal: in normal mode text is not
    inserted and single letters move, delete or switch back to insert mode.
    """

    def __init__(
        self,
        grammar: CommandGrammar,
        executor: CommandExecutor | None = None,
        *,
        keybindings: ReplKeybindingsManager | None = None,
        prompt: str = "",
    ) -> None:
        self._grammar = grammar
        self._completer = Completer(grammar)
        self._executor = executor
        self._keybindings = keybindings or ReplKeybindingsManager()
        self.prompt = prompt

        self.buffer = TextBuffer()
        self.log = SessionLog()
        self._completions: list[str] = []
        self._running = True
        self._mode: EditMode = "insert"

    @property
    def completions(self) -> list[str]:
        return list(self._completions)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def mode(self) -> EditMode:
        return self._mode

    def frame(self) -> Frame:
        return Frame(
            buffer_text=self.buffer.text,
            cursor=self.buffer.cursor,
            completions=list(self._completions),
            log_text=self.log.text,
            prompt=self.prompt,
        )

    def handle_input(self, data: str) -> bool:
        if not self._running:
            return False

        action = self._keybindings.action_for(data, self._mode)

        if action == "quit":
            logger.debug("Quit requested")
            self._running = False
        elif action == "complete":
            self.complete()
        elif action == "submit":
            self.submit()
        elif action == "deleteCharBackward":
            self.buffer.delete_char_before_cursor()
        elif action == "deleteCharForward":
            self.buffer.delete_char_at_cursor()
        elif action == "cursorLeft":
            self.buffer.move_left()
        elif action == "cursorRight":
            self.buffer.move_right()
        elif action == "normalMode":
            self._mode = "normal"
        elif action == "insertMode":
            self._mode = "insert"
        elif action == "appendMode":
            self.buffer.move_right()
            self._mode = "insert"
        elif self._mode == "normal":
            logger.debug("Ignoring %r in normal mode", data)
        elif is_printable_text(data):
            self.buffer.insert_text(data)
        elif len(data) > 1 and not data.startswith("\x1b"):
            # A chunk of text with tabs or control characters in it.
            self.buffer.insert_text(sanitize_text(data))
        else:
            logger.debug("Ignoring unbound input %r", data)

        return self._running

    def run(self, source: Iterable[str]) -> None:
        """Feed key sequences from *source* until quit or exhaustion."""
        for data in source:
            if not self.handle_input(data):
                break

    def complete(self) -> None:
        result = self._completer.complete(self.buffer.text)
        if result.kind == "complete":
            self.buffer.set_text(result.text)
        self._completions = result.candidates

    def submit(self) -> None:
        line = self.buffer.text
        self.log.record_input(line)
        self.buffer.reset()
        self._completions = []
        self._mode = "insert"

        if line.strip():
            self._dispatch(line)

    def _dispatch(self, line: str) -> None:
        try:
            command = resolve_command(self._grammar, line)
        except DispatchError as e:
            self.log.record_error(str(e))
            return

        if self._executor is None:
            self.log.record_error(f"{command.name}: no command executor available")
            return

        try:
            output = self._executor.execute(command)
        except CommandNotFoundError as e:
            self.log.record_error(str(e))
        except DispatchError as e:
            self.log.record_error(f"{command.name}: {e}")
        except Exception as e:
            logger.exception("Command %s failed", command.name)
            self.log.record_error(f"{command.name}: {e}")
        else:
            if output:
                self.log.record_output(output)
