"""Tests for mailrepl.cli -- option handling and the terminal driver."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from mailrepl.cli import main, run_repl, welcome_message
from mailrepl.commands import unavailable_commands
from mailrepl.config import CONFIG_ENV_VAR
from mailrepl.grammar import default_grammar
from mailrepl.input_loop import InputLoop
from mailrepl.keybindings import ReplKeybindingsManager

KEY_TAB = "\t"
KEY_ENTER = "\r"
CTRL_D = "\x04"


class FakeTerminal:
    """Feeds canned key sequences and collects output."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = keys
        self.output: list[str] = []
        self.started = False
        self.stopped = False

    @property
    def columns(self) -> int:
        return 80

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def read_sequences(self) -> Iterator[str]:
        yield from self.keys

    def write(self, data: str) -> None:
        self.output.append(data)

    @property
    def text(self) -> str:
        return "".join(self.output)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestOptions:
    """Failures detected before the terminal is touched."""

    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--config" in result.output
        assert "--backend" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[repl]\nkeybinds = "nano"\n', encoding="utf-8")
        result = CliRunner().invoke(main, ["--config", str(path)])
        assert result.exit_code == 1
        assert "unknown keybinds style" in result.output

    def test_invalid_keybinding(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[repl.keybindings]\nexplode = "tab"\n', encoding="utf-8")
        result = CliRunner().invoke(main, ["-c", str(path)])
        assert result.exit_code == 1
        assert "Unknown action" in result.output

    def test_bad_backend(self) -> None:
        result = CliRunner().invoke(main, ["--backend", "mailrepl_no_such_backend:build"])
        assert result.exit_code == 1
        assert "cannot import backend module" in result.output

    def test_invalid_log_level(self) -> None:
        result = CliRunner().invoke(main, ["--log-level", "loud"])
        assert result.exit_code == 2


class TestRunRepl:
    """The driver prints submitted lines and results above the prompt."""

    def make_loop(self) -> InputLoop:
        grammar = default_grammar()
        return InputLoop(grammar, unavailable_commands(grammar), prompt="mail-repl")

    def test_session(self) -> None:
        loop = self.make_loop()
        terminal = FakeTerminal([*"fol", KEY_TAB, *"list", KEY_ENTER, CTRL_D])
        run_repl(loop, terminal)

        assert terminal.started and terminal.stopped
        assert "mail-repl> folder list\r\n" in terminal.text
        assert "folder list: no mail backend configured\r\n" in terminal.text
        assert loop.log.submitted() == ["folder list"]
        assert not loop.running

    def test_unknown_command(self) -> None:
        loop = self.make_loop()
        terminal = FakeTerminal([*"select", KEY_ENTER])
        run_repl(loop, terminal)
        assert "select: command not found\r\n" in terminal.text
        assert loop.running

    def test_completion_list_is_drawn(self) -> None:
        loop = self.make_loop()
        terminal = FakeTerminal([*"account ", KEY_TAB])
        run_repl(loop, terminal)
        assert "doctor  list" in terminal.text

    def test_end_of_input(self) -> None:
        loop = self.make_loop()
        terminal = FakeTerminal([])
        run_repl(loop, terminal)
        assert terminal.text.startswith("mail-repl> ")
        assert terminal.stopped


class TestWelcomeMessage:
    """The welcome line names the configured quit keys."""

    def test_default_quit_keys(self) -> None:
        assert welcome_message(ReplKeybindingsManager()) == (
            "Welcome to mail-repl! Press ctrl+c or ctrl+d to quit."
        )

    def test_custom_quit_key(self) -> None:
        kb = ReplKeybindingsManager({"quit": "ctrl+q"})
        assert welcome_message(kb) == "Welcome to mail-repl! Press ctrl+q to quit."

    def test_no_quit_key(self) -> None:
        kb = ReplKeybindingsManager({"quit": []})
        assert welcome_message(kb) == "Welcome to mail-repl!"
