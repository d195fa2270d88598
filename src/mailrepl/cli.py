"""CLI entry point for mail-repl. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from mailrepl.backend import BackendError, load_backend
from mailrepl.commands import MailBackend, mail_commands, unavailable_commands
from mailrepl.config import ConfigError, load_config
from mailrepl.dispatch import CommandRegistry
from mailrepl.editor import compose
from mailrepl.grammar import CommandGrammar, default_grammar
from mailrepl.input_loop import InputLoop
from mailrepl.keybindings import ReplKeybindingsManager
from mailrepl.render import LineRenderer
from mailrepl.terminal import ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _setup_logging(level: str, log_file: str | None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        filename=log_file,
    )


def _build_executor(
    grammar: CommandGrammar, backend: MailBackend | None, terminal: ProcessTerminal
) -> CommandRegistry:
    if backend is None:
        return unavailable_commands(grammar)

    def compose_in_editor(template: str) -> str | None:
        with terminal.suspended():
            return compose(template)

    return mail_commands(backend, compose_in_editor)


def welcome_message(keybindings: ReplKeybindingsManager) -> str:
    quit_keys = keybindings.get_keys("quit")
    if not quit_keys:
        return "Welcome to mail-repl!"
    return f"Welcome to mail-repl! Press {' or '.join(quit_keys)} to quit."


def run_repl(loop: InputLoop, terminal: Terminal) -> None:
    """Drive *loop* from the terminal, redrawing after every key."""
    renderer = LineRenderer(terminal.write)
    printed = len(loop.log)

    terminal.start()
    try:
        renderer.draw(loop.frame(), terminal.columns)
        for data in terminal.read_sequences():
            running = loop.handle_input(data)

            new_entries = loop.log.since(printed)
            printed = len(loop.log)
            renderer.print_lines(
                [f"{loop.prompt}> {e.text}" if e.kind == "input" else e.text for e in new_entries]
            )

            if not running:
                break
            renderer.draw(loop.frame(), terminal.columns)
        renderer.finish()
    finally:
        terminal.stop()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-c",
    "--config",
    "config_paths",
    multiple=True,
    type=click.Path(dir_okay=False),
    help="Configuration file; repeat to merge several files (later ones win).",
)
@click.option("--backend", default=None, help="Mail backend as 'module:factory'.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
@click.option("--debug", is_flag=True, help="Shorthand for --log-level debug.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write logs to this file instead of stderr.",
)
@click.version_option(package_name="mail-repl")
def main(config_paths, backend, log_level, debug, log_file):
    """Interactive mail REPL with fuzzy command completion."""
    _setup_logging("debug" if debug else log_level, log_file)

    try:
        config = load_config(config_paths)
        keybindings = config.repl.keybindings_manager()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    target = backend or config.repl.backend
    try:
        mail_backend = load_backend(target) if target else None
    except BackendError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    terminal = ProcessTerminal()
    grammar = default_grammar()
    executor = _build_executor(grammar, mail_backend, terminal)

    loop = InputLoop(grammar, executor, keybindings=keybindings, prompt=config.repl.prompt)

    click.echo(welcome_message(keybindings))
    if not terminal.interactive:
        logger.info("stdin is not a terminal, reading keys from the stream")

    try:
        run_repl(loop, terminal)
    except KeyboardInterrupt:
        logger.debug("Interrupted")
    click.echo("Bye!")


if __name__ == "__main__":
    main()
