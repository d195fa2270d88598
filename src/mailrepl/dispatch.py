"""Resolving submitted lines to leaf commands and executing them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from mailrepl.grammar import CommandGrammar

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """A submitted command could not be carried out."""


class CommandNotFoundError(DispatchError):
    def __init__(self, command: str) -> None:
        super().__init__(f"{command}: command not found")
        self.command = command


class CommandUsageError(DispatchError):
    """Arguments given to a command are missing or malformed."""


@dataclass(frozen=True)
class ResolvedCommand:
    """A leaf command path plus the raw argument text that followed it."""

    path: tuple[str, ...]
    arguments: str

    @property
    def name(self) -> str:
        return " ".join(self.path)


def resolve_command(grammar: CommandGrammar, line: str) -> ResolvedCommand:
    """Match the leading tokens of *line* against *grammar*.

    Raises :class:`CommandNotFoundError` unless the exact-match walk ends on
    a leaf command.
    """
    tokens = line.split()
    matched = grammar.resolve(tokens)
    if not matched or not matched[-1].is_leaf:
        raise CommandNotFoundError(line.strip())

    rest = line
    for node in matched:
        rest = rest.lstrip()[len(node.name) :]

    path = tuple(node.name for node in matched)
    return ResolvedCommand(path=path, arguments=rest.strip())


class CommandExecutor(Protocol):
    """Runs a resolved command and returns text to show the user."""

    def execute(self, command: ResolvedCommand) -> str: ...


CommandHandler = Callable[[str], str]


class CommandRegistry:
    """Executor that maps leaf command paths to handler callables.

    A handler receives the argument text and returns its output.
    """

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, ...], CommandHandler] = {}

    def register(self, path: tuple[str, ...], handler: CommandHandler) -> None:
        if not path:
            raise ValueError("Command path must not be empty")
        self._handlers[path] = handler

    def command(self, *path: str) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: CommandHandler) -> CommandHandler:
            self.register(path, handler)
            return handler

        return decorator

    def __contains__(self, path: tuple[str, ...]) -> bool:
        return path in self._handlers

    @property
    def paths(self) -> list[tuple[str, ...]]:
        return sorted(self._handlers)

    def execute(self, command: ResolvedCommand) -> str:
        handler = self._handlers.get(command.path)
        if handler is None:
            raise CommandNotFoundError(command.name)
        logger.debug("Executing %s with %r", command.name, command.arguments)
        return handler(command.arguments)
