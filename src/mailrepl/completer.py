"""Hierarchical fuzzy command completion.

The input line is split into a committed path (tokens already followed by
whitespace) and a partial token (the one being typed). The committed path is
matched exactly against the grammar; the partial token is fuzzy-matched
against the children found there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from mailrepl.fuzzy import fuzzy_rank
from mailrepl.grammar import CommandGrammar

logger = logging.getLogger(__name__)

CompletionKind = Literal["none", "complete", "list"]


@dataclass(frozen=True)
class CompletionRequest:
    """Tokenized view of an input line."""

    tokens: tuple[str, ...]
    committed: tuple[str, ...]
    partial: str
    trailing_space: bool


@dataclass(frozen=True)
class Completion:
    """Outcome of one completion request.

    ``text`` is the line after completion; it equals the input unless
    ``kind`` is ``"complete"``.
    """

    kind: CompletionKind
    text: str
    candidates: list[str] = field(default_factory=list)


def parse_request(text: str) -> CompletionRequest:
    tokens = tuple(text.split())
    trailing_space = bool(text) and text[-1].isspace()

    if trailing_space or not tokens:
        return CompletionRequest(tokens, tokens, "", trailing_space)
    return CompletionRequest(tokens, tokens[:-1], tokens[-1], trailing_space)


class Completer:
    """Completes input lines against a :class:`CommandGrammar`."""

    def __init__(self, grammar: CommandGrammar) -> None:
        self._grammar = grammar

    @property
    def grammar(self) -> CommandGrammar:
        return self._grammar

    def candidates_for(self, text: str) -> list[str]:
        """Ranked candidate names for *text*, without deciding anything."""
        request = parse_request(text)
        children = self._grammar.children_at(request.committed)
        if not children:
            return []

        names = [node.name for node in children]
        if not request.partial:
            return sorted(names)

        return [name for name, _score in fuzzy_rank(request.partial, names)]

    def complete(self, text: str) -> Completion:
        request = parse_request(text)
        candidates = self.candidates_for(text)

        if not candidates:
            logger.debug("No completion for %r", text)
            return Completion("none", text)

        if len(candidates) > 1:
            logger.debug("Ambiguous completion for %r: %s", text, candidates)
            return Completion("list", text, candidates)

        completed = _replace_partial(text, request, candidates[0])
        logger.debug("Completed %r to %r", text, completed)
        return Completion("complete", completed)


def _replace_partial(text: str, request: CompletionRequest, name: str) -> str:
    if request.partial:
        # The partial token is always the tail of the line.
        head = text[: len(text) - len(request.partial)]
    else:
        head = text
    return f"{head}{name} "
