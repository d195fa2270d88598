"""Static command grammar: a forest of named command nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

# Nested mapping form used to declare a grammar; a ``None`` value (or an
# empty mapping) marks a leaf command.
GrammarSpec = Mapping[str, "GrammarSpec | None"]

MAIL_GRAMMAR: dict[str, dict[str, None]] = {
    "account": {"list": None, "doctor": None},
    "folder": {
        "add": None,
        "list": None,
        "expunge": None,
        "purge": None,
        "delete": None,
    },
    "envelope": {"list": None, "thread": None},
    "flag": {"add": None, "set": None, "remove": None},
    "message": {
        "read": None,
        "thread": None,
        "write": None,
        "reply": None,
        "forward": None,
        "copy": None,
        "move": None,
        "delete": None,
    },
}


def _sorted_children(children: Iterable[CommandNode]) -> tuple[CommandNode, ...]:
    nodes = sorted(children, key=lambda n: n.name)
    for prev, node in zip(nodes, nodes[1:]):
        if prev.name == node.name:
            raise ValueError(f"Duplicate command name: {node.name!r}")
    return tuple(nodes)


@dataclass(frozen=True)
class CommandNode:
    """A command and its sub-commands, children kept sorted by name."""

    name: str
    children: tuple[CommandNode, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(f"Invalid command name: {self.name!r}")
        object.__setattr__(self, "children", _sorted_children(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, name: str) -> CommandNode | None:
        for node in self.children:
            if node.name == name:
                return node
        return None


def _build_nodes(spec: GrammarSpec) -> list[CommandNode]:
    return [
        CommandNode(name, tuple(_build_nodes(sub)) if sub else ())
        for name, sub in spec.items()
    ]


class CommandGrammar:
    """Immutable forest of :class:`CommandNode` roots.

    Lookups are exact and case-sensitive. The grammar never changes after
    construction, so one instance can be shared freely.
    """

    def __init__(self, roots: Iterable[CommandNode]) -> None:
        self._roots = _sorted_children(roots)

    @classmethod
    def from_spec(cls, spec: GrammarSpec) -> CommandGrammar:
        return cls(_build_nodes(spec))

    @property
    def roots(self) -> tuple[CommandNode, ...]:
        return self._roots

    def children_at(self, path: Sequence[str]) -> tuple[CommandNode, ...]:
        """Return the nodes reachable after following *path* exactly.

        An empty path yields the roots. The result is empty as soon as one
        token fails to name a child.
        """
        nodes = self._roots
        for token in path:
            match = next((n for n in nodes if n.name == token), None)
            if match is None:
                return ()
            nodes = match.children
        return nodes

    def resolve(self, tokens: Sequence[str]) -> list[CommandNode]:
        """Walk *tokens* from the roots and return the exactly matched prefix."""
        matched: list[CommandNode] = []
        nodes = self._roots
        for token in tokens:
            match = next((n for n in nodes if n.name == token), None)
            if match is None:
                break
            matched.append(match)
            nodes = match.children
        return matched

    def leaf_paths(self) -> list[tuple[str, ...]]:
        paths: list[tuple[str, ...]] = []

        def walk(node: CommandNode, prefix: tuple[str, ...]) -> None:
            path = prefix + (node.name,)
            if node.is_leaf:
                paths.append(path)
                return
            for child in node.children:
                walk(child, path)

        for root in self._roots:
            walk(root, ())
        return paths


def default_grammar() -> CommandGrammar:
    return CommandGrammar.from_spec(MAIL_GRAMMAR)
