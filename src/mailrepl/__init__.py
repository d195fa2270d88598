"""mail-repl: interactive mail client REPL with fuzzy command completion."""

# Completion
from mailrepl.completer import Completer, Completion, CompletionRequest, parse_request

# Dispatch
from mailrepl.dispatch import (
    CommandExecutor,
    CommandNotFoundError,
    CommandRegistry,
    CommandUsageError,
    DispatchError,
    ResolvedCommand,
    resolve_command,
)

# Fuzzy matching
from mailrepl.fuzzy import FuzzyMatch, fuzzy_match, fuzzy_rank

# Grammar
from mailrepl.grammar import MAIL_GRAMMAR, CommandGrammar, CommandNode, default_grammar

# Input loop
from mailrepl.input_loop import InputLoop

# Keybindings
from mailrepl.keybindings import (
    DEFAULT_REPL_KEYBINDINGS,
    ReplAction,
    ReplKeybindingsManager,
)

# Keyboard input handling
from mailrepl.keys import KeyId, matches_key, parse_key

# Rendering
from mailrepl.render import Frame

# Session log
from mailrepl.session_log import LogEntry, SessionLog

# Text buffer
from mailrepl.text_buffer import TextBuffer

__all__ = [
    "DEFAULT_REPL_KEYBINDINGS",
    "MAIL_GRAMMAR",
    "CommandExecutor",
    "CommandGrammar",
    "CommandNode",
    "CommandNotFoundError",
    "CommandRegistry",
    "CommandUsageError",
    "Completer",
    "Completion",
    "CompletionRequest",
    "DispatchError",
    "Frame",
    "FuzzyMatch",
    "InputLoop",
    "KeyId",
    "LogEntry",
    "ReplAction",
    "ReplKeybindingsManager",
    "ResolvedCommand",
    "SessionLog",
    "TextBuffer",
    "default_grammar",
    "fuzzy_match",
    "fuzzy_rank",
    "matches_key",
    "parse_key",
    "parse_request",
    "resolve_command",
]
