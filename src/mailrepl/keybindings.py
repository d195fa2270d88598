"""REPL keybindings manager."""

from __future__ import annotations

from typing import Literal, get_args

from mailrepl.keys import KeyId, matches_key, normalize_key_id

ReplAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    # Completion / submission
    "complete",
    "submit",
    # Session
    "quit",
    # Vi modes
    "normalMode",
    "insertMode",
    "appendMode",
]

REPL_ACTIONS: tuple[str, ...] = get_args(ReplAction)

KeybindsStyle = Literal["emacs", "vi"]

EditMode = Literal["insert", "normal"]

ReplKeybindingsConfig = dict[ReplAction, KeyId | list[KeyId]]

DEFAULT_REPL_KEYBINDINGS: dict[ReplAction, KeyId | list[KeyId]] = {
    "cursorLeft": "left",
    "cursorRight": "right",
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "complete": "tab",
    "submit": "enter",
    "quit": ["ctrl+c", "ctrl+d"],
    "normalMode": [],
    "insertMode": [],
    "appendMode": [],
}

# Extra bindings layered over the defaults for each style.
STYLE_KEYBINDINGS: dict[KeybindsStyle, ReplKeybindingsConfig] = {
    "emacs": {
        "cursorLeft": ["left", "ctrl+b"],
        "cursorRight": ["right", "ctrl+f"],
    },
    "vi": {
        "normalMode": "escape",
    },
}

# Vi normal mode keys. Actions not listed here fall back to the insert
# mode bindings, so Tab, Enter and the quit keys work in both modes.
VI_NORMAL_KEYBINDINGS: dict[ReplAction, KeyId | list[KeyId]] = {
    "cursorLeft": ["h", "left"],
    "cursorRight": ["l", "right"],
    "deleteCharForward": ["x", "delete"],
    "insertMode": "i",
    "appendMode": "a",
}


def _normalized(keys: KeyId | list[KeyId]) -> list[KeyId]:
    key_array = keys if isinstance(keys, list) else [keys]
    return [normalize_key_id(k) for k in key_array]


def _first_match(bindings: dict[ReplAction, list[KeyId]], data: str) -> ReplAction | None:
    for action in REPL_ACTIONS:
        if any(matches_key(data, key) for key in bindings.get(action, ())):
            return action
    return None


class ReplKeybindingsManager:
    """Maps REPL actions to the keys that trigger them.

    Bindings are layered: defaults, then the style, then user config. A key
    bound by a later layer is taken away from every other action, so each
    key triggers at most one action.
    """

    def __init__(
        self,
        config: ReplKeybindingsConfig | None = None,
        style: KeybindsStyle = "emacs",
    ) -> None:
        if style not in STYLE_KEYBINDINGS:
            raise ValueError(f"Unknown keybinds style: {style!r}")
        self._style: KeybindsStyle = style
        self._action_to_keys: dict[ReplAction, list[KeyId]] = {}
        self._normal_to_keys: dict[ReplAction, list[KeyId]] = {
            action: _normalized(keys) for action, keys in VI_NORMAL_KEYBINDINGS.items()
        }
        self._build_maps(config or {})

    @property
    def style(self) -> KeybindsStyle:
        return self._style

    @property
    def modal(self) -> bool:
        """``True`` when the style has a normal mode."""
        return bool(self._action_to_keys.get("normalMode"))

    def _build_maps(self, config: ReplKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for layer in (DEFAULT_REPL_KEYBINDINGS, STYLE_KEYBINDINGS[self._style], config):
            for action, keys in layer.items():
                if action not in REPL_ACTIONS:
                    raise ValueError(f"Unknown action: {action!r}")
                bound = _normalized(keys)
                for other, other_keys in self._action_to_keys.items():
                    if other != action:
                        other_keys[:] = [k for k in other_keys if k not in bound]
                self._action_to_keys[action] = bound

    def matches(self, data: str, action: ReplAction) -> bool:
        """Check if input matches a specific action."""
        return any(matches_key(data, key) for key in self._action_to_keys.get(action, ()))

    def action_for(self, data: str, mode: EditMode = "insert") -> ReplAction | None:
        """First action (in declaration order) whose keys match *data*."""
        if mode == "normal":
            action = _first_match(self._normal_to_keys, data)
            if action is not None:
                return action
        return _first_match(self._action_to_keys, data)

    def get_keys(self, action: ReplAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])
