"""REPL configuration loaded from TOML.

Several files may be given; later ones are merged over earlier ones, which
allows keeping private settings apart from a shared file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mailrepl.keybindings import STYLE_KEYBINDINGS, ReplKeybindingsManager

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MAILREPL_CONFIG"
DEFAULT_PROMPT = "mail-repl"

_STYLE_ALIASES = {"vim": "vi"}


class ConfigError(Exception):
    """The configuration could not be read or is invalid."""


@dataclass
class ReplConfig:
    keybinds: str = "emacs"
    prompt: str = DEFAULT_PROMPT
    keybindings: dict[str, str | list[str]] = field(default_factory=dict)
    backend: str | None = None

    def keybindings_manager(self) -> ReplKeybindingsManager:
        try:
            return ReplKeybindingsManager(self.keybindings, style=self.keybinds)
        except ValueError as e:
            raise ConfigError(str(e)) from e


@dataclass
class Config:
    repl: ReplConfig = field(default_factory=ReplConfig)
    paths: list[Path] = field(default_factory=list)


def default_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "mailrepl" / "config.toml"


def deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base.

    For nested tables, merge recursively. For other values the override wins.
    """
    result = dict(base)
    for key, value in overrides.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file at {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"cannot parse config file at {path}: {e}") from e


def _parse_repl(data: Any) -> ReplConfig:
    if not isinstance(data, dict):
        raise ConfigError("[repl] must be a table")

    unknown = set(data).difference({"keybinds", "prompt", "keybindings", "backend"})
    if unknown:
        raise ConfigError(f"unknown [repl] keys: {', '.join(sorted(unknown))}")

    keybinds = str(data.get("keybinds", "emacs")).lower()
    keybinds = _STYLE_ALIASES.get(keybinds, keybinds)
    if keybinds not in STYLE_KEYBINDINGS:
        raise ConfigError(f"unknown keybinds style: {keybinds!r}")

    prompt = data.get("prompt", DEFAULT_PROMPT)
    if not isinstance(prompt, str):
        raise ConfigError("repl.prompt must be a string")

    keybindings = data.get("keybindings", {})
    if not isinstance(keybindings, dict):
        raise ConfigError("[repl.keybindings] must be a table")
    for action, keys in keybindings.items():
        if not isinstance(keys, (str, list)) or (
            isinstance(keys, list) and not all(isinstance(k, str) for k in keys)
        ):
            raise ConfigError(f"repl.keybindings.{action} must be a key or a list of keys")

    backend = data.get("backend")
    if backend is not None and not isinstance(backend, str):
        raise ConfigError("repl.backend must be a string")

    config = ReplConfig(
        keybinds=keybinds, prompt=prompt, keybindings=dict(keybindings), backend=backend
    )
    # Surface bad action names or key identifiers at load time.
    config.keybindings_manager()
    return config


def config_from_dict(data: dict[str, Any]) -> Config:
    return Config(repl=_parse_repl(data.get("repl", {})))


def load_config(paths: Sequence[Path | str] = ()) -> Config:
    """Load and merge the given config files.

    With no paths, ``$MAILREPL_CONFIG`` is used if set, otherwise the default
    location; a missing default file yields the default configuration.
    """
    explicit = [Path(p).expanduser() for p in paths]
    if not explicit and os.environ.get(CONFIG_ENV_VAR):
        explicit = [Path(os.environ[CONFIG_ENV_VAR]).expanduser()]

    if not explicit:
        path = default_config_path()
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return Config()
        explicit = [path]

    merged: dict[str, Any] = {}
    for path in explicit:
        logger.debug("Reading config file %s", path)
        merged = deep_merge(merged, _read_toml(path))

    config = config_from_dict(merged)
    config.paths = explicit
    return config
