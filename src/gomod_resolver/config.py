"""Configuration loader for module resolution.

Settings come from an optional JSON file. The file is looked up from an
explicit path, then the ``GOMOD_RESOLVER_CONFIG`` environment variable, then
``gomod-resolver.json`` in the current directory. Only the default location may
be absent; a missing explicit or env-designated file is an error.

Recognised keys: ``goTool`` (path to the go executable), ``timeout`` (seconds
for a whole resolution run), ``env`` (extra environment for the go command,
e.g. ``GOFLAGS`` or ``GOPROXY``) and ``sumFilename`` (defaults to ``go.sum``).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


DEFAULT_CONFIG_PATH = Path("gomod-resolver.json")
CONFIG_PATH_ENV_VAR = "GOMOD_RESOLVER_CONFIG"
DEFAULT_SUM_FILENAME = "go.sum"

_KNOWN_KEYS = {"goTool", "timeout", "env", "sumFilename"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    go_tool: str | None = None
    timeout: float | None = None
    env: dict[str, str] = field(default_factory=dict)
    sum_filename: str = DEFAULT_SUM_FILENAME

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a decoded JSON object, validating every field."""
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

        go_tool = data.get("goTool")
        if go_tool is not None and (not isinstance(go_tool, str) or not go_tool):
            raise ConfigError("'goTool' must be a non-empty string")

        timeout = data.get("timeout")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigError("'timeout' must be a number of seconds")
            if timeout <= 0:
                raise ConfigError("'timeout' must be positive")
            timeout = float(timeout)

        env = data.get("env", {})
        if not isinstance(env, dict):
            raise ConfigError("'env' must be an object")
        for key, value in env.items():
            if not isinstance(value, str):
                raise ConfigError(f"'env.{key}' must be a string")

        sum_filename = data.get("sumFilename", DEFAULT_SUM_FILENAME)
        if not isinstance(sum_filename, str) or not sum_filename:
            raise ConfigError("'sumFilename' must be a non-empty string")

        return cls(go_tool=go_tool, timeout=timeout, env=dict(env), sum_filename=sum_filename)


def _resolve_config_path(path: Path | str | None = None) -> tuple[Path, bool]:
    """Return the configuration path and whether it was requested explicitly.

    Priority:
    1. Explicit path argument
    2. GOMOD_RESOLVER_CONFIG environment variable
    3. Default path (gomod-resolver.json in the working directory)
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return DEFAULT_CONFIG_PATH, False


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    Raises:
        ConfigError: If a requested file is missing, unreadable or invalid.
    """
    config_path, explicit = _resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return Settings.from_dict(data)
