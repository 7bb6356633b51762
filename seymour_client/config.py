"""Configuration loading for the seymour client.

The configuration is a small YAML mapping::

    host_port: feeds.example.org:2001
    user: alice
    timeout: 15        # optional, seconds

When no path is given it is looked up as ``seymour-cli/config.yaml`` in the
XDG config directories.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import SeymourConfigError
from .protocol import is_token
from .transport import DEFAULT_TIMEOUT

CONFIG_DIR_NAME = "seymour-cli"
CONFIG_FILE_NAME = "config.yaml"


@dataclass(frozen=True)
class SeymourConfig:
    """Connection settings for one client invocation.

    Attributes:
        host_port: Server address as ``host:port``.
        user: Username to authenticate as.
        timeout: Bound in seconds for connecting and for each read/write.
    """

    host_port: str
    user: str
    timeout: float = DEFAULT_TIMEOUT


def config_search_paths(environ: dict[str, str] | None = None) -> list[Path]:
    """Return candidate config file paths in priority order."""
    env = os.environ if environ is None else environ
    config_home = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    dirs = [config_home]
    dirs.extend(d for d in env.get("XDG_CONFIG_DIRS", "/etc/xdg").split(os.pathsep) if d)
    return [Path(d) / CONFIG_DIR_NAME / CONFIG_FILE_NAME for d in dirs]


def find_config_file(environ: dict[str, str] | None = None) -> Path:
    """Locate the first existing config file."""
    for candidate in config_search_paths(environ):
        if candidate.is_file():
            return candidate
    raise SeymourConfigError(
        f"no {CONFIG_DIR_NAME} config file found in .config/{CONFIG_DIR_NAME}"
    )


def _require_str(data: dict[str, Any], key: str, path: Path) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise SeymourConfigError(f"{key!r} must be a non-empty string in {path}")
    return value.strip()


def parse_config(data: Any, path: Path) -> SeymourConfig:
    """Validate a decoded YAML document into a SeymourConfig."""
    if not isinstance(data, dict):
        raise SeymourConfigError(f"config file at {path} must contain a mapping")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    # bool is an int subclass
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise SeymourConfigError(f"'timeout' must be a positive number in {path}")

    user = _require_str(data, "user", path)
    if not is_token(user):
        raise SeymourConfigError(f"'user' must not contain whitespace in {path}: {user!r}")

    return SeymourConfig(
        host_port=_require_str(data, "host_port", path),
        user=user,
        timeout=float(timeout),
    )


def load_config(path: Path | None = None) -> SeymourConfig:
    """Load the client configuration.

    Args:
        path: Explicit config file. Discovered via XDG when omitted.

    Raises:
        SeymourConfigError: If the file is missing, unreadable or invalid.
    """
    config_file = path if path is not None else find_config_file()
    try:
        text = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise SeymourConfigError(f"failed to read config file at {config_file}") from err

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise SeymourConfigError(f"failed to parse config file at {config_file}") from err

    return parse_config(data, config_file)
