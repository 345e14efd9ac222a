"""Local state: settings, stored robot configurations and password sources.

* **Directories** -- :func:`get_config_dir` and :func:`get_data_dir`
  follow XDG on Linux/BSD and use ``~/.vectorauth`` elsewhere.
* **Settings** -- an optional ``config.json`` deserialised into a
  :class:`~vectorauth.models.GlobalConfig`, overlaid with
  ``VECTOR_AUTH_*`` environment variables. :func:`get_settings` caches
  the result for the process.
* **Passwords** -- :func:`resolve_credential` reads the account password
  from an environment variable, a file or the terminal.
* **Stored robot configurations** -- :func:`load_robot_configuration`
  reads a configuration the caller saved earlier. vectorauth never writes
  robot configurations itself.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from vectorauth.exceptions import ConfigurationError
from vectorauth.models import GlobalConfig, RobotConfiguration

_APP_NAME = "vectorauth"
_CONFIG_FILENAME = "config.json"

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "VECTOR_AUTH_CERTIFICATE_URL": ("endpoints", "certificate_url"),
    "VECTOR_AUTH_ACCOUNTS_URL": ("endpoints", "accounts_url"),
    "VECTOR_AUTH_APP_KEY": ("endpoints", "app_key"),
    "VECTOR_AUTH_DISCOVERY_TIMEOUT": ("timeouts", "discovery"),
    "VECTOR_AUTH_CONNECT_TIMEOUT": ("timeouts", "connect"),
}


# --- directories ---


def _is_xdg_platform() -> bool:
    """True on Linux and the BSDs."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: Path, fallback: Path) -> Path:
    if _is_xdg_platform():
        root = Path(os.environ.get(xdg_var) or xdg_default)
        path = root / _APP_NAME
    else:
        path = fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``, created on demand.

    ``$XDG_CONFIG_HOME/vectorauth`` (``~/.config/vectorauth``) on Linux/BSD,
    ``~/.vectorauth`` elsewhere.
    """
    home = Path.home()
    return _app_dir("XDG_CONFIG_HOME", home / ".config", home / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Directory for crash logs, created on demand.

    ``$XDG_DATA_HOME/vectorauth`` (``~/.local/share/vectorauth``) on
    Linux/BSD, ``~/.vectorauth/data`` elsewhere.
    """
    home = Path.home()
    return _app_dir(
        "XDG_DATA_HOME", home / ".local" / "share", home / f".{_APP_NAME}" / "data"
    )


# --- Settings ---


def _global_config_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid {what} at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {what} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Build settings from defaults, ``config.json`` and the environment.

    Each ``VECTOR_AUTH_*`` variable in ``_ENV_OVERRIDES`` that is set and
    non-empty replaces the matching ``config.json`` value, which in turn
    replaces the model default.

    Raises:
        ConfigurationError: If the file contains invalid JSON or either
            source fails Pydantic validation.
    """
    path = _global_config_path()
    data: dict[str, Any] = {}
    if path.is_file():
        loaded = _read_json(path, "settings")
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Invalid settings at {path}: expected a JSON object")
        data = loaded

    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            section_data = data.setdefault(section, {})
            if not isinstance(section_data, dict):
                raise ConfigurationError(f"Invalid settings at {path}: '{section}' must be an object")
            section_data[key] = value

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc


_settings: Optional[GlobalConfig] = None


def get_settings() -> GlobalConfig:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_global_config()
    return _settings


def set_settings(settings: GlobalConfig) -> None:
    """Install *settings* as the process-wide settings."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget cached settings so the next :func:`get_settings` reloads them."""
    global _settings
    _settings = None


# --- Stored robot configurations ---


def load_robot_configuration(path: Path) -> RobotConfiguration:
    """Load a robot configuration JSON document saved by the caller.

    Args:
        path: File holding the output of ``vector-auth login``.

    Raises:
        ConfigurationError: If the file is missing, is not JSON, or does
            not describe a robot configuration.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Robot configuration not found at {path}")
    data = _read_json(path, "robot configuration")
    try:
        return RobotConfiguration.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid robot configuration at {path}: {exc}") from exc


# --- passwords ---


def resolve_credential(source: str) -> str:
    """Read a secret (the account password) from *source*.

    ``env:NAME`` reads environment variable ``NAME`` as is, ``file:PATH``
    reads the file with surrounding whitespace stripped, and ``prompt``
    asks on the terminal without echo.

    Raises:
        ConfigurationError: If the variable or file is missing, the file
            cannot be read, ``prompt`` is used without a TTY, or the
            source has no known scheme.
    """
    scheme, _, target = source.partition(":")

    if scheme == "env" and target:
        value = os.environ.get(target)
        if value is None:
            raise ConfigurationError(f"Environment variable '{target}' is not set ({source})")
        return value

    if scheme == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Password file not found: {path}")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read password file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigurationError("Cannot prompt for a password: stdin is not a TTY")
        return getpass.getpass("Password: ")

    raise ConfigurationError(f"Unknown credential source format: {source}")
