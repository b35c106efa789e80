"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specshift:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specshift/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~specshift.models.GlobalConfig`
  JSON file storing defaults (target version, strict mode, validation,
  output formats).
* **Project-local config** -- An optional ``./specshift.json`` holding a
  partial config that overrides the global one for a repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specshift.exceptions import ConfigError, UnsupportedTargetError
from specshift.export.target import parse_target
from specshift.models import GlobalConfig

logger = logging.getLogger(__name__)

_APP_NAME = "specshift"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specshift.json"

ENV_TARGET = "SPECSHIFT_TARGET"
ENV_STRICT = "SPECSHIFT_STRICT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specshift/`` (default ``~/.config/specshift/``).
    On macOS/Windows: ``~/.specshift/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specshift/`` (default ``~/.local/share/specshift/``).
    On macOS/Windows: ``~/.specshift/logs/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~specshift.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specshift.json``.

    The file holds a partial config (for example ``{"target": "3.1"}``)
    that is layered over the global config.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_bool(value: str, name: str) -> bool:
    """Interpret an environment-variable style boolean.

    Raises:
        ConfigError: If *value* is not a recognised boolean word.
    """
    text = value.strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


# --- Precedence resolution ---


def resolve_config(
    cli_target: Optional[str] = None,
    cli_strict: Optional[bool] = None,
    cli_validate: Optional[bool] = None,
    cli_format: Optional[str] = None,
    cli_document: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``SPECSHIFT_TARGET``, ``SPECSHIFT_STRICT``)
        3. Project config (``./specshift.json``)
        4. User config (``~/.config/specshift/config.json``)
        5. Defaults

    Returns:
        The effective configuration. ``target`` is normalised to a full
        version string.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    global_cfg = load_global_config()

    project = load_project_config()
    if project is not None:
        try:
            global_cfg = GlobalConfig.model_validate(
                _merge(global_cfg.model_dump(mode="json"), project)
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_target = os.environ.get(ENV_TARGET)
    if env_target:
        global_cfg.target = env_target
    env_strict = os.environ.get(ENV_STRICT)
    if env_strict is not None:
        global_cfg.strict_downlevel = parse_bool(env_strict, ENV_STRICT)

    if cli_target is not None:
        global_cfg.target = cli_target
    if cli_strict is not None:
        global_cfg.strict_downlevel = cli_strict
    if cli_validate is not None:
        global_cfg.validate_spec = cli_validate
    if cli_format is not None:
        global_cfg.output.format = cli_format
    if cli_document is not None:
        global_cfg.output.document = cli_document

    try:
        global_cfg.target = parse_target(global_cfg.target).value
    except UnsupportedTargetError as exc:
        raise ConfigError(str(exc)) from exc

    logger.debug(
        "resolved config: target=%s strict=%s validate=%s",
        global_cfg.target,
        global_cfg.strict_downlevel,
        global_cfg.validate_spec,
    )
    return global_cfg
