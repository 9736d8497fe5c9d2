"""
Runtime configuration for tally.

Settings come from an optional ``tally.toml`` and are then overridden by
environment variables:

    [run]
    error_policy = "continue"   # or "halt" (default)
    log_level = "INFO"          # default WARNING
    show_vars = true

Environment variables:
    TALLY_ERROR_POLICY: halt | continue
    TALLY_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR | CRITICAL

Usage:
    from tally.core.config import ErrorPolicy, load_config

    config = load_config()
    if config.error_policy == ErrorPolicy.CONTINUE:
        ...
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from tally.core.errors import TallyError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tally.toml"

ERROR_POLICY_VAR = "TALLY_ERROR_POLICY"
LOG_LEVEL_VAR = "TALLY_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(TallyError):
    """Raised when a config file cannot be read."""


class ErrorPolicy(StrEnum):
    """What a batch run does after a line fails."""

    HALT = "halt"
    CONTINUE = "continue"


@dataclass
class TallyConfig:
    """Resolved runtime settings."""

    error_policy: ErrorPolicy = ErrorPolicy.HALT
    log_level: str = "WARNING"
    show_vars: bool = True


def parse_error_policy(value: str, default: ErrorPolicy = ErrorPolicy.HALT) -> ErrorPolicy:
    """Parse an error policy name, warning and falling back on unknown values."""
    normalized = value.lower().strip()
    if not normalized:
        return default
    if normalized in ("halt", "stop"):
        return ErrorPolicy.HALT
    if normalized in ("continue", "keep-going"):
        return ErrorPolicy.CONTINUE
    logger.warning(
        "Unknown error policy '%s'. Valid values: halt, continue. Defaulting to %s.",
        value,
        default,
    )
    return default


def parse_log_level(value: str, default: str = "WARNING") -> str:
    """Parse a log level name, warning and falling back on unknown values."""
    normalized = value.upper().strip()
    if not normalized:
        return default
    if normalized in _LOG_LEVELS:
        return normalized
    logger.warning(
        "Unknown log level '%s'. Valid values: %s. Defaulting to %s.",
        value,
        ", ".join(_LOG_LEVELS),
        default,
    )
    return default


def _load_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    run = data.get("run", {})
    if not isinstance(run, dict):
        raise ConfigError(f"[run] in {path} must be a table")
    return run


def load_config(path: Path | None = None) -> TallyConfig:
    """Load settings from ``path`` (or ./tally.toml if present) and the environment.

    Args:
        path: Explicit config file. When None, ``tally.toml`` in the current
            directory is used if it exists.

    Returns:
        TallyConfig with file values overridden by environment variables.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config = TallyConfig()

    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.exists() else None

    if path is not None:
        run = _load_file(path)
        if "error_policy" in run:
            config.error_policy = parse_error_policy(str(run["error_policy"]))
        if "log_level" in run:
            config.log_level = parse_log_level(str(run["log_level"]))
        if "show_vars" in run:
            config.show_vars = bool(run["show_vars"])
        logger.debug("Loaded config from %s", path)

    env_policy = os.environ.get(ERROR_POLICY_VAR)
    if env_policy is not None:
        config.error_policy = parse_error_policy(env_policy, config.error_policy)

    env_level = os.environ.get(LOG_LEVEL_VAR)
    if env_level is not None:
        config.log_level = parse_log_level(env_level, config.log_level)

    return config
