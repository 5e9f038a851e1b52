"""Environment variable overrides for configuration."""

import os
from dataclasses import replace
from pathlib import Path

from pipedit.config.schema import (
    ConfigValidationError,
    EditorConfig,
    LoggingConfig,
    load_config,
)
from pipedit.core.logging import LogLevel

# Environment variable names
ENV_CONFIG_PATH = "PIPEDIT_CONFIG"
ENV_LOG_LEVEL = "PIPEDIT_LOG_LEVEL"
ENV_LOG_FORMAT = "PIPEDIT_LOG_FORMAT"

# Default values
DEFAULT_CONFIG_FILENAME = "pipedit.yaml"

LOG_FORMATS = {"json": True, "text": False}


def get_config_path() -> Path:
    """Get the configured config file path.

    Returns:
        PIPEDIT_CONFIG if set, otherwise pipedit.yaml in the working directory.
    """
    path_str = os.environ.get(ENV_CONFIG_PATH)
    if path_str:
        return Path(path_str).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def _apply_logging_overrides(config: LoggingConfig) -> LoggingConfig:
    """Apply PIPEDIT_LOG_LEVEL / PIPEDIT_LOG_FORMAT to a logging config.

    Raises:
        ConfigValidationError: If an override has an invalid value.
    """
    level_str = os.environ.get(ENV_LOG_LEVEL)
    if level_str:
        try:
            config = replace(config, level=LogLevel.from_name(level_str))
        except ValueError as e:
            raise ConfigValidationError(f"{ENV_LOG_LEVEL}: {e}") from e

    format_str = os.environ.get(ENV_LOG_FORMAT)
    if format_str:
        key = format_str.strip().lower()
        if key not in LOG_FORMATS:
            raise ConfigValidationError(
                f"{ENV_LOG_FORMAT} must be one of {sorted(LOG_FORMATS)}"
            )
        config = replace(config, json_format=LOG_FORMATS[key])

    return config


def load_editor_config(path: Path | None = None) -> EditorConfig:
    """Load configuration from file (if present) and environment.

    Args:
        path: Explicit config path; falls back to get_config_path().

    Returns:
        EditorConfig with environment overrides applied.

    Raises:
        ConfigError: If the file or an override is invalid.
    """
    config_path = path or get_config_path()
    if path is not None or config_path.exists():
        config = load_config(config_path)
    else:
        config = EditorConfig()

    return replace(config, logging=_apply_logging_overrides(config.logging))
