"""Configuration parsing and validation."""

from pipedit.config.env import (
    DEFAULT_CONFIG_FILENAME,
    ENV_CONFIG_PATH,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    get_config_path,
    load_editor_config,
)
from pipedit.config.schema import (
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    DisplayConfig,
    EditorConfig,
    LoggingConfig,
    load_config,
    parse_config,
)

__all__ = [
    # Schema types
    "EditorConfig",
    "LoggingConfig",
    "DisplayConfig",
    # Schema functions
    "parse_config",
    "load_config",
    # Schema errors
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # Environment
    "load_editor_config",
    "get_config_path",
    "ENV_CONFIG_PATH",
    "ENV_LOG_LEVEL",
    "ENV_LOG_FORMAT",
    "DEFAULT_CONFIG_FILENAME",
]
