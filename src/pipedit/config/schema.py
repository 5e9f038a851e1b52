"""YAML schema validation for pipedit.yaml configuration files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pipedit.core.logging import LogLevel


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigParseError(ConfigError):
    """Error parsing YAML configuration."""

    pass


class ConfigValidationError(ConfigError):
    """Error validating configuration schema."""

    pass


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.WARNING
    json_format: bool = True


@dataclass
class DisplayConfig:
    """Terminal rendering configuration."""

    show_ids: bool = False
    show_selectors: bool = True


@dataclass
class EditorConfig:
    """Complete pipedit.yaml configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def _parse_yaml(content: str) -> dict[str, Any]:
    """Parse YAML content into a dictionary.

    Args:
        content: Raw YAML string.

    Returns:
        Parsed dictionary.

    Raises:
        ConfigParseError: If YAML parsing fails.
    """
    try:
        result = yaml.safe_load(content)
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise ConfigParseError("Configuration must be a YAML mapping")
        return result
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse YAML: {e}") from e


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigValidationError(f"{name} must be a mapping")
    return section


def _require_bool(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigValidationError(f"{name}.{key} must be a boolean")
    return value


def _validate_logging(data: dict[str, Any]) -> LoggingConfig:
    """Validate the logging section of configuration.

    Args:
        data: Raw configuration dictionary.

    Returns:
        Validated LoggingConfig with defaults if not specified.
    """
    section = _section(data, "logging")
    level = LogLevel.WARNING
    if "level" in section:
        raw_level = section["level"]
        if not isinstance(raw_level, str):
            raise ConfigValidationError("logging.level must be a string")
        try:
            level = LogLevel.from_name(raw_level)
        except ValueError as e:
            raise ConfigValidationError(f"logging.level: {e}") from e

    return LoggingConfig(
        level=level,
        json_format=_require_bool(section, "logging", "json_format", True),
    )


def _validate_display(data: dict[str, Any]) -> DisplayConfig:
    """Validate the display section of configuration."""
    section = _section(data, "display")
    return DisplayConfig(
        show_ids=_require_bool(section, "display", "show_ids", False),
        show_selectors=_require_bool(section, "display", "show_selectors", True),
    )


def parse_config(content: str) -> EditorConfig:
    """Parse and validate pipedit.yaml configuration content.

    Args:
        content: Raw YAML string.

    Returns:
        Validated EditorConfig object.

    Raises:
        ConfigParseError: If YAML parsing fails.
        ConfigValidationError: If schema validation fails.
    """
    data = _parse_yaml(content)
    return EditorConfig(
        logging=_validate_logging(data),
        display=_validate_display(data),
    )


def load_config(path: Path) -> EditorConfig:
    """Load and validate pipedit.yaml configuration from a file.

    Args:
        path: Path to pipedit.yaml file.

    Returns:
        Validated EditorConfig object.

    Raises:
        ConfigParseError: If file reading or YAML parsing fails.
        ConfigValidationError: If schema validation fails.
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigParseError(f"Failed to read configuration file: {e}") from e

    return parse_config(content)
