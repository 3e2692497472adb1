"""Configuration: ``shiftwatch.toml`` settings, env overrides and validation."""

from shiftwatch.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigLoadError,
    effective_config,
    load_config,
)
from shiftwatch.config.schema import (
    DEFAULT_CONFIG,
    SETTINGS,
    ConfigValidationError,
    ConfigValidationIssue,
    Setting,
    assert_valid_config,
    default_config,
    merge_config,
    redact_config,
    validate_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "SETTINGS",
    "Setting",
    "assert_valid_config",
    "default_config",
    "effective_config",
    "load_config",
    "merge_config",
    "redact_config",
    "validate_config",
]
