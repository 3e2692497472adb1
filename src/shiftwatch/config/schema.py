"""Settings for ``shiftwatch.toml``: the field table, defaults and validation.

Every setting is a :class:`Setting` row naming its section, key, default and
a checker. Checkers return the normalized value or raise ``ValueError`` with
the message reported for that field. The session cookie itself is never a
setting; ``input.session_env`` names the environment variable that holds it.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from shiftwatch.constants import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_PUZZLE_DAY,
    DEFAULT_PUZZLE_YEAR,
    DEFAULT_SESSION_ENV,
)
from shiftwatch.observability.logging import is_secret_key, redact

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

_ENV_NAME = re.compile(r"[A-Z_][A-Z0-9_]*")
_HTTP_URL = re.compile(r"https?://[^\s/]+(?:/\S*)?")

Checker = Callable[[object], object]


@dataclass(frozen=True, slots=True)
class Setting:
    """One ``[section] key`` entry of the config file."""

    section: str
    key: str
    default: object
    check: Checker

    @property
    def path(self) -> str:
        return f"{self.section}.{self.key}"

    @property
    def env_var(self) -> str:
        return f"SHIFTWATCH_{self.section.upper()}_{self.key.upper()}"


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    path: str
    message: str


class ConfigValidationError(ValueError):
    """Raised with every issue found, each tied to a dotted field path."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        lines = "\n".join(f"- {issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"invalid config:\n{lines}")


def _text(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected string, got {type(value).__name__}")
    if not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


def _integer(minimum: int, maximum: int | None = None) -> Checker:
    def check(value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected integer, got {type(value).__name__}")
        if value < minimum:
            raise ValueError(f"must be >= {minimum}")
        if maximum is not None and value > maximum:
            raise ValueError(f"must be <= {maximum}")
        return value

    return check


def _seconds(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected number, got {type(value).__name__}")
    if not math.isfinite(value) or value < 0.1:
        raise ValueError("must be a finite number >= 0.1")
    return float(value)


def _flag(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected boolean, got {type(value).__name__}")
    return value


def _base_url(value: object) -> str:
    url = _text(value)
    if not _HTTP_URL.fullmatch(url):
        raise ValueError("must be an http(s) URL")
    return url.rstrip("/")


def _env_var_name(value: object) -> str:
    name = _text(value)
    if not _ENV_NAME.fullmatch(name):
        raise ValueError(f"must be an environment variable name like {DEFAULT_SESSION_ENV}")
    return name


def _log_level(value: object) -> str:
    level = _text(value).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"expected one of: {', '.join(LOG_LEVELS)}")
    return level


def _log_dir(value: object) -> str:
    path = _text(value)
    if "\x00" in path:
        raise ValueError("must not contain NUL bytes")
    return path


def _schema_version(value: object) -> int:
    version = _integer(0)(value)
    if version < CONFIG_SCHEMA_VERSION:
        raise ValueError(
            f"version {version} predates {CONFIG_SCHEMA_VERSION}; "
            "update shiftwatch.toml to the current layout"
        )
    if version > CONFIG_SCHEMA_VERSION:
        raise ValueError(
            f"version {version} is newer than {CONFIG_SCHEMA_VERSION}; upgrade shiftwatch"
        )
    return version


SETTINGS: Final[tuple[Setting, ...]] = (
    Setting("meta", "schema_version", CONFIG_SCHEMA_VERSION, _schema_version),
    Setting("input", "base_url", DEFAULT_BASE_URL, _base_url),
    Setting("input", "year", DEFAULT_PUZZLE_YEAR, _integer(2015)),
    Setting("input", "day", DEFAULT_PUZZLE_DAY, _integer(1, 25)),
    Setting("input", "session_env", DEFAULT_SESSION_ENV, _env_var_name),
    Setting("input", "timeout_seconds", 30.0, _seconds),
    Setting("observability", "log_level", "WARNING", _log_level),
    Setting("observability", "log_dir", "logs/", _log_dir),
    Setting("observability", "log_to_file", False, _flag),
    Setting("observability", "redact_secrets", True, _flag),
)
SECTIONS: Final[tuple[str, ...]] = tuple(dict.fromkeys(s.section for s in SETTINGS))


def _defaults() -> dict[str, dict[str, Any]]:
    table: dict[str, dict[str, Any]] = {section: {} for section in SECTIONS}
    for setting in SETTINGS:
        table[setting.section][setting.key] = setting.default
    return table


DEFAULT_CONFIG: Final[dict[str, dict[str, Any]]] = _defaults()


def default_config() -> dict[str, dict[str, Any]]:
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``overlay`` merged in section by section. Inputs are untouched."""

    merged = copy.deepcopy(dict(base))
    for name, value in overlay.items():
        current = merged.get(name)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[name] = merge_config(current, value)
        else:
            merged[name] = copy.deepcopy(value)
    return merged


def validate_config(config: object) -> tuple[ConfigValidationIssue, ...]:
    """Every problem found in ``config``; an empty tuple means valid."""

    return _check(config)[1]


def assert_valid_config(config: object) -> dict[str, dict[str, Any]]:
    """Return the normalized config or raise :class:`ConfigValidationError`."""

    normalized, issues = _check(config)
    if issues:
        raise ConfigValidationError(issues)
    return normalized


def redact_config(config: Mapping[str, Any]) -> dict[str, Any]:
    redacted = redact(config)
    return redacted if isinstance(redacted, dict) else {}


def _check(config: object) -> tuple[dict[str, dict[str, Any]], tuple[ConfigValidationIssue, ...]]:
    issues: list[ConfigValidationIssue] = []
    normalized: dict[str, dict[str, Any]] = {}
    if not isinstance(config, Mapping):
        issues.append(
            ConfigValidationIssue("<root>", f"expected table, got {type(config).__name__}")
        )
        return normalized, tuple(issues)

    for name in config:
        if name not in SECTIONS:
            issues.append(ConfigValidationIssue(str(name), "unknown section"))

    known = {setting.path for setting in SETTINGS}
    for section in SECTIONS:
        table = config.get(section)
        if not isinstance(table, Mapping):
            issues.append(ConfigValidationIssue(section, "missing or not a table"))
            continue
        normalized[section] = {}
        for key in table:
            path = f"{section}.{key}"
            if path in known:
                continue
            if is_secret_key(str(key)):
                issues.append(
                    ConfigValidationIssue(
                        path,
                        "secrets do not belong in the config file; put the value in an "
                        "environment variable and name it with an *_env key",
                    )
                )
            else:
                issues.append(ConfigValidationIssue(path, "unknown field"))

    for setting in SETTINGS:
        table = config.get(setting.section)
        if not isinstance(table, Mapping):
            continue
        if setting.key not in table:
            issues.append(ConfigValidationIssue(setting.path, "missing required field"))
            continue
        try:
            normalized[setting.section][setting.key] = setting.check(table[setting.key])
        except ValueError as exc:
            issues.append(ConfigValidationIssue(setting.path, str(exc)))

    return normalized, tuple(issues)


__all__ = [
    "ConfigValidationError",
    "ConfigValidationIssue",
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "SECTIONS",
    "SETTINGS",
    "Setting",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "redact_config",
    "validate_config",
]
