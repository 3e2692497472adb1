"""Load the effective config: defaults, then ``shiftwatch.toml``, then ``SHIFTWATCH_*`` env vars.

Each setting has exactly one override variable, ``SHIFTWATCH_<SECTION>_<KEY>``
(for example ``SHIFTWATCH_INPUT_DAY``), coerced to the type of the setting's
default. A relative ``observability.log_dir`` is anchored at the directory of
the config file.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from shiftwatch.config.schema import (
    SETTINGS,
    Setting,
    assert_valid_config,
    default_config,
    merge_config,
    redact_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "shiftwatch.toml"

_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigLoadError(ValueError):
    """The config file or an override variable could not be read."""


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Build and validate the effective config.

    ``config_path=None`` looks for ``./shiftwatch.toml`` and tolerates its
    absence; an explicit path must exist.
    """

    path = Path(config_path or DEFAULT_CONFIG_FILE).expanduser().resolve()
    from_file = _read_toml(path, required=config_path is not None)
    from_env = _env_overrides(os.environ if environ is None else environ)

    config = assert_valid_config(merge_config(merge_config(default_config(), from_file), from_env))
    config["observability"]["log_dir"] = _anchor(config["observability"]["log_dir"], path.parent)
    return config


def effective_config(config: Mapping[str, Any]) -> dict[str, Any]:
    """Config as shown by ``shiftwatch config``: secrets masked."""

    return redact_config(config)


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.is_file():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _env_overrides(environ: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    overrides: dict[str, dict[str, Any]] = {}
    for setting in SETTINGS:
        raw = environ.get(setting.env_var)
        if raw is not None:
            overrides.setdefault(setting.section, {})[setting.key] = _coerce(raw, setting)
    return overrides


def _coerce(raw: str, setting: Setting) -> object:
    text = raw.strip()
    where = f"{setting.env_var} ({setting.path})"
    match setting.default:
        case bool():
            if text.lower() in _TRUE:
                return True
            if text.lower() in _FALSE:
                return False
            raise ConfigLoadError(f"{where} must be a boolean: true/false, yes/no, on/off, 1/0")
        case int():
            try:
                return int(text)
            except ValueError as exc:
                raise ConfigLoadError(f"{where} must be an integer") from exc
        case float():
            try:
                return float(text)
            except ValueError as exc:
                raise ConfigLoadError(f"{where} must be a number") from exc
        case _:
            return text


def _anchor(raw: str, base_dir: Path) -> str:
    expanded = Path(os.path.expandvars(raw)).expanduser()
    if not expanded.is_absolute():
        expanded = base_dir / expanded
    return Path(os.path.normpath(expanded)).as_posix()


__all__ = ["ConfigLoadError", "DEFAULT_CONFIG_FILE", "effective_config", "load_config"]
