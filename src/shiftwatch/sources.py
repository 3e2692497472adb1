"""Input sources for shift logs: local files, stdin, or the puzzle site over HTTP."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import requests

from shiftwatch.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_PUZZLE_DAY,
    DEFAULT_PUZZLE_YEAR,
    DEFAULT_SESSION_ENV,
)

if TYPE_CHECKING:
    from typing import TextIO

logger = logging.getLogger(__name__)

STDIN_MARKER: Final[str] = "-"
_USER_AGENT: Final[str] = "shiftwatch (+https://pypi.org/project/shiftwatch/)"


class FetchError(RuntimeError):
    """Raised when puzzle input cannot be fetched over HTTP."""


class InputReadError(OSError):
    """Raised when a local input file cannot be read."""


@dataclass(frozen=True, slots=True)
class PuzzleInputSource:
    """Where and how to download one day's puzzle input."""

    base_url: str = DEFAULT_BASE_URL
    year: int = DEFAULT_PUZZLE_YEAR
    day: int = DEFAULT_PUZZLE_DAY
    session_env: str = DEFAULT_SESSION_ENV
    timeout_seconds: float = 30.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PuzzleInputSource:
        section = config.get("input", {})
        if not isinstance(section, Mapping):
            return cls()
        return cls(
            base_url=str(section.get("base_url", DEFAULT_BASE_URL)),
            year=int(section.get("year", DEFAULT_PUZZLE_YEAR)),
            day=int(section.get("day", DEFAULT_PUZZLE_DAY)),
            session_env=str(section.get("session_env", DEFAULT_SESSION_ENV)),
            timeout_seconds=float(section.get("timeout_seconds", 30.0)),
        )

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.year}/day/{self.day}/input"

    def fetch(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> str:
        """Download the input text, authenticating with the session cookie from the env."""

        env_map = os.environ if environ is None else environ
        cookie = env_map.get(self.session_env, "").strip()
        if not cookie:
            raise FetchError(
                f"no session cookie: set the {self.session_env} environment variable "
                "or pass an input file"
            )

        http = session if session is not None else requests.Session()
        logger.info("fetching puzzle input from %s", self.url)
        try:
            response = http.get(
                self.url,
                headers={"User-Agent": _USER_AGENT},
                cookies={"session": cookie},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"unable to fetch {self.url}: {exc}") from exc
        finally:
            if session is None:
                http.close()

        logger.debug("fetched %d characters of puzzle input", len(response.text))
        return response.text


def read_input(path: str | Path, *, stdin: TextIO | None = None) -> str:
    """Read an input block from ``path``, or from stdin when ``path`` is ``-``."""

    if str(path) == STDIN_MARKER:
        stream = stdin if stdin is not None else sys.stdin
        try:
            return stream.read()
        except UnicodeDecodeError as exc:
            raise InputReadError(f"stdin is not valid UTF-8 text: {exc}") from exc

    resolved = Path(path).expanduser()
    try:
        return resolved.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputReadError(f"input file not found: {resolved}") from exc
    except UnicodeDecodeError as exc:
        raise InputReadError(f"input file {resolved} is not valid UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise InputReadError(f"unable to read input file {resolved}: {exc}") from exc


__all__ = ["FetchError", "InputReadError", "PuzzleInputSource", "STDIN_MARKER", "read_input"]
