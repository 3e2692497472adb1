"""Plain-text output for the shiftwatch CLI.

Headings are bold only when writing to a terminal and neither ``--no-color``
nor the ``NO_COLOR`` environment variable asks otherwise.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

_BOLD = "\033[1m"
_RESET = "\033[0m"
_GUTTER = "  "


class CLIRenderer:
    """Writes report lines to one stream."""

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.verbose = verbose
        self._out = stream if stream is not None else sys.stdout
        self._bold = not no_color and not os.environ.get("NO_COLOR") and self._out.isatty()

    def _line(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def heading(self, text: str) -> None:
        self._line(f"{_BOLD}{text}{_RESET}" if self._bold else text)

    def section(self, title: str) -> None:
        self._line()
        self.heading(title)

    def kv(self, key: str, value: object) -> None:
        self._line(f"{key}: {value}")

    def text(self, line: str) -> None:
        self._line(line)

    def detail(self, line: str) -> None:
        """Indented line shown only with ``--verbose``."""

        if self.verbose:
            self._line(_GUTTER + line)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Left-aligned columns under a dashed rule; nothing at all for no rows."""

        if not rows:
            return
        columns = list(zip(headers, *rows, strict=False))
        widths = [max(len(str(cell)) for cell in column) for column in columns]

        def render(cells: Sequence[str]) -> str:
            padded = (str(cell).ljust(width) for cell, width in zip(cells, widths, strict=False))
            return (_GUTTER + _GUTTER.join(padded)).rstrip()

        self._line(render(headers))
        self._line(render(["-" * width for width in widths]))
        for row in rows:
            self._line(render(row))


def create_renderer(
    *,
    no_color: bool = False,
    verbose: bool = False,
    stream: TextIO | None = None,
) -> CLIRenderer:
    return CLIRenderer(no_color=no_color, verbose=verbose, stream=stream)


__all__ = ["CLIRenderer", "create_renderer"]
