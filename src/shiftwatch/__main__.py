"""Module entrypoint for ``python -m shiftwatch``."""

from __future__ import annotations

from shiftwatch.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
