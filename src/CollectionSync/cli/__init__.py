"""CLI package for CollectionSync.

Wires configuration, logging and a collection data service behind a small
click interface for one-off reads and writes against the API.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from CollectionSync.cli.runner import CommandRunner
from CollectionSync.cli.ui import cli


def main() -> None:
    """Run CollectionSync CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
