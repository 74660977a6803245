"""CLI package for StudyFinder command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from StudyFinder.cli.runner import CommandRunner
from StudyFinder.cli.ui import cli


def main() -> None:
    """Run StudyFinder CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
