"""Command-line interface for reelname.

This package provides the Typer app and the global Rich console used for all
user-facing output.

- app: The Typer application object (see commands.py), the single CLI entry
  point for all commands.
- console: Rich Console instance for consistent, styled output.
"""

from rich.console import Console

# Reason: Global console object ensures all output is styled and consistent across
# commands.
console = Console()

from reelname.cli.commands import app, main  # noqa: E402

__all__ = ["app", "console", "main"]
