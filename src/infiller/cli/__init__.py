"""Command-line interface for infiller.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for layer processing
- Verbose/quiet output modes
- Detailed error reporting
"""

from infiller.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
