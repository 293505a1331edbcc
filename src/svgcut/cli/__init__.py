"""Command-line interface for svgcut.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Verbose/quiet output modes
- Dry-run mode reporting what would be plotted
- Detailed error reporting
"""

from svgcut.cli.app import cli, main

__all__ = ["cli", "main"]
