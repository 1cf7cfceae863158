"""Command-line interface for glyphcompose.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Project summary and rule inspection
- Batch accept and automatic kerning with progress bars
- Dry-run mode and optional file logging
"""

from glyphcompose.cli.app import cli, main

__all__ = ["cli", "main"]
