"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for pair processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]glyphcompose[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_project_info(
    project_path: str,
    name: str,
    characters: int,
    drawn: int,
    upm: int,
) -> None:
    """Print project information.

    Args:
        project_path: Path to the project file
        name: Project display name
        characters: Number of characters in the character sets
        drawn: Number of drawn outlines
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(project_path)
    line1.append(f" ({name})")
    console.print(line1)
    console.print(f"  {characters:,} characters {SYM_DOT} {drawn:,} drawn {SYM_DOT} {upm:,} UPM")


def print_names(names: Sequence[str], limit: int | None = None) -> None:
    """Print a comma-separated name list, truncated after ``limit`` names."""
    shown = list(names if limit is None else names[:limit])
    text = ", ".join(shown)
    if limit is not None and len(names) > limit:
        text += f" {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(names) - limit} more)"
    console.print(Text(f"  {text}"))


def print_table(title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Print a simple table with one header row."""
    table = Table(title=title, title_justify="left", show_edge=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_accept_summary(
    output_path: str | None,
    positioned: int,
    cascaded: int,
    fused: int,
    kerned: int,
    skipped: int,
) -> None:
    """Print the result of an accept run.

    Args:
        output_path: Path of the written project, None for a dry run
        positioned: Pairs positioned directly
        cascaded: Pairs positioned through an attachment class
        fused: Outlines baked
        kerned: Kern pairs given a neutral value
        skipped: Pairs not ready yet
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green]")
    if output_path is not None:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    skipped_style = "yellow" if skipped > 0 else "green"
    console.print(
        f"  {positioned} positioned {SYM_DOT} {cascaded} cascaded {SYM_DOT} "
        f"{fused} fused {SYM_DOT} {kerned} kerned {SYM_DOT} "
        f"[{skipped_style}]{skipped} skipped[/{skipped_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
