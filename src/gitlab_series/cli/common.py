"""Common CLI option factories and helpers.

This module centralizes reusable CLI options and provides:
- `run_command`: Unified error handling for startup failures in CLI commands
- `print_result_line`: One line per merge request outcome
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from gitlab_series.series import MergeRequestSyncResult, OutputFormat, SyncOutcome

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_command(
    func: Callable[[], T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute a CLI command body with unified error handling.

    Catches exceptions, prints user-friendly error messages, and exits with
    code 1. Per merge request failures never reach this point; they are
    recorded by the sync driver.

    Args:
        func: Zero-argument callable doing the work
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the callable

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return func()
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


_OUTCOME_STYLES = {
    SyncOutcome.CREATED: ("green", "Created"),
    SyncOutcome.UPDATED: ("blue", "Updated"),
    SyncOutcome.UNCHANGED: ("dim", "Unchanged"),
    SyncOutcome.FAILED: ("red", "Failed"),
}


def print_result_line(result: MergeRequestSyncResult) -> None:
    """Print one line for a merge request outcome."""
    style, label = _OUTCOME_STYLES[result.outcome]
    if result.outcome == SyncOutcome.FAILED:
        detail = result.reason or "unknown error"
    else:
        detail = result.title
        # Truncate title if too long
        if len(detail) > 60:
            detail = detail[:57] + "..."
    console.print(f"[{style}]{label}[/{style}] !{result.iid}: {escape(detail)}")


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

AllOption = Annotated[
    bool,
    typer.Option(
        "--all",
        "-a",
        help="Sync all merge requests (default is open only)",
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        "-f",
        help="Update all merge requests, even unchanged ones",
    ),
]
