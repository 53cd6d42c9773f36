"""Main CLI application for gitlab-series."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from gitlab_series import __version__
from gitlab_series.cli import sync as sync_cmd
from gitlab_series.config import get_settings
from gitlab_series.logging import setup_logging

app = typer.Typer(
    name="gitlab-series",
    help="Mirror GitLab merge requests into local git-series branches.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gitlab-series version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """gitlab-series - GitLab merge requests as git-series branches."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.command("sync")(sync_cmd.sync)
app.command("show")(sync_cmd.show)


if __name__ == "__main__":
    app()
