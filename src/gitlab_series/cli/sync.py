"""Sync commands for gitlab-series."""

import json
from typing import TYPE_CHECKING

import typer
from rich.markup import escape

from gitlab_series.cli.common import (
    AllOption,
    ForceOption,
    OutputFormatOption,
    console,
    print_result_line,
    run_command,
)
from gitlab_series.config import GitLabConfig, get_settings
from gitlab_series.gitlab import GitLabClient
from gitlab_series.repository import (
    EmailResolver,
    ObjectWriter,
    RefStore,
    open_repository,
    sync_refname,
)
from gitlab_series.series import (
    OutputFormat,
    Reconciler,
    SnapshotBuilder,
    StateFilter,
    SyncDriver,
    SyncRunResult,
)

if TYPE_CHECKING:
    from git import Repo

    from gitlab_series.config import Settings
    from gitlab_series.series.driver import ResultCallback


def create_driver(
    repo: "Repo",
    client: GitLabClient,
    settings: "Settings",
    on_result: "ResultCallback | None" = None,
) -> tuple[SyncDriver, RefStore]:
    """Wire the builder, reconciler and driver around one repository."""
    refs = RefStore(repo, remote=settings.remote)
    emails = EmailResolver(repo, branch=settings.primary_branch, placeholder=settings.unknown_email)
    builder = SnapshotBuilder(refs, ObjectWriter(repo), emails)
    reconciler = Reconciler(refs, emails)
    return SyncDriver(client, builder, reconciler, on_result=on_result), refs


def sync(
    all_: AllOption = False,
    force: ForceOption = False,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Import GitLab merge requests as git-series branches.

    Examples:
        gitlab-series sync
        gitlab-series sync --all
        gitlab-series sync --force --format json
        gitlab-series -v sync  # Debug logging
    """
    text = output_format == OutputFormat.TEXT

    def _sync() -> SyncRunResult:
        settings = get_settings()
        repo = open_repository()
        config = GitLabConfig.from_repository(repo)

        client = GitLabClient(config, ssl_verify=settings.ssl_verify, timeout=settings.timeout)
        client.check_connection()

        driver, refs = create_driver(
            repo,
            client,
            settings,
            on_result=print_result_line if text else None,
        )

        if text:
            console.print(f"[dim]Fetching from {escape(refs.remote)}[/dim]")
        refs.fetch()

        state_filter = StateFilter.ALL if all_ else StateFilter.OPEN
        return driver.run(state_filter, force=force)

    result = run_command(_sync, error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
        return

    console.print()
    console.print(
        f"[bold]Sync Complete[/bold] "
        f"([green]{result.created} created[/green], "
        f"[blue]{result.updated} updated[/blue], "
        f"[dim]{result.unchanged} unchanged[/dim], "
        f"[red]{result.failed} failed[/red] "
        f"in {result.duration_seconds:.1f}s)"
    )


def show(
    iid: int = typer.Argument(..., help="Merge request IID"),
) -> None:
    """Print the cover message stored on a merge request's sync branch.

    Examples:
        gitlab-series show 42
    """

    def _show() -> tuple[str, str, str]:
        refs = RefStore(open_repository(), remote=get_settings().remote)
        tip = refs.sync_tip(iid)
        if tip is None:
            console.print(f"[red]Error:[/red] No sync branch for !{iid} ({sync_refname(iid)})")
            raise typer.Exit(1)
        cover = (tip.tree / "cover").data_stream.read().decode("utf-8")
        return tip.hexsha, tip.tree.hexsha, cover

    commit_sha, tree_sha, cover = run_command(_show)
    console.print(f"[dim]commit {commit_sha}  tree {tree_sha}[/dim]")
    console.print(cover, markup=False, highlight=False, end="")
