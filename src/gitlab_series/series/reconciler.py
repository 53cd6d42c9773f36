"""Reconciler - decide and perform the commit for a freshly built snapshot.

State machine over refs/heads/git-series/gitlab/<iid>:

    no branch                          → commit [source]        CREATED
    tip tree == snapshot, not forced   → nothing                UNCHANGED
    tip tree != snapshot, or forced    → commit [tip, source]   UPDATED

The second parent of an update keeps the real source commits reachable
from the sync branch, while the first parent preserves sync history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from git import Actor, Commit
from gitdb.exc import ODBError

from gitlab_series.exceptions import ObjectWriteError, SourceNotFoundError
from gitlab_series.logging import get_logger
from gitlab_series.repository import sync_refname

from .results import MergeRequestSyncResult

if TYPE_CHECKING:
    from gitlab_series.repository import EmailResolver, RefStore
    from gitlab_series.schemas import MergeRequestRef

    from .builder import Snapshot

logger = get_logger(__name__)

UNKNOWN_IDENTITY = "UNKNOWN"


def format_identity(value: str) -> str:
    """Trim a signature name or email; git refuses empty identities."""
    value = value.strip()
    return value or UNKNOWN_IDENTITY


def commit_message(iid: int) -> str:
    return f"Import latest version of !{iid}"


class Reconciler:
    """Advances a merge request's sync branch to a snapshot.

    Usage:
        reconciler = Reconciler(RefStore(repo), EmailResolver(repo))
        result = reconciler.reconcile(mr, snapshot, force=False)
        print(result.outcome)

    Commits are authored as the merge request author at its updated_at time
    and committed with the repository's configured identity at the current
    time. The branch ref is only moved after the commit object is written.
    """

    def __init__(self, refs: RefStore, emails: EmailResolver) -> None:
        self._refs = refs
        self._emails = emails

    def reconcile(
        self,
        mr: MergeRequestRef,
        snapshot: Snapshot,
        force: bool = False,
    ) -> MergeRequestSyncResult:
        """Create, skip or update the sync branch for one merge request.

        Args:
            mr: Merge request the snapshot was built from
            snapshot: Freshly built snapshot
            force: Append a commit even if the tree is unchanged

        Returns:
            MergeRequestSyncResult with CREATED, UPDATED or UNCHANGED

        Raises:
            SourceNotFoundError: The snapshot's source commit is missing
            AuthorNotFoundError: The merge request author has no email
            ObjectWriteError: The commit or ref could not be written
        """
        mr_logger = logger.bind(mr=mr.iid)
        refname = sync_refname(mr.iid)
        tip = self._refs.sync_tip(mr.iid)

        if tip is not None and tip.tree.hexsha == snapshot.tree_sha and not force:
            mr_logger.info("!{} already up-to-date", mr.iid)
            return MergeRequestSyncResult.from_unchanged(mr.iid, mr.title, tip.hexsha, snapshot.tree_sha)

        source = self._refs.resolve(snapshot.source_sha)
        if source is None:
            raise SourceNotFoundError(f"Source commit {snapshot.source_sha} not found")

        parents = [source] if tip is None else [tip, source]
        commit = self._write_commit(mr, snapshot, parents)

        old_sha = tip.hexsha if tip is not None else None
        self._refs.update_ref(refname, commit.hexsha, old_sha, f"gitlab-series: sync !{mr.iid}")

        if tip is None:
            mr_logger.info("Created {} at {}", refname, commit.hexsha[:12])
            return MergeRequestSyncResult.from_created(mr.iid, mr.title, commit.hexsha, snapshot.tree_sha)

        mr_logger.info("Updated {} to {}", refname, commit.hexsha[:12])
        return MergeRequestSyncResult.from_updated(mr.iid, mr.title, commit.hexsha, snapshot.tree_sha)

    def _author(self, mr: MergeRequestRef) -> Actor:
        return Actor(
            format_identity(mr.author.name),
            format_identity(self._emails.resolve(mr.author.name)),
        )

    def _write_commit(self, mr: MergeRequestRef, snapshot: Snapshot, parents: list[Commit]) -> Commit:
        author = self._author(mr)
        author_date = f"{int(mr.updated_at.timestamp())} +0000"
        try:
            return Commit.create_from_tree(
                self._refs.repo,
                snapshot.tree_sha,
                commit_message(mr.iid),
                parent_commits=parents,
                head=False,
                author=author,
                author_date=author_date,
            )
        except (OSError, ValueError, ODBError) as e:
            raise ObjectWriteError(f"Failed to write commit for !{mr.iid}: {e}") from e
