"""Ref lookups and updates against the local repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from git.exc import GitCommandError
from gitdb.exc import BadName, BadObject

from gitlab_series.exceptions import ObjectWriteError
from gitlab_series.logging import get_logger

if TYPE_CHECKING:
    from git import Commit, Repo

logger = get_logger(__name__)

SYNC_REF_PREFIX = "refs/heads/git-series/gitlab"
NULL_SHA = "0" * 40


def sync_refname(iid: int) -> str:
    """Full name of the sync branch for a merge request."""
    return f"{SYNC_REF_PREFIX}/{iid}"


class RefStore:
    """Reads and advances refs in a single repository.

    Usage:
        refs = RefStore(repo, remote="origin")
        refs.fetch()
        target = refs.resolve(refs.remote_refname("main"))
    """

    def __init__(self, repo: Repo, remote: str = "origin") -> None:
        self._repo = repo
        self._remote = remote

    @property
    def repo(self) -> Repo:
        return self._repo

    @property
    def remote(self) -> str:
        return self._remote

    def remote_refname(self, branch: str) -> str:
        """Remote-tracking ref for a branch, e.g. refs/remotes/origin/main."""
        return f"refs/remotes/{self._remote}/{branch}"

    def resolve(self, refname: str) -> Commit | None:
        """Resolve a ref to the commit it points at, or None if it is absent."""
        try:
            return self._repo.commit(refname)
        except (BadName, BadObject, ValueError):
            return None

    def merge_base(self, a: Commit, b: Commit) -> Commit | None:
        """Best common ancestor of two commits, or None if they are unrelated."""
        bases = self._repo.merge_base(a, b)
        if not bases:
            return None
        return bases[0]

    def sync_tip(self, iid: int) -> Commit | None:
        """Current tip of a merge request's sync branch, if it exists."""
        return self.resolve(sync_refname(iid))

    def update_ref(
        self,
        refname: str,
        new_sha: str,
        old_sha: str | None,
        message: str,
    ) -> None:
        """Atomically point refname at new_sha.

        The update only succeeds if the ref still holds old_sha (or does not
        exist yet when old_sha is None), so a concurrent writer makes this
        fail instead of being overwritten.

        Raises:
            ObjectWriteError: If git refuses the update
        """
        try:
            self._repo.git.update_ref("-m", message, refname, new_sha, old_sha or NULL_SHA)
        except GitCommandError as e:
            raise ObjectWriteError(f"Failed to update {refname}: {e.stderr.strip()}") from e

    def fetch(self) -> bool:
        """Fetch the remote's branches. Failures are logged, not raised.

        Returns:
            True if the fetch succeeded
        """
        try:
            self._repo.git.fetch(self._remote)
        except GitCommandError as e:
            logger.error("Fetching from {} failed, using existing refs: {}", self._remote, e)
            return False
        return True
