"""Resolve GitLab display names to email addresses from commit history.

GitLab's API does not expose other users' emails, so the address recorded
on the author's most recent commit to the primary branch is used instead.
Matching is by free-text name: the first (most recent) match wins, which is
not necessarily the right person when two contributors share a name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from git.exc import GitCommandError

from gitlab_series.exceptions import AuthorNotFoundError
from gitlab_series.logging import get_logger

if TYPE_CHECKING:
    from git import Repo

logger = get_logger(__name__)


class EmailResolver:
    """Looks up author emails on one branch, memoising results for the run.

    Args:
        repo: Repository whose history is searched
        branch: Branch to search (the project's primary branch)
        placeholder: Returned for unknown authors instead of raising
    """

    def __init__(self, repo: Repo, branch: str = "master", placeholder: str | None = None) -> None:
        self._repo = repo
        self._branch = branch
        self._placeholder = placeholder
        self._cache: dict[str, str | None] = {}

    @property
    def branch(self) -> str:
        return self._branch

    def resolve(self, name: str) -> str:
        """Return the email of the latest commit on the branch authored by name.

        Raises:
            AuthorNotFoundError: If nothing matches and no placeholder is set
        """
        if name not in self._cache:
            self._cache[name] = self._lookup(name)

        email = self._cache[name]
        if email is not None:
            return email
        if self._placeholder is not None:
            logger.debug("No commit by {!r}, using placeholder email", name)
            return self._placeholder
        raise AuthorNotFoundError(name, self._branch)

    def _lookup(self, name: str) -> str | None:
        try:
            output: str = self._repo.git.log(
                "-1",
                "--pretty=%aE",
                "--regexp-ignore-case",
                "--fixed-strings",
                f"--author={name}",
                self._branch,
                "--",
            )
        except GitCommandError as e:
            raise AuthorNotFoundError(name, self._branch) from e
        return output.strip() or None
