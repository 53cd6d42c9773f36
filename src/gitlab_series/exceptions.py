"""Exceptions raised while mirroring merge requests into the local repository.

Startup-level errors (ConfigError, RepositoryConnectionError) abort the run.
BuildError and its subclasses are scoped to a single merge request: the sync
driver records them as a failed outcome and moves on to the next one.
"""


class GitSeriesError(Exception):
    """Base exception for gitlab-series errors."""

    pass


class ConfigError(GitSeriesError):
    """Raised when required repository configuration is missing or invalid."""

    pass


class RepositoryConnectionError(GitSeriesError):
    """Raised when the local git repository cannot be opened."""

    pass


class BuildError(GitSeriesError):
    """Base class for failures that abort one merge request's sync."""

    pass


class RefResolutionError(BuildError):
    """Raised when a branch needed for the snapshot cannot be resolved."""

    def __init__(self, message: str, refname: str | None = None) -> None:
        super().__init__(message)
        self.refname = refname


class TargetNotFoundError(RefResolutionError):
    """Raised when the merge request's target branch is not fetched locally."""

    pass


class SourceNotFoundError(RefResolutionError):
    """Raised when the merge request's source branch is not fetched locally."""

    pass


class MergeBaseNotFoundError(RefResolutionError):
    """Raised when target and source share no common ancestor."""

    pass


class AuthorNotFoundError(BuildError):
    """Raised when no commit on the primary branch matches an author name."""

    def __init__(self, name: str, branch: str) -> None:
        super().__init__(f"No commit by '{name}' found on {branch}")
        self.name = name
        self.branch = branch


class ObjectWriteError(BuildError):
    """Raised when a blob, tree, commit or ref cannot be written.

    The sync branch ref is never advanced when this is raised.
    """

    pass
