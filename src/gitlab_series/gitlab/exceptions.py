"""GitLab client exceptions."""

from gitlab_series.exceptions import GitSeriesError


class GitLabClientError(GitSeriesError):
    """Base exception for GitLab client errors."""

    pass


class GitLabConnectionError(GitLabClientError):
    """Raised when the GitLab server cannot be reached."""

    pass


class GitLabAuthenticationError(GitLabClientError):
    """Raised when authentication fails (401)."""

    pass


class GitLabNotFoundError(GitLabClientError):
    """Raised when a resource is not found (404)."""

    pass
