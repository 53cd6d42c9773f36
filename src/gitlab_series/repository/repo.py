"""Opening the local repository and reading its configuration."""

from __future__ import annotations

from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitlab_series.exceptions import ConfigError, RepositoryConnectionError
from gitlab_series.logging import get_logger

logger = get_logger(__name__)


def open_repository(path: str | Path | None = None) -> Repo:
    """Open the repository at path, or the one found via GIT_DIR / the cwd.

    Raises:
        RepositoryConnectionError: If no repository can be opened
    """
    try:
        repo = Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryConnectionError(f"Not a git repository: {e}") from e
    logger.info("Connected to local repo at {}", repo.git_dir)
    return repo


def read_config_value(repo: Repo, key: str) -> str:
    """Read a single git config value (keys are case-insensitive in git).

    Raises:
        ConfigError: If the key is not set
    """
    try:
        value: str = repo.git.config("--get", key)
    except GitCommandError as e:
        raise ConfigError(f"Missing git config '{key}' (set it with: git config {key} <value>)") from e
    return value.strip()
