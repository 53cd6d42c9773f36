"""Configuration settings for gitlab-series.

Two layers:
- Settings: process-level knobs from environment variables / .env
- GitLabConfig: the GitLab connection, read from the repository's git config
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitlab_series.exceptions import ConfigError

if TYPE_CHECKING:
    from git import Repo

GITLAB_URL_KEY = "gitlab.url"
GITLAB_TOKEN_KEY = "gitlab.privateToken"
GITLAB_PROJECT_KEY = "gitlab.projectId"


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GITLAB_SERIES_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Repository
    # --------------------------------------------------------------------------
    remote: str = Field(
        default="origin",
        description="Remote whose tracking refs hold the merge request branches",
    )
    primary_branch: str = Field(
        default="master",
        description="Branch whose history is searched to resolve author emails",
    )
    unknown_email: str | None = Field(
        default=None,
        description="Placeholder email for authors with no commit on the primary "
        "branch. When unset, such merge requests fail to sync.",
    )

    # --------------------------------------------------------------------------
    # GitLab API
    # --------------------------------------------------------------------------
    ssl_verify: bool = Field(
        default=True,
        description="Verify the GitLab server's TLS certificate",
    )
    timeout: int = Field(
        default=30,
        ge=1,
        description="GitLab request timeout in seconds",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


class GitLabConfig(BaseModel):
    """GitLab connection details stored in the repository's git config.

    Set with:
        git config gitlab.url https://gitlab.example.com
        git config gitlab.privateToken <token>
        git config gitlab.projectId 42
    """

    url: str = Field(min_length=1, description="GitLab base URL")
    private_token: str = Field(min_length=1, description="GitLab access token")
    project_id: int = Field(gt=0, description="Numeric GitLab project ID")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @classmethod
    def from_repository(cls, repo: Repo) -> GitLabConfig:
        """Read the GitLab settings from a repository's git config.

        Args:
            repo: Repository to read configuration from

        Returns:
            Validated GitLabConfig

        Raises:
            ConfigError: If a key is missing or a value is invalid
        """
        from gitlab_series.repository.repo import read_config_value

        values = {
            "url": read_config_value(repo, GITLAB_URL_KEY),
            "private_token": read_config_value(repo, GITLAB_TOKEN_KEY),
            "project_id": read_config_value(repo, GITLAB_PROJECT_KEY),
        }
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise ConfigError(f"Invalid GitLab configuration: {fields}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
