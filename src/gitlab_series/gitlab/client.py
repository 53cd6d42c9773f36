"""GitLab API client wrapper using python-gitlab.

This module provides a typed interface to the two GitLab endpoints the sync
needs: listing a project's merge requests and listing one merge request's
notes. Pagination is handled by python-gitlab.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import gitlab
import requests
from gitlab.exceptions import GitlabAuthenticationError, GitlabError
from pydantic import ValidationError

from gitlab_series.logging import get_logger
from gitlab_series.schemas import DiscussionNote, InvalidMergeRequest, MergeRequestRef
from gitlab_series.series.enums import StateFilter

from .exceptions import (
    GitLabAuthenticationError,
    GitLabClientError,
    GitLabConnectionError,
    GitLabNotFoundError,
)

if TYPE_CHECKING:
    from gitlab.v4.objects import Project

    from gitlab_series.config import GitLabConfig

logger = get_logger(__name__)


class GitLabClient:
    """GitLab API client for merge request and note retrieval.

    Usage:
        client = GitLabClient(GitLabConfig.from_repository(repo))
        client.check_connection()
        for mr in client.list_merge_requests(StateFilter.OPEN):
            notes = client.list_notes(mr.iid)
    """

    def __init__(
        self,
        config: GitLabConfig,
        *,
        ssl_verify: bool = True,
        timeout: int = 30,
    ) -> None:
        """Initialize the GitLab client.

        Args:
            config: GitLab URL, token and project ID
            ssl_verify: Verify the server certificate
            timeout: Request timeout in seconds
        """
        self._config = config
        self._ssl_verify = ssl_verify
        self._timeout = timeout
        self._client: gitlab.Gitlab | None = None

    @property
    def project_id(self) -> int:
        return self._config.project_id

    @property
    def _gitlab(self) -> gitlab.Gitlab:
        """Get or create the python-gitlab client instance."""
        if self._client is None:
            self._client = gitlab.Gitlab(
                url=self._config.url,
                private_token=self._config.private_token,
                ssl_verify=self._ssl_verify,
                timeout=self._timeout,
            )
        return self._client

    def _project(self) -> Project:
        return self._gitlab.projects.get(self._config.project_id, lazy=True)

    def check_connection(self) -> None:
        """Authenticate against the server.

        Raises:
            GitLabAuthenticationError: If the token is rejected
            GitLabConnectionError: If the server cannot be reached
        """
        try:
            self._gitlab.auth()
        except (GitlabError, requests.RequestException) as e:
            raise self._handle_error(e) from e
        logger.info("Connected to GitLab at {}", self._config.url)

    def list_merge_requests(
        self,
        state_filter: StateFilter = StateFilter.OPEN,
    ) -> list[MergeRequestRef | InvalidMergeRequest]:
        """List the project's merge requests, oldest update first.

        Args:
            state_filter: OPEN for opened merge requests only, ALL for every state

        Returns:
            MergeRequestRef per valid payload, InvalidMergeRequest per payload
            that failed validation, in listing order
        """
        kwargs: dict[str, Any] = {"get_all": True, "order_by": "updated_at", "sort": "asc"}
        if state_filter == StateFilter.OPEN:
            kwargs["state"] = "opened"

        try:
            items = self._project().mergerequests.list(**kwargs)
        except (GitlabError, requests.RequestException) as e:
            raise self._handle_error(e) from e

        return [self._parse_merge_request(item.attributes) for item in items]

    def _parse_merge_request(self, payload: dict[str, Any]) -> MergeRequestRef | InvalidMergeRequest:
        try:
            return MergeRequestRef.from_api(payload)
        except ValidationError as e:
            iid = payload.get("iid")
            fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in e.errors())
            logger.warning("Invalid payload for merge request {}: {}", iid, fields)
            return InvalidMergeRequest(
                iid=iid if isinstance(iid, int) else 0,
                title=str(payload.get("title") or ""),
                error=GitLabClientError(f"Invalid merge request payload: {fields}"),
            )

    def list_notes(self, iid: int) -> list[DiscussionNote]:
        """List all notes on one merge request, oldest first.

        Raises:
            GitLabNotFoundError: If the merge request doesn't exist
            GitLabClientError: If the payload cannot be parsed
        """
        try:
            mr = self._project().mergerequests.get(iid, lazy=True)
            items = mr.notes.list(get_all=True, order_by="created_at", sort="asc")
        except (GitlabError, requests.RequestException) as e:
            raise self._handle_error(e) from e

        try:
            return DiscussionNote.from_api_list([item.attributes for item in items])
        except ValidationError as e:
            raise GitLabClientError(f"Invalid notes payload for !{iid}: {e}") from e

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: Exception) -> GitLabClientError:
        """Convert python-gitlab/requests exceptions to our custom exceptions."""
        if isinstance(error, requests.RequestException):
            return GitLabConnectionError(f"Cannot reach GitLab at {self._config.url}: {error}")
        if isinstance(error, GitlabAuthenticationError):
            return GitLabAuthenticationError("Invalid GitLab token")

        status = getattr(error, "response_code", None)
        if status == 401:
            return GitLabAuthenticationError("Invalid GitLab token")
        elif status == 404:
            return GitLabNotFoundError(str(error))
        else:
            return GitLabClientError(f"GitLab API error ({status}): {error}")
