"""Tests for the GitLab client wrapper."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from gitlab.exceptions import GitlabAuthenticationError, GitlabGetError, GitlabListError

from gitlab_series.config import GitLabConfig
from gitlab_series.gitlab import (
    GitLabAuthenticationError,
    GitLabClient,
    GitLabClientError,
    GitLabConnectionError,
    GitLabNotFoundError,
)
from gitlab_series.schemas import InvalidMergeRequest, MergeRequestRef
from gitlab_series.series import StateFilter
from tests.fixtures import (
    GITLAB_MR_CLOSED_RESPONSE,
    GITLAB_MR_RESPONSE,
    GITLAB_NOTES_RESPONSE,
)


def api_objects(payloads):
    """Wrap payloads the way python-gitlab RESTObjects expose them."""
    return [MagicMock(attributes=payload) for payload in payloads]


@pytest.fixture
def config():
    return GitLabConfig(url="https://gitlab.example.com", private_token="glpat-test", project_id=3)


@pytest.fixture
def mock_gitlab():
    with patch("gitlab_series.gitlab.client.gitlab.Gitlab") as gitlab_cls:
        yield gitlab_cls


@pytest.fixture
def project(mock_gitlab):
    return mock_gitlab.return_value.projects.get.return_value


class TestClientSetup:
    """Tests for lazy client construction."""

    def test_client_created_lazily(self, config, mock_gitlab):
        client = GitLabClient(config, ssl_verify=False, timeout=10)

        mock_gitlab.assert_not_called()
        client.check_connection()

        mock_gitlab.assert_called_once_with(
            url="https://gitlab.example.com",
            private_token="glpat-test",
            ssl_verify=False,
            timeout=10,
        )
        mock_gitlab.return_value.auth.assert_called_once()

    def test_project_id(self, config):
        assert GitLabClient(config).project_id == 3

    def test_project_fetched_lazily(self, config, mock_gitlab, project):
        project.mergerequests.list.return_value = []

        GitLabClient(config).list_merge_requests()

        mock_gitlab.return_value.projects.get.assert_called_once_with(3, lazy=True)


class TestListMergeRequests:
    """Tests for merge request listing."""

    def test_open_filter(self, config, mock_gitlab, project):
        project.mergerequests.list.return_value = api_objects([GITLAB_MR_RESPONSE])

        mrs = GitLabClient(config).list_merge_requests(StateFilter.OPEN)

        project.mergerequests.list.assert_called_once_with(
            get_all=True, order_by="updated_at", sort="asc", state="opened"
        )
        assert [mr.iid for mr in mrs] == [42]

    def test_all_filter_has_no_state(self, config, mock_gitlab, project):
        project.mergerequests.list.return_value = api_objects([GITLAB_MR_RESPONSE, GITLAB_MR_CLOSED_RESPONSE])

        mrs = GitLabClient(config).list_merge_requests(StateFilter.ALL)

        assert "state" not in project.mergerequests.list.call_args.kwargs
        assert [mr.iid for mr in mrs] == [42, 43]

    def test_invalid_payload_kept_in_listing(self, config, mock_gitlab, project):
        """A payload that fails validation stays in place as InvalidMergeRequest."""
        broken = {**GITLAB_MR_RESPONSE, "iid": 41, "state": "reopened"}
        project.mergerequests.list.return_value = api_objects([broken, GITLAB_MR_CLOSED_RESPONSE])

        mrs = GitLabClient(config).list_merge_requests(StateFilter.ALL)

        assert [mr.iid for mr in mrs] == [41, 43]
        invalid = mrs[0]
        assert isinstance(invalid, InvalidMergeRequest)
        assert invalid.title == "Add widgets"
        assert isinstance(invalid.error, GitLabClientError)
        assert "state" in str(invalid.error)
        assert isinstance(mrs[1], MergeRequestRef)

    def test_invalid_payload_without_iid(self, config, mock_gitlab, project):
        project.mergerequests.list.return_value = api_objects([{"title": "Broken"}])

        mrs = GitLabClient(config).list_merge_requests(StateFilter.ALL)

        assert len(mrs) == 1
        assert isinstance(mrs[0], InvalidMergeRequest)
        assert mrs[0].iid == 0
        assert mrs[0].title == "Broken"


class TestListNotes:
    """Tests for note listing."""

    def test_list_notes(self, config, mock_gitlab, project):
        mr = project.mergerequests.get.return_value
        mr.notes.list.return_value = api_objects(GITLAB_NOTES_RESPONSE)

        notes = GitLabClient(config).list_notes(42)

        project.mergerequests.get.assert_called_once_with(42, lazy=True)
        mr.notes.list.assert_called_once_with(get_all=True, order_by="created_at", sort="asc")
        assert [n.id for n in notes] == [301, 302, 303]

    def test_invalid_notes_payload(self, config, mock_gitlab, project):
        mr = project.mergerequests.get.return_value
        mr.notes.list.return_value = api_objects([{"id": 1}])

        with pytest.raises(GitLabClientError, match="Invalid notes payload"):
            GitLabClient(config).list_notes(42)


class TestErrorMapping:
    """Tests for python-gitlab/requests error conversion."""

    def test_authentication_error(self, config, mock_gitlab):
        mock_gitlab.return_value.auth.side_effect = GitlabAuthenticationError("401 Unauthorized", 401)

        with pytest.raises(GitLabAuthenticationError):
            GitLabClient(config).check_connection()

    def test_connection_error(self, config, mock_gitlab):
        mock_gitlab.return_value.auth.side_effect = requests.ConnectionError("refused")

        with pytest.raises(GitLabConnectionError, match="gitlab.example.com"):
            GitLabClient(config).check_connection()

    def test_not_found(self, config, mock_gitlab, project):
        project.mergerequests.get.return_value.notes.list.side_effect = GitlabListError("404 Not Found", 404)

        with pytest.raises(GitLabNotFoundError):
            GitLabClient(config).list_notes(999)

    def test_unauthorized_status(self, config, mock_gitlab, project):
        project.mergerequests.list.side_effect = GitlabListError("401 Unauthorized", 401)

        with pytest.raises(GitLabAuthenticationError):
            GitLabClient(config).list_merge_requests()

    def test_other_status(self, config, mock_gitlab, project):
        project.mergerequests.list.side_effect = GitlabGetError("500 Internal Server Error", 500)

        with pytest.raises(GitLabClientError, match=r"\(500\)") as exc_info:
            GitLabClient(config).list_merge_requests()

        assert not isinstance(exc_info.value, (GitLabNotFoundError, GitLabAuthenticationError))
