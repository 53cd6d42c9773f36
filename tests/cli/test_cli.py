"""Tests for the gitlab-series CLI."""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from gitlab_series import __version__
from gitlab_series.cli.app import app
from gitlab_series.config import Settings
from gitlab_series.gitlab import GitLabAuthenticationError, GitLabClientError
from gitlab_series.repository import sync_refname
from gitlab_series.schemas import InvalidMergeRequest
from gitlab_series.series import StateFilter
from tests.factories import make_merge_request

runner = CliRunner()


@pytest.fixture
def workspace(seeded):
    """Seeded repository with GitLab config and itself as 'origin'."""
    repo = seeded.repo
    repo.create_remote("origin", repo.working_tree_dir)
    with repo.config_writer() as writer:
        writer.set_value("gitlab", "url", "https://gitlab.example.com")
        writer.set_value("gitlab", "privateToken", "glpat-test")
        writer.set_value("gitlab", "projectId", "3")
    with (
        patch("gitlab_series.cli.sync.open_repository", return_value=repo),
        patch("gitlab_series.cli.sync.get_settings", return_value=Settings(_env_file=None)),
    ):
        yield seeded


@pytest.fixture
def client():
    """GitLab client returning a single open merge request."""
    client = MagicMock()
    client.project_id = 3
    client.list_merge_requests.return_value = [make_merge_request(iid=42, title="Add widgets")]
    client.list_notes.return_value = []
    with patch("gitlab_series.cli.sync.GitLabClient", return_value=client):
        yield client


class TestGlobalFlags:
    """Tests for global CLI flags (--verbose, --quiet, --version)."""

    def test_global_help_shows_flags(self):
        result = runner.invoke(app, ["--help"])

        assert "--verbose" in result.stdout
        assert "--quiet" in result.stdout
        assert "sync" in result.stdout
        assert "show" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_sync_help_shows_options(self):
        result = runner.invoke(app, ["sync", "--help"])

        assert "--all" in result.stdout
        assert "--force" in result.stdout
        assert "--format" in result.stdout


class TestSyncCommand:
    """Tests for 'gitlab-series sync'."""

    def test_sync_creates_branch(self, workspace, client):
        result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 0, result.output
        assert "Created" in result.stdout
        assert "!42" in result.stdout
        assert "1 created" in result.stdout
        tip = workspace.repo.commit(sync_refname(42))
        assert tip.parents == (workspace.feature_tip,)

    def test_sync_defaults_to_open(self, workspace, client):
        runner.invoke(app, ["-q", "sync"])

        client.list_merge_requests.assert_called_once_with(StateFilter.OPEN)

    def test_sync_all(self, workspace, client):
        runner.invoke(app, ["-q", "sync", "--all"])

        client.list_merge_requests.assert_called_once_with(StateFilter.ALL)

    def test_second_sync_unchanged(self, workspace, client):
        runner.invoke(app, ["-q", "sync"])
        result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 0
        assert "Unchanged" in result.stdout
        assert "1 unchanged" in result.stdout

    def test_force_updates(self, workspace, client):
        runner.invoke(app, ["-q", "sync"])
        first = workspace.repo.commit(sync_refname(42))

        result = runner.invoke(app, ["-q", "sync", "--force"])

        assert "Updated" in result.stdout
        tip = workspace.repo.commit(sync_refname(42))
        assert tip.parents == (first, workspace.feature_tip)

    def test_sync_json_output(self, workspace, client):
        result = runner.invoke(app, ["-q", "sync", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["created"] == 1
        assert data["merge_requests"][0]["iid"] == 42
        assert data["merge_requests"][0]["outcome"] == "created"

    def test_failed_merge_request_still_exits_zero(self, workspace, client):
        """Per merge request failures are reported, not fatal."""
        client.list_merge_requests.return_value = [
            make_merge_request(iid=41, source_branch="feature/gone"),
            make_merge_request(iid=42),
        ]

        result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 0
        assert "Failed" in result.stdout
        assert "1 created" in result.stdout
        assert "1 failed" in result.stdout

    def test_invalid_payload_reported_as_failed(self, workspace, client):
        client.list_merge_requests.return_value = [
            InvalidMergeRequest(iid=41, title="Broken", error=GitLabClientError("Invalid payload")),
            make_merge_request(iid=42),
        ]

        result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 0
        assert "Failed" in result.stdout
        assert "1 created" in result.stdout
        assert "1 failed" in result.stdout
        assert workspace.repo.commit(sync_refname(42)).parents == (workspace.feature_tip,)

    def test_authentication_failure(self, workspace, client):
        client.check_connection.side_effect = GitLabAuthenticationError("Invalid GitLab token")

        result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 1
        assert "Sync failed" in result.stdout
        assert "Invalid GitLab token" in result.stdout

    def test_missing_gitlab_config(self, seeded, client):
        with (
            patch("gitlab_series.cli.sync.open_repository", return_value=seeded.repo),
            patch("gitlab_series.cli.sync.get_settings", return_value=Settings(_env_file=None)),
        ):
            result = runner.invoke(app, ["-q", "sync"])

        assert result.exit_code == 1
        assert "gitlab.url" in result.stdout


class TestShowCommand:
    """Tests for 'gitlab-series show'."""

    def test_show_prints_cover(self, workspace, client):
        runner.invoke(app, ["-q", "sync"])
        tip = workspace.repo.commit(sync_refname(42))

        result = runner.invoke(app, ["-q", "show", "42"])

        assert result.exit_code == 0
        assert tip.hexsha in result.stdout
        assert "Add widgets" in result.stdout
        assert "Closes !42" in result.stdout

    def test_show_missing_branch(self, workspace):
        result = runner.invoke(app, ["-q", "show", "99"])

        assert result.exit_code == 1
        assert "No sync branch for !99" in result.stdout
