"""Pytest configuration and shared fixtures.

Usage Guide:
- For schema tests: use dict payloads from tests.fixtures
- For builder/reconciler tests: use the `seeded` fixture, a real git
  repository with a primary branch, a feature branch and remote-tracking refs
- For domain objects: import factories from tests.factories
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import pytest
from git import Actor, Commit, Repo

from gitlab_series.logging import reset_logging

# -----------------------------------------------------------------------------
# Test Timeline Constants
# -----------------------------------------------------------------------------

JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)  # Merge request opened
JAN_16 = datetime(2024, 1, 16, 14, 0, 0, tzinfo=UTC)  # First review note
JAN_16_UPDATED = datetime(2024, 1, 16, 14, 30, 0, tzinfo=UTC)  # updated_at
JAN_20 = datetime(2024, 1, 20, 16, 0, 0, tzinfo=UTC)  # Later update

JAN_15_ISO = "2024-01-15T10:00:00.000Z"
JAN_16_ISO = "2024-01-16T14:00:00.000Z"
JAN_16_UPDATED_ISO = "2024-01-16T14:30:00.000Z"

# -----------------------------------------------------------------------------
# Identities (commit authors on the primary branch)
# -----------------------------------------------------------------------------

ALICE = Actor("Alice Smith", "alice@example.com")
BOB = Actor("Bob Jones", "bob@example.com")
CAROL = Actor("Carol White", "carol@example.com")
OPERATOR = Actor("Sync Operator", "operator@example.com")

REMOTE = "origin"
PRIMARY_BRANCH = "master"
FEATURE_BRANCH = "feature/widgets"


def commit_file(repo: Repo, name: str, content: str, author: Actor, message: str | None = None) -> Commit:
    """Write a file into the working tree and commit it on the current branch."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message or f"Add {name}", author=author, committer=author)


@dataclass
class SeededRepo:
    """A repository laid out like a clone with a fetched merge request.

        base ── master_tip                (refs/remotes/origin/master)
          └──── feature_tip               (refs/remotes/origin/feature/widgets)
    """

    repo: Repo
    base: Commit
    master_tip: Commit
    feature_tip: Commit

    def remote_ref(self, branch: str) -> str:
        return f"refs/remotes/{REMOTE}/{branch}"


# -----------------------------------------------------------------------------
# Repository Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def git_repo(tmp_path: Path) -> Repo:
    """Empty repository with an operator identity configured."""
    repo = Repo.init(tmp_path / "work")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", OPERATOR.name)
        writer.set_value("user", "email", OPERATOR.email)
    return repo


@pytest.fixture
def seeded(git_repo: Repo) -> SeededRepo:
    """Repository with history by Alice, Bob and Carol and a feature branch."""
    repo = git_repo
    commit_file(repo, "README.md", "hello\n", ALICE)
    repo.git.branch("-M", PRIMARY_BRANCH)
    commit_file(repo, "src/app.py", "print('app')\n", BOB)
    base = commit_file(repo, "src/lib.py", "VALUE = 1\n", CAROL)

    repo.git.checkout("-b", FEATURE_BRANCH)
    commit_file(repo, "src/widgets.py", "WIDGETS = []\n", CAROL, "Add widgets")
    feature_tip = commit_file(repo, "src/widgets.py", "WIDGETS = [1]\n", CAROL, "Fill widgets")

    repo.git.checkout(PRIMARY_BRANCH)
    master_tip = commit_file(repo, "CHANGELOG", "v1\n", ALICE)

    repo.git.update_ref(f"refs/remotes/{REMOTE}/{PRIMARY_BRANCH}", master_tip.hexsha)
    repo.git.update_ref(f"refs/remotes/{REMOTE}/{FEATURE_BRANCH}", feature_tip.hexsha)
    return SeededRepo(repo=repo, base=base, master_tip=master_tip, feature_tip=feature_tip)


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _quiet_logging():
    """Drop loguru's default stderr sink so tests don't spam output."""
    reset_logging()
    yield
    reset_logging()
