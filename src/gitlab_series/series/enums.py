"""Enums for sync operations."""

from enum import Enum


class StateFilter(str, Enum):
    """Which merge requests to list from GitLab."""

    OPEN = "opened"
    """Only currently open merge requests (default)."""

    ALL = "all"
    """Every merge request, including closed and merged ones."""


class SyncOutcome(str, Enum):
    """What happened to one merge request's sync branch."""

    CREATED = "created"
    """Branch did not exist; created with a single-parent commit."""

    UPDATED = "updated"
    """Snapshot changed (or forced); a two-parent commit was appended."""

    UNCHANGED = "unchanged"
    """Tip tree already matches the snapshot; branch left alone."""

    FAILED = "failed"
    """Build or reconcile failed; branch left alone."""


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
