"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import SyncOutcome


@dataclass
class MergeRequestSyncResult:
    """Result of syncing a single merge request."""

    iid: int
    """Merge request IID."""

    outcome: SyncOutcome
    """What happened to the sync branch."""

    title: str = ""
    """Merge request title, for display."""

    commit_sha: str | None = None
    """Sync branch tip after the operation (None if failed)."""

    tree_sha: str | None = None
    """Snapshot tree SHA (None if the build failed)."""

    error: Exception | None = None
    """Exception if the operation failed."""

    @property
    def success(self) -> bool:
        """Check if operation completed without errors."""
        return self.error is None

    @property
    def reason(self) -> str | None:
        """Failure reason for display, if any."""
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, object] = {
            "iid": self.iid,
            "success": self.success,
            "outcome": self.outcome.value,
            "title": self.title,
            "commit": self.commit_sha,
            "tree": self.tree_sha,
        }
        if self.error:
            result["error"] = self.reason
            result["error_type"] = type(self.error).__name__
        return result

    @classmethod
    def from_created(cls, iid: int, title: str, commit_sha: str, tree_sha: str) -> MergeRequestSyncResult:
        return cls(iid, SyncOutcome.CREATED, title, commit_sha, tree_sha)

    @classmethod
    def from_updated(cls, iid: int, title: str, commit_sha: str, tree_sha: str) -> MergeRequestSyncResult:
        return cls(iid, SyncOutcome.UPDATED, title, commit_sha, tree_sha)

    @classmethod
    def from_unchanged(cls, iid: int, title: str, commit_sha: str, tree_sha: str) -> MergeRequestSyncResult:
        return cls(iid, SyncOutcome.UNCHANGED, title, commit_sha, tree_sha)

    @classmethod
    def from_error(cls, iid: int, error: Exception, title: str = "") -> MergeRequestSyncResult:
        """Create a result representing a failed operation.

        Args:
            iid: Merge request IID
            error: The exception that caused the failure
            title: Merge request title, if known

        Returns:
            MergeRequestSyncResult with outcome FAILED
        """
        return cls(iid, SyncOutcome.FAILED, title, error=error)


@dataclass
class SyncRunResult:
    """Aggregate result of one sync pass over a project's merge requests."""

    total_discovered: int = 0
    """Merge requests returned by GitLab for the state filter."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0

    failed_merge_requests: list[tuple[int, str]] = field(default_factory=list)
    """List of (iid, reason) for failed merge requests."""

    results: list[MergeRequestSyncResult] = field(default_factory=list)
    """Per merge request results, in processing order."""

    duration_seconds: float = 0.0

    def record(self, result: MergeRequestSyncResult) -> None:
        """Fold a single merge request result into the totals."""
        self.results.append(result)
        if result.outcome == SyncOutcome.CREATED:
            self.created += 1
        elif result.outcome == SyncOutcome.UPDATED:
            self.updated += 1
        elif result.outcome == SyncOutcome.UNCHANGED:
            self.unchanged += 1
        else:
            self.failed += 1
            self.failed_merge_requests.append((result.iid, result.reason or "unknown error"))

    @property
    def total_processed(self) -> int:
        return self.created + self.updated + self.unchanged + self.failed

    @property
    def success_rate(self) -> float:
        """Percentage of processed merge requests that did not fail."""
        processed = self.total_processed
        if processed == 0:
            return 100.0
        return ((processed - self.failed) / processed) * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_discovered": self.total_discovered,
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "failed": self.failed,
            "failed_merge_requests": [
                {"iid": iid, "error": reason} for iid, reason in self.failed_merge_requests
            ],
            "merge_requests": [r.to_dict() for r in self.results],
            "duration_seconds": round(self.duration_seconds, 2),
            "success_rate": round(self.success_rate, 1),
        }
