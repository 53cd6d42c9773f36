"""Enums for Pydantic schemas."""

from enum import Enum


class MergeRequestState(str, Enum):
    """Lifecycle state of a GitLab merge request."""

    OPENED = "opened"
    CLOSED = "closed"
    MERGED = "merged"
    LOCKED = "locked"
    """Transient state GitLab uses while a merge is in progress."""

    @property
    def is_closed(self) -> bool:
        """True for merge requests that are no longer open for review."""
        return self in (MergeRequestState.CLOSED, MergeRequestState.MERGED)
