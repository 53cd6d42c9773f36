"""Test fixtures for gitlab-series."""

from .gitlab_responses import (
    GITLAB_MR_CLOSED_RESPONSE,
    GITLAB_MR_RESPONSE,
    GITLAB_NOTE_RESPONSE,
    GITLAB_NOTES_RESPONSE,
    GITLAB_SYSTEM_NOTE_RESPONSE,
    GITLAB_USER_RESPONSE,
)

__all__ = [
    "GITLAB_MR_CLOSED_RESPONSE",
    "GITLAB_MR_RESPONSE",
    "GITLAB_NOTE_RESPONSE",
    "GITLAB_NOTES_RESPONSE",
    "GITLAB_SYSTEM_NOTE_RESPONSE",
    "GITLAB_USER_RESPONSE",
]
