"""Pydantic schemas for gitlab-series.

This module provides validated models for GitLab merge requests and notes.
"""

from .base import SchemaBase
from .enums import MergeRequestState
from .gitlab_api import DiscussionNote, GitLabUser, InvalidMergeRequest, MergeRequestRef

__all__ = [
    # GitLab API
    "DiscussionNote",
    "GitLabUser",
    "InvalidMergeRequest",
    "MergeRequestRef",
    # Enums
    "MergeRequestState",
    # Base
    "SchemaBase",
]
