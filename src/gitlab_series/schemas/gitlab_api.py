"""Pydantic schemas for parsing GitLab API responses.

These schemas map to the GitLab REST API v4 response structure.
See: https://docs.gitlab.com/ee/api/merge_requests.html
     https://docs.gitlab.com/ee/api/notes.html
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import Field

from .base import SchemaBase
from .enums import MergeRequestState


class GitLabUser(SchemaBase):
    """GitLab user object from API responses."""

    name: str = Field(description="Display name")
    username: str | None = Field(default=None, description="GitLab username")
    id: int | None = Field(default=None, description="GitLab user ID")


class DiscussionNote(SchemaBase):
    """A single note in a merge request's discussion.

    Maps to: GET /projects/:id/merge_requests/:iid/notes
    """

    id: int = Field(description="Note ID, unique within the GitLab instance")
    author: GitLabUser = Field(description="Note author")
    created_at: datetime = Field(description="When the note was posted")
    body: str = Field(default="", description="Markdown body")
    system: bool = Field(default=False, description="Generated by GitLab, not a user")
    approved: bool | None = Field(
        default=None,
        description="Explicit approval marker, when the source provides one",
    )


class MergeRequestRef(SchemaBase):
    """GitLab merge request object from API.

    Maps to: GET /projects/:id/merge_requests
    """

    iid: int = Field(gt=0, description="Merge request IID within the project")
    source_branch: str = Field(description="Branch proposed for merging")
    target_branch: str = Field(description="Branch the merge request targets")
    title: str = Field(description="Merge request title")
    description: str | None = Field(default=None, description="Merge request description")
    state: MergeRequestState = Field(description="Lifecycle state")
    updated_at: datetime = Field(description="Last update timestamp")
    author: GitLabUser = Field(description="Merge request author")
    assignee: GitLabUser | None = Field(default=None, description="Primary assignee")
    assignees: list[GitLabUser] = Field(
        default_factory=list,
        description="All assignees, in the order GitLab reports them",
    )
    user_notes_count: int = Field(default=0, ge=0, description="User-authored notes")

    @property
    def cc_recipients(self) -> list[GitLabUser]:
        """Secondary assignees: every assignee except the primary one.

        GitLab repeats the primary assignee inside ``assignees``; it is
        already credited by its own tag in the cover message.
        """
        if self.assignee is None:
            return list(self.assignees)
        return [a for a in self.assignees if a.name != self.assignee.name]


@dataclass(frozen=True)
class InvalidMergeRequest:
    """A listed merge request whose payload failed validation.

    Kept in the listing so the sync pass reports it as failed instead of
    silently dropping it.
    """

    iid: int
    title: str
    error: Exception
