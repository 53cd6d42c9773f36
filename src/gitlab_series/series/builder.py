"""Snapshot Builder - merge request state → content-addressed tree.

A snapshot tree has four fixed entries:

    base    gitlink to merge-base(target, source)
    series  gitlink to the source branch tip
    notes   tree with one blob per user note, named by note ID
    cover   blob with the synthesized cover message

Building is deterministic: identical inputs give an identical tree SHA, which
is what lets the Reconciler detect unchanged merge requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC
from email.utils import format_datetime
from typing import TYPE_CHECKING

from gitlab_series.exceptions import (
    MergeBaseNotFoundError,
    RefResolutionError,
    SourceNotFoundError,
    TargetNotFoundError,
)
from gitlab_series.logging import get_logger
from gitlab_series.repository import TreeEntry

from .ackers import is_ack
from .cover import render_cover

if TYPE_CHECKING:
    from git import Commit

    from gitlab_series.repository import EmailResolver, ObjectWriter, RefStore
    from gitlab_series.schemas import DiscussionNote, MergeRequestRef

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """A written snapshot tree and the values it was built from."""

    tree_sha: str
    """Content identifier of the four-entry tree."""

    cover: str
    """Text stored in the cover blob."""

    base_sha: str
    """Commit recorded in the base gitlink."""

    source_sha: str
    """Commit recorded in the series gitlink (source branch tip)."""

    note_count: int = 0
    """Number of note blobs in the notes sub-tree."""


def format_note(note: DiscussionNote, email: str) -> str:
    """Render a note as a mail-like blob."""
    return (
        f"From: {note.author.name} <{email}>\n"
        f"Date: {format_datetime(note.created_at.astimezone(UTC))}\n"
        f"\n"
        f"{note.body}\n"
    )


class SnapshotBuilder:
    """Builds snapshot trees for merge requests.

    Usage:
        builder = SnapshotBuilder(RefStore(repo), ObjectWriter(repo), EmailResolver(repo))
        snapshot = builder.build(mr, notes)
        print(snapshot.tree_sha)

    Writes objects only; never modifies refs.
    """

    def __init__(self, refs: RefStore, writer: ObjectWriter, emails: EmailResolver) -> None:
        self._refs = refs
        self._writer = writer
        self._emails = emails

    def build(self, mr: MergeRequestRef, notes: list[DiscussionNote]) -> Snapshot:
        """Write the snapshot tree for one merge request.

        Args:
            mr: Merge request metadata
            notes: Its discussion notes (system notes are skipped)

        Returns:
            Snapshot with the tree SHA and cover text

        Raises:
            TargetNotFoundError: Target branch has no remote-tracking ref
            SourceNotFoundError: Source branch has no remote-tracking ref
            MergeBaseNotFoundError: Target and source are unrelated
            AuthorNotFoundError: A note author, assignee or acker has no email
            ObjectWriteError: A blob or tree could not be written, or two notes share an ID
        """
        target = self._resolve_branch(mr.target_branch, TargetNotFoundError, "target")
        source = self._resolve_branch(mr.source_branch, SourceNotFoundError, "source")

        base = self._refs.merge_base(target, source)
        if base is None:
            raise MergeBaseNotFoundError(
                f"No merge-base between {mr.target_branch} and {mr.source_branch}"
            )

        notes_sha, note_count, ackers = self._write_notes(mr, notes)

        cover = render_cover(mr, ackers, self._emails.resolve)
        cover_sha = self._writer.write_blob(cover)

        tree_sha = self._writer.write_tree(
            [
                TreeEntry.gitlink("base", base.hexsha),
                TreeEntry.gitlink("series", source.hexsha),
                TreeEntry.tree("notes", notes_sha),
                TreeEntry.blob("cover", cover_sha),
            ]
        )
        logger.debug(
            "Built snapshot {} for !{} ({} notes, {} ackers)",
            tree_sha[:12],
            mr.iid,
            note_count,
            len(ackers),
        )
        return Snapshot(
            tree_sha=tree_sha,
            cover=cover,
            base_sha=base.hexsha,
            source_sha=source.hexsha,
            note_count=note_count,
        )

    def _resolve_branch(
        self,
        branch: str,
        error: type[RefResolutionError],
        role: str,
    ) -> Commit:
        refname = self._refs.remote_refname(branch)
        commit = self._refs.resolve(refname)
        if commit is None:
            raise error(f"Error dereferencing {role} branch {refname}", refname=refname)
        return commit

    def _write_notes(
        self,
        mr: MergeRequestRef,
        notes: list[DiscussionNote],
    ) -> tuple[str, int, set[str]]:
        entries: list[TreeEntry] = []
        ackers: set[str] = set()

        if mr.user_notes_count > 0:
            for note in notes:
                if note.system:
                    continue
                content = format_note(note, self._emails.resolve(note.author.name))
                entries.append(TreeEntry.blob(str(note.id), self._writer.write_blob(content)))
                if is_ack(note):
                    ackers.add(note.author.name)

        return self._writer.write_tree(entries), len(entries), ackers
