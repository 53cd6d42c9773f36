"""Heuristic classification of discussion notes as approvals."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitlab_series.schemas import DiscussionNote

# Case-sensitive. Known to be loose: "+1" also matches "n+1 queries".
ACK_PHRASES = ("LGTM", "+1", "Looks good")


def is_ack(note: DiscussionNote) -> bool:
    """True if the note carries an approval flag or an approval phrase."""
    if note.approved:
        return True
    return any(phrase in note.body for phrase in ACK_PHRASES)
