"""Cover message synthesis for a merge request snapshot.

The cover reads like a patch series cover letter:

    [Closed] Fix bug

    Longer description from the merge request.

    Closes !42

    Reviewed-by: Alice <alice@example.com>
    Acked-by: Bob <bob@example.com>
    Cc: Carol <carol@example.com>
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Set

    from gitlab_series.schemas import MergeRequestRef

CLOSED_PREFIX = "[Closed]"

EmailLookup = Callable[[str], str]


def format_tag(tag: str, name: str, email: str) -> str:
    return f"{tag}: {name} <{email}>"


def render_title(mr: MergeRequestRef) -> str:
    if mr.state.is_closed:
        return f"{CLOSED_PREFIX} {mr.title}"
    return mr.title


def render_tags(mr: MergeRequestRef, ackers: Set[str], lookup_email: EmailLookup) -> list[str]:
    """Trailer lines in fixed order: assignee, ackers by name, then Cc's.

    An assignee who also acked gets a single Reviewed-by line instead of
    Assigned-to plus Acked-by.
    """
    remaining = set(ackers)
    tags: list[str] = []

    if mr.assignee is not None:
        name = mr.assignee.name
        if name in remaining:
            remaining.discard(name)
            tags.append(format_tag("Reviewed-by", name, lookup_email(name)))
        else:
            tags.append(format_tag("Assigned-to", name, lookup_email(name)))

    for name in sorted(remaining):
        tags.append(format_tag("Acked-by", name, lookup_email(name)))

    for cc in mr.cc_recipients:
        tags.append(format_tag("Cc", cc.name, lookup_email(cc.name)))

    return tags


def render_cover(mr: MergeRequestRef, ackers: Set[str], lookup_email: EmailLookup) -> str:
    """Build the cover message: paragraphs separated by blank lines."""
    sections = [render_title(mr)]
    if mr.description:
        sections.append(mr.description)
    sections.append(f"Closes !{mr.iid}")

    tags = render_tags(mr, ackers, lookup_email)
    if tags:
        sections.append("\n".join(tags))

    return "\n\n".join(sections) + "\n"
