"""Series sync module - merge requests to git-series branches.

Services:
- SnapshotBuilder: merge request + notes → snapshot tree (objects only)
- Reconciler: snapshot → create / skip / update the sync branch
- SyncDriver: per-project pass with per-merge-request error isolation
"""

from .ackers import ACK_PHRASES, is_ack
from .builder import Snapshot, SnapshotBuilder, format_note
from .cover import render_cover
from .driver import SyncDriver
from .enums import OutputFormat, StateFilter, SyncOutcome
from .reconciler import Reconciler
from .results import MergeRequestSyncResult, SyncRunResult

__all__ = [
    # Driver
    "SyncDriver",
    # Builder
    "Snapshot",
    "SnapshotBuilder",
    "format_note",
    "render_cover",
    "ACK_PHRASES",
    "is_ack",
    # Reconciler
    "Reconciler",
    # Results & enums
    "MergeRequestSyncResult",
    "OutputFormat",
    "StateFilter",
    "SyncOutcome",
    "SyncRunResult",
]
