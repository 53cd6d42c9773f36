"""Sync Driver - one pass over a project's merge requests.

Each merge request is independent: notes are fetched, the snapshot is built
and the branch is reconciled, strictly one merge request at a time. A failure
at any step is recorded for that merge request and the pass continues.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from gitlab_series.logging import bind_mr, bind_project, get_logger
from gitlab_series.schemas import InvalidMergeRequest, MergeRequestRef

from .enums import StateFilter
from .results import MergeRequestSyncResult, SyncRunResult

if TYPE_CHECKING:
    from gitlab_series.gitlab.client import GitLabClient

    from .builder import SnapshotBuilder
    from .reconciler import Reconciler

logger = get_logger(__name__)

ResultCallback = Callable[[MergeRequestSyncResult], None]


class SyncDriver:
    """Drives builder and reconciler over a list of merge requests.

    Usage:
        driver = SyncDriver(client, builder, reconciler)
        result = driver.run(StateFilter.OPEN, force=False)
        print(result.created, result.updated, result.unchanged, result.failed)
    """

    def __init__(
        self,
        client: GitLabClient,
        builder: SnapshotBuilder,
        reconciler: Reconciler,
        on_result: ResultCallback | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            client: GitLab client used to list merge requests and notes
            builder: Snapshot builder
            reconciler: Sync branch reconciler
            on_result: Optional callback invoked after each merge request,
                       used by the CLI to print outcomes as they happen
        """
        self._client = client
        self._builder = builder
        self._reconciler = reconciler
        self._on_result = on_result

    def run(self, state_filter: StateFilter = StateFilter.OPEN, *, force: bool = False) -> SyncRunResult:
        """List merge requests from GitLab and sync each of them.

        Raises:
            GitLabClientError: If the merge request listing fails
        """
        project_logger = bind_project(self._client.project_id)
        project_logger.info("Listing {} merge requests", state_filter.value)
        merge_requests = self._client.list_merge_requests(state_filter)
        return self.sync(merge_requests, force=force)

    def sync(
        self,
        merge_requests: list[MergeRequestRef | InvalidMergeRequest],
        *,
        force: bool = False,
    ) -> SyncRunResult:
        """Sync every merge request, never aborting on a single failure.

        Listed merge requests whose payload failed validation are recorded
        as failed in their listing position.
        """
        start = time.monotonic()
        result = SyncRunResult(total_discovered=len(merge_requests))

        for mr in merge_requests:
            if isinstance(mr, InvalidMergeRequest):
                mr_result = self._reject(mr)
            else:
                mr_result = self.sync_one(mr, force=force)
            result.record(mr_result)
            if self._on_result is not None:
                self._on_result(mr_result)

        result.duration_seconds = time.monotonic() - start
        logger.info(
            "Sync finished: {} created, {} updated, {} unchanged, {} failed",
            result.created,
            result.updated,
            result.unchanged,
            result.failed,
        )
        return result

    def sync_one(self, mr: MergeRequestRef, *, force: bool = False) -> MergeRequestSyncResult:
        """Fetch notes, build and reconcile one merge request.

        Note:
            Errors are captured in the result, not raised.
        """
        mr_logger = bind_mr(self._client.project_id, mr.iid)
        try:
            notes = []
            if mr.user_notes_count > 0:
                mr_logger.debug("Fetching {} notes", mr.user_notes_count)
                notes = self._client.list_notes(mr.iid)

            snapshot = self._builder.build(mr, notes)
            return self._reconciler.reconcile(mr, snapshot, force=force)
        except Exception as e:
            mr_logger.error("Failed to sync !{}: {}", mr.iid, e)
            return MergeRequestSyncResult.from_error(mr.iid, e, mr.title)

    def _reject(self, item: InvalidMergeRequest) -> MergeRequestSyncResult:
        bind_mr(self._client.project_id, item.iid).error("Failed to sync !{}: {}", item.iid, item.error)
        return MergeRequestSyncResult.from_error(item.iid, item.error, item.title)
