"""Restore a job order to the snapshot stored on one of its log entries."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.job_order_log import JobOrderLog
from app.services.job_order_service import EntityWriteFailed, EntityWriteResult, JobOrderNotFound, update_job_order
from app.services.snapshot_codec import strip

logger = logging.getLogger(__name__)


class RevertError(Exception):
    """Raised when a revert is refused or its restoring write fails.

    ``reason`` is one of ``NOT_FOUND``, ``NO_SNAPSHOT`` or ``WRITE_FAILED``;
    in every case the job order was left untouched.
    """

    NOT_FOUND = "not_found"
    NO_SNAPSHOT = "no_snapshot"
    WRITE_FAILED = "write_failed"

    def __init__(self, reason: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.cause = cause


def revert_to(db: Session, log_entry_id: int, actor_id: int | None) -> EntityWriteResult:
    """Write the entry's snapshot back through the normal update path.

    The revert is therefore recorded like any other update, and reverting to
    the current state is suppressed as a no-op. Never retried.
    """
    entry = db.get(JobOrderLog, log_entry_id)
    if entry is None:
        raise RevertError(RevertError.NOT_FOUND, f"Log entry {log_entry_id} not found")
    if not entry.snapshot:
        logger.warning("[REVERT] Log entry %s has no snapshot; revert refused", log_entry_id)
        raise RevertError(RevertError.NO_SNAPSHOT, "This history entry has no snapshot to restore")

    job_order_id = entry.job_order_id
    restore_data = strip(entry.snapshot)
    try:
        result = update_job_order(db, job_order_id, restore_data, actor_id, reverted_from_id=log_entry_id)
    except (EntityWriteFailed, JobOrderNotFound) as exc:
        logger.warning(
            "[REVERT] Restoring job_order_id=%s to entry %s failed: %s",
            job_order_id,
            log_entry_id,
            exc,
        )
        raise RevertError(RevertError.WRITE_FAILED, "The job order could not be restored; nothing was changed", cause=exc) from exc

    logger.info(
        "[REVERT] job_order_id=%s restored to entry %s by actor=%s (recorded=%s)",
        job_order_id,
        log_entry_id,
        actor_id,
        result.outcome.recorded,
    )
    return result
