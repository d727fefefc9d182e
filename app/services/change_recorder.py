"""Write path of the job order revision ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.job_order_log import JobOrderLog
from app.services.diff_engine import diff
from app.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)


class LedgerAppendFailed(Exception):
    """Raised when a job order write succeeded but its log entry could not be stored."""

    def __init__(self, job_order_id: int) -> None:
        super().__init__(f"Could not append history entry for job order {job_order_id}")
        self.job_order_id = job_order_id


@dataclass(frozen=True)
class RecordOutcome:
    """Result of observing one entity write."""

    entry: JobOrderLog | None = None
    error: LedgerAppendFailed | None = None

    @property
    def suppressed(self) -> bool:
        return self.entry is None and self.error is None

    @property
    def recorded(self) -> bool:
        return self.entry is not None


def _last_entry(db: Session, job_order_id: int) -> JobOrderLog | None:
    return db.scalar(
        select(JobOrderLog)
        .where(JobOrderLog.job_order_id == job_order_id)
        .order_by(JobOrderLog.seq.desc())
        .limit(1)
    )


def record_change(
    db: Session,
    *,
    job_order_id: int,
    actor_id: int | None,
    previous: dict[str, Any] | None,
    current: dict[str, Any],
    reverted_from_id: int | None = None,
) -> JobOrderLog | None:
    """Append a log entry for a flushed write inside a SAVEPOINT.

    The caller owns the surrounding transaction and commits it. Returns
    ``None`` when an update changed no tracked field. Raises
    ``LedgerAppendFailed`` when storing the entry fails; only the SAVEPOINT
    is rolled back, so the entity write can still commit.
    """
    if previous is None:
        action = "created"
        changed_fields = None
    else:
        changed_fields = diff(previous, current)
        if not changed_fields:
            logger.debug("[LEDGER] No tracked change for job_order_id=%s; entry suppressed", job_order_id)
            return None
        action = "updated"

    try:
        with db.begin_nested():
            last = _last_entry(db, job_order_id)
            changed_at = utc_now()
            if last is not None and as_utc(last.changed_at) > changed_at:
                changed_at = as_utc(last.changed_at)
            entry = JobOrderLog(
                job_order_id=job_order_id,
                seq=last.seq + 1 if last is not None else 1,
                changed_at=changed_at,
                changed_by=actor_id,
                action=action,
                changed_fields=changed_fields,
                snapshot=current,
                reverted_from_id=reverted_from_id,
            )
            db.add(entry)
    except SQLAlchemyError as exc:
        raise LedgerAppendFailed(job_order_id) from exc

    return entry


def on_entity_write(
    db: Session,
    *,
    job_order_id: int,
    actor_id: int | None,
    previous: dict[str, Any] | None,
    current: dict[str, Any],
    reverted_from_id: int | None = None,
) -> RecordOutcome:
    """Record a flushed job order write; never raises for ledger failures.

    A failed append is reported and the entity write still commits; it is
    left as a divergence rather than retried against newer state.
    """
    try:
        entry = record_change(
            db,
            job_order_id=job_order_id,
            actor_id=actor_id,
            previous=previous,
            current=current,
            reverted_from_id=reverted_from_id,
        )
    except LedgerAppendFailed as exc:
        logger.exception(
            "[LEDGER] Job order %s was written by actor=%s but its history entry was not stored",
            job_order_id,
            actor_id,
        )
        return RecordOutcome(error=exc)
    return RecordOutcome(entry=entry)
