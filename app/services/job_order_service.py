"""Job order storage; every write is recorded in the revision ledger before it commits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.job_order import JobOrder
from app.schemas.job_order import JobOrderCreate, JobOrderUpdate
from app.services.change_recorder import RecordOutcome, on_entity_write
from app.services.snapshot_codec import capture
from app.utils.time import utc_now

logger = logging.getLogger(__name__)


class JobOrderNotFound(Exception):
    """Raised when a job order id does not exist."""

    def __init__(self, job_order_id: int) -> None:
        super().__init__(f"Job order {job_order_id} not found")
        self.job_order_id = job_order_id


class EntityWriteFailed(Exception):
    """Raised when the store rejects a write; nothing was persisted."""

    def __init__(self, message: str, *, conflict: bool = False) -> None:
        super().__init__(message)
        self.conflict = conflict


@dataclass(frozen=True)
class EntityWriteResult:
    job_order: JobOrder
    outcome: RecordOutcome


def _format_job_order_number(job_order_id: int) -> str:
    return f"JO-{job_order_id:05d}"


def get_job_order(db: Session, job_order_id: int) -> JobOrder:
    job_order = db.get(JobOrder, job_order_id)
    if job_order is None:
        raise JobOrderNotFound(job_order_id)
    return job_order


def _flush_write(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise EntityWriteFailed("Job order number already exists", conflict=True) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise EntityWriteFailed("Job order could not be saved") from exc


def _commit_write(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise EntityWriteFailed("Job order could not be saved") from exc


def create_job_order(db: Session, payload: JobOrderCreate, actor_id: int | None) -> EntityWriteResult:
    """Insert a job order and record its ``created`` entry in the same transaction."""
    values = payload.model_dump()
    job_order_number = values.pop("job_order_number", None)
    now = utc_now()
    job_order = JobOrder(
        **values,
        job_order_number=job_order_number or f"tmp-{uuid4().hex[:12]}",
        created_by=actor_id,
        created_at=now,
        updated_at=now,
    )
    db.add(job_order)
    _flush_write(db)
    if not job_order_number:
        job_order.job_order_number = _format_job_order_number(job_order.id)
        _flush_write(db)

    db.refresh(job_order)
    outcome = on_entity_write(
        db,
        job_order_id=job_order.id,
        actor_id=actor_id,
        previous=None,
        current=capture(job_order),
    )
    _commit_write(db)
    return EntityWriteResult(job_order=job_order, outcome=outcome)


def update_job_order(
    db: Session,
    job_order_id: int,
    changes: dict[str, Any],
    actor_id: int | None,
    *,
    reverted_from_id: int | None = None,
) -> EntityWriteResult:
    """Apply a partial update and record the resulting diff.

    The row lock taken when reading the previous state is held until the
    log entry is stored, so entries for one job order follow the order in
    which its writes commit.
    """
    job_order = db.get(JobOrder, job_order_id, with_for_update=True)
    if job_order is None:
        db.rollback()
        raise JobOrderNotFound(job_order_id)

    try:
        update = JobOrderUpdate.model_validate(changes)
    except ValidationError as exc:
        db.rollback()
        logger.warning("[JOB_ORDER] Rejected update for job_order_id=%s: %s", job_order_id, exc)
        raise EntityWriteFailed(f"Invalid job order update: {exc.error_count()} field error(s)") from exc

    previous = capture(job_order)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(job_order, field, value)
    job_order.updated_at = utc_now()
    _flush_write(db)

    db.refresh(job_order)
    outcome = on_entity_write(
        db,
        job_order_id=job_order.id,
        actor_id=actor_id,
        previous=previous,
        current=capture(job_order),
        reverted_from_id=reverted_from_id,
    )
    _commit_write(db)
    return EntityWriteResult(job_order=job_order, outcome=outcome)
