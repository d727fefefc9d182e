"""Read side of the revision ledger: filtered history and actor facets."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.job_order_log import JobOrderLog
from app.models.user import UNKNOWN_USER_NAME, User
from app.schemas.job_order_log import ActorRead, HistoryFilters, JobOrderLogRead
from app.utils.time import as_utc, day_window_end, day_window_start


def _display_name(full_name: str | None, username: str | None) -> str:
    return full_name or username or UNKNOWN_USER_NAME


def query_history(db: Session, job_order_id: int, filters: HistoryFilters | None = None) -> list[JobOrderLogRead]:
    """Return matching entries oldest first.

    Actor names are joined from the users table at read time, so renamed
    users show their current name across the whole history.
    """
    filters = filters or HistoryFilters()
    stmt = (
        select(JobOrderLog, User.full_name, User.username)
        .outerjoin(User, User.id == JobOrderLog.changed_by)
        .where(JobOrderLog.job_order_id == job_order_id)
    )
    if filters.actor_id is not None:
        stmt = stmt.where(JobOrderLog.changed_by == filters.actor_id)
    if filters.date_from is not None:
        stmt = stmt.where(JobOrderLog.changed_at >= day_window_start(filters.date_from))
    if filters.date_to is not None:
        stmt = stmt.where(JobOrderLog.changed_at <= day_window_end(filters.date_to))
    stmt = stmt.order_by(JobOrderLog.changed_at.asc(), JobOrderLog.seq.asc())

    return [
        JobOrderLogRead(
            id=entry.id,
            job_order_id=entry.job_order_id,
            seq=entry.seq,
            changed_at=as_utc(entry.changed_at),
            changed_by=entry.changed_by,
            changed_by_name=_display_name(full_name, username),
            action=entry.action,
            changed_fields=entry.changed_fields,
            snapshot=entry.snapshot,
            reverted_from_id=entry.reverted_from_id,
        )
        for entry, full_name, username in db.execute(stmt).all()
    ]


def distinct_actors(db: Session, job_order_id: int) -> list[ActorRead]:
    """Return every actor seen in a job order's history, sorted by name."""
    rows = db.execute(
        select(JobOrderLog.changed_by, User.full_name, User.username)
        .outerjoin(User, User.id == JobOrderLog.changed_by)
        .where(JobOrderLog.job_order_id == job_order_id)
        .distinct()
    ).all()
    actors = [ActorRead(user_id=user_id, name=_display_name(full_name, username)) for user_id, full_name, username in rows]
    return sorted(actors, key=lambda actor: (actor.name.lower(), actor.user_id or 0))
