"""Append-only revision ledger for job orders."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class LedgerEntryImmutable(Exception):
    """Raised when code tries to modify or delete a written log entry."""


class JobOrderLog(Base):
    """One immutable record per job order mutation.

    ``changed_fields`` and ``snapshot`` use plain JSON (not JSONB) so the
    field order of the diff survives storage.
    """

    __tablename__ = "job_order_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    job_order_id: Mapped[int] = mapped_column(ForeignKey("job_orders.id"), nullable=False)
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    changed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    changed_fields: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    snapshot: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    reverted_from_id: Mapped[int | None] = mapped_column(ForeignKey("job_order_logs.id"), nullable=True)

    __table_args__ = (
        Index("ix_job_order_logs_job_order_changed_at", "job_order_id", "changed_at"),
        Index("uq_job_order_logs_job_order_seq", "job_order_id", "seq", unique=True),
    )


@event.listens_for(JobOrderLog, "before_update")
def _refuse_log_update(_mapper, _connection, target: JobOrderLog) -> None:
    raise LedgerEntryImmutable(f"Log entry {target.id} is immutable")


@event.listens_for(JobOrderLog, "before_delete")
def _refuse_log_delete(_mapper, _connection, target: JobOrderLog) -> None:
    raise LedgerEntryImmutable(f"Log entry {target.id} cannot be deleted")
