"""Revision ledger API schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.schemas.job_order import JobOrderRead


class HistoryFilters(BaseModel):
    """Optional narrowing of a job order history.

    Bare dates cover whole days; datetimes are exact inclusive bounds.
    """

    actor_id: int | None = None
    date_from: date | datetime | None = None
    date_to: date | datetime | None = None


class FieldChange(BaseModel):
    old: str
    new: str


class JobOrderLogRead(BaseModel):
    """One history entry with the actor's current display name."""

    id: int
    job_order_id: int
    seq: int
    changed_at: datetime
    changed_by: int | None
    changed_by_name: str
    action: str
    changed_fields: dict[str, FieldChange] | None
    snapshot: dict[str, Any] | None
    reverted_from_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ActorRead(BaseModel):
    user_id: int | None
    name: str


class RevertRequest(BaseModel):
    """Revert must be explicitly confirmed by the caller."""

    confirm: bool = False


class RevertResponse(BaseModel):
    job_order: JobOrderRead
    reverted_to_entry_id: int
    log_entry_id: int | None = None
    changed: bool
    history_recorded: bool
    message: str
