"""Job order API schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.job_order import APPROVAL_STATUSES, JOB_STATUSES, PRIORITY_LEVELS

REQUIRED_ON_WRITE: tuple[str, ...] = ("job_order_number", "status", "priority", "approval_status")


def _check_choice(value: str | None, choices: tuple[str, ...], label: str) -> str | None:
    if value is not None and value not in choices:
        raise ValueError(f"Unsupported {label}: {value}")
    return value


class JobOrderFields(BaseModel):
    """Writable job order fields shared by create and update payloads."""

    title: str | None = Field(default=None, max_length=255)
    client_name: str | None = Field(default=None, max_length=255)
    branch: str | None = Field(default=None, max_length=128)
    assignee: str | None = Field(default=None, max_length=255)
    salesman: str | None = Field(default=None, max_length=255)
    designer: str | None = Field(default=None, max_length=255)
    due_date: date | None = None
    estimated_hours: Decimal | None = Field(default=None, ge=0)
    actual_hours: Decimal | None = Field(default=None, ge=0)
    total_value: Decimal | None = None
    invoice_number: str | None = Field(default=None, max_length=64)
    approval_notes: str | None = None
    job_order_details: str | None = None
    delivered_at: datetime | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("status", check_fields=False)
    @classmethod
    def _check_status(cls, value: str | None) -> str | None:
        return _check_choice(value, JOB_STATUSES, "status")

    @field_validator("priority", check_fields=False)
    @classmethod
    def _check_priority(cls, value: str | None) -> str | None:
        return _check_choice(value, PRIORITY_LEVELS, "priority")

    @field_validator("approval_status", check_fields=False)
    @classmethod
    def _check_approval_status(cls, value: str | None) -> str | None:
        return _check_choice(value, APPROVAL_STATUSES, "approval status")


class JobOrderCreate(JobOrderFields):
    """Payload for a new job order; the number is generated when omitted."""

    job_order_number: str | None = Field(default=None, max_length=32)
    status: str = "pending"
    priority: str = "medium"
    approval_status: str = "pending"


class JobOrderUpdate(JobOrderFields):
    """Partial update; unknown and store-owned keys are rejected."""

    job_order_number: str | None = Field(default=None, max_length=32)
    status: str | None = None
    priority: str | None = None
    approval_status: str | None = None

    @field_validator(*REQUIRED_ON_WRITE)
    @classmethod
    def _not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class JobOrderRead(BaseModel):
    """Serialized job order."""

    id: int
    job_order_number: str
    title: str | None
    client_name: str | None
    branch: str | None
    assignee: str | None
    salesman: str | None
    designer: str | None
    status: str
    priority: str
    due_date: date | None
    estimated_hours: Decimal | None
    actual_hours: Decimal | None
    total_value: Decimal | None
    invoice_number: str | None
    approval_status: str
    approval_notes: str | None
    job_order_details: str | None
    delivered_at: datetime | None
    created_by: int | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobOrderWriteResponse(BaseModel):
    """Job order after a write, plus what the ledger did with it."""

    job_order: JobOrderRead
    log_entry_id: int | None = None
    history_recorded: bool
    message: str
