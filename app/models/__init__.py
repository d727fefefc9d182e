"""Application models package."""

from app.models.job_order import JobOrder
from app.models.job_order_log import JobOrderLog, LedgerEntryImmutable
from app.models.user import User

__all__ = ["User", "JobOrder", "JobOrderLog", "LedgerEntryImmutable"]
