"""Schema exports."""

from app.schemas.auth import AuthUserResponse, LoginRequest, TokenResponse
from app.schemas.job_order import JobOrderCreate, JobOrderRead, JobOrderUpdate, JobOrderWriteResponse
from app.schemas.job_order_log import (
    ActorRead,
    FieldChange,
    HistoryFilters,
    JobOrderLogRead,
    RevertRequest,
    RevertResponse,
)

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "TokenResponse",
    "JobOrderCreate",
    "JobOrderRead",
    "JobOrderUpdate",
    "JobOrderWriteResponse",
    "ActorRead",
    "FieldChange",
    "HistoryFilters",
    "JobOrderLogRead",
    "RevertRequest",
    "RevertResponse",
]
