"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import job_order as _job_order  # noqa: E402,F401
from app.models import job_order_log as _job_order_log  # noqa: E402,F401
from app.models import user as _user  # noqa: E402,F401
