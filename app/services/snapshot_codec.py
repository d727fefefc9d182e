"""Capture job order state as JSON snapshots and prepare them for re-application."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect

from app.models.job_order import JobOrder

Snapshot = dict[str, Any]

# Fields the job order store owns; a snapshot never writes them back.
WRITE_FORBIDDEN_FIELDS: frozenset[str] = frozenset({"id", "created_at", "created_by", "updated_at"})


def capture(job_order: JobOrder) -> Snapshot:
    """Return a JSON-safe copy of every persisted column of the job order."""
    columns = inspect(JobOrder).columns
    raw = {column.key: getattr(job_order, column.key) for column in columns}
    return jsonable_encoder(raw)


def strip(snapshot: Snapshot) -> Snapshot:
    """Drop store-owned metadata so the snapshot can be sent as an update."""
    return {field: value for field, value in snapshot.items() if field not in WRITE_FORBIDDEN_FIELDS}
