"""Timestamp helpers shared by the ledger services."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps.

    SQLite drops tzinfo on the way back out, while every timestamp the ledger
    writes is UTC, so a naive value read from the database is UTC as well.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_window_start(value: date | datetime) -> datetime:
    """Return the inclusive lower bound for a date or datetime filter."""
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def day_window_end(value: date | datetime) -> datetime:
    """Return the inclusive upper bound for a date or datetime filter.

    A bare date covers the whole calendar day.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value + timedelta(days=1), time.min, tzinfo=timezone.utc) - timedelta(microseconds=1)
