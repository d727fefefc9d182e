"""CSV export of a job order history."""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable
from io import StringIO

from app.core.config import settings
from app.schemas.job_order_log import JobOrderLogRead
from app.utils.time import as_utc

EXPORT_HEADERS: list[str] = ["Timestamp", "User", "Action", "Changes"]
CREATED_LABEL = "Initial creation"


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "job-order")[:max_length]


def _single_line(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\n", "\\n")


def export_filename(job_order_number: str) -> str:
    return f"job-order-{sanitize_filename(job_order_number)}-log.csv"


def format_changes(entry: JobOrderLogRead, separator: str | None = None) -> str:
    """Render ``field: old → new`` pairs in diff order as one cell."""
    if entry.action == "created" or not entry.changed_fields:
        return CREATED_LABEL
    separator = settings.history_change_separator if separator is None else separator
    summary = separator.join(
        f"{field}: {_single_line(change.old)} → {_single_line(change.new)}"
        for field, change in entry.changed_fields.items()
    )
    if entry.reverted_from_id is not None:
        summary = f"{summary} (reverted to entry #{entry.reverted_from_id})"
    return summary


def export_history_csv(entries: Iterable[JobOrderLogRead]) -> str:
    """Return one header line plus one line per entry, in the given order.

    Only stored values are rendered, so the same entries always produce the
    same bytes.
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for entry in entries:
        writer.writerow(
            [
                as_utc(entry.changed_at).strftime(settings.history_export_timestamp_format),
                entry.changed_by_name,
                entry.action,
                format_changes(entry),
            ]
        )
    return output.getvalue()
