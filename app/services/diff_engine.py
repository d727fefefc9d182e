"""Field-level diffing of job order states."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

# Declaration order is the order changes are reported in.
TRACKED_FIELDS: tuple[str, ...] = (
    "job_order_number",
    "title",
    "client_name",
    "branch",
    "assignee",
    "salesman",
    "designer",
    "status",
    "priority",
    "due_date",
    "estimated_hours",
    "actual_hours",
    "total_value",
    "invoice_number",
    "approval_status",
    "approval_notes",
    "job_order_details",
    "delivered_at",
)

FieldChange = dict[str, str]


def render_value(value: Any) -> str:
    """Coerce a field value to the display string used for comparison.

    Numeric values compare by value (``8``, ``8.0`` and ``Decimal("8.00")``
    all render ``"8"``). Strings are kept as given, so ``"8"`` equals ``8``
    but ``"8.0"`` does not. Missing values render as the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return _render_number(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _render_number(value: int | float | Decimal) -> str:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    if not number.is_finite():
        return str(value)
    if number == number.to_integral_value():
        return str(number.quantize(Decimal(1)))
    return format(number.normalize(), "f")


def diff(
    previous: Mapping[str, Any] | None,
    current: Mapping[str, Any],
    tracked_fields: tuple[str, ...] = TRACKED_FIELDS,
) -> dict[str, FieldChange]:
    """Return ``{field: {"old": ..., "new": ...}}`` for tracked fields that differ.

    A missing ``previous`` reports every tracked field present on ``current``
    as new. Fields outside ``tracked_fields`` are ignored.
    """
    previous = previous or {}
    changes: dict[str, FieldChange] = {}
    for field in tracked_fields:
        if field not in previous and field not in current:
            continue
        old = render_value(previous.get(field))
        new = render_value(current.get(field))
        if old != new:
            changes[field] = {"old": old, "new": new}
    return changes
