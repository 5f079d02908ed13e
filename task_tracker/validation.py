"""Field validation for task payloads.

``validate_task_fields`` is the single rule set used by both the create and
the update paths. It never raises for bad input: every violation is collected
as a ``FieldError`` in the returned ``ValidationResult`` and the caller decides
how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Mapping, Optional

from .models.task import TaskPriority, TaskStatus, now_utc

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

TITLE_REQUIRED = "Title is required"
TITLE_NOT_STRING = "Title must be a string"
TITLE_LENGTH = f"Title must be between 1 and {TITLE_MAX_LENGTH} characters"
DESCRIPTION_NOT_STRING = "Description must be a string"
DESCRIPTION_LENGTH = f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
STATUS_INVALID = "Status must be pending, in-progress, or completed"
PRIORITY_INVALID = "Priority must be low, medium, or high"
DUE_DATE_INVALID = "Due date must be a valid date"
DUE_DATE_PAST = "Due date cannot be in the past"

# Input keys accepted for each attribute; anything else is ignored.
_FIELD_KEYS = {
    "title": ("title",),
    "description": ("description",),
    "status": ("status",),
    "priority": ("priority",),
    "due_date": ("dueDate", "due_date"),
}


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult:
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 date or date-time; naive values are taken as UTC.

    Returns None when ``value`` is not a recognizable date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    # Offsets near datetime.min/max can push the UTC value out of range.
    try:
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def _lookup(payload: Mapping[str, Any], attribute: str) -> tuple[bool, Any]:
    for key in _FIELD_KEYS[attribute]:
        if key in payload:
            return True, payload[key]
    return False, None


def _validate_title(raw: Any, result: ValidationResult) -> None:
    if raw is None:
        result.add_error("title", TITLE_REQUIRED)
        return
    if not isinstance(raw, str):
        result.add_error("title", TITLE_NOT_STRING)
        return
    title = raw.strip()
    if not 1 <= len(title) <= TITLE_MAX_LENGTH:
        result.add_error("title", TITLE_LENGTH)
        return
    result.values["title"] = title


def _validate_description(raw: Any, result: ValidationResult) -> None:
    if raw is None:
        result.values["description"] = None
        return
    if not isinstance(raw, str):
        result.add_error("description", DESCRIPTION_NOT_STRING)
        return
    description = raw.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        result.add_error("description", DESCRIPTION_LENGTH)
        return
    result.values["description"] = description


def _validate_enum(raw: Any, enum_cls: type, field_name: str, message: str, result: ValidationResult) -> None:
    try:
        result.values[field_name] = enum_cls(raw)
    except (TypeError, ValueError):
        result.add_error(field_name, message)


def _validate_due_date(raw: Any, now: datetime, result: ValidationResult) -> None:
    if raw is None:
        result.values["due_date"] = None
        return
    due_date = parse_datetime(raw)
    if due_date is None:
        result.add_error("dueDate", DUE_DATE_INVALID)
        return
    if due_date < now:
        result.add_error("dueDate", DUE_DATE_PAST)
        return
    result.values["due_date"] = due_date


def validate_task_fields(
    payload: Mapping[str, Any],
    *,
    partial: bool = False,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate and normalize client-supplied task fields.

    With ``partial=False`` (create) a missing title is an error and missing
    status/priority take their defaults. With ``partial=True`` (update) only
    the keys present in ``payload`` are checked and returned. Error field
    names use the wire names (``dueDate``).
    """
    now = now or now_utc()
    result = ValidationResult()

    present, raw = _lookup(payload, "title")
    if present or not partial:
        _validate_title(raw, result)

    present, raw = _lookup(payload, "description")
    if present:
        _validate_description(raw, result)
    elif not partial:
        result.values["description"] = None

    present, raw = _lookup(payload, "status")
    if present:
        _validate_enum(raw, TaskStatus, "status", STATUS_INVALID, result)
    elif not partial:
        result.values["status"] = TaskStatus.PENDING

    present, raw = _lookup(payload, "priority")
    if present:
        _validate_enum(raw, TaskPriority, "priority", PRIORITY_INVALID, result)
    elif not partial:
        result.values["priority"] = TaskPriority.MEDIUM

    present, raw = _lookup(payload, "due_date")
    if present:
        _validate_due_date(raw, now, result)
    elif not partial:
        result.values["due_date"] = None

    return result
