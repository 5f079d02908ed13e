"""Task data models using Pydantic."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Wire names and attribute names both resolve to the attribute used for ordering.
SORT_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "completedAt": "completed_at",
    "title": "title",
    "status": "status",
    "priority": "priority",
    "created_at": "created_at",
    "updated_at": "updated_at",
    "due_date": "due_date",
    "completed_at": "completed_at",
}


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """A stored task record.

    Serialized with camelCase names for the date fields (``dueDate``,
    ``completedAt``, ``createdAt``, ``updatedAt``); constructed with either
    the wire names or the attribute names.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    completed_at: Optional[datetime] = Field(None, alias="completedAt")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True when the due date has passed and the task is not completed."""
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        return self.due_date < (now or now_utc())
