"""Task service - business logic layer."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import TaskNotFoundError, TaskValidationError
from ..models.task import SORT_FIELDS, Task, TaskStatus, now_utc
from ..repositories.task_repository import InMemoryTaskRepository, TaskRepository
from ..validation import FieldError, validate_task_fields

DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = "desc"


def apply_completion_rule(
    fields: Dict[str, Any],
    *,
    current_completed_at: Optional[datetime],
    now: datetime,
) -> Dict[str, Any]:
    """Keep ``completed_at`` consistent with a status being written.

    Completing stamps ``now`` unless a completion time already exists; any
    other status clears it. Fields without a status are returned unchanged.
    """
    if "status" not in fields:
        return fields
    if fields["status"] == TaskStatus.COMPLETED:
        fields["completed_at"] = current_completed_at or now
    else:
        fields["completed_at"] = None
    return fields


class TaskService:
    """Service for task business logic.

    Every write goes through ``validate_task_fields`` and the completion
    rule before it reaches the repository.
    """

    def __init__(
        self,
        repository: Optional[TaskRepository] = None,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.repository = repository or InMemoryTaskRepository()
        self._clock = clock

    def _validated(self, payload: Mapping[str, Any], *, partial: bool, now: datetime) -> Dict[str, Any]:
        if not isinstance(payload, Mapping):
            raise TaskValidationError([FieldError("body", "Request body must be a JSON object")])
        result = validate_task_fields(payload, partial=partial, now=now)
        if not result.ok:
            raise TaskValidationError(result.errors)
        return dict(result.values)

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        """Create a new task."""
        now = self._clock()
        fields = self._validated(payload, partial=False, now=now)
        apply_completion_rule(fields, current_completed_at=None, now=now)
        task = Task(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **fields,
        )
        return await self.repository.add(task)

    async def get_task_by_id(self, task_id: str) -> Task:
        """Get a specific task by ID."""
        task = await self.repository.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def get_tasks(
        self,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[Task]:
        """Get tasks, optionally filtered by exact status/priority."""
        sort = sort or DEFAULT_SORT
        sort_field = SORT_FIELDS.get(sort)
        if sort_field is None:
            raise TaskValidationError([FieldError("sort", f"Cannot sort by '{sort}'")])
        filters: Dict[str, str] = {}
        if status:
            filters["status"] = status
        if priority:
            filters["priority"] = priority
        return await self.repository.get_all(
            filters=filters,
            sort_field=sort_field,
            descending=(order or DEFAULT_ORDER).lower() == "desc",
        )

    async def update_task(self, task_id: str, payload: Mapping[str, Any]) -> Task:
        """Update an existing task; omitted fields keep their values."""
        now = self._clock()
        fields = self._validated(payload, partial=True, now=now)
        existing = await self.get_task_by_id(task_id)
        apply_completion_rule(fields, current_completed_at=existing.completed_at, now=now)
        fields["updated_at"] = now
        task = await self.repository.update(task_id, fields)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def delete_task(self, task_id: str) -> Task:
        """Delete a task and return the removed record."""
        task = await self.repository.delete(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def complete_task(self, task_id: str) -> Task:
        """Mark a task completed; the first completion time is kept."""
        task = await self.repository.mark_completed(task_id, self._clock())
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def get_tasks_by_status(self, status: str) -> List[Task]:
        return await self.get_tasks(status=status)

    async def get_overdue_tasks(self) -> List[Task]:
        return await self.repository.get_overdue(self._clock())
