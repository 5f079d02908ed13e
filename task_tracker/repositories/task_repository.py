"""Task repository - data access layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models.task import Task, TaskStatus


class TaskRepository(ABC):
    """Persistence operations for tasks.

    Implementations store exactly what they are given: validation, defaults
    and timestamps are the service's job. ``fields`` dicts use attribute
    names (``due_date``, ``completed_at``...).
    """

    backend_name = "unknown"

    @abstractmethod
    async def add(self, task: Task) -> Task:
        """Persist a new task."""

    @abstractmethod
    async def get_by_id(self, task_id: str) -> Optional[Task]:
        """Get task by ID, None when it does not exist."""

    @abstractmethod
    async def get_all(
        self,
        *,
        filters: Optional[Dict[str, str]] = None,
        sort_field: str = "created_at",
        descending: bool = True,
    ) -> List[Task]:
        """Get tasks whose fields equal ``filters``, ordered by ``sort_field``."""

    @abstractmethod
    async def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """Overwrite the given fields, None when the task does not exist."""

    @abstractmethod
    async def mark_completed(self, task_id: str, now: datetime) -> Optional[Task]:
        """Set status to completed, stamping completed_at only if unset."""

    @abstractmethod
    async def delete(self, task_id: str) -> Optional[Task]:
        """Delete a task and return it, None when it does not exist."""

    @abstractmethod
    async def get_overdue(self, now: datetime) -> List[Task]:
        """Tasks due before ``now`` that are not completed."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored task."""


def _sort_value(task: Task, sort_field: str) -> Any:
    value = getattr(task, sort_field)
    if isinstance(value, Enum):
        return value.value
    return value


class InMemoryTaskRepository(TaskRepository):
    """Repository for task data access with in-memory storage."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}

    async def add(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy()
        return task.model_copy()

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return task.model_copy() if task else None

    async def get_all(
        self,
        *,
        filters: Optional[Dict[str, str]] = None,
        sort_field: str = "created_at",
        descending: bool = True,
    ) -> List[Task]:
        filters = filters or {}
        matches = [
            task
            for task in self._tasks.values()
            if all(_sort_value(task, name) == value for name, value in filters.items())
        ]

        # Nulls first ascending, last descending.
        def key(task: Task) -> tuple:
            value = _sort_value(task, sort_field)
            return (value is not None, value if value is not None else 0)

        matches.sort(key=key, reverse=descending)
        return [task.model_copy() for task in matches]

    async def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if not task:
            return None
        updated = task.model_copy(update=fields)
        self._tasks[task_id] = updated
        return updated.model_copy()

    async def mark_completed(self, task_id: str, now: datetime) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if not task:
            return None
        return await self.update(
            task_id,
            {
                "status": TaskStatus.COMPLETED,
                "completed_at": task.completed_at or now,
                "updated_at": now,
            },
        )

    async def delete(self, task_id: str) -> Optional[Task]:
        return self._tasks.pop(task_id, None)

    async def get_overdue(self, now: datetime) -> List[Task]:
        overdue = [task for task in self._tasks.values() if task.is_overdue(now)]
        overdue.sort(key=lambda task: task.due_date)
        return [task.model_copy() for task in overdue]

    async def clear(self) -> None:
        """Clear all stored tasks (testing helper)."""
        self._tasks.clear()
