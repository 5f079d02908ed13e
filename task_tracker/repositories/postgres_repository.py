"""PostgreSQL-backed task repository."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

import asyncpg

from .. import db
from ..errors import TaskStoreError
from ..models.task import Task
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _plain(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in fields.items()}


def _to_task(row: Optional[Dict[str, Any]]) -> Optional[Task]:
    if row is None:
        return None
    return Task.model_validate(row)


class PostgresTaskRepository(TaskRepository):
    """Task storage in the ``tasks`` table of the pool opened by ``db.init_db``."""

    backend_name = "postgres"

    async def _run(self, action: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError) as exc:
            logger.exception("Task store %s failed", action)
            raise TaskStoreError(f"Task store {action} failed") from exc

    async def add(self, task: Task) -> Task:
        fields = _plain(task.model_dump(exclude={"id"}))
        row = await self._run("add", db.create_task_row(task_id=task.id, fields=fields))
        return _to_task(row)

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        return _to_task(await self._run("get_by_id", db.get_task_row(task_id)))

    async def get_all(
        self,
        *,
        filters: Optional[Dict[str, str]] = None,
        sort_field: str = "created_at",
        descending: bool = True,
    ) -> List[Task]:
        rows = await self._run(
            "get_all",
            db.list_task_rows(
                filters=_plain(filters or {}),
                sort_column=sort_field,
                descending=descending,
            ),
        )
        return [_to_task(row) for row in rows]

    async def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        return _to_task(await self._run("update", db.update_task_row(task_id, _plain(fields))))

    async def mark_completed(self, task_id: str, now: datetime) -> Optional[Task]:
        return _to_task(await self._run("mark_completed", db.complete_task_row(task_id, now)))

    async def delete(self, task_id: str) -> Optional[Task]:
        return _to_task(await self._run("delete", db.delete_task_row(task_id)))

    async def get_overdue(self, now: datetime) -> List[Task]:
        rows = await self._run("get_overdue", db.list_overdue_task_rows(now))
        return [_to_task(row) for row in rows]

    async def clear(self) -> None:
        removed = await self._run("clear", db.delete_all_task_rows())
        logger.info("Removed %s tasks", removed)
