"""Database utilities for task persistence.

Smoke check:
  - Without DATABASE_URL: start the app, POST /api/tasks, then GET /api/tasks/{task_id}.
  - With DATABASE_URL set: POST /api/tasks, restart server, then GET /api/tasks/{task_id}.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import asyncpg

logger = logging.getLogger(__name__)

_pool: Optional[asyncpg.Pool] = None

TASK_COLUMNS = (
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "completed_at",
    "created_at",
    "updated_at",
)
SORTABLE_COLUMNS = {
    "title",
    "status",
    "priority",
    "due_date",
    "completed_at",
    "created_at",
    "updated_at",
}


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool is not initialized")
    return _pool


async def init_db(database_url: str, *, min_size: int = 1, max_size: int = 5) -> None:
    global _pool

    if _pool is not None:
        return

    _pool = await asyncpg.create_pool(dsn=database_url, min_size=min_size, max_size=max_size)
    async with _pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id UUID PRIMARY KEY,
                title VARCHAR(100) NOT NULL,
                description VARCHAR(500) NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                priority TEXT NOT NULL DEFAULT 'medium',
                due_date TIMESTAMPTZ NULL,
                completed_at TIMESTAMPTZ NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_tasks_status_priority ON tasks (status, priority);"
        )
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks (due_date);")
    logger.info("Database initialized for task persistence")


async def close_db() -> None:
    global _pool

    if _pool is None:
        return

    await _pool.close()
    _pool = None
    logger.info("Database pool closed")


def coerce_task_id(task_id: str) -> Optional[uuid.UUID]:
    """Parse ``task_id``; malformed ids resolve to None (no such row)."""
    if isinstance(task_id, uuid.UUID):
        return task_id
    try:
        return uuid.UUID(str(task_id))
    except ValueError:
        return None


def _row_to_dict(row: Optional[asyncpg.Record]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    data = dict(row)
    data["id"] = str(data["id"])
    return data


async def create_task_row(*, task_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    pool = get_pool()
    values = [fields.get(column) for column in TASK_COLUMNS]
    placeholders = ", ".join(f"${idx}" for idx in range(2, len(TASK_COLUMNS) + 2))
    query = (
        f"INSERT INTO tasks (id, {', '.join(TASK_COLUMNS)}) "
        f"VALUES ($1, {placeholders}) RETURNING *;"
    )
    row = await pool.fetchrow(query, uuid.UUID(task_id), *values)
    return _row_to_dict(row) or {}


async def get_task_row(task_id: str) -> Optional[Dict[str, Any]]:
    key = coerce_task_id(task_id)
    if key is None:
        return None
    row = await get_pool().fetchrow("SELECT * FROM tasks WHERE id = $1;", key)
    return _row_to_dict(row)


async def list_task_rows(
    *,
    filters: Dict[str, str],
    sort_column: str = "created_at",
    descending: bool = True,
) -> List[Dict[str, Any]]:
    if sort_column not in SORTABLE_COLUMNS:
        raise ValueError(f"Unsupported sort column: {sort_column}")

    clauses = []
    values: List[Any] = []
    for idx, (column, value) in enumerate(filters.items(), start=1):
        if column not in ("status", "priority"):
            raise ValueError(f"Unsupported filter column: {column}")
        clauses.append(f"{column} = ${idx}")
        values.append(value)
    where = f"WHERE {' AND '.join(clauses)} " if clauses else ""
    direction = "DESC NULLS LAST" if descending else "ASC NULLS FIRST"
    query = f"SELECT * FROM tasks {where}ORDER BY {sort_column} {direction};"

    rows = await get_pool().fetch(query, *values)
    return [_row_to_dict(row) for row in rows]


async def update_task_row(task_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    key = coerce_task_id(task_id)
    if key is None:
        return None

    updates = {column: value for column, value in fields.items() if column in TASK_COLUMNS}
    updates.pop("created_at", None)
    if not updates:
        return await get_task_row(task_id)

    set_clauses = []
    values: List[Any] = []
    for idx, (column, value) in enumerate(updates.items(), start=1):
        set_clauses.append(f"{column} = ${idx}")
        values.append(value)
    values.append(key)
    query = f"UPDATE tasks SET {', '.join(set_clauses)} WHERE id = ${len(values)} RETURNING *;"

    row = await get_pool().fetchrow(query, *values)
    return _row_to_dict(row)


async def complete_task_row(task_id: str, now: datetime) -> Optional[Dict[str, Any]]:
    key = coerce_task_id(task_id)
    if key is None:
        return None
    row = await get_pool().fetchrow(
        """
        UPDATE tasks
        SET status = 'completed',
            completed_at = COALESCE(completed_at, $1),
            updated_at = $1
        WHERE id = $2
        RETURNING *;
        """,
        now,
        key,
    )
    return _row_to_dict(row)


async def delete_task_row(task_id: str) -> Optional[Dict[str, Any]]:
    key = coerce_task_id(task_id)
    if key is None:
        return None
    row = await get_pool().fetchrow("DELETE FROM tasks WHERE id = $1 RETURNING *;", key)
    return _row_to_dict(row)


async def list_overdue_task_rows(now: datetime) -> List[Dict[str, Any]]:
    rows = await get_pool().fetch(
        """
        SELECT * FROM tasks
        WHERE due_date < $1 AND status <> 'completed'
        ORDER BY due_date ASC;
        """,
        now,
    )
    return [_row_to_dict(row) for row in rows]


async def delete_all_task_rows() -> int:
    result = await get_pool().execute("DELETE FROM tasks;")
    # asyncpg returns the command tag, e.g. "DELETE 3".
    return int(result.split()[-1]) if result else 0
