"""Insert sample tasks into the configured storage.

Tasks go through ``TaskService`` so defaults, validation and the completion
rule apply exactly as they do for API writes.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from . import db
from .logging_utils import configure_logging
from .models.task import Task, now_utc
from .repositories.postgres_repository import PostgresTaskRepository
from .repositories.task_repository import TaskRepository
from .services.task_service import TaskService
from .settings import get_settings

logger = logging.getLogger(__name__)


def sample_tasks(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or now_utc()
    return [
        {
            "title": "Complete Project Documentation",
            "description": "Write comprehensive documentation for the task tracker",
            "status": "pending",
            "priority": "high",
            "dueDate": (now + timedelta(days=7)).isoformat(),
        },
        {
            "title": "Implement User Authentication",
            "description": "Add token-based authentication",
            "status": "in-progress",
            "priority": "high",
            "dueDate": (now + timedelta(days=3)).isoformat(),
        },
        {
            "title": "Write Unit Tests",
            "description": "Create unit tests for all components",
            "status": "completed",
            "priority": "medium",
        },
        {
            "title": "Setup CI/CD Pipeline",
            "description": "Configure automated testing and deployment",
            "status": "pending",
            "priority": "low",
        },
    ]


async def seed(repository: TaskRepository, *, reset: bool = False) -> List[Task]:
    service = TaskService(repository)
    if reset:
        await repository.clear()
    created = [await service.create_task(fields) for fields in sample_tasks()]
    logger.info("Seeded %d sample tasks", len(created))
    return created


async def _seed_database(reset: bool) -> None:
    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is required to seed tasks")

    await db.init_db(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    try:
        await seed(PostgresTaskRepository(), reset=reset)
    finally:
        await db.close_db()


def main(argv=None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(get_settings().log_level)
    asyncio.run(_seed_database(reset="--reset" in argv))


if __name__ == "__main__":
    main()
