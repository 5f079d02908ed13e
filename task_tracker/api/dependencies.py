"""API dependencies for task management."""

from fastapi import Depends, Request

from ..repositories.task_repository import TaskRepository
from ..services.task_service import TaskService


def get_task_repository(request: Request) -> TaskRepository:
    """Dependency for the repository created once per application."""
    return request.app.state.task_repository


def get_task_service(
    repository: TaskRepository = Depends(get_task_repository),
) -> TaskService:
    """Dependency for getting task service instance."""
    return TaskService(repository)
