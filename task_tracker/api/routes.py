"""API routes for task management."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..logging_utils import bind_task_id
from ..services.task_service import DEFAULT_ORDER, DEFAULT_SORT, TaskService
from .dependencies import get_task_service
from .models import MessageResponse, TaskListResponse, TaskResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


@router.get("/tasks", response_model=TaskListResponse)
async def get_tasks(
    status_filter: Optional[str] = Query(None, alias="status", description="Exact status match"),
    priority: Optional[str] = Query(None, description="Exact priority match"),
    sort: str = Query(DEFAULT_SORT, description="Field to order by"),
    order: str = Query(DEFAULT_ORDER, description="'desc' for descending, anything else ascending"),
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """Get all tasks, optionally filtered and ordered."""
    tasks = await service.get_tasks(status=status_filter, priority=priority, sort=sort, order=order)
    logger.info("Retrieved %d tasks", len(tasks))
    return TaskListResponse(count=len(tasks), data=tasks)


@router.get("/tasks/overdue", response_model=TaskListResponse)
async def get_overdue_tasks(
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """Get tasks past their due date that are not completed."""
    tasks = await service.get_overdue_tasks()
    return TaskListResponse(count=len(tasks), data=tasks)


@router.get("/tasks/status/{task_status}", response_model=TaskListResponse)
async def get_tasks_by_status(
    task_status: str,
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    tasks = await service.get_tasks_by_status(task_status)
    return TaskListResponse(count=len(tasks), data=tasks)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Get a specific task by ID."""
    with bind_task_id(task_id):
        task = await service.get_task_by_id(task_id)
    return TaskResponse(data=task)


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: Dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Create a new task."""
    task = await service.create_task(payload)
    with bind_task_id(task.id):
        logger.info("Created new task: %s", task.title)
    return TaskResponse(data=task)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    payload: Dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Update an existing task."""
    with bind_task_id(task_id):
        task = await service.update_task(task_id, payload)
        logger.info("Updated task: %s", task.title)
    return TaskResponse(data=task)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    """Delete a task."""
    with bind_task_id(task_id):
        task = await service.delete_task(task_id)
        logger.info("Deleted task: %s", task.title)
    return MessageResponse(message="Task deleted successfully")


@router.patch("/tasks/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Mark a task as completed."""
    with bind_task_id(task_id):
        task = await service.complete_task(task_id)
        logger.info("Marked task as completed: %s", task.title)
    return TaskResponse(data=task)
