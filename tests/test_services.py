"""Service layer tests."""

from datetime import timedelta

import pytest

from task_tracker.errors import TaskNotFoundError, TaskValidationError
from task_tracker.models.task import TaskPriority, TaskStatus
from task_tracker.services.task_service import TaskService


class TestTaskService:
    """Test suite for TaskService."""

    @pytest.mark.asyncio
    async def test_create_and_get_task(self, task_service: TaskService, clock) -> None:
        due = clock.now + timedelta(days=2)
        created = await task_service.create_task(
            {"title": "Write report", "description": "Q1 numbers", "priority": "high", "dueDate": due.isoformat()}
        )

        assert created.id
        assert created.title == "Write report"
        assert created.description == "Q1 numbers"
        assert created.status == TaskStatus.PENDING
        assert created.priority == TaskPriority.HIGH
        assert created.due_date == due
        assert created.completed_at is None
        assert created.created_at == clock.now
        assert created.updated_at == clock.now

        retrieved = await task_service.get_task_by_id(created.id)
        assert retrieved == created

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, task_service: TaskService) -> None:
        first = await task_service.create_task({"title": "One"})
        second = await task_service.create_task({"title": "One"})

        assert first.id != second.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "a" * 101])
    async def test_create_task_invalid_title(self, task_service: TaskService, title: str) -> None:
        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.create_task({"title": title})
        assert exc_info.value.fields == ["title"]

    @pytest.mark.asyncio
    async def test_create_task_invalid_status(self, task_service: TaskService) -> None:
        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.create_task({"title": "T", "status": "bogus"})
        assert exc_info.value.fields == ["status"]

    @pytest.mark.asyncio
    async def test_create_task_due_date(self, task_service: TaskService, clock) -> None:
        yesterday = clock.now - timedelta(days=1)
        tomorrow = clock.now + timedelta(days=1)

        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.create_task({"title": "T", "dueDate": yesterday.isoformat()})
        assert exc_info.value.fields == ["dueDate"]

        task = await task_service.create_task({"title": "T", "dueDate": tomorrow.isoformat()})
        assert task.due_date == tomorrow

    @pytest.mark.asyncio
    async def test_create_rejects_non_object_payload(self, task_service: TaskService) -> None:
        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.create_task(["title"])
        assert exc_info.value.fields == ["body"]

    @pytest.mark.asyncio
    async def test_create_completed_task_stamps_completion(self, task_service: TaskService, clock) -> None:
        task = await task_service.create_task(
            {"title": "Done already", "status": "completed", "completedAt": "2000-01-01T00:00:00Z"}
        )

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at == clock.now

    @pytest.mark.asyncio
    async def test_get_missing_task(self, task_service: TaskService) -> None:
        with pytest.raises(TaskNotFoundError):
            await task_service.get_task_by_id("does-not-exist")

    @pytest.mark.asyncio
    async def test_update_task(self, task_service: TaskService, clock) -> None:
        task = await task_service.create_task({"title": "Original", "description": "keep me"})
        clock.advance(minutes=5)

        updated = await task_service.update_task(task.id, {"title": "  Updated ", "priority": "low"})

        assert updated.title == "Updated"
        assert updated.priority == TaskPriority.LOW
        assert updated.description == "keep me"
        assert updated.created_at == task.created_at
        assert updated.updated_at == clock.now
        assert updated.updated_at > task.updated_at

    @pytest.mark.asyncio
    async def test_update_task_runs_same_validation(self, task_service: TaskService) -> None:
        task = await task_service.create_task({"title": "Original"})

        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.update_task(task.id, {"title": "", "priority": "urgent"})
        assert sorted(exc_info.value.fields) == ["priority", "title"]

        unchanged = await task_service.get_task_by_id(task.id)
        assert unchanged.title == "Original"

    @pytest.mark.asyncio
    async def test_update_nonexistent_task(self, task_service: TaskService) -> None:
        with pytest.raises(TaskNotFoundError):
            await task_service.update_task("missing", {"title": "Updated"})

    @pytest.mark.asyncio
    async def test_update_to_completed_stamps_completion(self, task_service: TaskService, clock) -> None:
        task = await task_service.create_task({"title": "T"})
        clock.advance(hours=1)

        updated = await task_service.update_task(task.id, {"status": "completed"})

        assert updated.status == TaskStatus.COMPLETED
        assert updated.completed_at == clock.now

    @pytest.mark.asyncio
    async def test_update_ignores_client_completion_time(self, task_service: TaskService) -> None:
        task = await task_service.create_task({"title": "T"})

        updated = await task_service.update_task(task.id, {"completedAt": "2000-01-01T00:00:00Z"})

        assert updated.completed_at is None

    @pytest.mark.asyncio
    async def test_reopening_task_clears_completion(self, task_service: TaskService, clock) -> None:
        task = await task_service.create_task({"title": "T"})
        await task_service.complete_task(task.id)

        reopened = await task_service.update_task(task.id, {"status": "in-progress"})

        assert reopened.status == TaskStatus.IN_PROGRESS
        assert reopened.completed_at is None

    @pytest.mark.asyncio
    async def test_complete_task(self, task_service: TaskService, clock) -> None:
        task = await task_service.create_task({"title": "T"})
        clock.advance(minutes=10)

        completed = await task_service.complete_task(task.id)
        assert completed.status == TaskStatus.COMPLETED
        assert completed.completed_at == clock.now
        first_completion = completed.completed_at

        clock.advance(days=1)
        again = await task_service.complete_task(task.id)
        assert again.status == TaskStatus.COMPLETED
        assert again.completed_at == first_completion
        assert again.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_complete_missing_task(self, task_service: TaskService) -> None:
        with pytest.raises(TaskNotFoundError):
            await task_service.complete_task("missing")

    @pytest.mark.asyncio
    async def test_delete_task(self, task_service: TaskService) -> None:
        task = await task_service.create_task({"title": "To delete"})

        deleted = await task_service.delete_task(task.id)
        assert deleted.id == task.id

        with pytest.raises(TaskNotFoundError):
            await task_service.get_task_by_id(task.id)
        with pytest.raises(TaskNotFoundError):
            await task_service.delete_task(task.id)

    @pytest.mark.asyncio
    async def test_filter_by_status_returns_exact_subset(self, task_service: TaskService) -> None:
        statuses = ["pending", "completed", "in-progress", "pending", "completed", "pending"]
        created = [
            await task_service.create_task({"title": f"Task {i}", "status": status})
            for i, status in enumerate(statuses)
        ]

        pending = await task_service.get_tasks(status="pending")

        expected = {task.id for task in created if task.status == TaskStatus.PENDING}
        assert {task.id for task in pending} == expected
        assert len(pending) == 3

        by_status = await task_service.get_tasks_by_status("completed")
        assert {task.status for task in by_status} == {TaskStatus.COMPLETED}
        assert len(by_status) == 2

    @pytest.mark.asyncio
    async def test_filter_by_status_and_priority(self, task_service: TaskService) -> None:
        await task_service.create_task({"title": "A", "status": "pending", "priority": "high"})
        await task_service.create_task({"title": "B", "status": "pending", "priority": "low"})
        await task_service.create_task({"title": "C", "status": "completed", "priority": "high"})

        tasks = await task_service.get_tasks(status="pending", priority="high")

        assert [task.title for task in tasks] == ["A"]

    @pytest.mark.asyncio
    async def test_unknown_filter_value_matches_nothing(self, task_service: TaskService) -> None:
        await task_service.create_task({"title": "A"})

        assert await task_service.get_tasks(status="bogus") == []

    @pytest.mark.asyncio
    async def test_default_order_is_newest_first(self, task_service: TaskService, clock) -> None:
        for title in ("first", "second", "third"):
            await task_service.create_task({"title": title})
            clock.advance(seconds=1)

        tasks = await task_service.get_tasks()

        assert [task.title for task in tasks] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_custom_sort(self, task_service: TaskService) -> None:
        for title in ("banana", "apple", "cherry"):
            await task_service.create_task({"title": title})

        ascending = await task_service.get_tasks(sort="title", order="asc")
        descending = await task_service.get_tasks(sort="title", order="desc")

        assert [task.title for task in ascending] == ["apple", "banana", "cherry"]
        assert [task.title for task in descending] == ["cherry", "banana", "apple"]

    @pytest.mark.asyncio
    async def test_unknown_sort_field(self, task_service: TaskService) -> None:
        with pytest.raises(TaskValidationError) as exc_info:
            await task_service.get_tasks(sort="owner")
        assert exc_info.value.fields == ["sort"]

    @pytest.mark.asyncio
    async def test_overdue_tasks(self, task_service: TaskService, clock) -> None:
        overdue_pending = await task_service.create_task(
            {"title": "overdue pending", "dueDate": (clock.now + timedelta(days=1)).isoformat()}
        )
        overdue_completed = await task_service.create_task(
            {"title": "overdue completed", "dueDate": (clock.now + timedelta(days=1)).isoformat()}
        )
        await task_service.create_task(
            {"title": "future pending", "dueDate": (clock.now + timedelta(days=10)).isoformat()}
        )
        await task_service.create_task({"title": "no due date"})
        await task_service.complete_task(overdue_completed.id)

        clock.advance(days=2)
        overdue = await task_service.get_overdue_tasks()

        assert [task.id for task in overdue] == [overdue_pending.id]

    @pytest.mark.asyncio
    async def test_default_repository(self) -> None:
        service = TaskService()
        task = await service.create_task({"title": "standalone"})

        assert (await service.get_task_by_id(task.id)).title == "standalone"
