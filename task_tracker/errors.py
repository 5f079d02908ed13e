"""Error taxonomy shared by the store, the API and the client."""

from __future__ import annotations

from typing import List, Sequence

from .validation import FieldError


class TaskError(Exception):
    """Base class for task tracker failures."""


class TaskValidationError(TaskError):
    """One or more fields failed validation; correctable by the caller."""

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        fields = ", ".join(error.field for error in self.errors) or "unknown"
        super().__init__(f"Invalid task fields: {fields}")

    @property
    def fields(self) -> List[str]:
        return [error.field for error in self.errors]


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__("Task not found")


class TaskStoreError(TaskError):
    """The persistence backend failed or is unavailable."""


class TaskServiceUnavailableError(TaskError):
    """Raised by the HTTP client when the API cannot serve a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
