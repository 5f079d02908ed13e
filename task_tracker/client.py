"""Async HTTP client for the task tracker API.

Request/response observers are injected per client and run through httpx
event hooks, so callers can log, count or trace traffic without patching
any global state::

    async with TaskClient("http://localhost:8080/api") as client:
        task = await client.create_task({"title": "Write report"})
        await client.complete_task(task.id)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from .errors import TaskNotFoundError, TaskServiceUnavailableError, TaskValidationError
from .models.task import Task
from .validation import FieldError

logger = logging.getLogger(__name__)


def _payload(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value.isoformat() if isinstance(value, date) else value for key, value in fields.items()}


class RequestObserver(Protocol):
    async def on_request(self, request: httpx.Request) -> None:
        ...

    async def on_response(self, response: httpx.Response) -> None:
        ...


class LoggingObserver:
    """Logs every request and the status of every response."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    async def on_request(self, request: httpx.Request) -> None:
        self.log.debug("API request: %s %s", request.method, request.url)

    async def on_response(self, response: httpx.Response) -> None:
        request = response.request
        self.log.debug("API response: %s %s -> %s", request.method, request.url, response.status_code)


class TaskClient:
    def __init__(
        self,
        base_url: str,
        *,
        observers: Optional[Sequence[RequestObserver]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.observers: List[RequestObserver] = list(observers) if observers is not None else [LoggingObserver()]
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            event_hooks={
                "request": [observer.on_request for observer in self.observers],
                "response": [observer.on_response for observer in self.observers],
            },
        )

    async def __aenter__(self) -> "TaskClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, url: str, *, task_id: Optional[str] = None, **kwargs: Any
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TaskServiceUnavailableError(f"Task API unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 400:
            errors = [
                FieldError(item.get("field", "body"), item.get("message", "Invalid value"))
                for item in body.get("errors", [])
            ]
            raise TaskValidationError(errors)
        if response.status_code == 404:
            raise TaskNotFoundError(task_id or url)
        if response.is_error:
            raise TaskServiceUnavailableError(
                body.get("error") or f"Task API returned {response.status_code}",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _tasks(body: Mapping[str, Any]) -> List[Task]:
        return [Task.model_validate(item) for item in body.get("data", [])]

    async def list_tasks(
        self,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[Task]:
        params = {
            key: value
            for key, value in {"status": status, "priority": priority, "sort": sort, "order": order}.items()
            if value is not None
        }
        return self._tasks(await self._request("GET", "/tasks", params=params))

    async def get_task(self, task_id: str) -> Task:
        body = await self._request("GET", f"/tasks/{task_id}", task_id=task_id)
        return Task.model_validate(body["data"])

    async def create_task(self, fields: Mapping[str, Any]) -> Task:
        body = await self._request("POST", "/tasks", json=_payload(fields))
        return Task.model_validate(body["data"])

    async def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Task:
        body = await self._request("PUT", f"/tasks/{task_id}", task_id=task_id, json=_payload(fields))
        return Task.model_validate(body["data"])

    async def delete_task(self, task_id: str) -> str:
        body = await self._request("DELETE", f"/tasks/{task_id}", task_id=task_id)
        return body.get("message", "")

    async def complete_task(self, task_id: str) -> Task:
        body = await self._request("PATCH", f"/tasks/{task_id}/complete", task_id=task_id)
        return Task.model_validate(body["data"])

    async def get_tasks_by_status(self, status: str) -> List[Task]:
        return self._tasks(await self._request("GET", f"/tasks/status/{status}"))

    async def get_overdue_tasks(self) -> List[Task]:
        return self._tasks(await self._request("GET", "/tasks/overdue"))
