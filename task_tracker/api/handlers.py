"""Map task errors onto the JSON envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import TaskNotFoundError, TaskStoreError, TaskValidationError
from .models import ErrorResponse, FieldErrorItem, ValidationErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


async def task_validation_exception_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    body = ValidationErrorResponse(
        errors=[FieldErrorItem(field=error.field, message=error.message) for error in exc.errors]
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = ValidationErrorResponse(
        errors=[
            FieldErrorItem(field=_field_name(tuple(error.get("loc", ()))), message=error.get("msg", "Invalid input"))
            for error in exc.errors()
        ]
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def task_not_found_exception_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "Task not found")


async def task_store_exception_handler(request: Request, exc: TaskStoreError) -> JSONResponse:
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = _error(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskValidationError, task_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(TaskNotFoundError, task_not_found_exception_handler)
    app.add_exception_handler(TaskStoreError, task_store_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
