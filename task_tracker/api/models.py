"""Response envelopes shared by every endpoint."""

from typing import List

from pydantic import BaseModel

from ..models.task import Task


class TaskResponse(BaseModel):
    success: bool = True
    data: Task


class TaskListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Task]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class FieldErrorItem(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    success: bool = False
    errors: List[FieldErrorItem]
