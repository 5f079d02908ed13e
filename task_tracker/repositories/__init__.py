from .postgres_repository import PostgresTaskRepository
from .task_repository import InMemoryTaskRepository, TaskRepository

__all__ = ["InMemoryTaskRepository", "PostgresTaskRepository", "TaskRepository"]
