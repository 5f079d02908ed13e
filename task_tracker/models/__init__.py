from .task import SORT_FIELDS, Task, TaskPriority, TaskStatus, now_utc

__all__ = ["SORT_FIELDS", "Task", "TaskPriority", "TaskStatus", "now_utc"]
