"""Service layer implementations."""

from .task_service import TaskService
from .dispatch_service import ActionDispatcher

__all__ = [
    "TaskService",
    "ActionDispatcher",
]
