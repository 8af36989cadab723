"""Exceptions raised across the application."""


class ConfigurationError(ValueError):
    """Invalid or missing action configuration. Fatal before any remote call."""


class ClientAuthorizationError(RuntimeError):
    """The task tracker rejected the supplied credentials."""


class TaskTrackerError(RuntimeError):
    """A request to the task tracker failed."""


class TaskNotFoundError(TaskTrackerError, LookupError):
    """The task tracker reports no task with the given id."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class StatusReportError(RuntimeError):
    """A commit status could not be created."""
