"""Domain models and protocols."""

from .errors import (
    ConfigurationError,
    ClientAuthorizationError,
    TaskTrackerError,
    TaskNotFoundError,
    StatusReportError,
)
from .models import (
    ActionName,
    ActionTarget,
    Comment,
    CommitStatus,
    DispatchResult,
    Project,
    PullRequestEvent,
    Section,
    StatusState,
    Task,
    TaskReference,
    LINK_STATUS_CONTEXT,
)
from .protocols import (
    TaskTracker,
    StatusReporter,
    EventParser,
)

__all__ = [
    "ConfigurationError",
    "ClientAuthorizationError",
    "TaskTrackerError",
    "TaskNotFoundError",
    "StatusReportError",
    "ActionName",
    "ActionTarget",
    "Comment",
    "CommitStatus",
    "DispatchResult",
    "Project",
    "PullRequestEvent",
    "Section",
    "StatusState",
    "Task",
    "TaskReference",
    "LINK_STATUS_CONTEXT",
    "TaskTracker",
    "StatusReporter",
    "EventParser",
]
