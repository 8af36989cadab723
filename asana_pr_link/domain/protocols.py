"""Protocol definitions for dependency injection."""

from typing import Protocol, runtime_checkable, Optional, Sequence

from .models import Task, Comment, Section, CommitStatus, PullRequestEvent


@runtime_checkable
class TaskTracker(Protocol):
    """Protocol for the remote task tracker.

    Implementations raise ``TaskTrackerError`` (or ``TaskNotFoundError``)
    when a request fails.
    """

    async def authorize(self) -> None:
        """Verify the credentials, raising ClientAuthorizationError if rejected."""
        ...

    async def get_task(self, task_id: str) -> Task:
        """Retrieve a single task by ID."""
        ...

    async def list_stories(self, task_id: str) -> Sequence[Comment]:
        """List the story history of a task in remote order."""
        ...

    async def create_story(
        self, task_id: str, text: str, is_pinned: bool = False
    ) -> Comment:
        """Add a comment to a task."""
        ...

    async def delete_story(self, story_id: str) -> None:
        """Delete a comment."""
        ...

    async def update_task(self, task_id: str, *, completed: bool) -> Task:
        """Update a task's completion flag."""
        ...

    async def list_sections(self, project_id: str) -> Sequence[Section]:
        """List the sections of a project."""
        ...

    async def add_task_to_section(self, section_id: str, task_id: str) -> None:
        """Add a task to a section."""
        ...


@runtime_checkable
class StatusReporter(Protocol):
    """Protocol for reporting commit statuses."""

    async def create_status(self, status: CommitStatus) -> None:
        """Create a commit status, raising StatusReportError on failure."""
        ...


@runtime_checkable
class EventParser(Protocol):
    """Protocol for parsing incoming event payloads."""

    def can_parse(self, payload: dict) -> bool:
        """Check if this parser can handle the payload."""
        ...

    def parse(self, payload: dict) -> Optional[PullRequestEvent]:
        """Parse an event payload into a PullRequestEvent."""
        ...

    @property
    def platform(self) -> str:
        """Return the platform name this parser handles."""
        ...
