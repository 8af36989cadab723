"""Task service over the remote task tracker."""

import logging
from typing import Optional, Sequence

from ..domain.errors import TaskTrackerError
from ..domain.models import Comment, Section, Task
from ..domain.protocols import TaskTracker


logger = logging.getLogger(__name__)


class TaskService:
    """Semantic operations on tasks, comments and sections.

    Lookups propagate ``TaskTrackerError``. Removal and completion updates
    are best effort: failures are logged and reported as ``False``.
    """

    def __init__(self, tracker: TaskTracker) -> None:
        self._tracker = tracker

    async def find_task(self, task_id: str) -> Task:
        """Get a task, raising TaskNotFoundError if it does not exist."""
        return await self._tracker.get_task(task_id)

    async def list_comments(self, task_id: str) -> Sequence[Comment]:
        """List the task's full story history in remote order."""
        return await self._tracker.list_stories(task_id)

    async def find_comment_by_marker(
        self, task_id: str, marker: str
    ) -> Optional[Comment]:
        """Return the first comment whose text contains ``marker``."""
        for comment in await self.list_comments(task_id):
            if marker in comment.text:
                return comment
        return None

    async def add_comment(
        self,
        task_id: str,
        text: str,
        marker: str = "",
        pinned: bool = False,
    ) -> Optional[Comment]:
        """Add a comment with the marker embedded on its own line.

        Returns:
            The created comment, or None if the tracker rejected it
        """
        if marker:
            text += "\n" + marker + "\n"
        try:
            return await self._tracker.create_story(task_id, text, is_pinned=pinned)
        except TaskTrackerError as e:
            logger.error(f"Failed to add comment to task {task_id}: {e}")
            return None

    async def remove_comment(self, comment_id: str) -> bool:
        """Delete a comment, returning False if the tracker refused."""
        try:
            await self._tracker.delete_story(comment_id)
            return True
        except TaskTrackerError as e:
            logger.error(f"Failed to remove comment {comment_id}: {e}")
            return False

    async def set_completion(self, task_id: str, completed: bool) -> bool:
        """Set a task's completion flag, returning False on failure."""
        try:
            await self._tracker.update_task(task_id, completed=completed)
            return True
        except TaskTrackerError as e:
            logger.error(f"Failed to mark task {task_id} completed={completed}: {e}")
            return False

    async def find_section_in_project(
        self, project_id: str, section_name: str
    ) -> Optional[Section]:
        """Find a section by exact, case-sensitive name."""
        for section in await self._tracker.list_sections(project_id):
            if section.name == section_name:
                return section
        return None

    async def move_to_section(self, section_id: str, task_id: str) -> None:
        """Add the task to a section, leaving its other sections alone."""
        await self._tracker.add_task_to_section(section_id, task_id)

    async def task_notes_contain(self, task_id: str, text: str) -> bool:
        """Check a task's notes for ``text``. Lookup failures count as False."""
        try:
            task = await self.find_task(task_id)
        except TaskTrackerError as e:
            logger.error(f"Error checking task description: {e}")
            return False
        return bool(task.notes) and text in task.notes
