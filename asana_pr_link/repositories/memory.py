"""In-memory task tracker for testing and dry runs."""

import itertools
from dataclasses import replace
from typing import Optional, Sequence

from ..domain.errors import TaskNotFoundError, TaskTrackerError
from ..domain.models import Comment, Project, Section, Task


class InMemoryTaskTracker:
    """In-memory implementation of TaskTracker."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._stories: dict[str, list[Comment]] = {}
        self._sections: dict[str, list[Section]] = {}
        # section gid -> task gids, in insertion order
        self._memberships: dict[str, list[str]] = {}
        self._ids = itertools.count(1000)

    def _next_gid(self) -> str:
        return str(next(self._ids))

    def add_task(self, task: Task) -> Task:
        """Seed a task."""
        self._tasks[task.gid] = task
        self._stories.setdefault(task.gid, [])
        return task

    def add_project(self, name: str, sections: Sequence[str] = (), gid: Optional[str] = None) -> Project:
        """Seed a project with named sections."""
        project = Project(gid=gid or self._next_gid(), name=name)
        self._sections[project.gid] = [
            Section(gid=self._next_gid(), name=section_name) for section_name in sections
        ]
        return project

    def tasks_in_section(self, section_id: str) -> list[str]:
        """Task gids added to a section."""
        return list(self._memberships.get(section_id, []))

    async def authorize(self) -> None:
        """Always authorized."""
        return None

    async def get_task(self, task_id: str) -> Task:
        """Retrieve a single task by ID."""
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list_stories(self, task_id: str) -> Sequence[Comment]:
        """List stories in insertion order."""
        if task_id not in self._tasks:
            raise TaskNotFoundError(task_id)
        return list(self._stories[task_id])

    async def create_story(
        self, task_id: str, text: str, is_pinned: bool = False
    ) -> Comment:
        """Append a story."""
        if task_id not in self._tasks:
            raise TaskNotFoundError(task_id)
        comment = Comment(gid=self._next_gid(), text=text)
        self._stories[task_id].append(comment)
        return comment

    async def delete_story(self, story_id: str) -> None:
        """Delete a story wherever it lives."""
        for stories in self._stories.values():
            for i, story in enumerate(stories):
                if story.gid == story_id:
                    stories.pop(i)
                    return
        raise TaskTrackerError(f"Story {story_id} not found")

    async def update_task(self, task_id: str, *, completed: bool) -> Task:
        """Set the completion flag."""
        task = await self.get_task(task_id)
        updated = replace(task, completed=completed)
        self._tasks[task_id] = updated
        return updated

    async def list_sections(self, project_id: str) -> Sequence[Section]:
        """List sections of a project."""
        if project_id not in self._sections:
            raise TaskTrackerError(f"Project {project_id} not found")
        return list(self._sections[project_id])

    async def add_task_to_section(self, section_id: str, task_id: str) -> None:
        """Add a task to a section. Membership elsewhere is left untouched."""
        if not any(s.gid == section_id for sections in self._sections.values() for s in sections):
            raise TaskTrackerError(f"Section {section_id} not found")
        await self.get_task(task_id)
        members = self._memberships.setdefault(section_id, [])
        if task_id not in members:
            members.append(task_id)
