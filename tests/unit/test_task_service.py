"""Tests for TaskService."""

import pytest
from unittest.mock import AsyncMock

from asana_pr_link.domain.errors import TaskNotFoundError, TaskTrackerError
from asana_pr_link.domain.models import Comment, Task
from asana_pr_link.domain.protocols import TaskTracker
from asana_pr_link.services.task_service import TaskService


class TestTaskService:
    """Tests for TaskService against the in-memory tracker."""

    @pytest.fixture
    def service(self, tracker) -> TaskService:
        return TaskService(tracker)

    @pytest.mark.asyncio
    async def test_find_task(self, service, sample_task):
        """Should return the task with its project memberships."""
        task = await service.find_task(sample_task.gid)

        assert task.gid == "789"
        assert [p.name for p in task.projects] == ["Asana bot test environment"]

    @pytest.mark.asyncio
    async def test_find_task_not_found(self, service):
        """Should raise TaskNotFoundError for unknown tasks."""
        with pytest.raises(TaskNotFoundError):
            await service.find_task("404")

    @pytest.mark.asyncio
    async def test_add_comment_embeds_marker(self, service, tracker, sample_task):
        """Marker is appended on its own line."""
        comment = await service.add_comment(sample_task.gid, "rad stuff", "marker-1")

        assert comment is not None
        assert comment.text == "rad stuff\nmarker-1\n"
        stories = await tracker.list_stories(sample_task.gid)
        assert stories == [comment]

    @pytest.mark.asyncio
    async def test_add_comment_without_marker(self, service, sample_task):
        """Text is sent unchanged when no marker is given."""
        comment = await service.add_comment(sample_task.gid, "rad stuff")
        assert comment.text == "rad stuff"

    @pytest.mark.asyncio
    async def test_add_comment_failure_returns_none(self, service):
        """Remote failure is logged, not raised."""
        assert await service.add_comment("404", "text", "marker") is None

    @pytest.mark.asyncio
    async def test_find_comment_by_marker(self, service, tracker, sample_task):
        """Should return the first comment containing the marker."""
        await tracker.create_story(sample_task.gid, "unrelated")
        first = await service.add_comment(sample_task.gid, "one", "marker-1")
        await service.add_comment(sample_task.gid, "two", "marker-1")

        found = await service.find_comment_by_marker(sample_task.gid, "marker-1")

        assert found == first

    @pytest.mark.asyncio
    async def test_find_comment_by_marker_absent(self, service, sample_task):
        """Should return None when no comment carries the marker."""
        assert await service.find_comment_by_marker(sample_task.gid, "nope") is None

    @pytest.mark.asyncio
    async def test_remove_comment(self, service, tracker, sample_task):
        """Should delete the comment."""
        comment = await service.add_comment(sample_task.gid, "text", "m")

        assert await service.remove_comment(comment.gid) is True
        assert await tracker.list_stories(sample_task.gid) == []

    @pytest.mark.asyncio
    async def test_remove_comment_failure_is_not_raised(self, service):
        """Deleting an unknown comment reports False."""
        assert await service.remove_comment("missing") is False

    @pytest.mark.asyncio
    async def test_set_completion(self, service, tracker, sample_task):
        """Should update the completion flag."""
        assert await service.set_completion(sample_task.gid, True) is True

        task = await tracker.get_task(sample_task.gid)
        assert task.completed is True

    @pytest.mark.asyncio
    async def test_set_completion_failure_is_not_raised(self, service):
        """Unknown task reports False."""
        assert await service.set_completion("404", True) is False

    @pytest.mark.asyncio
    async def test_find_section_exact_match(self, service, project):
        """Section names match exactly and case-sensitively."""
        section = await service.find_section_in_project(project.gid, "Done")
        assert section is not None
        assert section.name == "Done"

        assert await service.find_section_in_project(project.gid, "done") is None

    @pytest.mark.asyncio
    async def test_move_to_section_is_additive(self, service, tracker, project, sample_task):
        """Moving into a second section keeps the first membership."""
        new = await service.find_section_in_project(project.gid, "New")
        done = await service.find_section_in_project(project.gid, "Done")

        await service.move_to_section(new.gid, sample_task.gid)
        await service.move_to_section(done.gid, sample_task.gid)

        assert tracker.tasks_in_section(new.gid) == [sample_task.gid]
        assert tracker.tasks_in_section(done.gid) == [sample_task.gid]

    @pytest.mark.asyncio
    async def test_task_notes_contain(self, service, sample_task):
        """Should check task notes for a substring."""
        assert await service.task_notes_contain(sample_task.gid, "test suite") is True
        assert await service.task_notes_contain(sample_task.gid, "QA approved") is False

    @pytest.mark.asyncio
    async def test_task_notes_contain_lookup_failure(self, service):
        """Lookup failure counts as not containing the text."""
        assert await service.task_notes_contain("404", "anything") is False

    @pytest.mark.asyncio
    async def test_task_notes_empty(self, service, tracker):
        """Empty notes never contain text."""
        tracker.add_task(Task(gid="1", notes=""))
        assert await service.task_notes_contain("1", "") is False


class TestTaskServiceWithMockTracker:
    """Tests for TaskService against a mocked tracker."""

    @pytest.fixture
    def mock_tracker(self):
        return AsyncMock(spec=TaskTracker)

    @pytest.mark.asyncio
    async def test_lookup_errors_propagate(self, mock_tracker):
        """Comment lookups are not swallowed."""
        mock_tracker.list_stories.side_effect = TaskTrackerError("boom")
        service = TaskService(mock_tracker)

        with pytest.raises(TaskTrackerError):
            await service.find_comment_by_marker("1", "marker")

    @pytest.mark.asyncio
    async def test_add_comment_passes_pinned(self, mock_tracker):
        """Pinned flag is forwarded to the tracker."""
        mock_tracker.create_story.return_value = Comment(gid="c1", text="t")
        service = TaskService(mock_tracker)

        await service.add_comment("1", "t", pinned=True)

        mock_tracker.create_story.assert_awaited_once_with("1", "t", is_pinned=True)
