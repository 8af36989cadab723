"""Tests for domain models."""

import pytest

from asana_pr_link.domain.errors import TaskNotFoundError, TaskTrackerError
from asana_pr_link.domain.models import (
    ActionName,
    CommitStatus,
    DispatchResult,
    LINK_STATUS_CONTEXT,
    Project,
    StatusState,
    Task,
    TaskReference,
)


class TestTaskReference:
    """Tests for TaskReference value object."""

    def test_value(self):
        reference = TaskReference("789")
        assert reference.value == "789"
        assert str(reference) == "789"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            TaskReference("")

    def test_equality_and_hashing(self):
        assert TaskReference("1") == TaskReference("1")
        assert len({TaskReference("1"), TaskReference("1"), TaskReference("2")}) == 2


class TestActionName:
    """Tests for ActionName."""

    @pytest.mark.parametrize("value", [
        "assert-link", "add-comment", "remove-comment", "complete-task", "move-section",
    ])
    def test_values(self, value):
        assert ActionName(value).value == value

    def test_unknown(self):
        with pytest.raises(ValueError):
            ActionName("close-pr")


class TestTask:
    """Tests for Task."""

    def test_defaults(self):
        task = Task(gid="1")
        assert task.notes == ""
        assert task.completed is False
        assert task.projects == []

    def test_project_named_exact(self):
        """Project lookup is exact and returns the first match."""
        first = Project(gid="1", name="Board")
        task = Task(gid="9", projects=[first, Project(gid="2", name="Board")])

        assert task.project_named("Board") is first
        assert task.project_named("board") is None


class TestCommitStatus:
    """Tests for CommitStatus."""

    def test_default_context(self):
        status = CommitStatus(
            owner="o", repo="r", sha="abc", state=StatusState.ERROR, description="d"
        )
        assert status.context == LINK_STATUS_CONTEXT == "asana-link-presence"


class TestDispatchResult:
    """Tests for DispatchResult."""

    def test_to_dict(self):
        result = DispatchResult(
            action=ActionName.ADD_COMMENT,
            references=[TaskReference("1"), TaskReference("2")],
            items=["c1"],
        )

        assert result.to_dict() == {
            "action": "add-comment",
            "references": ["1", "2"],
            "items": ["c1"],
        }

    def test_to_dict_with_status(self):
        status = CommitStatus(
            owner="o", repo="r", sha="abc", state=StatusState.SUCCESS, description="ok"
        )
        result = DispatchResult(action=ActionName.ASSERT_LINK, status=status)

        assert result.to_dict()["status"] == {
            "context": "asana-link-presence",
            "state": "success",
            "description": "ok",
            "sha": "abc",
        }


class TestErrors:
    """Tests for the error taxonomy."""

    def test_task_not_found(self):
        error = TaskNotFoundError("42")
        assert isinstance(error, TaskTrackerError)
        assert isinstance(error, LookupError)
        assert str(error) == "Task 42 not found"
