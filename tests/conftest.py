"""Shared pytest fixtures."""

import pytest

from asana_pr_link.domain.models import Project, Task
from asana_pr_link.repositories.memory import InMemoryTaskTracker
from asana_pr_link.reporters.memory import InMemoryStatusReporter


PROJECT_NAME = "Asana bot test environment"


@pytest.fixture
def tracker() -> InMemoryTaskTracker:
    """In-memory tracker with one project holding New and Done sections."""
    return InMemoryTaskTracker()


@pytest.fixture
def project(tracker) -> Project:
    """Seeded project."""
    return tracker.add_project(PROJECT_NAME, sections=["New", "Done"], gid="1201")


@pytest.fixture
def sample_task(tracker, project) -> Task:
    """Seeded incomplete task in the project."""
    return tracker.add_task(
        Task(
            gid="789",
            name="my fantastic task",
            notes="generated automatically by the test suite",
            projects=[project],
        )
    )


@pytest.fixture
def reporter() -> InMemoryStatusReporter:
    """Status reporter that records statuses."""
    return InMemoryStatusReporter()


@pytest.fixture
def default_body(project, sample_task) -> str:
    """PR body linking the sample task with a bare URL inside a markdown link."""
    return (
        f"Implement [task](https://app.asana.com/0/{project.gid}/{sample_task.gid}) "
        "in record time"
    )
