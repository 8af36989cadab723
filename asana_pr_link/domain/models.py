"""Domain models for linking pull requests to Asana tasks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ActionName(Enum):
    """Actions the dispatcher can run."""

    ASSERT_LINK = "assert-link"
    ADD_COMMENT = "add-comment"
    REMOVE_COMMENT = "remove-comment"
    COMPLETE_TASK = "complete-task"
    MOVE_SECTION = "move-section"


class StatusState(Enum):
    """Commit status states reported for link checks."""

    SUCCESS = "success"
    ERROR = "error"


LINK_STATUS_CONTEXT = "asana-link-presence"


@dataclass(frozen=True)
class TaskReference:
    """Value object for a task identifier extracted from a PR body."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Task reference cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Project:
    """Asana project a task belongs to."""

    gid: str
    name: str


@dataclass(frozen=True)
class Section:
    """Named section inside a project."""

    gid: str
    name: str


@dataclass
class Task:
    """Remote task as seen by this system."""

    gid: str
    name: str = ""
    notes: str = ""
    completed: bool = False
    projects: list[Project] = field(default_factory=list)

    def project_named(self, name: str) -> Optional[Project]:
        """Return the first membership whose project name matches exactly."""
        for project in self.projects:
            if project.name == name:
                return project
        return None


@dataclass(frozen=True)
class Comment:
    """Entry in a task's story history."""

    gid: str
    text: str = ""


@dataclass(frozen=True)
class ActionTarget:
    """Destination for a section move."""

    project: str
    section: str


@dataclass(frozen=True)
class PullRequestEvent:
    """The parts of a pull request event the actions consume."""

    body: str
    head_sha: str = ""
    owner: str = ""
    repo: str = ""
    number: Optional[int] = None


@dataclass(frozen=True)
class CommitStatus:
    """Commit status to report against the triggering commit."""

    owner: str
    repo: str
    sha: str
    state: StatusState
    description: str
    context: str = LINK_STATUS_CONTEXT


@dataclass
class DispatchResult:
    """Outcome of a single dispatched action."""

    action: ActionName
    references: list[TaskReference] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    status: Optional[CommitStatus] = None

    def to_dict(self) -> dict:
        """Serialize for CLI and API output."""
        data = {
            "action": self.action.value,
            "references": [r.value for r in self.references],
            "items": list(self.items),
        }
        if self.status is not None:
            data["status"] = {
                "context": self.status.context,
                "state": self.status.state.value,
                "description": self.status.description,
                "sha": self.status.sha,
            }
        return data
