"""Dispatches the configured action over the tasks linked from a pull request."""

import logging
from typing import Awaitable, Callable, Optional, Sequence

from ..config.settings import ActionInputs
from ..domain.errors import ConfigurationError, StatusReportError, TaskTrackerError
from ..domain.models import (
    ActionName,
    ActionTarget,
    CommitStatus,
    DispatchResult,
    PullRequestEvent,
    StatusState,
    TaskReference,
)
from ..domain.protocols import StatusReporter
from ..parsers.reference_parser import extract_task_references
from .task_service import TaskService


logger = logging.getLogger(__name__)

LINK_NOT_FOUND = "asana link not found"

Handler = Callable[
    [Sequence[TaskReference], ActionInputs, PullRequestEvent],
    Awaitable[DispatchResult],
]


class ActionDispatcher:
    """Runs one named action for every task referenced by a pull request.

    References are processed strictly one after another: the marker lookup
    for reference i completes, and its comment is created, before reference
    i+1 is looked at. Remote failures for one reference are logged and do
    not stop the loop.
    """

    def __init__(
        self,
        task_service: TaskService,
        status_reporter: Optional[StatusReporter] = None,
    ) -> None:
        self._tasks = task_service
        self._status_reporter = status_reporter
        self._handlers: dict[ActionName, Handler] = {
            ActionName.ASSERT_LINK: self._run_assert_link,
            ActionName.ADD_COMMENT: self._run_add_comment,
            ActionName.REMOVE_COMMENT: self._run_remove_comment,
            ActionName.COMPLETE_TASK: self._run_complete_task,
            ActionName.MOVE_SECTION: self._run_move_section,
        }

    async def dispatch(
        self, inputs: ActionInputs, event: PullRequestEvent
    ) -> DispatchResult:
        """Extract references from the event body and run the configured action.

        Raises:
            ConfigurationError: If the action is unknown or cannot run with
                the configured collaborators
        """
        handler = self._handlers.get(inputs.action)
        if handler is None:
            raise ConfigurationError(f"unexpected action {inputs.action}")

        references = extract_task_references(event.body, inputs.trigger_phrase)
        logger.info(f"calling {inputs.action.value} for {len(references)} task(s)")
        return await handler(references, inputs, event)

    async def _run_assert_link(self, references, inputs, event) -> DispatchResult:
        return await self.assert_link(
            references,
            event,
            link_required=inputs.link_required,
            description_contains=inputs.description_contains,
        )

    async def _run_add_comment(self, references, inputs, event) -> DispatchResult:
        return await self.add_comment(
            references,
            inputs.text,
            marker=inputs.comment_id,
            pinned=inputs.is_pinned,
        )

    async def _run_remove_comment(self, references, inputs, event) -> DispatchResult:
        return await self.remove_comment(references, inputs.comment_id)

    async def _run_complete_task(self, references, inputs, event) -> DispatchResult:
        return await self.complete_task(references, inputs.is_complete)

    async def _run_move_section(self, references, inputs, event) -> DispatchResult:
        return await self.move_section(references, inputs.targets)

    async def assert_link(
        self,
        references: Sequence[TaskReference],
        event: PullRequestEvent,
        *,
        link_required: bool,
        description_contains: str = "",
    ) -> DispatchResult:
        """Report whether the pull request links a task.

        The status is an error when a link is required and none was found,
        or when ``description_contains`` is set and no linked task's notes
        contain it. Exactly one status is reported.
        """
        if self._status_reporter is None:
            raise ConfigurationError("github-token is required for assert-link")

        linked = not link_required or len(references) > 0
        state = StatusState.SUCCESS if linked else StatusState.ERROR
        description = LINK_NOT_FOUND

        if state == StatusState.SUCCESS and description_contains:
            found = False
            for reference in references:
                if await self._tasks.task_notes_contain(reference.value, description_contains):
                    found = True
            if not found:
                state = StatusState.ERROR
                description = (
                    f'Required text "{description_contains}" not found in task description'
                )

        status = CommitStatus(
            owner=event.owner,
            repo=event.repo,
            sha=event.head_sha,
            state=state,
            description=description,
        )
        logger.info(f"setting {state.value} for {event.head_sha}")
        try:
            await self._status_reporter.create_status(status)
        except StatusReportError as e:
            logger.error(f"Failed to report {status.context} status: {e}")

        return DispatchResult(
            action=ActionName.ASSERT_LINK,
            references=list(references),
            status=status,
        )

    async def add_comment(
        self,
        references: Sequence[TaskReference],
        text: str,
        *,
        marker: str = "",
        pinned: bool = False,
    ) -> DispatchResult:
        """Comment on every task that does not already carry ``marker``.

        Only newly created comment ids are returned, so a second run with
        the same marker returns nothing.
        """
        created = []
        for reference in references:
            task_id = reference.value
            if marker:
                try:
                    existing = await self._tasks.find_comment_by_marker(task_id, marker)
                except TaskTrackerError as e:
                    logger.error(f"Could not read comments of task {task_id}: {e}")
                    continue
                if existing:
                    logger.info(f"found existing comment {existing.gid} on task {task_id}")
                    continue

            comment = await self._tasks.add_comment(task_id, text, marker, pinned)
            if comment is not None:
                created.append(comment.gid)

        return DispatchResult(
            action=ActionName.ADD_COMMENT,
            references=list(references),
            items=created,
        )

    async def remove_comment(
        self, references: Sequence[TaskReference], marker: str
    ) -> DispatchResult:
        """Remove the comment carrying ``marker`` from every task that has one."""
        removed = []
        for reference in references:
            task_id = reference.value
            try:
                comment = await self._tasks.find_comment_by_marker(task_id, marker)
            except TaskTrackerError as e:
                logger.error(f"Could not read comments of task {task_id}: {e}")
                continue
            if comment is None:
                continue

            logger.info(f"removing comment {comment.gid} from task {task_id}")
            # Recorded even when the delete fails: removal is best effort
            await self._tasks.remove_comment(comment.gid)
            removed.append(comment.gid)

        return DispatchResult(
            action=ActionName.REMOVE_COMMENT,
            references=list(references),
            items=removed,
        )

    async def complete_task(
        self, references: Sequence[TaskReference], completed: bool
    ) -> DispatchResult:
        """Set the completion flag on every task."""
        processed = []
        for reference in references:
            task_id = reference.value
            logger.info(
                f"marking task {task_id} {'complete' if completed else 'incomplete'}"
            )
            await self._tasks.set_completion(task_id, completed)
            processed.append(task_id)

        return DispatchResult(
            action=ActionName.COMPLETE_TASK,
            references=list(references),
            items=processed,
        )

    async def move_section(
        self, references: Sequence[TaskReference], targets: Sequence[ActionTarget]
    ) -> DispatchResult:
        """Move every task into each target section of the projects it belongs to.

        A task outside a target's project skips that target. A section that
        does not exist is logged as an error. Every reference is listed in
        the result regardless of how many targets applied.
        """
        processed = []
        for reference in references:
            await self._move_task(reference.value, targets)
            processed.append(reference.value)

        return DispatchResult(
            action=ActionName.MOVE_SECTION,
            references=list(references),
            items=processed,
        )

    async def _move_task(self, task_id: str, targets: Sequence[ActionTarget]) -> None:
        try:
            task = await self._tasks.find_task(task_id)
        except TaskTrackerError as e:
            logger.error(f"Could not look up task {task_id}: {e}")
            return

        for target in targets:
            project = task.project_named(target.project)
            if project is None:
                logger.info(f'This task does not exist in "{target.project}" project')
                continue

            try:
                section = await self._tasks.find_section_in_project(
                    project.gid, target.section
                )
            except TaskTrackerError as e:
                logger.error(f"Could not list sections of {target.project}: {e}")
                continue
            if section is None:
                logger.error(f"Asana section {target.section} not found.")
                continue

            try:
                await self._tasks.move_to_section(section.gid, task_id)
            except TaskTrackerError as e:
                logger.error(
                    f"Failed to move task {task_id} to {target.project}/{target.section}: {e}"
                )
                continue
            logger.info(f"Moved to: {target.project}/{target.section}")
