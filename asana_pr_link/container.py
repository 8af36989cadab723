"""Dependency injection container."""

from dataclasses import dataclass
from typing import TypeVar, Generic, Callable, Optional, Any

from asana_pr_link.domain.models import ActionName
from asana_pr_link.domain.protocols import TaskTracker, StatusReporter


T = TypeVar("T")


class Provider(Generic[T]):
    """Lazy provider that creates instance on first access."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._instance: Optional[T] = None

    def get(self) -> T:
        """Get the instance, creating it if necessary."""
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def reset(self) -> None:
        """Reset the instance (for testing)."""
        self._instance = None

    def override(self, instance: T) -> None:
        """Override with a specific instance (for testing)."""
        self._instance = instance


@dataclass
class Container:
    """Dependency injection container."""

    _task_tracker: Optional[Provider[TaskTracker]] = None
    _status_reporter: Optional[Provider[StatusReporter]] = None
    _action_inputs: Optional[Provider[Any]] = None

    # Settings cache
    _settings: Optional[Any] = None

    @property
    def task_tracker(self) -> TaskTracker:
        """Get the task tracker client."""
        if self._task_tracker is None:
            raise RuntimeError("Task tracker not configured")
        return self._task_tracker.get()

    @property
    def status_reporter(self) -> Optional[StatusReporter]:
        """Get the status reporter, or None when none is configured."""
        if self._status_reporter is None:
            return None
        return self._status_reporter.get()

    @property
    def action_inputs(self) -> Any:
        """Get the ActionInputs the webhook server dispatches with."""
        if self._action_inputs is None:
            raise RuntimeError("Action inputs not configured")
        return self._action_inputs.get()

    @property
    def task_service(self) -> Any:
        """Get TaskService instance."""
        from asana_pr_link.services.task_service import TaskService

        return TaskService(tracker=self.task_tracker)

    @property
    def dispatcher(self) -> Any:
        """Get ActionDispatcher instance."""
        from asana_pr_link.services.dispatch_service import ActionDispatcher

        return ActionDispatcher(
            task_service=self.task_service,
            status_reporter=self.status_reporter,
        )

    @property
    def settings(self) -> Any:
        """Get application settings."""
        if self._settings is None:
            from asana_pr_link.config.settings import get_settings

            self._settings = get_settings()
        return self._settings

    def check_ready(self, action: ActionName) -> None:
        """Raise ConfigurationError if `action` cannot run with what is configured."""
        from asana_pr_link.domain.errors import ConfigurationError

        if action == ActionName.ASSERT_LINK and self._status_reporter is None:
            raise ConfigurationError("github-token is required for assert-link")

    def configure_task_tracker(
        self, factory: Callable[[], TaskTracker]
    ) -> "Container":
        """Configure the task tracker client."""
        self._task_tracker = Provider(factory)
        return self

    def configure_status_reporter(
        self, factory: Callable[[], StatusReporter]
    ) -> "Container":
        """Configure the commit status reporter."""
        self._status_reporter = Provider(factory)
        return self

    def configure_action_inputs(self, factory: Callable[[], Any]) -> "Container":
        """Configure the action inputs."""
        self._action_inputs = Provider(factory)
        return self

    def reset(self) -> None:
        """Reset all providers (for testing)."""
        if self._task_tracker:
            self._task_tracker.reset()
        if self._status_reporter:
            self._status_reporter.reset()
        if self._action_inputs:
            self._action_inputs.reset()
        self._settings = None


# Global container instance
container = Container()


def get_container() -> Container:
    """Get the global container instance."""
    return container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global container
    container.reset()
    container = Container()


def setup_container(inputs: Optional[Any] = None) -> Container:
    """Configure the global container from settings, keeping anything already set.

    Secrets supplied as action inputs (``asana-pat``, ``github-token``) take
    precedence over ``ASANA_PAT`` and ``GITHUB_TOKEN``.

    Raises:
        ConfigurationError: If no Asana token is available
    """
    from asana_pr_link.config.settings import ActionInputs, get_settings
    from asana_pr_link.domain.errors import ConfigurationError
    from asana_pr_link.repositories.asana import AsanaTaskTracker
    from asana_pr_link.reporters.github_status import GitHubStatusReporter

    current = get_container()
    settings = get_settings()
    asana_settings = settings.asana
    github_settings = settings.github

    if current._task_tracker is None:
        pat = (inputs.asana_pat if inputs else None) or asana_settings.pat
        if pat is None:
            raise ConfigurationError("asana-pat input or ASANA_PAT is required")
        current.configure_task_tracker(
            lambda: AsanaTaskTracker(
                access_token=pat.get_secret_value(),
                base_url=asana_settings.base_url,
                timeout=asana_settings.timeout,
                story_limit=asana_settings.page_size,
            )
        )

    if current._status_reporter is None:
        token = (inputs.github_token if inputs else None) or github_settings.token
        if token is not None:
            current.configure_status_reporter(
                lambda: GitHubStatusReporter(
                    token=token.get_secret_value(),
                    api_url=github_settings.api_url,
                    timeout=github_settings.timeout,
                )
            )

    if current._action_inputs is None:
        if inputs is not None:
            current.configure_action_inputs(lambda: inputs)
        else:
            current.configure_action_inputs(ActionInputs.from_env)

    return current
