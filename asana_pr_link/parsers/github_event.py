"""GitHub pull request event parser."""

from typing import Optional

from ..domain.models import PullRequestEvent


class GitHubPullRequestParser:
    """Parse GitHub ``pull_request`` event payloads."""

    def __init__(self, default_repository: Optional[str] = None) -> None:
        # owner/repo used when the payload carries no repository block
        self._default_repository = default_repository

    @property
    def platform(self) -> str:
        return "github"

    def can_parse(self, payload: dict) -> bool:
        """Check if payload is a pull request event."""
        return isinstance(payload.get("pull_request"), dict)

    def parse(self, payload: dict) -> Optional[PullRequestEvent]:
        """Parse a pull request event into a PullRequestEvent."""
        if not self.can_parse(payload):
            return None

        pull_request = payload["pull_request"]
        head = pull_request.get("head") or {}

        owner, repo = "", ""
        repository = payload.get("repository") or {}
        if repository.get("name"):
            owner = (repository.get("owner") or {}).get("login", "")
            repo = repository["name"]
        elif repository.get("full_name"):
            owner, _, repo = repository["full_name"].partition("/")
        elif self._default_repository:
            owner, _, repo = self._default_repository.partition("/")

        return PullRequestEvent(
            body=pull_request.get("body") or "",
            head_sha=head.get("sha", ""),
            owner=owner,
            repo=repo,
            number=pull_request.get("number"),
        )
