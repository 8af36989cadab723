"""GitHub commit status reporter implementation."""

from typing import Optional
import httpx

from ..domain.errors import StatusReportError
from ..domain.models import CommitStatus

# GitHub limit for status descriptions
MAX_DESCRIPTION_LENGTH = 140


class GitHubStatusReporter:
    """Reports commit statuses through the GitHub REST API."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize GitHub status reporter.

        Args:
            token: GitHub token with ``repo:status`` scope
            api_url: GitHub API base URL
            timeout: Request timeout in seconds
            http_client: Optional HTTP client for testing
        """
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def create_status(self, status: CommitStatus) -> None:
        """Create a commit status.

        Args:
            status: Status to report

        Raises:
            StatusReportError: If GitHub rejects the status or cannot be reached
        """
        if not (status.owner and status.repo and status.sha):
            raise StatusReportError(
                "owner, repo and sha are required to report a commit status"
            )

        url = f"{self._api_url}/repos/{status.owner}/{status.repo}/statuses/{status.sha}"
        client = self._http_client or httpx.AsyncClient()
        try:
            response = await client.post(
                url,
                json=self._build_payload(status),
                headers=self._build_headers(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise StatusReportError(f"Could not reach GitHub: {e}") from e
        finally:
            if self._owns_client and not self._http_client:
                await client.aclose()

        if response.status_code not in (200, 201):
            raise StatusReportError(
                f"GitHub returned {response.status_code} for {status.context} on {status.sha}"
            )

    def _build_headers(self) -> dict:
        """Build request headers."""
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _build_payload(self, status: CommitStatus) -> dict:
        """Build the status request body."""
        return {
            "state": status.state.value,
            "description": status.description[:MAX_DESCRIPTION_LENGTH],
            "context": status.context,
        }
