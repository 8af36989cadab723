"""Asana REST API task tracker implementation."""

import logging
from typing import Any, Optional, Sequence

import httpx

from ..domain.errors import (
    ClientAuthorizationError,
    TaskNotFoundError,
    TaskTrackerError,
)
from ..domain.models import Comment, Project, Section, Task


logger = logging.getLogger(__name__)

# Asana rejects larger pages
MAX_PAGE_LIMIT = 100


class AsanaTaskTracker:
    """Task tracker backed by the Asana REST API."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = "https://app.asana.com/api/1.0",
        timeout: float = 30.0,
        story_limit: int = 200,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Asana client.

        Args:
            access_token: Asana personal access token
            base_url: API base URL
            timeout: Per-request timeout in seconds
            story_limit: Maximum number of stories read per task
            http_client: Optional HTTP client for testing
        """
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._story_limit = story_limit
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_headers(self) -> dict:
        """Get API request headers."""
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
            "Asana-Enable": "new_sections,string_ids",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._http_client:
            return self._http_client
        return httpx.AsyncClient()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, converting transport failures to TaskTrackerError."""
        client = await self._get_client()
        try:
            send = getattr(client, method)
            logger.debug(f"{method.upper()} {path}")
            return await send(
                f"{self._base_url}{path}",
                headers=self._get_headers(),
                timeout=self._timeout,
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise TaskTrackerError(f"{method.upper()} {path} failed: {e}") from e
        finally:
            if self._owns_client and not self._http_client:
                await client.aclose()

    def _payload(self, response: httpx.Response, path: str) -> dict:
        """Return the decoded body of a successful response."""
        if response.status_code >= 400:
            raise TaskTrackerError(
                f"{path} returned {response.status_code}: {self._error_message(response)}"
            )
        if response.status_code == 204:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TaskTrackerError(f"{path} returned a non-JSON body") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            errors = response.json().get("errors", [])
        except ValueError:
            return response.text
        messages = [e.get("message", "") for e in errors if isinstance(e, dict)]
        return "; ".join(m for m in messages if m) or response.text

    async def authorize(self) -> None:
        """Verify the access token against the current user endpoint.

        Raises:
            ClientAuthorizationError: If the token is rejected or Asana
                cannot be reached
        """
        try:
            response = await self._send("get", "/users/me", params={"opt_fields": "name"})
        except TaskTrackerError as e:
            raise ClientAuthorizationError("client authorization failed") from e

        if response.status_code in (401, 403):
            raise ClientAuthorizationError("client authorization failed")
        try:
            self._payload(response, "/users/me")
        except TaskTrackerError as e:
            raise ClientAuthorizationError("client authorization failed") from e

    async def get_task(self, task_id: str) -> Task:
        """Get task by ID.

        Raises:
            TaskNotFoundError: If Asana reports no such task
        """
        path = f"/tasks/{task_id}"
        response = await self._send(
            "get", path, params={"opt_fields": "name,notes,completed,projects.name"}
        )
        if response.status_code == 404:
            raise TaskNotFoundError(task_id)
        return self._to_task(self._payload(response, path).get("data", {}))

    async def list_stories(self, task_id: str) -> Sequence[Comment]:
        """List task stories, following pagination up to the story limit."""
        path = f"/tasks/{task_id}/stories"
        stories: list[Comment] = []
        offset = None

        while len(stories) < self._story_limit:
            params = {
                "limit": min(MAX_PAGE_LIMIT, self._story_limit - len(stories)),
                "opt_fields": "text",
            }
            if offset:
                params["offset"] = offset

            response = await self._send("get", path, params=params)
            if response.status_code == 404:
                raise TaskNotFoundError(task_id)
            data = self._payload(response, path)

            for story in data.get("data", []):
                stories.append(Comment(gid=story["gid"], text=story.get("text") or ""))

            offset = (data.get("next_page") or {}).get("offset")
            if not offset:
                break

        return stories[: self._story_limit]

    async def create_story(
        self, task_id: str, text: str, is_pinned: bool = False
    ) -> Comment:
        """Add a comment story to a task."""
        path = f"/tasks/{task_id}/stories"
        response = await self._send(
            "post", path, json={"data": {"text": text, "is_pinned": is_pinned}}
        )
        story = self._payload(response, path).get("data", {})
        return Comment(gid=story["gid"], text=story.get("text") or text)

    async def delete_story(self, story_id: str) -> None:
        """Delete a story."""
        path = f"/stories/{story_id}"
        response = await self._send("delete", path)
        self._payload(response, path)

    async def update_task(self, task_id: str, *, completed: bool) -> Task:
        """Set a task's completion flag."""
        path = f"/tasks/{task_id}"
        response = await self._send(
            "put",
            path,
            json={"data": {"completed": completed}},
            params={"opt_fields": "name,notes,completed,projects.name"},
        )
        if response.status_code == 404:
            raise TaskNotFoundError(task_id)
        return self._to_task(self._payload(response, path).get("data", {}))

    async def list_sections(self, project_id: str) -> Sequence[Section]:
        """List sections of a project."""
        path = f"/projects/{project_id}/sections"
        response = await self._send("get", path, params={"opt_fields": "name"})
        data = self._payload(response, path)
        return [
            Section(gid=section["gid"], name=section.get("name", ""))
            for section in data.get("data", [])
        ]

    async def add_task_to_section(self, section_id: str, task_id: str) -> None:
        """Add a task to a section."""
        path = f"/sections/{section_id}/addTask"
        response = await self._send("post", path, json={"data": {"task": task_id}})
        self._payload(response, path)

    def _to_task(self, data: dict) -> Task:
        """Convert an Asana task resource to Task."""
        try:
            return Task(
                gid=data["gid"],
                name=data.get("name") or "",
                notes=data.get("notes") or "",
                completed=bool(data.get("completed", False)),
                projects=[
                    Project(gid=p["gid"], name=p.get("name", ""))
                    for p in data.get("projects") or []
                ],
            )
        except (KeyError, TypeError) as e:
            raise TaskTrackerError(f"Unexpected task payload: {data!r}") from e
