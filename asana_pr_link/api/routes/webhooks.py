"""Webhook routes for GitHub pull request events."""

import hashlib
import hmac
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Header, HTTPException, Request

from ...container import get_container
from ...domain.errors import ConfigurationError
from ...parsers.github_event import GitHubPullRequestParser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def verify_signature(secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature.removeprefix("sha256="))


@router.post("/github")
async def github_webhook(
    request: Request,
    x_github_event: Optional[str] = Header(default=None),
    x_hub_signature_256: Optional[str] = Header(default=None),
) -> dict[str, Any]:
    """Handle GitHub webhook events.

    Supports:
    - ping
    - pull_request events, dispatched with the configured action
    """
    container = get_container()
    raw_body = await request.body()

    secret = container.settings.github.webhook_secret
    if secret is not None and not verify_signature(
        secret.get_secret_value(), raw_body, x_hub_signature_256
    ):
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = json.loads(raw_body or b"{}")
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if x_github_event == "ping":
        return {"status": "ok", "message": "pong"}

    if x_github_event not in (None, "pull_request"):
        return {"status": "ignored", "event": x_github_event}

    event = GitHubPullRequestParser().parse(payload)
    if event is None:
        return {"status": "ignored"}

    try:
        inputs = container.action_inputs
        container.check_ready(inputs.action)
        await container.task_tracker.authorize()
        result = await container.dispatcher.dispatch(inputs, event)
    except (ConfigurationError, RuntimeError) as e:
        logger.error(f"Cannot dispatch pull request event: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "result": result.to_dict()}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for webhooks."""
    return {"status": "healthy"}
