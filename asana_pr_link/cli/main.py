"""CLI commands for linking pull requests to Asana tasks."""

import asyncio
import json
import logging
import sys
from typing import Optional

import click

from ..config.settings import ActionInputs, get_settings, read_input_env
from ..container import Container, setup_container
from ..domain.errors import ClientAuthorizationError, ConfigurationError
from ..domain.models import DispatchResult, PullRequestEvent
from ..parsers.github_event import GitHubPullRequestParser
from ..parsers.reference_parser import extract_task_references


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger once for CLI runs."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_async(coro):
    """Run async coroutine in sync context."""
    return asyncio.run(coro)


async def authorize_and_dispatch(
    container: Container, inputs: ActionInputs, event: PullRequestEvent
) -> DispatchResult:
    """Check the configuration, verify the Asana token, then dispatch the action."""
    container.check_ready(inputs.action)
    await container.task_tracker.authorize()
    return await container.dispatcher.dispatch(inputs, event)


def load_event(
    event_path: Optional[str],
    body: Optional[str] = None,
    sha: Optional[str] = None,
    repository: Optional[str] = None,
) -> PullRequestEvent:
    """Build the pull request event from an explicit body or an event file.

    Raises:
        ConfigurationError: If no event is available or it is not a pull request
    """
    github_settings = get_settings().github
    repository = repository or github_settings.repository

    if body is not None:
        owner, _, repo = (repository or "").partition("/")
        return PullRequestEvent(body=body, head_sha=sha or "", owner=owner, repo=repo)

    event_path = event_path or github_settings.event_path
    if not event_path:
        raise ConfigurationError("No event payload: pass --event-path, --body or set GITHUB_EVENT_PATH")

    try:
        with open(event_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read event payload {event_path}: {e}") from e

    event = GitHubPullRequestParser(default_repository=repository).parse(payload)
    if event is None:
        raise ConfigurationError("Event payload has no pull_request")
    if sha:
        event = PullRequestEvent(
            body=event.body,
            head_sha=sha,
            owner=event.owner,
            repo=event.repo,
            number=event.number,
        )
    return event


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Link pull requests to Asana tasks."""
    configure_logging(verbose)


@cli.command("run")
@click.option("--event-path", type=click.Path(dir_okay=False), help="GitHub event payload (default: $GITHUB_EVENT_PATH)")
@click.option("--body", help="Pull request body; skips reading the event payload")
@click.option("--sha", help="Commit sha to report statuses against")
@click.option("--repository", help="owner/repo (default: $GITHUB_REPOSITORY)")
@click.option("--action", "action_name", help="assert-link, add-comment, remove-comment, complete-task or move-section")
@click.option("--trigger-phrase", help="Text that must precede task links")
@click.option("--link-required/--no-link-required", default=None, help="Fail assert-link when no task is linked")
@click.option("--description-contains", help="Text a linked task's description must contain")
@click.option("--comment-id", help="Marker identifying the comment")
@click.option("--text", help="Comment text")
@click.option("--pinned/--no-pinned", "is_pinned", default=None, help="Pin the comment")
@click.option("--complete/--incomplete", "is_complete", default=None, help="Completion state to set")
@click.option("--targets", help='JSON list of {"project": ..., "section": ...}')
def run(
    event_path: Optional[str],
    body: Optional[str],
    sha: Optional[str],
    repository: Optional[str],
    action_name: Optional[str],
    trigger_phrase: Optional[str],
    link_required: Optional[bool],
    description_contains: Optional[str],
    comment_id: Optional[str],
    text: Optional[str],
    is_pinned: Optional[bool],
    is_complete: Optional[bool],
    targets: Optional[str],
):
    """Run an action for the tasks linked from a pull request.

    Inputs are read from INPUT_* environment variables; options override them.
    """
    overrides = {
        "action": action_name,
        "trigger-phrase": trigger_phrase,
        "link-required": link_required,
        "description-contains": description_contains,
        "comment-id": comment_id,
        "text": text,
        "is-pinned": is_pinned,
        "is-complete": is_complete,
        "targets": targets,
    }
    values = read_input_env()
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        inputs = ActionInputs.from_mapping(values)
        event = load_event(event_path, body, sha, repository)
        container = setup_container(inputs)
        result = run_async(authorize_and_dispatch(container, inputs, event))
    except (ConfigurationError, ClientAuthorizationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@cli.command("extract")
@click.argument("body", required=False)
@click.option("--trigger-phrase", default="", help="Text that must precede task links")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def extract(body: Optional[str], trigger_phrase: str, output_json: bool):
    """Print the task ids linked from BODY (or stdin)."""
    if body is None:
        body = click.get_text_stream("stdin").read()

    references = extract_task_references(body, trigger_phrase)

    if output_json:
        click.echo(json.dumps({"tasks": [r.value for r in references], "total": len(references)}, indent=2))
        return

    if not references:
        click.echo("No task links found.")
        return

    for reference in references:
        click.echo(reference.value)


@cli.command("serve")
@click.option("--host", "-h", default=None, help="Host to bind to")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the webhook server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    try:
        setup_container()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Starting server at http://{host}:{port}")
    click.echo("Press Ctrl+C to stop")

    uvicorn.run(
        "asana_pr_link.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
