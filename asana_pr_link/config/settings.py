"""Application settings and action inputs using Pydantic."""

import json
import os
from functools import lru_cache
from typing import Any, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.errors import ConfigurationError
from ..domain.models import ActionName, ActionTarget


INPUT_ENV_PREFIX = "INPUT_"


class AsanaSettings(BaseSettings):
    """Asana API configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASANA_",
        extra="ignore",
    )

    pat: Optional[SecretStr] = Field(default=None)
    base_url: str = Field(default="https://app.asana.com/api/1.0")
    timeout: float = Field(default=30.0)
    # Stories fetched per task when looking for a marker
    page_size: int = Field(default=200)


class GitHubSettings(BaseSettings):
    """GitHub API and runner configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GITHUB_",
        extra="ignore",
    )

    token: Optional[SecretStr] = Field(default=None)
    api_url: str = Field(default="https://api.github.com")
    # owner/repo, set by the Actions runner
    repository: Optional[str] = Field(default=None)
    # Path to the JSON event payload, set by the Actions runner
    event_path: Optional[str] = Field(default=None)
    # Shared secret for X-Hub-Signature-256 verification on the webhook server
    webhook_secret: Optional[SecretStr] = Field(default=None)
    timeout: float = Field(default=10.0)


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Nested settings - manually create to avoid env prefix issues
    @property
    def asana(self) -> AsanaSettings:
        return AsanaSettings()

    @property
    def github(self) -> GitHubSettings:
        return GitHubSettings()


def _parse_flag(value: Any) -> bool:
    """Inputs arrive as strings; only "true" enables a flag."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


class ActionInputs(BaseModel):
    """Typed action configuration.

    Field aliases match the input names declared for the action
    (``trigger-phrase``, ``comment-id`` ...). Values are validated and
    converted once here so the services never see raw strings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    action: ActionName
    trigger_phrase: str = Field(default="", alias="trigger-phrase")
    link_required: bool = Field(default=False, alias="link-required")
    description_contains: str = Field(default="", alias="description-contains")
    comment_id: str = Field(default="", alias="comment-id")
    text: str = Field(default="")
    is_pinned: bool = Field(default=False, alias="is-pinned")
    # None until supplied; required for complete-task
    is_complete: Optional[bool] = Field(default=None, alias="is-complete")
    targets: list[ActionTarget] = Field(default_factory=list)
    asana_pat: Optional[SecretStr] = Field(default=None, alias="asana-pat")
    github_token: Optional[SecretStr] = Field(default=None, alias="github-token")

    @field_validator("action", mode="before")
    @classmethod
    def _strip_action(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("link_required", "is_pinned", mode="before")
    @classmethod
    def _flags(cls, value: Any) -> bool:
        return _parse_flag(value)

    @field_validator("is_complete", mode="before")
    @classmethod
    def _required_flag(cls, value: Any) -> Optional[bool]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return _parse_flag(value)

    @field_validator("trigger_phrase", "description_contains", "comment_id", "text", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("asana_pat", "github_token", mode="before")
    @classmethod
    def _blank_secret(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("targets", mode="before")
    @classmethod
    def _decode_targets(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            if not value.strip():
                return []
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"targets is not valid JSON: {e.msg}") from e
        if not isinstance(value, list):
            raise ValueError("targets must be a JSON list of {project, section} objects")
        return value

    @model_validator(mode="after")
    def _check_required_inputs(self) -> "ActionInputs":
        if self.action == ActionName.ADD_COMMENT and not self.text:
            raise ValueError("text is required for add-comment")
        if self.action == ActionName.REMOVE_COMMENT and not self.comment_id:
            raise ValueError("comment-id is required for remove-comment")
        if self.action == ActionName.COMPLETE_TASK and self.is_complete is None:
            raise ValueError("is-complete is required for complete-task")
        if self.action == ActionName.MOVE_SECTION and not self.targets:
            raise ValueError("targets is required for move-section")
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ActionInputs":
        """Validate raw input values, raising ConfigurationError on failure."""
        try:
            return cls.model_validate(dict(values))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'inputs'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid action inputs: {problems}") from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionInputs":
        """Load inputs from ``INPUT_<NAME>`` variables set by the Actions runner.

        The runner keeps hyphens in input names (``INPUT_TRIGGER-PHRASE``);
        underscored spellings are accepted as well.
        """
        return cls.from_mapping(read_input_env(environ))


def read_input_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Collect ``INPUT_*`` variables keyed by their hyphenated input name."""
    if environ is None:
        environ = os.environ
    values = {}
    for key, value in environ.items():
        if key.upper().startswith(INPUT_ENV_PREFIX):
            name = key[len(INPUT_ENV_PREFIX):].lower().replace("_", "-")
            values[name] = value
    return values


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
