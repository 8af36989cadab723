"""Configuration module."""

from .settings import (
    ActionInputs,
    AppSettings,
    AsanaSettings,
    GitHubSettings,
    get_settings,
    read_input_env,
)

__all__ = [
    "ActionInputs",
    "AppSettings",
    "AsanaSettings",
    "GitHubSettings",
    "get_settings",
    "read_input_env",
]
