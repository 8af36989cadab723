"""Commit status reporter implementations."""

from .github_status import GitHubStatusReporter
from .memory import InMemoryStatusReporter

__all__ = [
    "GitHubStatusReporter",
    "InMemoryStatusReporter",
]
