"""Parsers for pull request events and task references."""

from .github_event import GitHubPullRequestParser
from .reference_parser import (
    ExtractionGrammar,
    ReferenceExtractor,
    build_grammars,
    extract_task_references,
)

__all__ = [
    "GitHubPullRequestParser",
    "ExtractionGrammar",
    "ReferenceExtractor",
    "build_grammars",
    "extract_task_references",
]
