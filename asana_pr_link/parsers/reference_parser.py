"""Asana task reference extraction from pull request descriptions."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..domain.models import TaskReference


logger = logging.getLogger(__name__)

ASANA_HOST = r"https://app\.asana\.com"

# [title](https://app.asana.com/1/<workspace>/project/<project>/task/<task>...)
MARKDOWN_LINK_PATTERN = (
    r"\[(.*?)\]\(" + ASANA_HOST
    + r"/(\d+)/(?P<workspace>\d+)/project/(?P<project>\d+)/task/(?P<task>\d+).*?\)"
)

# https://app.asana.com/0/<project>/<task>
BARE_URL_PATTERN = r"(?:\s*)" + ASANA_HOST + r"/(\d+)/(?P<project>\d+)/(?P<task>\d+)"


@dataclass(frozen=True)
class ExtractionGrammar:
    """A compiled reference pattern and its priority rank (1 is tried first)."""

    name: str
    rank: int
    pattern: re.Pattern

    def find_task_ids(self, body: str) -> list[str]:
        """Return every ``task`` capture in order of appearance."""
        task_ids = []
        for match in self.pattern.finditer(body):
            task_id = match.groupdict().get("task")
            if not task_id:
                logger.warning(
                    f"Invalid Asana task URL at offset {match.start()}: {match.group(0)!r}"
                )
                continue
            task_ids.append(task_id)
        return task_ids


def build_grammars(trigger_phrase: str = "") -> list[ExtractionGrammar]:
    """Build both grammars for a trigger phrase, ordered by rank."""
    prefix = re.escape(trigger_phrase) + r"\s*" if trigger_phrase else ""
    return [
        ExtractionGrammar(
            name="markdown-link",
            rank=1,
            pattern=re.compile(prefix + MARKDOWN_LINK_PATTERN),
        ),
        ExtractionGrammar(
            name="bare-url",
            rank=2,
            pattern=re.compile(re.escape(trigger_phrase) + BARE_URL_PATTERN),
        ),
    ]


class ReferenceExtractor:
    """Extracts task references using the first grammar that yields any.

    Grammars are tried in rank order and never merged: the bare URL grammar
    is only consulted when no markdown link matched. Repeated task ids keep
    the position of their first occurrence.
    """

    def __init__(self, trigger_phrase: str = "") -> None:
        self._trigger_phrase = trigger_phrase
        self._grammars = build_grammars(trigger_phrase)

    @property
    def trigger_phrase(self) -> str:
        return self._trigger_phrase

    @property
    def grammars(self) -> list[ExtractionGrammar]:
        return list(self._grammars)

    def extract(self, body: Optional[str]) -> list[TaskReference]:
        """Extract task references from a pull request body."""
        if not body:
            return []

        for grammar in sorted(self._grammars, key=lambda g: g.rank):
            task_ids = grammar.find_task_ids(body)
            if task_ids:
                references = _dedupe(task_ids)
                logger.info(
                    f"found {len(references)} task ids via {grammar.name}: "
                    f"{','.join(r.value for r in references)}"
                )
                return references

        logger.info("found 0 task ids")
        return []


def _dedupe(task_ids: list[str]) -> list[TaskReference]:
    seen = set()
    references = []
    for task_id in task_ids:
        if task_id in seen:
            logger.debug(f"Skipping repeated task id {task_id}")
            continue
        seen.add(task_id)
        references.append(TaskReference(task_id))
    return references


def extract_task_references(
    body: Optional[str], trigger_phrase: str = ""
) -> list[TaskReference]:
    """Extract task references from ``body`` after ``trigger_phrase``."""
    return ReferenceExtractor(trigger_phrase).extract(body)
