"""Natural-language intake: free text to a created task."""

from __future__ import annotations

import logging
from typing import Any

from gateway.errors import ModelFailure
from gateway.filters import today_iso
from gateway.llm import ParseAdapter
from gateway.mapper import from_upstream_task, to_upstream_create
from gateway.mcp_constants import (
    DEFAULT_NLP_CONTEXT,
    DEFAULT_NLP_PRIORITY,
    TASK_CONTEXTS,
    TASK_PRIORITIES,
)
from gateway.models import CreateTaskInput, ParseResult
from gateway.payloads import is_iso_date, parse_create_payload
from gateway.projects import ProjectCatalog, resolve
from gateway.tasknotes_client import TaskNotesClient

logger = logging.getLogger(__name__)


def parse_text(
    text: str, adapter: ParseAdapter, catalog: ProjectCatalog
) -> ParseResult:
    """Dry run: ask the model for a structured guess without creating anything."""
    projects = catalog.projects()
    return adapter.parse(text, today_iso(), projects)


def build_create_input(parsed: ParseResult, projects: list[str]) -> CreateTaskInput:
    """Fill defaults and resolve the project guess, then validate like any caller input.

    Problems with the guess itself are the model's fault and raise
    ModelFailure; an unknown context falls back to the default.
    """
    if not isinstance(parsed.title, str) or not parsed.title.strip():
        raise ModelFailure("Model returned an empty title.", {"field": "title"})
    if parsed.priority is not None and parsed.priority not in TASK_PRIORITIES:
        raise ModelFailure(
            "Model returned an unknown priority.", {"priority": str(parsed.priority)}
        )

    context = parsed.context if parsed.context in TASK_CONTEXTS else DEFAULT_NLP_CONTEXT
    resolved = resolve(parsed.project, projects)
    payload: dict[str, Any] = {
        "title": parsed.title.strip(),
        "contexts": [context],
        "priority": parsed.priority or DEFAULT_NLP_PRIORITY,
        "projects": [resolved] if resolved else [],
    }
    for key in ("scheduled", "due"):
        value = getattr(parsed, key)
        if is_iso_date(value):
            payload[key] = value
        elif value:
            logger.warning("Dropping malformed %s date from model output: %r", key, value)
    return parse_create_payload(payload)


def parse_and_create(
    text: str,
    client: TaskNotesClient,
    adapter: ParseAdapter,
    catalog: ProjectCatalog,
) -> dict[str, Any]:
    projects = catalog.projects()
    parsed = adapter.parse(text, today_iso(), projects)
    task_input = build_create_input(parsed, projects)
    created = client.create_task(to_upstream_create(task_input))
    logger.info(
        "Created task from text",
        extra={"task_id": created.get("id"), "contexts": list(task_input.contexts)},
    )
    return from_upstream_task(created)
