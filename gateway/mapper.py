"""Conversion between the gateway task shape and the task store's shape."""

from __future__ import annotations

from typing import Any, Mapping

from gateway.mcp_constants import SENTINEL_TAG
from gateway.models import CreateTaskInput, FilterOptions, TaskUpdate
from gateway.projects import canonical_projects, canonicalize, decorate


def to_upstream_create(task_input: CreateTaskInput) -> dict[str, Any]:
    """Build the POST /tasks body: sentinel tag appended, projects decorated."""
    tags = list(task_input.tags)
    if SENTINEL_TAG not in tags:
        tags.append(SENTINEL_TAG)

    payload: dict[str, Any] = {
        "title": task_input.title,
        "contexts": list(task_input.contexts),
        "projects": [decorate(name) for name in task_input.projects],
        "tags": tags,
    }
    for key in ("status", "priority", "scheduled", "due", "details"):
        value = getattr(task_input, key)
        if value is not None:
            payload[key] = value
    return payload


def to_upstream_update(update: TaskUpdate) -> dict[str, Any]:
    patch: dict[str, Any] = {}
    if update.status is not None:
        patch["status"] = update.status
    if update.priority is not None:
        patch["priority"] = update.priority
    if update.due is not None:
        patch["due"] = update.due
    elif update.clear_due:
        patch["due"] = None
    return patch


def from_upstream_task(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Copy an upstream task with every project name unwrapped."""
    task = dict(raw)
    projects = task.get("projects")
    if isinstance(projects, list):
        task["projects"] = [
            canonicalize(name) if isinstance(name, str) else name
            for name in projects
        ]
    return task


def from_upstream_tasks(raw_tasks: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [from_upstream_task(raw) for raw in raw_tasks]


def from_upstream_filter_options(raw: Mapping[str, Any]) -> FilterOptions:
    def _strings(key: str) -> list[str]:
        values = raw.get(key) or []
        return [value for value in values if isinstance(value, str)]

    return FilterOptions(
        statuses=_strings("statuses"),
        priorities=_strings("priorities"),
        contexts=_strings("contexts"),
        projects=canonical_projects(raw.get("projects") or []),
        tags=_strings("tags"),
    )
