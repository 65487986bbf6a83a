"""REST endpoints for tasks and filter options."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from gateway.payloads import (
    filters_from_query,
    parse_create_payload,
    parse_task_id,
    parse_update_payload,
)
from gateway.request_scope import get_request_operations

tasks_router = APIRouter(prefix="/tasks", tags=["Tasks"])
filter_options_router = APIRouter(tags=["Tasks"])


@tasks_router.get("")
def list_tasks(
    request: Request,
    status: str | None = None,
    priority: str | None = None,
    context: str | None = None,
    overdue: str | None = None,
    scheduled: str | None = None,
    archived: str | None = None,
) -> list[dict[str, Any]]:
    """List tasks; archived tasks are excluded unless archived=true."""
    query = {
        "status": status,
        "priority": priority,
        "context": context,
        "overdue": overdue,
        "scheduled": scheduled,
        "archived": archived,
    }
    filters = filters_from_query(
        {key: value for key, value in query.items() if value is not None}
    )
    return get_request_operations(request).list_tasks(filters)


# Task ids are vault paths and may contain slashes.
@tasks_router.post("/{task_id:path}/toggle-status")
def toggle_status(task_id: str, request: Request) -> dict[str, Any]:
    """Toggle a task between open and in-progress."""
    return get_request_operations(request).toggle_status(parse_task_id(task_id))


@tasks_router.get("/{task_id:path}")
def get_task(task_id: str, request: Request) -> dict[str, Any]:
    return get_request_operations(request).get_task(parse_task_id(task_id))


@tasks_router.post("")
def create_task(request: Request, payload: Any = Body(None)) -> dict[str, Any]:
    """Create a task; at least one context is required."""
    task_input = parse_create_payload(payload)
    return get_request_operations(request).create_task(task_input)


@tasks_router.put("/{task_id:path}")
def update_task(
    task_id: str, request: Request, payload: Any = Body(None)
) -> dict[str, Any]:
    """Update status, priority or due date."""
    update = parse_update_payload(payload)
    return get_request_operations(request).update_task(
        parse_task_id(task_id), update
    )


@filter_options_router.get("/filter-options")
def get_filter_options(request: Request) -> dict[str, Any]:
    """Live filter options: statuses, priorities, contexts, projects, tags."""
    return get_request_operations(request).get_filter_options()
