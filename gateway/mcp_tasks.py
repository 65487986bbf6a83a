"""Task tools for language-model agents.

Each tool is a thin adapter over ``TaskOperations``; the same handlers back
the ``/tool:<name>`` routes and the JSON-RPC ``/mcp`` endpoint.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from fastapi import Request

from gateway.errors import ValidationFailure, success_response
from gateway.mcp_router import mcp_router
from gateway.operations import TaskOperations
from gateway.payloads import (
    _ensure_payload_dict,
    _reject_unknown_fields,
    filters_from_payload,
    parse_create_payload,
    parse_task_id,
    parse_text_payload,
    parse_update_payload,
)
from gateway.request_scope import get_request_operations

ToolHandler = Callable[[TaskOperations, dict[str, Any]], Any]


def _list_tasks(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    return operations.list_tasks(filters_from_payload(payload))


def _get_task(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    _reject_unknown_fields(payload, {"id"})
    return operations.get_task(parse_task_id(payload.get("id")))


def _create_task(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    return operations.create_task(parse_create_payload(payload))


def _update_task(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    fields = dict(payload)
    task_id = parse_task_id(fields.pop("id", None))
    return operations.update_task(task_id, parse_update_payload(fields))


def _toggle_task_status(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    _reject_unknown_fields(payload, {"id"})
    return operations.toggle_status(parse_task_id(payload.get("id")))


def _nlp_parse(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    return operations.parse_text(parse_text_payload(payload))


def _nlp_create(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    return operations.parse_and_create(parse_text_payload(payload))


def _get_filter_options(operations: TaskOperations, payload: dict[str, Any]) -> Any:
    _reject_unknown_fields(payload, set())
    return operations.get_filter_options()


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "list_tasks": _list_tasks,
    "get_task": _get_task,
    "create_task": _create_task,
    "update_task": _update_task,
    "toggle_task_status": _toggle_task_status,
    "nlp_parse": _nlp_parse,
    "nlp_create": _nlp_create,
    "get_filter_options": _get_filter_options,
}


def text_content(result: Any) -> dict[str, Any]:
    """Serialize a tool result as a structured text payload."""
    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(result, indent=2, ensure_ascii=False),
            }
        ]
    }


def run_tool(name: str, payload: Any, operations: TaskOperations) -> Any:
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise ValidationFailure(
            "Unknown tool.", {"tool": name}, code="UNKNOWN_TOOL"
        )
    return handler(operations, _ensure_payload_dict(payload))


def _respond(name: str, payload: Any, request: Request) -> dict[str, Any]:
    result = run_tool(name, payload, get_request_operations(request))
    return success_response(text_content(result))


@mcp_router.post("/tool:list_tasks")
def list_tasks(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """List tasks with optional filters."""
    return _respond("list_tasks", payload, request)


@mcp_router.post("/tool:get_task")
def get_task(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    return _respond("get_task", payload, request)


@mcp_router.post("/tool:create_task")
def create_task(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Create a task; at least one context is required."""
    return _respond("create_task", payload, request)


@mcp_router.post("/tool:update_task")
def update_task(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Update task status, priority, or due date."""
    return _respond("update_task", payload, request)


@mcp_router.post("/tool:toggle_task_status")
def toggle_task_status(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Toggle a task between open and in-progress."""
    return _respond("toggle_task_status", payload, request)


@mcp_router.post("/tool:nlp_parse")
def nlp_parse(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    return _respond("nlp_parse", payload, request)


@mcp_router.post("/tool:nlp_create")
def nlp_create(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Parse natural language and create a task."""
    return _respond("nlp_create", payload, request)


@mcp_router.post("/tool:get_filter_options")
def get_filter_options(
    request: Request, payload: dict[str, Any] | None = None
) -> dict[str, Any]:
    return _respond("get_filter_options", payload or {}, request)
