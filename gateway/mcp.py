"""Tool-surface handler registration."""

# ruff: noqa: F401

from __future__ import annotations

from fastapi import FastAPI

from gateway.mcp_router import mcp_router

# Import modules to register routes with the shared router.
from gateway import mcp_rpc, mcp_tasks, mcp_tools_endpoint

# Re-export endpoints for tests and direct imports.
from gateway.mcp_rpc import mcp_endpoint
from gateway.mcp_tasks import (
    TOOL_HANDLERS,
    create_task,
    get_filter_options,
    get_task,
    list_tasks,
    nlp_create,
    nlp_parse,
    toggle_task_status,
    update_task,
)
from gateway.mcp_tools_endpoint import list_tool_schemas


def register_mcp_handlers(app: FastAPI) -> None:
    """Attach tool routes to the FastAPI application."""
    app.include_router(mcp_router)
