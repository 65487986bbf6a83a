"""Tool definition endpoint."""

from __future__ import annotations

from typing import Any

from gateway.errors import GatewayError, success_response
from gateway.mcp_router import mcp_router
from tools.mcp_tools import ToolSchemaError, load_tool_definitions


def load_tools_or_raise() -> list[dict[str, Any]]:
    try:
        return load_tool_definitions()
    except ToolSchemaError as exc:
        raise GatewayError(
            "TOOL_SCHEMA_ERROR",
            "Tool definitions could not be loaded.",
            {"error": str(exc)},
        ) from exc


@mcp_router.get("/tools")
def list_tool_schemas() -> dict[str, Any]:
    """Return the current tool definitions."""
    return success_response({"tools": load_tools_or_raise()})
