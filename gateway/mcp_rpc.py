"""JSON-RPC endpoint speaking the MCP tool protocol over plain HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Body, Request, Response

from gateway.errors import GatewayError, error_response
from gateway.mcp_constants import SERVICE_NAME, SERVICE_VERSION
from gateway.mcp_router import mcp_router
from gateway.mcp_tasks import run_tool, text_content
from gateway.mcp_tools_endpoint import load_tools_or_raise
from gateway.request_scope import get_request_operations
from tools.mcp_tools import to_mcp_tool

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
DEFAULT_PROTOCOL_VERSION = "2025-03-26"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def _result(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def _error(request_id: Any, exc: RpcError) -> dict[str, Any]:
    error: dict[str, Any] = {"code": exc.code, "message": exc.message}
    if exc.data is not None:
        error["data"] = exc.data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def _initialize(params: dict[str, Any], request: Request) -> dict[str, Any]:
    return {
        "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": SERVICE_NAME, "version": SERVICE_VERSION},
    }


def _tools_list(params: dict[str, Any], request: Request) -> dict[str, Any]:
    return {"tools": [to_mcp_tool(tool) for tool in load_tools_or_raise()]}


def _tools_call(params: dict[str, Any], request: Request) -> dict[str, Any]:
    name = params.get("name")
    if not isinstance(name, str) or not name:
        raise RpcError(INVALID_PARAMS, "params.name is required.")
    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}

    operations = get_request_operations(request)
    try:
        result = run_tool(name, arguments, operations)
    except GatewayError as exc:
        # tool failures are reported in-band so agents can read them
        logger.info("Tool %s failed: %s", name, exc.error.code)
        return {
            "content": [
                {"type": "text", "text": json.dumps(error_response(exc.error))}
            ],
            "isError": True,
        }
    return {**text_content(result), "isError": False}


def _ping(params: dict[str, Any], request: Request) -> dict[str, Any]:
    return {}


METHODS = {
    "initialize": _initialize,
    "tools/list": _tools_list,
    "tools/call": _tools_call,
    "ping": _ping,
}


@mcp_router.post("/mcp")
def mcp_endpoint(request: Request, message: Any = Body(None)) -> Any:
    """Handle one JSON-RPC message; notifications are acknowledged with 202."""
    if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION:
        return _error(None, RpcError(INVALID_REQUEST, "Invalid JSON-RPC request."))

    method = message.get("method")
    request_id = message.get("id")
    if "id" not in message:
        return Response(status_code=202)
    if not isinstance(method, str):
        return _error(request_id, RpcError(INVALID_REQUEST, "method is required."))

    handler = METHODS.get(method)
    if handler is None:
        return _error(
            request_id, RpcError(METHOD_NOT_FOUND, f"Method not found: {method}")
        )

    params = message.get("params") or {}
    if not isinstance(params, dict):
        return _error(request_id, RpcError(INVALID_PARAMS, "params must be an object."))

    try:
        return _result(request_id, handler(params, request))
    except RpcError as exc:
        return _error(request_id, exc)
    except GatewayError as exc:
        return _error(
            request_id,
            RpcError(INTERNAL_ERROR, exc.error.message, exc.error.to_dict()),
        )
