"""Request-scoped access to the shared gateway state."""

from __future__ import annotations

from fastapi import Request

from gateway.errors import GatewayError
from gateway.operations import TaskOperations

SERVICE_TOKEN_HEADER = "X-TaskNotes-Service-Token"
AUTH_EXEMPT_PATHS = {"/health"}


def get_request_operations(request: Request) -> TaskOperations:
    """Return the operation set built at startup."""
    operations = getattr(request.app.state, "operations", None)
    if operations is None:
        raise GatewayError(
            "NOT_READY",
            "Gateway is not initialized.",
            status_code=503,
        )
    return operations


def service_token_matches(request: Request, service_token: str | None) -> bool:
    if not service_token:
        return True
    return request.headers.get(SERVICE_TOKEN_HEADER) == service_token
