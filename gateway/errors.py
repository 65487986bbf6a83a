"""Structured error types for gateway responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class ErrorResponse:
    """Serializable error payload returned by every surface."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class GatewayError(RuntimeError):
    """Exception carrying a structured error response and an HTTP status."""

    status_code = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: Mapping[str, Any] | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.error = ErrorResponse(
            code=code, message=message, details=dict(details or {})
        )


class ValidationFailure(GatewayError):
    """Caller input violates a schema constraint; raised before any network call."""

    status_code = 400

    def __init__(
        self,
        message: str,
        details: Mapping[str, Any] | None = None,
        *,
        code: str = "VALIDATION_FAILED",
    ) -> None:
        super().__init__(code, message, details)


class UpstreamUnreachable(GatewayError):
    status_code = 502

    def __init__(
        self,
        message: str = "TaskNotes API is unreachable.",
        details: Mapping[str, Any] | None = None,
        *,
        code: str = "UPSTREAM_UNREACHABLE",
    ) -> None:
        super().__init__(code, message, details)


class UpstreamTimeout(UpstreamUnreachable):
    status_code = 504

    def __init__(
        self,
        message: str = "TaskNotes API did not respond in time.",
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details, code="UPSTREAM_TIMEOUT")


class UpstreamRejected(GatewayError):
    """The task store answered with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            "UPSTREAM_REJECTED",
            f"TaskNotes API error {status}: {body}",
            {"status": status, "body": body},
            status_code=status if 400 <= status <= 599 else 502,
        )
        self.status = status
        self.body = body


class ModelFailure(GatewayError):
    """The language-model adapter errored or returned an unusable result."""

    status_code = 502

    def __init__(
        self, message: str, details: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("MODEL_FAILURE", message, details)


def success_response(payload: dict[str, Any]) -> dict[str, Any]:
    """Wrap a successful tool response in the standard envelope."""
    return {"ok": True, "data": payload}


def error_response(error: ErrorResponse) -> dict[str, Any]:
    """Wrap an error response in the standard envelope."""
    return {"ok": False, "error": error.to_dict()}
