"""REST endpoints for natural-language intake."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from gateway.payloads import parse_text_payload
from gateway.request_scope import get_request_operations

nlp_router = APIRouter(prefix="/nlp", tags=["NLP"])


@nlp_router.post("/parse")
def parse(request: Request, payload: Any = Body(None)) -> dict[str, Any]:
    """Parse natural language into task fields without creating a task."""
    text = parse_text_payload(payload)
    return get_request_operations(request).parse_text(text)


@nlp_router.post("/create")
def create(request: Request, payload: Any = Body(None)) -> dict[str, Any]:
    """Parse natural language and create the task."""
    text = parse_text_payload(payload)
    return get_request_operations(request).parse_and_create(text)
