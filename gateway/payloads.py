"""Payload validation shared by the REST and tool surfaces."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping

from gateway.errors import ValidationFailure
from gateway.filters import TaskFilters
from gateway.mcp_constants import TASK_CONTEXTS, TASK_PRIORITIES, TASK_STATUSES
from gateway.models import CreateTaskInput, TaskUpdate

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

CREATE_FIELDS = {
    "title",
    "status",
    "priority",
    "scheduled",
    "due",
    "contexts",
    "projects",
    "tags",
    "details",
}
UPDATE_FIELDS = {"status", "priority", "due"}
LIST_FIELDS = {"status", "priority", "context", "scheduled", "overdue", "archived"}


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationFailure(
            "Payload must be an object.",
            {"type": type(payload).__name__},
            code="INVALID_TYPE",
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise ValidationFailure(
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
            code="UNKNOWN_FIELD",
        )


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _optional_string(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailure(
            f"{key} must be a string.",
            {"field": key, "type": type(value).__name__},
            code="INVALID_TYPE",
        )
    return value


def _optional_choice(
    payload: Mapping[str, Any], key: str, choices: tuple[str, ...]
) -> str | None:
    value = _optional_string(payload, key)
    if value is None or value == "":
        return None
    if value not in choices:
        raise ValidationFailure(
            f"{key} must be one of: {', '.join(choices)}.",
            {"field": key, "value": value, "allowed": list(choices)},
            code="INVALID_VALUE",
        )
    return value


def _optional_date(payload: Mapping[str, Any], key: str) -> str | None:
    value = _optional_string(payload, key)
    if value is None or value == "":
        return None
    if not is_iso_date(value):
        raise ValidationFailure(
            f"{key} must be a YYYY-MM-DD date.",
            {"field": key, "value": value},
            code="INVALID_DATE",
        )
    return value


def _string_list(payload: Mapping[str, Any], key: str) -> list[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationFailure(
            f"{key} must be a list of strings.",
            {"field": key},
            code="INVALID_TYPE",
        )
    return value


def _flag(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"", "0", "false", "no", "off"}:
            return False
    raise ValidationFailure(
        f"{key} must be a boolean.",
        {"field": key, "value": str(value)},
        code="INVALID_TYPE",
    )


def parse_task_id(raw_id: Any) -> str:
    if not isinstance(raw_id, str) or not raw_id.strip():
        raise ValidationFailure(
            "id must be a non-empty string.",
            {"fields": ["id"]},
            code="MISSING_ID",
        )
    return raw_id


def parse_create_payload(payload: Any) -> CreateTaskInput:
    """Validate a creation request; at least one context is always required."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, CREATE_FIELDS)

    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValidationFailure(
            "title is required.", {"fields": ["title"]}, code="MISSING_TITLE"
        )

    contexts = _string_list(payload, "contexts")
    if not contexts:
        raise ValidationFailure(
            "At least one context is required.",
            {"fields": ["contexts"], "allowed": list(TASK_CONTEXTS)},
            code="MISSING_CONTEXT",
        )
    invalid_contexts = [item for item in contexts if item not in TASK_CONTEXTS]
    if invalid_contexts:
        raise ValidationFailure(
            f"contexts must be drawn from: {', '.join(TASK_CONTEXTS)}.",
            {"field": "contexts", "values": invalid_contexts},
            code="INVALID_VALUE",
        )

    projects = [name.strip() for name in _string_list(payload, "projects")]
    tags = _string_list(payload, "tags")

    return CreateTaskInput(
        title=title.strip(),
        contexts=tuple(dict.fromkeys(contexts)),
        status=_optional_choice(payload, "status", TASK_STATUSES),
        priority=_optional_choice(payload, "priority", TASK_PRIORITIES),
        scheduled=_optional_date(payload, "scheduled"),
        due=_optional_date(payload, "due"),
        projects=tuple(name for name in projects if name),
        tags=tuple(tags),
        details=_optional_string(payload, "details"),
    )


def parse_update_payload(payload: Any) -> TaskUpdate:
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, UPDATE_FIELDS)

    clear_due = "due" in payload and payload["due"] is None
    update = TaskUpdate(
        status=_optional_choice(payload, "status", TASK_STATUSES),
        priority=_optional_choice(payload, "priority", TASK_PRIORITIES),
        due=_optional_date(payload, "due"),
        clear_due=clear_due,
    )
    if update.is_empty():
        raise ValidationFailure(
            "At least one of status, priority or due is required.",
            {"fields": sorted(UPDATE_FIELDS)},
            code="MISSING_FIELDS",
        )
    return update


def parse_text_payload(payload: Any) -> str:
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"text"})
    text = payload.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ValidationFailure(
            "text is required.", {"fields": ["text"]}, code="MISSING_TEXT"
        )
    return text.strip()


def filters_from_payload(payload: Any) -> TaskFilters:
    """Build filters from tool arguments or REST query parameters."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, LIST_FIELDS)
    return TaskFilters(
        status=_optional_choice(payload, "status", TASK_STATUSES),
        priority=_optional_choice(payload, "priority", TASK_PRIORITIES),
        context=_optional_choice(payload, "context", TASK_CONTEXTS),
        scheduled=_optional_date(payload, "scheduled"),
        overdue=_flag(payload.get("overdue"), "overdue"),
        include_archived=_flag(payload.get("archived"), "archived"),
    )


def filters_from_query(query: Mapping[str, str]) -> TaskFilters:
    known = {key: value for key, value in query.items() if key in LIST_FIELDS}
    return filters_from_payload(known)
