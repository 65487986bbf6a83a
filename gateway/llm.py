"""Language-model adapter that turns free text into a structured task guess."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx

from gateway.errors import ModelFailure
from gateway.mcp_constants import TASK_CONTEXTS, TASK_PRIORITIES
from gateway.models import ParseResult
from gateway.payloads import is_iso_date

logger = logging.getLogger(__name__)

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "context": {"type": "STRING", "enum": list(TASK_CONTEXTS)},
        "priority": {"type": "STRING", "enum": list(TASK_PRIORITIES)},
        "project": {"type": "STRING", "nullable": True},
        "scheduled": {"type": "STRING", "nullable": True},
        "due": {"type": "STRING", "nullable": True},
    },
    "required": ["title"],
}


class ParseAdapter(Protocol):
    def parse(self, text: str, today: str, projects: list[str]) -> ParseResult: ...


def build_system_prompt(today: str, projects: list[str]) -> str:
    project_list = ", ".join(projects) if projects else "none"
    return (
        f"Today: {today}\n\n"
        "Contexts (required, pick exactly one):\n"
        "- dev: coding, programming, software tasks, any code work\n"
        "- work: university, courses, PR/reviews, meetings, non-coding professional tasks\n"
        "- life: personal, health, shopping, errands, social\n"
        "- infra: homelab, server, docker, networking, infrastructure\n\n"
        f"Available projects: {project_list}\n"
        "Priorities: none, low, normal, high (default: normal)\n\n"
        "Project rules:\n"
        "- Only assign a project if the task explicitly or strongly implies one of the available projects\n"
        "- When uncertain, omit (return null); do not guess\n"
        "- life and infra tasks rarely need a project\n\n"
        "Return scheduled/due as YYYY-MM-DD or null. "
        "If no explicit date, scheduled defaults to today."
    )


def parse_model_output(raw: Any) -> ParseResult:
    """Validate the model's JSON object into a ParseResult."""
    if not isinstance(raw, dict):
        raise ModelFailure(
            "Model output must be a JSON object.", {"type": type(raw).__name__}
        )

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ModelFailure("Model returned an empty title.", {"field": "title"})

    priority = raw.get("priority")
    if priority is not None and priority not in TASK_PRIORITIES:
        raise ModelFailure(
            "Model returned an unknown priority.", {"priority": str(priority)}
        )

    context = raw.get("context")
    if context is not None and context not in TASK_CONTEXTS:
        logger.warning("Dropping unknown context from model output: %r", context)
        context = None

    project = raw.get("project")
    if not isinstance(project, str) or not project.strip():
        project = None

    return ParseResult(
        title=title.strip(),
        context=context,
        priority=priority,
        project=project,
        scheduled=_date_or_none(raw.get("scheduled"), "scheduled"),
        due=_date_or_none(raw.get("due"), "due"),
    )


def _date_or_none(value: Any, key: str) -> str | None:
    if value is None or value == "":
        return None
    if is_iso_date(value):
        return value
    logger.warning("Dropping malformed %s date from model output: %r", key, value)
    return None


class GeminiAdapter:
    """Calls the Gemini generateContent REST endpoint with a JSON response schema."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def parse(self, text: str, today: str, projects: list[str]) -> ParseResult:
        if not self._api_key:
            raise ModelFailure(
                "GEMINI_API_KEY is not configured.", {"model": self._model}
            )

        body = {
            "systemInstruction": {
                "parts": [{"text": build_system_prompt(today, projects)}]
            },
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        url = f"{self._base_url}/models/{self._model}:generateContent"
        try:
            response = self._http.post(
                url, json=body, headers={"x-goog-api-key": self._api_key}
            )
        except httpx.TimeoutException as exc:
            logger.error("Model request timed out (model=%s)", self._model)
            raise ModelFailure(
                "Model request timed out.", {"model": self._model}
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Model request failed (model=%s): %s", self._model, exc)
            raise ModelFailure(
                "Model request failed.", {"model": self._model}
            ) from exc

        if not response.is_success:
            logger.error(
                "Model API returned %s (model=%s)", response.status_code, self._model
            )
            raise ModelFailure(
                "Model API returned an error.",
                {"status": response.status_code, "model": self._model},
            )

        return parse_model_output(_extract_json(response))


def _extract_json(response: httpx.Response) -> Any:
    try:
        body = response.json()
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise ModelFailure("Model response had no content.") from exc
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ModelFailure("Model response was not valid JSON.") from exc
