"""HTTP client for the upstream TaskNotes API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from gateway.errors import UpstreamRejected, UpstreamTimeout, UpstreamUnreachable

logger = logging.getLogger(__name__)


class TaskNotesClient:
    """Single-shot calls against the task store; every response is a ``{data: T}`` envelope."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._http.close()

    def list_tasks(self) -> list[dict[str, Any]]:
        data = self._request("GET", "/tasks")
        tasks = data.get("tasks") if isinstance(data, dict) else None
        if not isinstance(tasks, list):
            raise UpstreamRejected(502, "Response is missing data.tasks.")
        return tasks

    def get_task(self, task_id: str) -> dict[str, Any]:
        return self._request_object("GET", f"/tasks/{_encode_id(task_id)}")

    def create_task(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request_object("POST", "/tasks", json=payload)

    def update_task(self, task_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        return self._request_object(
            "PUT", f"/tasks/{_encode_id(task_id)}", json=patch
        )

    def filter_options(self) -> dict[str, Any]:
        return self._request_object("GET", "/filter-options")

    def _request_object(
        self, method: str, path: str, json: Any = None
    ) -> dict[str, Any]:
        data = self._request(method, path, json=json)
        if not isinstance(data, dict):
            raise UpstreamRejected(502, "Response data must be an object.")
        return data

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._http.request(method, url, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("TaskNotes request timed out: %s %s", method, path)
            raise UpstreamTimeout(details={"method": method, "path": path}) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "TaskNotes request failed: %s %s (%s)", method, path, exc
            )
            raise UpstreamUnreachable(
                details={"method": method, "path": path}
            ) from exc

        if not response.is_success:
            body = response.text or str(response.status_code)
            logger.warning(
                "TaskNotes rejected %s %s with %s", method, path, response.status_code
            )
            raise UpstreamRejected(response.status_code, body)

        try:
            envelope = response.json()
        except ValueError:
            raise UpstreamRejected(502, "Response is not valid JSON.") from None
        if not isinstance(envelope, dict) or "data" not in envelope:
            raise UpstreamRejected(502, "Response is missing the data envelope.")
        return envelope["data"]


def _encode_id(task_id: str) -> str:
    return quote(task_id, safe="")
