from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any
from urllib.parse import unquote

import httpx
import pytest

from gateway.errors import ModelFailure
from gateway.models import ParseResult
from gateway.operations import TaskOperations
from gateway.projects import ProjectCatalog
from gateway.tasknotes_client import TaskNotesClient

BASE_URL = "http://tasknotes.test/api"


def make_task(task_id: str, **fields: Any) -> dict[str, Any]:
    task = {
        "id": task_id,
        "path": task_id,
        "title": fields.pop("title", task_id),
        "status": "open",
        "priority": "normal",
        "scheduled": None,
        "due": None,
        "contexts": ["dev"],
        "projects": [],
        "tags": ["task"],
        "dateCreated": "2026-01-01T00:00:00Z",
        "dateModified": "2026-01-01T00:00:00Z",
        "archived": False,
        "totalTrackedTime": 0,
        "timeEstimate": None,
        "isBlocked": False,
        "isBlocking": False,
    }
    task.update(fields)
    return task


class FakeTaskStore:
    """In-memory stand-in for the TaskNotes HTTP API."""

    def __init__(self) -> None:
        self.tasks: dict[str, dict[str, Any]] = {}
        self.projects = ["[[basalt-ui]]", "[[iu]]"]
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.fail_paths: set[str] = set()
        self.unreachable = False
        self._next_id = 1

    def add(self, task: dict[str, Any]) -> dict[str, Any]:
        self.tasks[task["id"]] = task
        return task

    def posted(self) -> list[dict[str, Any]]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == "POST"
        ]

    def writes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method in {"POST", "PUT"}]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        path = unquote(request.url.raw_path.decode("ascii").split("?")[0])
        path = path[len("/api") :]
        if self.fail_status is not None and (
            not self.fail_paths or path in self.fail_paths
        ):
            return httpx.Response(self.fail_status, text="boom")

        if path == "/filter-options" and request.method == "GET":
            return self._ok(
                {
                    "statuses": ["none", "open", "in-progress", "done"],
                    "priorities": ["none", "low", "normal", "high"],
                    "contexts": ["dev", "work", "life", "infra"],
                    "projects": list(self.projects),
                    "tags": ["task"],
                }
            )
        if path == "/tasks" and request.method == "GET":
            return self._ok({"tasks": list(self.tasks.values())})
        if path == "/tasks" and request.method == "POST":
            body = json.loads(request.content)
            task_id = f"Tasks/task-{self._next_id}.md"
            self._next_id += 1
            fields = {key: value for key, value in body.items() if key != "details"}
            fields.setdefault("status", "none")
            return self._ok(self.add(make_task(task_id, **fields)))
        if path.startswith("/tasks/"):
            task_id = path[len("/tasks/") :]
            task = self.tasks.get(task_id)
            if task is None:
                return httpx.Response(404, text="Task not found")
            if request.method == "GET":
                return self._ok(task)
            if request.method == "PUT":
                task.update(json.loads(request.content))
                return self._ok(task)
        return httpx.Response(405, text="unsupported")

    @staticmethod
    def _ok(data: Any) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": data})


class FakeAdapter:
    def __init__(self, result: ParseResult | None = None) -> None:
        self.result = result or ParseResult(title="Untitled")
        self.calls: list[tuple[str, str, list[str]]] = []
        self.error: ModelFailure | None = None

    def parse(self, text: str, today: str, projects: list[str]) -> ParseResult:
        self.calls.append((text, today, list(projects)))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture
def client(store: FakeTaskStore) -> TaskNotesClient:
    tasknotes = TaskNotesClient(BASE_URL, transport=httpx.MockTransport(store.handler))
    yield tasknotes
    tasknotes.close()


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def operations(client: TaskNotesClient, adapter: FakeAdapter) -> TaskOperations:
    return TaskOperations(client, adapter, ProjectCatalog(client))


@pytest.fixture
def build_request(operations: TaskOperations):
    def _build(**state: Any) -> SimpleNamespace:
        return SimpleNamespace(
            app=SimpleNamespace(state=SimpleNamespace(operations=operations, **state)),
            headers={},
        )

    return _build
