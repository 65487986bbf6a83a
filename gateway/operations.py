"""The single operation set every transport surface dispatches to."""

from __future__ import annotations

import logging
from typing import Any

from gateway import nlp
from gateway.errors import GatewayError
from gateway.filters import TaskFilters, apply_filters, today_iso
from gateway.llm import ParseAdapter
from gateway.mapper import (
    from_upstream_filter_options,
    from_upstream_task,
    from_upstream_tasks,
    to_upstream_create,
    to_upstream_update,
)
from gateway.mcp_constants import TOGGLE_STATUSES
from gateway.models import CreateTaskInput, TaskUpdate
from gateway.projects import ProjectCatalog
from gateway.tasknotes_client import TaskNotesClient

logger = logging.getLogger(__name__)


class TaskOperations:
    def __init__(
        self,
        client: TaskNotesClient,
        adapter: ParseAdapter,
        catalog: ProjectCatalog | None = None,
    ) -> None:
        self.client = client
        self.adapter = adapter
        self.catalog = catalog or ProjectCatalog(client)

    def list_tasks(
        self, filters: TaskFilters, today: str | None = None
    ) -> list[dict[str, Any]]:
        tasks = from_upstream_tasks(self.client.list_tasks())
        return apply_filters(tasks, filters, today or today_iso())

    def get_task(self, task_id: str) -> dict[str, Any]:
        return from_upstream_task(self.client.get_task(task_id))

    def create_task(self, task_input: CreateTaskInput) -> dict[str, Any]:
        created = self.client.create_task(to_upstream_create(task_input))
        return from_upstream_task(created)

    def update_task(self, task_id: str, update: TaskUpdate) -> dict[str, Any]:
        updated = self.client.update_task(task_id, to_upstream_update(update))
        return from_upstream_task(updated)

    def toggle_status(self, task_id: str) -> dict[str, Any]:
        """Flip open and in-progress; any other status is returned untouched."""
        task = self.get_task(task_id)
        next_status = TOGGLE_STATUSES.get(task.get("status"))
        if next_status is None:
            logger.info(
                "Toggle skipped for task %s with status %r",
                task_id,
                task.get("status"),
            )
            return task
        return self.update_task(task_id, TaskUpdate(status=next_status))

    def get_filter_options(self) -> dict[str, Any]:
        raw = self.client.filter_options()
        return from_upstream_filter_options(raw).to_dict()

    def parse_text(self, text: str) -> dict[str, Any]:
        return nlp.parse_text(text, self.adapter, self.catalog).to_dict()

    def parse_and_create(self, text: str) -> dict[str, Any]:
        return nlp.parse_and_create(text, self.client, self.adapter, self.catalog)

    def health(self, version: str) -> dict[str, Any]:
        try:
            self.client.list_tasks()
            reachable = True
        except GatewayError as exc:
            logger.warning("Health probe failed: %s", exc)
            reachable = False
        return {
            "status": "ok" if reachable else "degraded",
            "version": version,
            "tasknotesReachable": reachable,
        }
