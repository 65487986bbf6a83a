"""Shared task vocabularies and gateway defaults."""

from __future__ import annotations

TASK_STATUSES = ("none", "open", "in-progress", "done")
TASK_PRIORITIES = ("none", "low", "normal", "high")
TASK_CONTEXTS = ("dev", "work", "life", "infra")

SENTINEL_TAG = "task"
DEFAULT_NLP_CONTEXT = "dev"
DEFAULT_NLP_PRIORITY = "normal"

TOGGLE_STATUSES = {"open": "in-progress", "in-progress": "open"}

SERVICE_NAME = "tasknotes-gateway"
SERVICE_VERSION = "0.1.0"
