"""Typed shapes that flow between the gateway layers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class CreateTaskInput:
    """A validated creation request, projects in canonical (unwrapped) form."""

    title: str
    contexts: tuple[str, ...]
    status: str | None = None
    priority: str | None = None
    scheduled: str | None = None
    due: str | None = None
    projects: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    details: str | None = None


@dataclass(frozen=True)
class TaskUpdate:
    status: str | None = None
    priority: str | None = None
    due: str | None = None
    clear_due: bool = False

    def is_empty(self) -> bool:
        return (
            self.status is None
            and self.priority is None
            and self.due is None
            and not self.clear_due
        )


@dataclass(frozen=True)
class FilterOptions:
    statuses: list[str] = field(default_factory=list)
    priorities: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return asdict(self)


@dataclass(frozen=True)
class ParseResult:
    """Structured guess returned by the language-model adapter."""

    title: str
    context: str | None = None
    priority: str | None = None
    project: str | None = None
    scheduled: str | None = None
    due: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": self.title}
        if self.context is not None:
            payload["context"] = self.context
        if self.priority is not None:
            payload["priority"] = self.priority
        payload["project"] = self.project
        payload["scheduled"] = self.scheduled
        payload["due"] = self.due
        return payload
