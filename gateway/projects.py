"""Project-name normalization and resolution against the live project set."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, Protocol

logger = logging.getLogger(__name__)

_LINK_OPEN = "[["
_LINK_CLOSE = "]]"


class FilterOptionsSource(Protocol):
    def filter_options(self) -> dict: ...


def canonicalize(raw: str) -> str:
    """Strip ``[[...]]`` link decoration when both brackets are present.

    Nested wrapping is stripped completely, so the result is a fixed point.
    """
    name = raw
    while (
        len(name) >= len(_LINK_OPEN) + len(_LINK_CLOSE)
        and name.startswith(_LINK_OPEN)
        and name.endswith(_LINK_CLOSE)
    ):
        name = name[len(_LINK_OPEN) : -len(_LINK_CLOSE)]
    return name


def decorate(name: str) -> str:
    """Wrap a canonical project name in link decoration for the task store."""
    return f"{_LINK_OPEN}{canonicalize(name)}{_LINK_CLOSE}"


def canonical_projects(raw_projects: Iterable[object]) -> list[str]:
    """Canonicalize upstream project identifiers, dropping blanks and duplicates."""
    seen: set[str] = set()
    projects: list[str] = []
    for raw in raw_projects:
        if not isinstance(raw, str):
            continue
        name = canonicalize(raw.strip())
        if not name or name in seen:
            continue
        seen.add(name)
        projects.append(name)
    return projects


def resolve(guess: str | None, projects: Iterable[str]) -> str | None:
    """Match a free-text project guess to a canonical name, ignoring case.

    Returns ``None`` when the guess is empty or matches nothing; no fuzzy
    matching is attempted. A miss is logged and is not an error.
    """
    if guess is None:
        return None
    needle = canonicalize(guess.strip()).lower()
    if not needle:
        return None

    lookup: dict[str, str] = {}
    for name in projects:
        lookup.setdefault(name.lower(), name)

    match = lookup.get(needle)
    if match is None:
        logger.warning(
            "Unknown project returned by model: %r, omitting",
            guess,
            extra={"event": "project_unresolved", "guess": guess},
        )
    return match


class ProjectCatalog:
    """Source of canonical project names, with an optional short-lived cache."""

    def __init__(
        self,
        source: FilterOptionsSource,
        ttl: float = 0.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: list[str] | None = None
        self._fetched_at = 0.0

    def projects(self) -> list[str]:
        if self._ttl <= 0:
            return self._fetch()
        with self._lock:
            now = self._clock()
            if self._cached is not None and now - self._fetched_at < self._ttl:
                return list(self._cached)
        projects = self._fetch()
        with self._lock:
            self._cached = projects
            self._fetched_at = self._clock()
        return list(projects)

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None

    def _fetch(self) -> list[str]:
        options = self._source.filter_options()
        return canonical_projects(options.get("projects") or [])
