import logging

import pytest

from gateway.projects import (
    ProjectCatalog,
    canonical_projects,
    canonicalize,
    decorate,
    resolve,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("[[basalt-ui]]", "basalt-ui"),
        ("basalt-ui", "basalt-ui"),
        ("[[basalt-ui", "[[basalt-ui"),
        ("basalt-ui]]", "basalt-ui]]"),
        ("[[[[nested]]]]", "nested"),
        ("[[]]", ""),
        ("", ""),
    ],
)
def test_canonicalize(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize(
    "raw", ["[[a]]", "[[[[a]]]]", "[[a", "a]]", "[[a]] [[b]]", "[[", "]]", "[[[]]]"]
)
def test_canonicalize_is_idempotent(raw):
    once = canonicalize(raw)
    assert canonicalize(once) == once


def test_decorate_does_not_double_wrap():
    assert decorate("iu") == "[[iu]]"
    assert decorate("[[iu]]") == "[[iu]]"


def test_canonical_projects_dedupes_and_skips_blanks():
    raw = ["[[Dev-UI]]", "Dev-UI", "", "[[iu]]", None, "  "]
    assert canonical_projects(raw) == ["Dev-UI", "iu"]


def test_resolve_is_case_insensitive():
    assert resolve("DEV-UI", ["Dev-UI"]) == "Dev-UI"
    assert resolve("dev-ui", ["Dev-UI", "iu"]) == "Dev-UI"


def test_resolve_miss_returns_none_and_logs(caplog):
    with caplog.at_level(logging.WARNING, logger="gateway.projects"):
        assert resolve("zzz", ["Dev-UI"]) is None
    assert any("zzz" in record.getMessage() for record in caplog.records)


def test_resolve_none_and_blank():
    assert resolve(None, ["Dev-UI"]) is None
    assert resolve(None, []) is None
    assert resolve("   ", ["Dev-UI"]) is None


def test_resolve_never_fuzzy_matches():
    assert resolve("Dev", ["Dev-UI"]) is None
    assert resolve("Dev-UI ", ["Dev-UI"]) == "Dev-UI"


class _CountingSource:
    def __init__(self):
        self.calls = 0
        self.projects = ["[[basalt-ui]]"]

    def filter_options(self):
        self.calls += 1
        return {"projects": list(self.projects)}


def test_catalog_without_ttl_always_fetches():
    source = _CountingSource()
    catalog = ProjectCatalog(source)
    assert catalog.projects() == ["basalt-ui"]
    assert catalog.projects() == ["basalt-ui"]
    assert source.calls == 2


def test_catalog_caches_within_ttl():
    source = _CountingSource()
    now = [100.0]
    catalog = ProjectCatalog(source, ttl=30, clock=lambda: now[0])

    assert catalog.projects() == ["basalt-ui"]
    source.projects.append("[[iu]]")
    now[0] += 10
    assert catalog.projects() == ["basalt-ui"]
    assert source.calls == 1

    now[0] += 25
    assert catalog.projects() == ["basalt-ui", "iu"]
    assert source.calls == 2


def test_catalog_invalidate_forces_refetch():
    source = _CountingSource()
    catalog = ProjectCatalog(source, ttl=300, clock=lambda: 0.0)
    catalog.projects()
    catalog.invalidate()
    catalog.projects()
    assert source.calls == 2
