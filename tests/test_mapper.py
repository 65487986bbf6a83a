from gateway.mapper import (
    from_upstream_filter_options,
    from_upstream_task,
    to_upstream_create,
    to_upstream_update,
)
from gateway.models import CreateTaskInput, TaskUpdate
from conftest import make_task


def test_create_payload_appends_sentinel_tag_and_wraps_projects():
    payload = to_upstream_create(
        CreateTaskInput(
            title="Fix dark mode",
            contexts=("dev",),
            projects=("basalt-ui",),
            tags=("ui",),
            priority="high",
        )
    )

    assert payload == {
        "title": "Fix dark mode",
        "contexts": ["dev"],
        "projects": ["[[basalt-ui]]"],
        "tags": ["ui", "task"],
        "priority": "high",
    }


def test_sentinel_tag_is_not_duplicated():
    payload = to_upstream_create(
        CreateTaskInput(title="x", contexts=("dev",), tags=("task", "ui"))
    )
    assert payload["tags"] == ["task", "ui"]


def test_create_payload_defaults_to_sentinel_only():
    payload = to_upstream_create(CreateTaskInput(title="x", contexts=("life",)))
    assert payload["tags"] == ["task"]
    assert payload["projects"] == []
    assert "status" not in payload
    assert "due" not in payload


def test_update_payload_only_carries_set_fields():
    assert to_upstream_update(TaskUpdate(status="done")) == {"status": "done"}
    assert to_upstream_update(TaskUpdate(clear_due=True)) == {"due": None}
    assert to_upstream_update(
        TaskUpdate(priority="low", due="2026-05-01")
    ) == {"priority": "low", "due": "2026-05-01"}


def test_read_strips_link_decoration_and_keeps_passthrough_fields():
    raw = make_task(
        "Tasks/a.md",
        projects=["[[basalt-ui]]", "iu"],
        totalTrackedTime=42,
        timeEstimate="1h",
        isBlocked=True,
    )
    task = from_upstream_task(raw)

    assert task["projects"] == ["basalt-ui", "iu"]
    assert task["totalTrackedTime"] == 42
    assert task["timeEstimate"] == "1h"
    assert task["isBlocked"] is True
    assert raw["projects"] == ["[[basalt-ui]]", "iu"]


def test_write_then_read_round_trip_restores_project_names():
    names = ("basalt-ui", "Dev-UI", "iu")
    written = to_upstream_create(
        CreateTaskInput(title="x", contexts=("dev",), projects=names)
    )
    assert all(name.startswith("[[") for name in written["projects"])

    read_back = from_upstream_task(make_task("t", projects=written["projects"]))
    assert read_back["projects"] == list(names)


def test_filter_options_projects_unwrapped():
    options = from_upstream_filter_options(
        {
            "statuses": ["open"],
            "priorities": ["high"],
            "contexts": ["dev"],
            "projects": ["[[basalt-ui]]", "[[iu]]"],
            "tags": ["task"],
        }
    )
    assert options.projects == ["basalt-ui", "iu"]
    assert options.to_dict()["statuses"] == ["open"]
