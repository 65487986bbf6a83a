import httpx
import pytest

from gateway.errors import UpstreamRejected, UpstreamTimeout, UpstreamUnreachable
from gateway.tasknotes_client import TaskNotesClient
from conftest import BASE_URL, make_task


def test_list_tasks_unwraps_envelope(client, store):
    store.add(make_task("Tasks/a.md"))

    tasks = client.list_tasks()

    assert [task["id"] for task in tasks] == ["Tasks/a.md"]
    assert str(store.requests[0].url) == f"{BASE_URL}/tasks"


def test_get_task_encodes_path_ids(client, store):
    store.add(make_task("Tasks/with space.md"))

    task = client.get_task("Tasks/with space.md")

    assert task["id"] == "Tasks/with space.md"
    assert b"Tasks%2Fwith%20space.md" in store.requests[0].url.raw_path


def test_non_success_status_is_rejected_with_body(client, store):
    store.fail_status = 500

    with pytest.raises(UpstreamRejected) as excinfo:
        client.list_tasks()

    assert excinfo.value.status == 500
    assert excinfo.value.body == "boom"
    assert excinfo.value.status_code == 500
    assert excinfo.value.error.code == "UPSTREAM_REJECTED"


def test_missing_task_propagates_404(client):
    with pytest.raises(UpstreamRejected) as excinfo:
        client.get_task("Tasks/missing.md")
    assert excinfo.value.status == 404


def test_network_failure_is_unreachable(client, store):
    store.unreachable = True

    with pytest.raises(UpstreamUnreachable) as excinfo:
        client.filter_options()

    assert excinfo.value.error.code == "UPSTREAM_UNREACHABLE"
    assert len(store.requests) == 1


def test_timeout_is_reported_distinctly():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    tasknotes = TaskNotesClient(BASE_URL, transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamTimeout) as excinfo:
        tasknotes.list_tasks()
    assert excinfo.value.status_code == 504
    assert isinstance(excinfo.value, UpstreamUnreachable)


def test_missing_envelope_is_rejected():
    def handler(request):
        return httpx.Response(200, json={"tasks": []})

    tasknotes = TaskNotesClient(BASE_URL, transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamRejected):
        tasknotes.list_tasks()


def test_create_and_update_send_json(client, store):
    created = client.create_task({"title": "x", "contexts": ["dev"], "tags": ["task"]})
    updated = client.update_task(created["id"], {"status": "done"})

    assert updated["status"] == "done"
    assert [request.method for request in store.requests] == ["POST", "PUT"]
    assert store.requests[0].headers["content-type"] == "application/json"
