from fastapi.testclient import TestClient

from gateway.main import create_app


def test_tools_endpoint_returns_tool_definitions(operations, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TASKNOTES_GATEWAY_SERVICE_TOKEN", raising=False)

    app = create_app(operations)
    with TestClient(app) as client:
        response = client.get("/tools")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    tools = payload["data"]["tools"]
    assert isinstance(tools, list)
    names = {
        tool.get("function", {}).get("name") for tool in tools if tool
    }
    assert "nlp_create" in names
    assert "toggle_task_status" in names
