"""Integration tests for the HTTP transport."""
import json

import pytest
from fastapi.testclient import TestClient

from rpcroute.config import ServerSettings
from rpcroute.server import Server, create_app

from conftest import Calculator


@pytest.fixture(scope="module")
def client():
    """Create a test client for a router with a namespaced handler."""
    from rpcroute.jsonrpc.router import Router

    router = Router()
    router.register("math", Calculator())
    with TestClient(create_app(router)) as c:
        yield c


def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "rpcroute"
    assert data["protocol_version"] == "2.0"


@pytest.mark.parametrize("path", ["/", "/rpc", "/jsonrpc"])
def test_jsonrpc_call(client, path):
    """Test a namespaced call on every RPC path."""
    response = client.post(path, json={
        "protocolVersion": "2.0",
        "method": "math.add",
        "params": [1, 2],
        "id": 3,
    })

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"protocolVersion": "2.0", "result": 3, "id": 3}


def test_jsonrpc_list_methods(client):
    response = client.post("/", json={
        "protocolVersion": "2.0",
        "method": "system.listMethods",
        "id": 1,
    })

    result = response.json()["result"]
    assert "system.listMethods" in result
    assert "system.isAlive" in result
    assert "math.add" in result


def test_notification_returns_no_content(client):
    """Test that notifications (no id) get an empty 204 response."""
    response = client.post("/", json={
        "protocolVersion": "2.0",
        "method": "math.add",
        "params": [1, 2],
    })

    assert response.status_code == 204
    assert response.content == b""


def test_batch(client):
    response = client.post("/", json=[
        {"protocolVersion": "2.0", "method": "math.add", "params": [1, 2], "id": 1},
        {"protocolVersion": "2.0", "method": "math.add", "params": [3, 4]},
        {"protocolVersion": "2.0", "method": "math.missing", "id": 2},
    ])

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == [1, 2]
    assert data[1]["error"]["code"] == -32601


def test_parse_error(client):
    response = client.post(
        "/",
        content=b'{"protocolVersion": "2.0", "method"',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "protocolVersion": "2.0",
        "error": {"code": -32700, "message": "Parse error"},
        "id": None,
    }


def test_get_is_not_processed(client):
    """Only POST requests reach the pipeline."""
    response = client.get("/rpc")
    assert response.status_code == 405


def test_show_errors_setting():
    app = create_app(Calculator(), ServerSettings(show_errors=True))
    with TestClient(app) as c:
        response = c.post("/", json={"protocolVersion": "2.0", "method": "fail", "id": 1})

    assert response.json()["error"]["data"]["message"] == "boom"


class TestServer:
    """Test the Server wrapper."""

    def test_wraps_bare_handler(self):
        server = Server(Calculator(), ServerSettings())
        assert "add" in server.router.list_methods()
        assert server.pipeline.router is server.router

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("RPCROUTE_SHOW_ERRORS", "true")
        monkeypatch.setenv("RPCROUTE_BATCH_CONCURRENCY", "1")
        server = Server(Calculator())
        assert server.pipeline.show_errors is True
        assert server.pipeline.batch_concurrency is True

    @pytest.mark.asyncio
    async def test_process(self):
        server = Server(Calculator(), ServerSettings())
        reply = await server.process('{"protocolVersion": "2.0", "method": "add", "params": [2, 5], "id": "x"}')
        assert json.loads(reply) == {"protocolVersion": "2.0", "result": 7, "id": "x"}

    def test_start_runs_uvicorn(self, monkeypatch):
        calls = {}

        def fake_run(app, **kwargs):
            calls["app"] = app
            calls.update(kwargs)

        monkeypatch.setattr("rpcroute.server.uvicorn.run", fake_run)
        server = Server(Calculator(), ServerSettings(host="127.0.0.1", port=9100, log_level="debug"))
        server.start()

        assert calls["app"] is server.app
        assert calls["host"] == "127.0.0.1"
        assert calls["port"] == 9100
        assert calls["log_level"] == "debug"

    @pytest.mark.asyncio
    async def test_with_routes(self):
        def routes(router):
            router.root(Calculator())
            router.register("math", Calculator())

        server = Server.with_routes(routes, ServerSettings())
        assert "math.add" in server.router.list_methods()

        reply = await server.process('{"protocolVersion": "2.0", "method": "math.add", "params": [1, 2], "id": 1}')
        assert json.loads(reply)["result"] == 3
