import inspect
import os

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from app.core.config import Settings
from app.db.session import check_connection
from app.main import create_app


def _settings(**overrides) -> Settings:
    return Settings(
        database_url=os.environ["DATABASE_URL"],
        jwt_secret_key="test-secret-key",
        **overrides,
    )


def test_health_echoes_request_id(client):
    r = client.get("/api/health", headers={"X-Request-Id": "rid-123"})
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok", "request_id": "rid-123"}
    assert r.headers["X-Request-Id"] == "rid-123"


def test_request_id_generated_when_absent(client):
    r = client.get("/api/health")
    assert r.headers["X-Request-Id"]
    assert r.json()["request_id"] == r.headers["X-Request-Id"]


def test_root_reports_running(client):
    body = client.get("/").json()
    assert body["status"] == "running"
    assert body["date"]


def test_errors_use_failure_shape_without_stack_in_production():
    c = TestClient(create_app(_settings(environment="production")))
    r = c.get("/no-such-route")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Not Found"}


def test_errors_include_stack_in_development():
    c = TestClient(create_app(_settings(environment="development")))
    body = c.get("/no-such-route").json()
    assert body["success"] is False
    assert "stack" in body


def test_unhandled_errors_become_generic_500_in_production():
    app = create_app(_settings(environment="production"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("INSERT INTO quotations ... buyer@acme.example.com")

    c = TestClient(app, raise_server_exceptions=False)
    r = c.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Something went wrong on the server"}


def test_unhandled_error_detail_shown_in_development():
    app = create_app(_settings(environment="development"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("store unavailable")

    c = TestClient(app, raise_server_exceptions=False)
    body = c.get("/boom").json()
    assert body["message"] == "store unavailable"
    assert "RuntimeError" in body["stack"]


def test_unreachable_store_aborts_startup(monkeypatch, tmp_path):
    broken = create_engine(f"sqlite:///{tmp_path}/missing/quotes.db")
    monkeypatch.setattr("app.main.check_connection", lambda: check_connection(broken))

    with pytest.raises(OperationalError):
        with TestClient(create_app(_settings())):
            pass


def test_store_backed_routes_are_sync_handlers():
    # sync Session calls must not run on the event loop
    app = create_app(_settings())
    routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path != "/"]
    assert routes
    for route in routes:
        assert not inspect.iscoroutinefunction(route.endpoint), route.path
