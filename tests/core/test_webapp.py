"""Tests for the FastAPI query service."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from sqlenvelope.core import webapp as webapp_module
from sqlenvelope.core.executor import QueryExecutor
from sqlenvelope.core.observability import JSONLQueryLogger
from sqlenvelope.core.webapp import create_app
from sqlenvelope.integrations.in_memory_connection import InMemoryConnection


@pytest.fixture()
def connection() -> InMemoryConnection:
    connection = InMemoryConnection()
    connection.prime("SELECT * FROM users", ["id", "name"], [(b"1", b"Ada"), (b"2", b"Grace")])
    connection.prime("SELECT * FROM empty_table", ["id"])
    connection.prime("SELECT ratio FROM odd", ["ratio"], [(b"NaN",)])
    connection.fail("DROP TABLE missing", 'table "missing" does not exist')
    return connection


@pytest.fixture()
def client(connection: InMemoryConnection) -> TestClient:
    app = create_app(executor=QueryExecutor(connection=connection))
    return TestClient(app)


def test_healthcheck(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_query_returns_rows(client: TestClient) -> None:
    response = client.post("/api/query", json={"sql": "SELECT * FROM users"})

    assert response.status_code == 200
    assert response.json() == {
        "status_code": 200,
        "data": [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Grace"}],
    }


def test_query_reports_empty_result(client: TestClient) -> None:
    response = client.post("/api/query", json={"sql": "SELECT * FROM empty_table"})

    assert response.json() == {"status_code": 204, "message": "No data found."}


def test_query_reports_unsupported_command(client: TestClient, connection: InMemoryConnection) -> None:
    response = client.post("/api/query", json={"sql": "TRUNCATE users"})

    assert response.json() == {"status_code": 400, "message": "Unsupported SQL command."}
    assert connection.statements == []


def test_query_wraps_execution_failure(client: TestClient) -> None:
    response = client.post("/api/query", json={"sql": "DROP TABLE missing"})

    assert response.status_code == 200
    assert response.json() == {
        "status_code": 500,
        "error_message": 'table "missing" does not exist',
    }


def test_unserializable_result_returns_empty_body(client: TestClient) -> None:
    response = client.post("/api/query", json={"sql": "SELECT ratio FROM odd"})

    assert response.status_code == 500
    assert response.content == b""


def test_empty_sql_is_rejected(client: TestClient) -> None:
    response = client.post("/api/query", json={"sql": ""})

    assert response.status_code == 422


def test_many_requests_share_one_daily_log_file(tmp_path: Path, connection: InMemoryConnection) -> None:
    logger = JSONLQueryLogger(base_dir=tmp_path, clock=lambda: "2026-03-04T05:06:07.000Z")
    client = TestClient(create_app(executor=QueryExecutor(connection=connection, observer=logger)))

    for _ in range(200):
        assert client.post("/api/query", json={"sql": "SELECT * FROM empty_table"}).status_code == 200

    files = list(tmp_path.iterdir())
    assert [path.name for path in files] == ["20260304-queries.jsonl"]
    records = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert len(records) == 600
    assert len({record["ticket_id"] for record in records}) == 200


def test_request_id_header_is_recorded_as_ticket(tmp_path: Path, connection: InMemoryConnection) -> None:
    logger = JSONLQueryLogger(base_dir=tmp_path)
    client = TestClient(create_app(executor=QueryExecutor(connection=connection, observer=logger)))

    client.post("/api/query", json={"sql": "SELECT * FROM users"}, headers={"X-Request-ID": "abc-123"})

    (log_file,) = tmp_path.glob("*-queries.jsonl")
    tickets = {json.loads(line)["ticket_id"] for line in log_file.read_text(encoding="utf-8").splitlines()}
    assert tickets == {"abc-123"}


def test_main_serves_app_with_uvicorn(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("database:\n  driver: memory\n", encoding="utf-8")
    calls: list[dict[str, Any]] = []

    def _fake_run(app: Any, *, host: str, port: int) -> None:
        calls.append({"app": app, "host": host, "port": port})

    monkeypatch.setattr(webapp_module.uvicorn, "run", _fake_run)

    webapp_module.main(["--config", str(config), "--port", "8123"])

    assert len(calls) == 1
    assert calls[0]["port"] == 8123
    assert calls[0]["host"] == "127.0.0.1"
    assert TestClient(calls[0]["app"]).get("/api/health").json() == {"status": "ok"}
