"""Tests for building the executor from settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from sqlenvelope.core.config import DatabaseSettings, LoggingSettings, PathsSettings, Settings
from sqlenvelope.core.dependencies import build_connection, build_executor
from sqlenvelope.core.observability import JSONLQueryLogger
from sqlenvelope.integrations.dbapi_connection import DBAPIConnection
from sqlenvelope.integrations.in_memory_connection import InMemoryConnection


def _settings(database: DatabaseSettings, logs_dir: str | None = None) -> Settings:
    return Settings(
        database=database,
        paths=PathsSettings(query_logs_dir=logs_dir),
        logging=LoggingSettings(),
    )


def test_memory_driver_builds_in_memory_connection() -> None:
    executor = build_executor(_settings(DatabaseSettings()))

    assert isinstance(executor.connection, InMemoryConnection)
    assert executor.observer is None


def test_sqlite_driver_with_query_logs(tmp_path: Path) -> None:
    settings = _settings(
        DatabaseSettings(driver="sqlite", path=str(tmp_path / "db.sqlite3")),
        logs_dir=str(tmp_path / "logs"),
    )

    executor = build_executor(settings)
    try:
        assert isinstance(executor.connection, DBAPIConnection)
        assert isinstance(executor.observer, JSONLQueryLogger)
        assert (tmp_path / "logs").is_dir()
    finally:
        executor.close()


def test_postgres_driver_delegates_to_connect_postgres(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[DatabaseSettings] = []
    sentinel = InMemoryConnection()

    def _fake_connect(settings: DatabaseSettings) -> InMemoryConnection:
        calls.append(settings)
        return sentinel

    monkeypatch.setattr("sqlenvelope.core.dependencies.connect_postgres", _fake_connect)
    database = DatabaseSettings(driver="postgres", name="test")

    assert build_connection(_settings(database)) is sentinel
    assert calls == [database]
