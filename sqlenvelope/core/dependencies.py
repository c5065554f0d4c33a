"""Factory helpers for constructing the executor and its collaborators from settings."""

from __future__ import annotations

from pathlib import Path

from sqlenvelope.core.config import Settings
from sqlenvelope.core.executor import ConnectionProvider, QueryExecutor
from sqlenvelope.core.observability import JSONLQueryLogger, QueryObservationSink
from sqlenvelope.integrations.in_memory_connection import InMemoryConnection
from sqlenvelope.integrations.postgres_connection import connect_postgres
from sqlenvelope.integrations.sqlite_connection import connect_sqlite


def build_connection(settings: Settings) -> ConnectionProvider:
    """Open the connection described by ``settings.database``."""

    database = settings.database
    if database.driver == "sqlite":
        return connect_sqlite(database.path)
    if database.driver == "postgres":
        return connect_postgres(database)
    return InMemoryConnection()


def build_query_logger(settings: Settings) -> QueryObservationSink | None:
    if settings.paths.query_logs_dir is None:
        return None
    return JSONLQueryLogger(base_dir=Path(settings.paths.query_logs_dir))


def build_executor(settings: Settings) -> QueryExecutor:
    """Create a `QueryExecutor` wired to the configured connection and logs."""

    return QueryExecutor(
        connection=build_connection(settings),
        observer=build_query_logger(settings),
    )


__all__ = ["build_connection", "build_executor", "build_query_logger"]
