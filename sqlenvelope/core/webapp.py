"""FastAPI service exposing the query executor over HTTP."""

from __future__ import annotations

import argparse
import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from sqlenvelope.core.config import load_settings
from sqlenvelope.core.dependencies import build_executor
from sqlenvelope.core.envelope import ResponseEnvelope, build_error, serialize_response
from sqlenvelope.core.errors import QueryError
from sqlenvelope.core.executor import QueryExecutor
from sqlenvelope.core.logging_utils import configure_logging, truncate_for_log

LOGGER = logging.getLogger(__name__)


class QueryRequest(BaseModel):
    sql: str = Field(..., min_length=1)


class ExecutorGuard:
    """Serializes access to a single-owner executor across worker threads."""

    def __init__(self, executor: QueryExecutor) -> None:
        self._executor = executor
        self._lock = threading.Lock()

    def execute(self, sql_text: str, ticket_id: str) -> ResponseEnvelope:
        with self._lock:
            try:
                return self._executor.execute(sql_text, ticket_id=ticket_id)
            except QueryError as exc:
                LOGGER.error("Ticket %s failed: %s", ticket_id, exc)
                return build_error(exc)

    def close(self) -> None:
        with self._lock:
            self._executor.close()


def create_app(
    config_path: str = "configs/dev.yaml",
    *,
    executor: QueryExecutor | None = None,
) -> FastAPI:
    if executor is None:
        LOGGER.info("Initialising query service with config '%s'", config_path)
        executor = build_executor(load_settings(config_path))
    guard = ExecutorGuard(executor)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        LOGGER.info("Closing database connection")
        guard.close()

    app = FastAPI(title="SQL Envelope Service", version="0.1.0", lifespan=lifespan)
    app.state.executor_guard = guard

    @app.get("/api/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/query")
    def run_query(payload: QueryRequest, request: Request) -> Response:
        ticket_id = request.headers.get("x-request-id") or f"req-{uuid4().hex[:12]}"
        LOGGER.info("Ticket %s executing: %s", ticket_id, truncate_for_log(payload.sql))
        envelope = guard.execute(payload.sql, ticket_id)
        body = serialize_response(envelope)
        if not body:
            return Response(content="", status_code=500, media_type="application/json")
        LOGGER.debug("Ticket %s completed with status_code=%s", ticket_id, envelope.status_code)
        return Response(content=body, media_type="application/json")

    return app


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the SQL envelope API")
    parser.add_argument("--config", default="configs/dev.yaml", help="Path to configuration file")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind the server")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind the server")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    configure_logging("DEBUG" if args.debug else settings.logging.level)
    app = create_app(executor=build_executor(settings))

    LOGGER.info("Starting uvicorn on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
