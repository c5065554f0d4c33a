"""Classify, execute, and wrap ad-hoc SQL statements.

The `QueryExecutor` owns no connection state of its own. It is handed a
`ConnectionProvider` and, for each call:

- classifies the statement by its leading keyword,
- sends exactly one statement to the provider (none for unsupported commands),
- decodes the cursor for reading statements and always releases it,
- returns one of the envelopes defined in `sqlenvelope.core.envelope`.

Failures reported by the provider or the decoder propagate as `QueryError`
subclasses; wrapping them into error envelopes is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from sqlenvelope.core.classifier import CommandKind, classify
from sqlenvelope.core.decoder import ResultCursor, decode_rows
from sqlenvelope.core.envelope import (
    MESSAGE_EXECUTED,
    MESSAGE_NO_DATA,
    MESSAGE_UNSUPPORTED,
    DataResponse,
    ResponseEnvelope,
    build_response,
    serialize_response,
)
from sqlenvelope.core.errors import QueryError
from sqlenvelope.core.logging_utils import truncate_for_log
from sqlenvelope.core.observability import QueryObservationSink

LOGGER = logging.getLogger(__name__)

DEFAULT_TICKET_ID = "adhoc"


class ConnectionProvider(Protocol):
    """Open relational connection able to run statements and queries."""

    def execute_statement(self, statement: str) -> None:  # pragma: no cover - interface
        """Run a statement that produces no result cursor."""

    def execute_query(self, statement: str) -> ResultCursor:  # pragma: no cover - interface
        """Run a statement and return a cursor over its rows."""

    def close(self) -> None:  # pragma: no cover - interface
        """Close the underlying connection."""


@dataclass
class QueryExecutor:
    """Executes one statement per call against a single-owner connection."""

    connection: ConnectionProvider
    observer: QueryObservationSink | None = None

    def execute(self, sql_text: str, *, ticket_id: str = DEFAULT_TICKET_ID) -> ResponseEnvelope:
        """Run *sql_text* and return the response envelope describing the outcome."""

        self._log_event(ticket_id, "statement_received", {"statement": truncate_for_log(sql_text)})
        kind = classify(sql_text)
        LOGGER.debug("Classified statement as %s: %s", kind.value, truncate_for_log(sql_text))
        self._log_event(ticket_id, "statement_classified", {"kind": kind.value})

        try:
            if kind is CommandKind.MUTATING:
                response = self._execute_mutating(sql_text)
            elif kind is CommandKind.READING:
                response = self._execute_reading(sql_text)
            else:
                response = build_response(400, MESSAGE_UNSUPPORTED)
        except QueryError as exc:
            LOGGER.warning("Statement failed (%s): %s", type(exc).__name__, exc)
            self._log_event(
                ticket_id,
                "statement_failed",
                {"kind": kind.value, "error_type": type(exc).__name__, "error": str(exc)},
            )
            raise

        self._log_event(
            ticket_id,
            "statement_completed",
            {
                "kind": kind.value,
                "status_code": response.status_code,
                "row_count": len(response.data) if isinstance(response, DataResponse) else None,
            },
        )
        return response

    def query(self, sql_text: str, *, ticket_id: str = DEFAULT_TICKET_ID) -> str:
        """Run *sql_text* and return the serialized envelope."""

        return serialize_response(self.execute(sql_text, ticket_id=ticket_id))

    def close(self) -> None:
        self.connection.close()

    def _execute_mutating(self, sql_text: str) -> ResponseEnvelope:
        self.connection.execute_statement(sql_text)
        return build_response(200, MESSAGE_EXECUTED)

    def _execute_reading(self, sql_text: str) -> ResponseEnvelope:
        cursor = self.connection.execute_query(sql_text)
        try:
            rows = decode_rows(cursor)
        finally:
            _release(cursor)

        if rows:
            return build_response(200, data=rows)
        return build_response(204, MESSAGE_NO_DATA)

    def _log_event(self, ticket_id: str, event: str, payload: dict[str, Any]) -> None:
        if self.observer is None:
            return
        self.observer.log_event(ticket_id, event, payload)


def _release(cursor: ResultCursor) -> None:
    try:
        cursor.close()
    except Exception:  # noqa: BLE001 - a close failure must not mask the query outcome
        LOGGER.warning("Error closing the result cursor", exc_info=True)


__all__ = ["ConnectionProvider", "DEFAULT_TICKET_ID", "QueryExecutor"]
