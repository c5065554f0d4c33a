"""Scripted, in-memory connection provider.

This provider does not parse SQL or talk to a database. It replays canned
result sets registered per statement, which makes it useful for dry runs of
the console and web service and for exercising the executor in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

from sqlenvelope.core.errors import ExecutionError


@dataclass(slots=True)
class CannedResult:
    columns: list[str]
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    error: BaseException | None = None


@dataclass(slots=True)
class InMemoryCursor:
    """Cursor replaying a `CannedResult` once."""

    columns: list[str]
    rows: list[tuple[Any, ...]]
    error: BaseException | None = None
    close_calls: int = 0

    def __iter__(self) -> Iterator[Sequence[Any]]:
        rows, self.rows = self.rows, []
        return iter(rows)

    def close(self) -> None:
        self.close_calls += 1


@dataclass(slots=True)
class InMemoryConnection:
    """Connection provider that satisfies statements from primed results."""

    results: dict[str, CannedResult] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    statements: list[str] = field(default_factory=list)
    cursors: list[InMemoryCursor] = field(default_factory=list)
    closed: bool = False

    def prime(
        self,
        statement: str,
        columns: list[str],
        rows: list[tuple[Any, ...]] | None = None,
        *,
        error: BaseException | None = None,
    ) -> None:
        """Register the result set returned the next times *statement* runs."""

        self.results[statement] = CannedResult(columns=list(columns), rows=list(rows or []), error=error)

    def fail(self, statement: str, message: str) -> None:
        """Make *statement* raise `ExecutionError` with *message*."""

        self.failures[statement] = message

    def execute_statement(self, statement: str) -> None:
        self._record(statement)

    def execute_query(self, statement: str) -> InMemoryCursor:
        self._record(statement)
        canned = self.results.get(statement, CannedResult(columns=[]))
        cursor = InMemoryCursor(columns=list(canned.columns), rows=list(canned.rows), error=canned.error)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True

    def _record(self, statement: str) -> None:
        if self.closed:
            raise ExecutionError("sql: database is closed")
        self.statements.append(statement)
        message = self.failures.get(statement)
        if message is not None:
            raise ExecutionError(message)


__all__ = ["CannedResult", "InMemoryConnection", "InMemoryCursor"]
