"""Connection provider backed by any DB-API 2.0 (PEP 249) connection.

Driver modules each define their own ``Error`` hierarchy, so the adapter is
told which exception types mean "the database rejected this". Those are
translated into `ExecutionError` when a statement is sent, and recorded on
the cursor's ``error`` attribute when they surface mid-fetch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

from sqlenvelope.core.errors import ExecutionError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DBAPICursor:
    """Forward-only row iterator over a DB-API cursor."""

    raw_cursor: Any
    error_types: tuple[type[BaseException], ...] = (Exception,)
    columns: list[str] = field(init=False, default_factory=list)
    error: BaseException | None = field(init=False, default=None)
    _consumed: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        description = self.raw_cursor.description or ()
        self.columns = [str(column[0]) for column in description]

    def __iter__(self) -> Iterator[Sequence[Any]]:
        if self._consumed:
            return
        self._consumed = True
        if not self.columns:
            return

        batch_size = max(int(getattr(self.raw_cursor, "arraysize", 1) or 1), 1)
        while True:
            try:
                batch = self.raw_cursor.fetchmany(batch_size)
            except self.error_types as exc:
                self.error = exc
                return
            if not batch:
                return
            yield from batch

    def close(self) -> None:
        self.raw_cursor.close()


@dataclass(slots=True)
class DBAPIConnection:
    """Adapts a PEP 249 connection to the `ConnectionProvider` protocol."""

    raw_connection: Any
    error_types: tuple[type[BaseException], ...] = (Exception,)

    def execute_statement(self, statement: str) -> None:
        cursor = self.raw_connection.cursor()
        try:
            cursor.execute(statement)
        except self.error_types as exc:
            raise ExecutionError(str(exc)) from exc
        finally:
            cursor.close()

    def execute_query(self, statement: str) -> DBAPICursor:
        cursor = self.raw_connection.cursor()
        try:
            cursor.execute(statement)
        except self.error_types as exc:
            cursor.close()
            raise ExecutionError(str(exc)) from exc
        return DBAPICursor(raw_cursor=cursor, error_types=self.error_types)

    def close(self) -> None:
        try:
            self.raw_connection.close()
        except self.error_types:
            LOGGER.warning("Error closing the database connection", exc_info=True)


__all__ = ["DBAPIConnection", "DBAPICursor"]
