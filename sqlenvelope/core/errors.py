"""Failure taxonomy raised while executing and decoding statements."""

from __future__ import annotations


class QueryError(Exception):
    """Base class for failures surfaced by the query executor."""


class ExecutionError(QueryError):
    """The connection provider rejected the statement."""


class DecodeError(QueryError):
    """Rows returned by the cursor could not be decoded."""


class RowScanError(DecodeError):
    """A row did not carry one value per result column."""


class UnsupportedColumnTypeError(DecodeError):
    """A cell arrived as a native type outside the supported set."""

    def __init__(self, type_name: str, detail: str | None = None) -> None:
        message = f"unsupported column type: {type_name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.type_name = type_name
        self.detail = detail


class CursorError(DecodeError):
    """The cursor reported a terminal error after iteration stopped."""


__all__ = [
    "CursorError",
    "DecodeError",
    "ExecutionError",
    "QueryError",
    "RowScanError",
    "UnsupportedColumnTypeError",
]
