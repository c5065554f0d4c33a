"""Decode driver cursors into ordered rows of canonical cell values.

Drivers surface cell values in whatever representation their wire protocol
prefers. Text-protocol drivers hand back raw byte strings, while others return
native Python scalars. The decoder folds both into a closed set of cell types:

- ``int`` (64-bit signed)
- ``float``
- ``str``
- ``None``

Byte strings are sniffed in order: integer literal, floating-point literal,
then plain text. Native values from the supported set pass through untouched;
any other native type aborts decoding with `UnsupportedColumnTypeError`.

Note that numeric sniffing applies to every byte-string cell, so a textual
column holding ``b"12345"`` (for example a zip code) decodes as the integer
``12345`` and ``b"00123"`` loses its leading zeros.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterator, Protocol, Sequence, Union

from sqlenvelope.core.errors import CursorError, RowScanError, UnsupportedColumnTypeError

Cell = Union[int, float, str, None]
Row = dict[str, Cell]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", flags=re.IGNORECASE)

_BYTE_TYPES = (bytes, bytearray, memoryview)


class ResultCursor(Protocol):
    """Forward-only handle over the rows produced by a reading statement."""

    columns: list[str]
    error: BaseException | None

    def __iter__(self) -> Iterator[Sequence[Any]]:  # pragma: no cover - interface
        """Yield one positional value sequence per row."""

    def close(self) -> None:  # pragma: no cover - interface
        """Release the underlying driver resources."""


def parse_integer(text: str) -> int | None:
    """Return *text* as an int64 when it is a whole base-10 integer literal."""

    if not _INTEGER_RE.fullmatch(text):
        return None
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_float(text: str) -> float | None:
    """Return *text* as a float when it is a complete floating-point literal."""

    if _SPECIAL_FLOAT_RE.fullmatch(text):
        return float(text)
    if _DECIMAL_FLOAT_RE.fullmatch(text):
        value = float(text)
        # Finite literals that overflow are not numbers we can represent.
        return None if math.isinf(value) else value
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return None
    return None


def coerce_text(raw: bytes | bytearray | memoryview) -> Cell:
    """Sniff a byte-string cell into an int, float, or str."""

    text = bytes(raw).decode("utf-8", errors="replace")
    integer = parse_integer(text)
    if integer is not None:
        return integer
    number = parse_float(text)
    if number is not None:
        return number
    return text


def coerce_cell(value: Any) -> Cell:
    """Return the canonical representation of a single driver value."""

    if value is None:
        return None
    if isinstance(value, _BYTE_TYPES):
        return coerce_text(value)
    # bool subclasses int but is not an integer column value.
    if isinstance(value, bool):
        raise UnsupportedColumnTypeError(describe_type(value))
    if isinstance(value, int):
        if value < INT64_MIN or value > INT64_MAX:
            raise UnsupportedColumnTypeError(describe_type(value), detail="value outside int64 range")
        return value
    if isinstance(value, (float, str)):
        return value
    raise UnsupportedColumnTypeError(describe_type(value))


def describe_type(value: Any) -> str:
    """Return a diagnostic name for the type of *value*."""

    value_type = type(value)
    module = value_type.__module__
    if module == "builtins":
        return value_type.__qualname__
    return f"{module}.{value_type.__qualname__}"


def decode_row(columns: Sequence[str], values: Sequence[Any]) -> Row:
    """Assemble a row keyed by column name in column order."""

    if len(values) != len(columns):
        raise RowScanError(
            f"expected {len(columns)} destination arguments in scan, got {len(values)}"
        )
    return {column: coerce_cell(value) for column, value in zip(columns, values)}


def decode_rows(cursor: ResultCursor) -> list[Row]:
    """Consume *cursor* and return its rows; the caller remains responsible for closing it."""

    columns = list(cursor.columns)
    rows = [decode_row(columns, values) for values in cursor]

    if cursor.error is not None:
        raise CursorError(str(cursor.error)) from cursor.error

    return rows


__all__ = [
    "Cell",
    "INT64_MAX",
    "INT64_MIN",
    "ResultCursor",
    "Row",
    "coerce_cell",
    "coerce_text",
    "decode_row",
    "decode_rows",
    "describe_type",
    "parse_float",
    "parse_integer",
]
