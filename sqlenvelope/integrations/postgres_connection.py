"""PostgreSQL connection provider using psycopg2.

psycopg2 parses many column types into rich Python objects (``Decimal``,
``dict``, ``list``, ``timedelta``). The decoder only accepts scalars or raw
bytes, so the connection is set up to hand the wire text of those types over
as bytes. The decoder then sniffs them like any other text cell. Dates,
times and booleans keep psycopg2's native types and are rejected by the
decoder as unsupported.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlenvelope.core.config import DatabaseSettings
from sqlenvelope.core.errors import ExecutionError
from sqlenvelope.integrations.dbapi_connection import DBAPIConnection

LOGGER = logging.getLogger(__name__)

# Type OIDs from pg_type.
RAW_TEXT_OIDS: dict[str, tuple[int, ...]] = {
    "numeric": (1700,),
    "json": (114, 3802),
    "interval": (1186,),
    "array": (
        199,  # json[]
        651,  # cidr[]
        1000,  # bool[]
        1001,  # bytea[]
        1002,  # char[]
        1003,  # name[]
        1005,  # int2[]
        1007,  # int4[]
        1009,  # text[]
        1014,  # bpchar[]
        1015,  # varchar[]
        1016,  # int8[]
        1021,  # float4[]
        1022,  # float8[]
        1028,  # oid[]
        1041,  # inet[]
        1115,  # timestamp[]
        1182,  # date[]
        1183,  # time[]
        1185,  # timestamptz[]
        1187,  # interval[]
        1231,  # numeric[]
        1270,  # timetz[]
        2951,  # uuid[]
        3807,  # jsonb[]
    ),
}


def _import_psycopg2() -> Any:
    try:
        import psycopg2  # type: ignore
        import psycopg2.extensions  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "psycopg2 is required for the postgres driver. Install sqlenvelope[postgres]."
        ) from exc
    return psycopg2


def _text_as_bytes(value: str | None, cursor: Any) -> bytes | None:
    if value is None:
        return None
    return value.encode("utf-8")


def register_raw_text_casters(extensions: Any, raw_connection: Any) -> None:
    """Make *raw_connection* return the wire text of `RAW_TEXT_OIDS` types as bytes."""

    for name, oids in RAW_TEXT_OIDS.items():
        caster = extensions.new_type(oids, f"{name.upper()}_BYTES", _text_as_bytes)
        extensions.register_type(caster, raw_connection)


def _quote(value: object) -> str:
    text = str(value)
    if text and not any(ch in text for ch in " '\\"):
        return text
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_dsn(settings: DatabaseSettings) -> str:
    """Return a libpq keyword/value connection string for *settings*."""

    parts = {
        "host": settings.host,
        "port": settings.port,
        "dbname": settings.name,
        "user": settings.user,
        "password": settings.resolve_password(),
        "sslmode": settings.sslmode,
    }
    if not parts["password"]:
        del parts["password"]
    return " ".join(f"{key}={_quote(value)}" for key, value in parts.items())


def connect_postgres(settings: DatabaseSettings) -> DBAPIConnection:
    """Open an autocommit connection and verify it responds before returning."""

    psycopg2 = _import_psycopg2()
    LOGGER.info(
        "Connecting to PostgreSQL at %s:%s/%s as %s",
        settings.host,
        settings.port,
        settings.name,
        settings.user,
    )
    try:
        raw = psycopg2.connect(build_dsn(settings))
    except psycopg2.Error as exc:
        raise ExecutionError(f"could not connect to PostgreSQL: {exc}") from exc
    raw.autocommit = True
    register_raw_text_casters(psycopg2.extensions, raw)

    connection = DBAPIConnection(raw_connection=raw, error_types=(psycopg2.Error,))
    try:
        ping = connection.execute_query("SELECT 1")
        ping.close()
    except ExecutionError:
        connection.close()
        raise
    return connection


__all__ = ["RAW_TEXT_OIDS", "build_dsn", "connect_postgres", "register_raw_text_casters"]
